"""Integration tests for OptimizeQuoteCommand.

These tests run the command against real packers and piece stores,
including:
- Kerf resolution from the request, machine defaults and the default
- Choice between single and multi-material packing
- Slab size resolution from overrides, materials and the catalogue
- Oversize flag persistence and failed writes
- Request validation
"""

from __future__ import annotations

from typing import Sequence

import pytest

from slabs.application import OptimizeQuoteCommand, OptimizeRequest
from slabs.domain.value_objects import MaterialInfo, OversizeRecord, Piece, ShapeType
from slabs.infrastructure.persistence import (
    InMemoryPieceRepository,
    PersistenceError,
    StaticMachineDefaults,
    StaticMaterialCatalog,
)

pytestmark = pytest.mark.integration


class LockedRepository:
    """Piece store that rejects every write."""

    def apply_oversize_updates(self, quote_id: str, records: Sequence[OversizeRecord]) -> None:
        raise PersistenceError(quote_id, "database is locked")

    def get_oversize_records(self, quote_id: str) -> dict[str, OversizeRecord]:
        return {}


@pytest.fixture
def pieces(island_piece: Piece, splashback_piece: Piece) -> list[Piece]:
    return [island_piece, splashback_piece]


class TestKerfResolution:
    """Tests for kerf selection."""

    def test_default_kerf(self, pieces: list[Piece]) -> None:
        output = OptimizeQuoteCommand().execute(OptimizeRequest(quote_id="Q-1", pieces=pieces))

        assert output.kerf_width == 3
        assert output.mitre_kerf_width is None
        assert output.result is not None
        assert output.result.kerf_width == 3

    def test_machine_default_kerf(self, pieces: list[Piece]) -> None:
        command = OptimizeQuoteCommand(machine_defaults=StaticMachineDefaults())
        output = command.execute(OptimizeRequest(quote_id="Q-1", pieces=pieces))

        assert output.kerf_width == 4
        assert output.mitre_kerf_width == 4

    def test_request_kerf_wins(self, pieces: list[Piece]) -> None:
        command = OptimizeQuoteCommand(machine_defaults=StaticMachineDefaults())
        output = command.execute(
            OptimizeRequest(quote_id="Q-1", pieces=pieces, kerf_width=5, mitre_kerf_width=2)
        )

        assert output.kerf_width == 5
        assert output.mitre_kerf_width == 2


class TestPackingPath:
    """Tests for single versus multi-material packing."""

    def test_single_material(
        self, pieces: list[Piece], quartz_material: MaterialInfo
    ) -> None:
        output = OptimizeQuoteCommand().execute(
            OptimizeRequest(quote_id="Q-1", pieces=pieces, materials=[quartz_material])
        )

        assert output.is_valid
        assert output.is_multi_material is False
        assert output.result is not None
        assert set(output.result.placed_piece_ids) == {"p1", "p2"}
        assert output.total_slabs == 1

    def test_several_materials(
        self,
        island_piece: Piece,
        quartz_material: MaterialInfo,
        marble_material: MaterialInfo,
    ) -> None:
        vanity = Piece(id="p3", width=1200, height=500, material_id="m2")
        output = OptimizeQuoteCommand().execute(
            OptimizeRequest(
                quote_id="Q-1",
                pieces=[island_piece, vanity],
                materials=[quartz_material, marble_material],
            )
        )

        assert output.result is None
        assert output.multi_material is not None
        assert [g.material_id for g in output.multi_material.material_groups] == ["m1", "m2"]
        assert output.total_slabs == 2
        assert output.waste_percent == output.multi_material.overall_waste_percentage

    def test_group_by_material_forces_multi(
        self, pieces: list[Piece], quartz_material: MaterialInfo
    ) -> None:
        output = OptimizeQuoteCommand().execute(
            OptimizeRequest(
                quote_id="Q-1",
                pieces=pieces,
                materials=[quartz_material],
                group_by_material=True,
            )
        )
        assert output.multi_material is not None
        assert len(output.multi_material.material_groups) == 1

    def test_shaped_piece_decomposed(self) -> None:
        piece = Piece(
            id="L1",
            width=2400,
            height=1800,
            shape_type=ShapeType.L_SHAPE,
            shape_config={
                "leg1": {"length_mm": 2400, "width_mm": 600},
                "leg2": {"length_mm": 1200, "width_mm": 600},
            },
        )
        output = OptimizeQuoteCommand().execute(OptimizeRequest(quote_id="Q-1", pieces=[piece]))

        assert output.result is not None
        assert set(output.result.placed_piece_ids) == {"L1-leg-a", "L1-leg-b"}


class TestSlabResolution:
    """Tests for slab size selection."""

    def test_catalogue_material(self) -> None:
        catalog = StaticMaterialCatalog([MaterialInfo(id="m2", name="Carrara", fabrication_category="marble")])
        piece = Piece(id="p1", width=1000, height=500, material_id="m2")
        output = OptimizeQuoteCommand(material_catalog=catalog).execute(
            OptimizeRequest(quote_id="Q-1", pieces=[piece])
        )

        assert output.slab is not None
        assert (output.slab.length_mm, output.slab.width_mm) == (2800, 1600)
        assert output.slab_source == "category-default"
        assert output.result is not None
        assert output.result.slab_config.width == 2800

    def test_no_material_uses_fallback(self) -> None:
        loose = [Piece(id="p1", width=1000, height=500)]
        output = OptimizeQuoteCommand().execute(OptimizeRequest(quote_id="Q-1", pieces=loose))
        assert output.slab_source == "ultimate-fallback"

    def test_override(self, pieces: list[Piece], quartz_material: MaterialInfo) -> None:
        output = OptimizeQuoteCommand().execute(
            OptimizeRequest(
                quote_id="Q-1",
                pieces=pieces,
                materials=[quartz_material],
                slab_length_mm=3000,
                slab_width_mm=1400,
            )
        )

        assert output.slab_source == "override"
        assert output.result is not None
        assert (output.result.slab_config.width, output.result.slab_config.height) == (3000, 1400)


class TestPersistence:
    """Tests for the oversize flag write after packing."""

    def test_flags_written(self) -> None:
        repository = InMemoryPieceRepository()
        pieces = [Piece(id="run", width=4000, height=600), Piece(id="small", width=800, height=400)]
        output = OptimizeQuoteCommand(repository=repository).execute(
            OptimizeRequest(quote_id="Q-1", pieces=pieces)
        )

        stored = repository.get_oversize_records("Q-1")
        assert stored["run"].is_oversize is True
        assert stored["small"].is_oversize is False
        assert {r.piece_id for r in output.oversize_records} == {"run", "small"}

    def test_flags_follow_slab_override(self) -> None:
        repository = InMemoryPieceRepository()
        material = MaterialInfo(id="m1", name="Nero", slab_length_mm=2800, slab_width_mm=1600)
        output = OptimizeQuoteCommand(repository=repository).execute(
            OptimizeRequest(
                quote_id="Q-1",
                pieces=[Piece(id="run", width=3000, height=600, material_id="m1")],
                materials=[material],
                slab_length_mm=3200,
                slab_width_mm=1600,
            )
        )

        assert output.result is not None
        assert not any(p.is_segment for p in output.result.placements)
        assert repository.get_oversize_records("Q-1")["run"] == OversizeRecord.cleared("run")

    def test_unknown_material_flagged_against_default_slab(self) -> None:
        repository = InMemoryPieceRepository()
        material = MaterialInfo(id="m1", name="Nero", slab_length_mm=2800, slab_width_mm=1600)
        output = OptimizeQuoteCommand(repository=repository).execute(
            OptimizeRequest(
                quote_id="Q-1",
                pieces=[
                    Piece(id="a", width=1000, height=600, material_id="m1"),
                    Piece(id="b", width=3000, height=600, material_id="ghost"),
                ],
                materials=[material],
                primary_material_id="m1",
            )
        )

        assert output.multi_material is not None
        ghost = next(g for g in output.multi_material.material_groups if g.material_id == "ghost")
        assert (ghost.slab.length_mm, ghost.slab.width_mm) == (3200, 1600)
        assert not any(p.is_segment for p in ghost.result.placements)
        assert repository.get_oversize_records("Q-1")["b"] == OversizeRecord.cleared("b")

    def test_persist_disabled(self, pieces: list[Piece]) -> None:
        repository = InMemoryPieceRepository()
        output = OptimizeQuoteCommand(repository=repository).execute(
            OptimizeRequest(quote_id="Q-1", pieces=pieces, persist=False)
        )

        assert repository.get_oversize_records("Q-1") == {}
        assert output.oversize_records == ()

    def test_failed_write_is_a_warning(self, pieces: list[Piece]) -> None:
        output = OptimizeQuoteCommand(repository=LockedRepository()).execute(
            OptimizeRequest(quote_id="Q-1", pieces=pieces)
        )

        assert output.is_valid
        assert output.result is not None
        assert output.result.total_slabs == 1
        assert output.warnings == ["Oversize flags could not be saved: database is locked"]
        assert output.all_warnings[-1] == output.warnings[0]


class TestRequestValidation:
    """Tests for rejected requests."""

    def test_duplicate_piece_ids(self, island_piece: Piece) -> None:
        output = OptimizeQuoteCommand().execute(
            OptimizeRequest(quote_id="Q-1", pieces=[island_piece, island_piece])
        )

        assert output.is_valid is False
        assert output.errors == ["Duplicate piece id 'p1'"]
        assert output.result is None
        assert output.total_slabs == 0

    @pytest.mark.parametrize(
        "fields,message",
        [
            ({"kerf_width": -1}, "Kerf width cannot be negative"),
            ({"edge_allowance_mm": -5}, "Edge allowance cannot be negative"),
            ({"slab_length_mm": 3000}, "Slab length and width must be given together"),
            ({"quote_id": ""}, "Quote id is required"),
        ],
    )
    def test_invalid_fields(self, pieces: list[Piece], fields: dict, message: str) -> None:
        data = {"quote_id": "Q-1", "pieces": pieces, **fields}
        output = OptimizeQuoteCommand().execute(OptimizeRequest(**data))
        assert message in output.errors

    def test_rejected_request_writes_nothing(self, island_piece: Piece) -> None:
        repository = InMemoryPieceRepository()
        OptimizeQuoteCommand(repository=repository).execute(
            OptimizeRequest(quote_id="Q-1", pieces=[island_piece, island_piece])
        )
        assert repository.get_oversize_records("Q-1") == {}

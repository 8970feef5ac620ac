"""Unit tests for the multi-material orchestrator.

Tests cover:
- Grouping by material in first-appearance order, primary first
- Per-material slab size resolution and overrides
- Unassigned pieces and unknown materials
- Oversize piece reporting per group
- Area-weighted overall waste
"""

from __future__ import annotations

import pytest

from slabs.domain.services.cut_plan import JoinStrategy
from slabs.domain.value_objects import MaterialInfo, Piece, ShapeType, SlabSize
from slabs.infrastructure.multi_material import (
    MultiMaterialOptimizer,
    optimize_multi_material,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def materials(quartz_material: MaterialInfo, marble_material: MaterialInfo) -> list[MaterialInfo]:
    return [quartz_material, marble_material]


@pytest.fixture
def pieces() -> list[Piece]:
    """Quartz benchtops and a marble splashback."""
    return [
        Piece(id="p1", width=2000, height=600, label="Bench", material_id="m1"),
        Piece(id="p2", width=1000, height=500, label="Splash", material_id="m2"),
        Piece(id="p3", width=1000, height=600, label="Return", material_id="m1"),
    ]


@pytest.fixture
def optimizer() -> MultiMaterialOptimizer:
    return MultiMaterialOptimizer(kerf_width=3)


# =============================================================================
# Tests
# =============================================================================


class TestGrouping:
    """Tests for material grouping and ordering."""

    def test_groups_in_first_appearance_order(
        self, optimizer: MultiMaterialOptimizer, pieces: list[Piece], materials: list[MaterialInfo]
    ) -> None:
        result = optimizer.optimize(pieces, materials)

        assert [g.material_id for g in result.material_groups] == ["m1", "m2"]
        assert result.material_groups[0].piece_ids == ("p1", "p3")
        assert result.material_groups[1].piece_ids == ("p2",)
        assert result.total_slab_count == 2

    def test_primary_material_first(
        self, optimizer: MultiMaterialOptimizer, pieces: list[Piece], materials: list[MaterialInfo]
    ) -> None:
        result = optimizer.optimize(pieces, materials, primary_material_id="m2")

        assert [g.material_id for g in result.material_groups] == ["m2", "m1"]
        assert result.material_groups[0].is_primary is True
        assert result.material_groups[1].is_primary is False
        assert result.primary_material_id == "m2"

    def test_slabs_never_shared(
        self, optimizer: MultiMaterialOptimizer, pieces: list[Piece], materials: list[MaterialInfo]
    ) -> None:
        result = optimizer.optimize(pieces, materials)

        for group in result.material_groups:
            placed = {p.piece_id for p in group.result.placements}
            assert placed <= set(group.piece_ids)
            assert group.result.slabs[0].slab_index == 0

    def test_empty_input(self, optimizer: MultiMaterialOptimizer) -> None:
        result = optimizer.optimize([], [])
        assert result.material_groups == ()
        assert result.total_slab_count == 0
        assert result.overall_waste_percentage == 0.0

    def test_shaped_piece_decomposed_within_group(
        self, optimizer: MultiMaterialOptimizer, materials: list[MaterialInfo]
    ) -> None:
        piece = Piece(
            id="L1",
            width=2400,
            height=1800,
            material_id="m1",
            shape_type=ShapeType.L_SHAPE,
            shape_config={
                "leg1": {"length_mm": 2400, "width_mm": 600},
                "leg2": {"length_mm": 1200, "width_mm": 600},
            },
        )
        group = optimizer.optimize([piece], materials).material_groups[0]

        assert group.piece_ids == ("L1",)
        assert set(group.result.placed_piece_ids) == {"L1-leg-a", "L1-leg-b"}


class TestSlabResolution:
    """Tests for per-material slab sizes."""

    def test_each_group_uses_its_own_slab(
        self, optimizer: MultiMaterialOptimizer, pieces: list[Piece], materials: list[MaterialInfo]
    ) -> None:
        result = optimizer.optimize(pieces, materials)

        quartz = result.group_for("m1")
        marble = result.group_for("m2")
        assert quartz is not None and marble is not None
        assert (quartz.slab.length_mm, quartz.slab.width_mm) == (3200, 1600)
        assert (marble.slab.length_mm, marble.slab.width_mm) == (2800, 1600)
        assert marble.slab_source == "category-default"
        assert marble.result.slab_config.width == 2800

    def test_slab_override(
        self, optimizer: MultiMaterialOptimizer, pieces: list[Piece], materials: list[MaterialInfo]
    ) -> None:
        override = SlabSize(length_mm=2400, width_mm=1200, name="Offcut")
        result = optimizer.optimize(pieces, materials, slab_overrides={"m1": override})

        quartz = result.group_for("m1")
        assert quartz is not None
        assert quartz.slab == override
        assert quartz.slab_source == "override"

    def test_group_for_unknown(
        self, optimizer: MultiMaterialOptimizer, pieces: list[Piece], materials: list[MaterialInfo]
    ) -> None:
        assert optimizer.optimize(pieces, materials).group_for("nope") is None


class TestWarnings:
    """Tests for orchestrator and group warnings."""

    def test_unassigned_pieces_excluded(
        self, optimizer: MultiMaterialOptimizer, pieces: list[Piece], materials: list[MaterialInfo]
    ) -> None:
        loose = Piece(id="p4", width=800, height=400, label="Loose")
        result = optimizer.optimize(pieces + [loose], materials)

        assert result.unassigned_piece_ids == ("p4",)
        assert all("p4" not in g.piece_ids for g in result.material_groups)
        assert result.warnings[0] == "1 piece(s) have no material assigned: Loose"

    def test_unknown_material_uses_default_slab(self, optimizer: MultiMaterialOptimizer) -> None:
        piece = Piece(id="p1", width=1000, height=600, material_id="m9")
        result = optimizer.optimize([piece], [])

        group = result.material_groups[0]
        assert group.material_name == "m9"
        assert group.slab_source == "ultimate-fallback"
        assert "[m9] Material 'm9' not found; using default slab size" in result.warnings

    def test_group_warnings_prefixed(
        self, optimizer: MultiMaterialOptimizer, marble_material: MaterialInfo
    ) -> None:
        piece = Piece(id="big", width=3000, height=1700, material_id="m2")
        result = optimizer.optimize([piece], [marble_material])

        assert result.material_groups[0].result.unplaced_pieces == ("big",)
        assert result.warnings
        assert all(w.startswith("[Carrara] ") for w in result.warnings)


class TestOversizeReporting:
    """Tests for per-group oversize piece info."""

    def test_oversize_piece_reported(
        self, optimizer: MultiMaterialOptimizer, marble_material: MaterialInfo
    ) -> None:
        piece = Piece(id="run", width=3000, height=600, label="Run", material_id="m2")
        group = optimizer.optimize([piece], [marble_material]).material_groups[0]

        assert len(group.oversize_pieces) == 1
        info = group.oversize_pieces[0]
        assert info.piece_id == "run"
        assert info.join_strategy is JoinStrategy.LENGTHWISE
        assert info.join_count == 1
        assert info.join_length_mm == 600
        assert info.suggested_join_position_mm == 1500

    def test_same_piece_fits_quartz(
        self, optimizer: MultiMaterialOptimizer, quartz_material: MaterialInfo
    ) -> None:
        piece = Piece(id="run", width=3000, height=600, material_id="m1")
        group = optimizer.optimize([piece], [quartz_material]).material_groups[0]
        assert group.oversize_pieces == ()


class TestOverallWaste:
    """Tests for the combined waste figure."""

    def test_area_weighted(self, pieces: list[Piece], materials: list[MaterialInfo]) -> None:
        result = optimize_multi_material(pieces, materials, kerf_width=3)

        usable = sum(g.total_usable_area for g in result.material_groups)
        waste = sum(g.result.total_waste_area for g in result.material_groups)
        assert result.overall_waste_percentage == pytest.approx(waste / usable * 100)

    def test_not_a_simple_average(self, materials: list[MaterialInfo]) -> None:
        pieces = [
            Piece(id="a", width=3000, height=1500, material_id="m1"),
            Piece(id="b", width=3000, height=1500, material_id="m1"),
            Piece(id="c", width=500, height=500, material_id="m2"),
        ]
        result = optimize_multi_material(pieces, materials, kerf_width=3)

        simple = sum(g.waste_percent for g in result.material_groups) / 2
        assert result.overall_waste_percentage < simple

"""Unit tests for lamination strip generation.

Tests cover:
- Threshold and enable switch
- One strip per finished side, in side order
- Raw edges, wall edges and short edges being skipped
- Mitred edge widths including mitre kerf
- Conversion of strips to packing candidates
"""

from __future__ import annotations

import pytest

from slabs.domain.services.lamination import (
    LaminationConfig,
    generate_lamination_strips,
    generate_strip_pieces,
    is_mitred,
    requires_lamination,
    strip_to_piece,
)
from slabs.domain.value_objects import EdgeSide, EdgeTypeNames, FinishedEdges, Piece


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def thick_piece() -> Piece:
    """A 40mm piece finished on the front and left ends."""
    return Piece(
        id="p1",
        width=2000,
        height=600,
        label="Island",
        thickness=40,
        finished_edges=FinishedEdges(top=True, left=True),
        material_id="m1",
        grain_matched=True,
    )


# =============================================================================
# Tests
# =============================================================================


class TestLaminationConfig:
    """Tests for LaminationConfig validation."""

    def test_defaults(self) -> None:
        config = LaminationConfig()
        assert config.threshold_mm == 40
        assert config.standard_width_mm == 60
        assert config.mitre_width_mm == 40
        assert config.min_strip_length_mm == 100

    @pytest.mark.parametrize(
        "kwargs",
        [{"threshold_mm": 0}, {"standard_width_mm": 0}, {"mitre_width_mm": -1}, {"min_strip_length_mm": -5}],
    )
    def test_invalid_values(self, kwargs: dict[str, int]) -> None:
        with pytest.raises(ValueError):
            LaminationConfig(**kwargs)


class TestIsMitred:
    """Tests for mitre detection from edge profile names."""

    @pytest.mark.parametrize("name", ["Mitre", "Mitred Apron", "40mm miter"])
    def test_mitre_names(self, name: str) -> None:
        assert is_mitred(name) is True

    @pytest.mark.parametrize("name", [None, "", "Pencil Round", "Arris"])
    def test_other_names(self, name: str | None) -> None:
        assert is_mitred(name) is False


class TestGenerateLaminationStrips:
    """Tests for generate_lamination_strips."""

    def test_thin_piece_gets_no_strips(self, thick_piece: Piece) -> None:
        thin = thick_piece.with_dimensions(2000, 600, thickness=20)
        assert requires_lamination(thin, LaminationConfig()) is False
        assert generate_lamination_strips(thin) == ()

    def test_disabled(self, thick_piece: Piece) -> None:
        assert generate_lamination_strips(thick_piece, LaminationConfig(enabled=False)) == ()

    def test_custom_threshold(self, thick_piece: Piece) -> None:
        piece = thick_piece.with_dimensions(2000, 600, thickness=30)
        assert generate_lamination_strips(piece) == ()
        assert len(generate_lamination_strips(piece, LaminationConfig(threshold_mm=30))) == 2

    def test_one_strip_per_finished_side(self, thick_piece: Piece) -> None:
        strips = generate_lamination_strips(thick_piece)

        assert [s.side for s in strips] == [EdgeSide.TOP, EdgeSide.LEFT]
        top, left = strips
        assert (top.length_mm, top.width_mm) == (2000, 60)
        assert (left.length_mm, left.width_mm) == (600, 60)
        assert top.id == "p1-lam-top"
        assert top.label == "Island (Lam-Top)"
        assert top.parent_piece_id == "p1"
        assert top.area == 120_000

    def test_raw_edge_skipped(self) -> None:
        piece = Piece(
            id="p1",
            width=2000,
            height=600,
            thickness=40,
            finished_edges=FinishedEdges(top=True, left=True),
            edge_type_names=EdgeTypeNames(top="", left=None),
        )
        strips = generate_lamination_strips(piece)
        assert [s.side for s in strips] == [EdgeSide.LEFT]

    def test_wall_edge_skipped(self) -> None:
        piece = Piece(
            id="p1",
            width=2000,
            height=600,
            thickness=40,
            finished_edges=FinishedEdges(top=True, left=True),
            no_strip_edges=frozenset({EdgeSide.LEFT}),
        )
        assert [s.side for s in generate_lamination_strips(piece)] == [EdgeSide.TOP]

    def test_short_edge_skipped_with_warning(self) -> None:
        piece = Piece(
            id="p1",
            width=2000,
            height=80,
            label="Ledge",
            thickness=40,
            finished_edges=FinishedEdges(top=True, left=True),
        )
        batch = generate_strip_pieces([piece])

        assert [sp.strip.side for sp in batch.strips] == [EdgeSide.TOP]
        assert len(batch.diagnostics) == 1
        assert "below the 100mm minimum" in batch.diagnostics.warnings[0]

    def test_mitred_edge_uses_mitre_width(self) -> None:
        piece = Piece(
            id="p1",
            width=2000,
            height=600,
            label="Island",
            thickness=40,
            finished_edges=FinishedEdges(top=True, bottom=True),
            edge_type_names=EdgeTypeNames(top="Mitred Apron", bottom="Pencil Round"),
        )
        top, bottom = generate_lamination_strips(piece)

        assert top.is_mitred is True
        assert top.width_mm == 40
        assert top.label == "Island (Lam-Top Mitred Apron)"
        assert bottom.is_mitred is False
        assert bottom.width_mm == 60

    def test_mitre_kerf_added_to_mitred_strips_only(self) -> None:
        piece = Piece(
            id="p1",
            width=2000,
            height=600,
            thickness=40,
            finished_edges=FinishedEdges(top=True, bottom=True),
            edge_type_names=EdgeTypeNames(top="Mitre", bottom="Arris"),
        )
        top, bottom = generate_lamination_strips(piece, mitre_kerf_width=4)
        assert top.width_mm == 44
        assert bottom.width_mm == 60


class TestStripPieces:
    """Tests for strip packing candidates."""

    def test_top_strip_runs_along_width(self, thick_piece: Piece) -> None:
        top = generate_lamination_strips(thick_piece)[0]
        piece = strip_to_piece(top, thick_piece, LaminationConfig())
        assert (piece.width, piece.height) == (2000, 60)

    def test_left_strip_runs_along_height(self, thick_piece: Piece) -> None:
        left = generate_lamination_strips(thick_piece)[1]
        piece = strip_to_piece(left, thick_piece, LaminationConfig())
        assert (piece.width, piece.height) == (60, 600)

    def test_strip_inherits_parent_constraints(self, thick_piece: Piece) -> None:
        batch = generate_strip_pieces([thick_piece])
        strip_piece = batch.strips[0].piece

        assert strip_piece.material_id == "m1"
        assert strip_piece.grain_matched is True
        assert strip_piece.thickness == 20
        assert not strip_piece.finished_edges.any
        assert batch.strips[0].parent_area == 2000 * 600

    def test_strips_in_input_order(self, thick_piece: Piece) -> None:
        second = Piece(
            id="p2", width=1000, height=600, thickness=40, finished_edges=FinishedEdges(right=True)
        )
        batch = generate_strip_pieces([thick_piece, second])
        assert [sp.piece.id for sp in batch.strips] == ["p1-lam-top", "p1-lam-left", "p2-lam-right"]

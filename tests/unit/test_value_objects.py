"""Unit tests for the stone piece and material value objects."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from slabs.domain.value_objects import (
    EdgeSide,
    EdgeTypeNames,
    FinishedEdges,
    Piece,
    SlabSize,
)


class TestEdgeSide:
    def test_runs_along_width(self) -> None:
        assert EdgeSide.TOP.runs_along_width
        assert EdgeSide.BOTTOM.runs_along_width
        assert not EdgeSide.LEFT.runs_along_width

    def test_string_values(self) -> None:
        assert EdgeSide("right") is EdgeSide.RIGHT


class TestFinishedEdges:
    """Tests for FinishedEdges."""

    def test_sides_in_fixed_order(self) -> None:
        edges = FinishedEdges(right=True, top=True)
        assert edges.sides == (EdgeSide.TOP, EdgeSide.RIGHT)
        assert edges.any is True

    def test_none_finished(self) -> None:
        assert FinishedEdges().sides == ()
        assert FinishedEdges().any is False


class TestEdgeTypeNames:
    """Unknown and raw edge names are kept apart."""

    def test_unknown_is_not_raw(self) -> None:
        names = EdgeTypeNames(top="Pencil Round")
        assert names.for_side(EdgeSide.BOTTOM) is None
        assert names.is_raw(EdgeSide.BOTTOM) is False

    def test_blank_is_raw(self) -> None:
        names = EdgeTypeNames(left="", right="  ")
        assert names.is_raw(EdgeSide.LEFT)
        assert names.is_raw(EdgeSide.RIGHT)
        assert not EdgeTypeNames(top="Mitre").is_raw(EdgeSide.TOP)


class TestPiece:
    """Tests for Piece."""

    def test_defaults(self) -> None:
        piece = Piece(id="p1", width=2000, height=600)
        assert piece.thickness == 20
        assert piece.material_id is None
        assert piece.can_rotate is True
        assert piece.no_strip_edges == frozenset()

    def test_area_and_edges(self) -> None:
        piece = Piece(id="p1", width=2000, height=600)
        assert piece.area == 1_200_000
        assert piece.edge_length(EdgeSide.TOP) == 2000
        assert piece.edge_length(EdgeSide.LEFT) == 600

    def test_display_label_falls_back_to_id(self) -> None:
        assert Piece(id="p1", width=1, height=1).display_label == "p1"
        assert Piece(id="p1", width=1, height=1, label="Island").display_label == "Island"

    def test_with_dimensions(self, island_piece: Piece) -> None:
        segment = island_piece.with_dimensions(1000, 600, label="Island (Part 1/2)")

        assert (segment.width, segment.height) == (1000, 600)
        assert segment.label == "Island (Part 1/2)"
        assert segment.finished_edges == island_piece.finished_edges
        assert island_piece.width == 2000

    def test_frozen(self, island_piece: Piece) -> None:
        with pytest.raises(FrozenInstanceError):
            island_piece.width = 10  # type: ignore[misc]


class TestSlabSize:
    def test_area(self) -> None:
        assert SlabSize(length_mm=3200, width_mm=1600).area == 5_120_000

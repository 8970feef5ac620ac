"""Decomposition of L and U shaped pieces into packable rectangles.

L-shape: ``leg1`` runs across the top, ``leg2`` drops from its right end.
U-shape: ``back`` runs across the top, ``leftLeg`` and ``rightLeg`` drop from
each end. Only outer edges keep their finish; the inner step edges are
always raw.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from slabs.domain.value_objects import (
    EdgeSide,
    EdgeTypeNames,
    FinishedEdges,
    Piece,
    ShapeType,
)

# Which outer sides of the parent each leg carries
_L_LEG_SIDES: tuple[tuple[str, frozenset[EdgeSide]], ...] = (
    ("Leg A", frozenset({EdgeSide.TOP, EdgeSide.LEFT})),
    ("Leg B", frozenset({EdgeSide.RIGHT, EdgeSide.BOTTOM})),
)
_U_LEG_SIDES: tuple[tuple[str, frozenset[EdgeSide]], ...] = (
    ("Back", frozenset({EdgeSide.TOP})),
    ("Left Leg", frozenset({EdgeSide.LEFT, EdgeSide.BOTTOM})),
    ("Right Leg", frozenset({EdgeSide.RIGHT, EdgeSide.BOTTOM})),
)


@dataclass(frozen=True)
class LegRect:
    """One rectangular component of a shaped piece.

    Attributes:
        label: Leg name ("Leg A", "Back", ...), None for plain rectangles.
        length_mm: Leg length (slab-length axis).
        width_mm: Leg width.
        part_index: Position of the leg within the parent.
        sides: Parent sides that remain outer edges on this leg.
    """

    label: str | None
    length_mm: int
    width_mm: int
    part_index: int = 0
    sides: frozenset[EdgeSide] = frozenset(EdgeSide)


def _leg(config: Mapping[str, Any], *keys: str) -> tuple[int, int] | None:
    for key in keys:
        leg = config.get(key)
        if isinstance(leg, Mapping) and leg.get("length_mm") and leg.get("width_mm"):
            return int(leg["length_mm"]), int(leg["width_mm"])
    return None


def _shape_type(piece: Piece) -> ShapeType | None:
    if piece.shape_type is None:
        return None
    try:
        return ShapeType(piece.shape_type)
    except ValueError:
        return None


def leg_rects(piece: Piece) -> tuple[LegRect, ...]:
    """Rectangles making up a piece.

    Rectangles, unknown shapes and shapes with incomplete leg data return the
    piece's own bounding rectangle.
    """
    whole = (LegRect(label=None, length_mm=piece.width, width_mm=piece.height),)
    shape = _shape_type(piece)
    config = piece.shape_config
    if shape in (None, ShapeType.RECTANGLE) or not config:
        return whole

    if shape is ShapeType.L_SHAPE:
        legs = [_leg(config, "leg1"), _leg(config, "leg2")]
        layout = _L_LEG_SIDES
    else:
        legs = [
            _leg(config, "back"),
            _leg(config, "leftLeg", "left_leg"),
            _leg(config, "rightLeg", "right_leg"),
        ]
        layout = _U_LEG_SIDES

    if any(leg is None for leg in legs):
        return whole

    return tuple(
        LegRect(label=name, length_mm=leg[0], width_mm=leg[1], part_index=i, sides=sides)
        for i, ((name, sides), leg) in enumerate(zip(layout, legs))
        if leg is not None
    )


def _leg_id(piece: Piece, leg: LegRect) -> str:
    slug = (leg.label or "part").lower().replace(" ", "-")
    return f"{piece.id}-{slug}"


def decompose_piece(piece: Piece) -> tuple[Piece, ...]:
    """Split a shaped piece into rectangular pieces for the packer.

    Plain rectangles are returned unchanged. Each leg inherits material,
    thickness and grain lock, and keeps only the finishes of its outer sides.
    """
    legs = leg_rects(piece)
    if len(legs) == 1 and legs[0].label is None:
        return (piece,)

    parts: list[Piece] = []
    for leg in legs:
        finished = FinishedEdges(
            **{side.value: piece.finished_edges.is_finished(side) and side in leg.sides for side in EdgeSide}
        )
        names = None
        if piece.edge_type_names is not None:
            names = EdgeTypeNames(
                **{
                    side.value: piece.edge_type_names.for_side(side) if side in leg.sides else None
                    for side in EdgeSide
                }
            )
        parts.append(
            replace(
                piece,
                id=_leg_id(piece, leg),
                width=leg.length_mm,
                height=leg.width_mm,
                label=f"{piece.display_label} ({leg.label})",
                finished_edges=finished,
                edge_type_names=names,
                shape_type=None,
                shape_config=None,
                no_strip_edges=piece.no_strip_edges | (frozenset(EdgeSide) - leg.sides),
            )
        )
    return tuple(parts)


def decompose_pieces(pieces: tuple[Piece, ...] | list[Piece]) -> list[Piece]:
    """Decompose every piece, preserving input order."""
    result: list[Piece] = []
    for piece in pieces:
        result.extend(decompose_piece(piece))
    return result

"""Cut-plan calculation for a single piece against a single slab.

Answers one question: does the piece fit on one slab by itself, and if not,
how must it be split into joined segments. Kerf and packing are not
considered here; see ``slabs.infrastructure.bin_packing`` for that.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from slabs.domain.slab_sizes import get_slab_size
from slabs.domain.value_objects import SlabSize

logger = logging.getLogger(__name__)

# Joins closer than this to the centre of a piece are flagged for review
CENTRE_JOIN_TOLERANCE_MM = 200


class JoinStrategy(str, Enum):
    """How an oversize piece is divided."""

    NONE = "NONE"
    LENGTHWISE = "LENGTHWISE"
    WIDTHWISE = "WIDTHWISE"
    MULTI_JOIN = "MULTI_JOIN"


class JoinOrientation(str, Enum):
    """Direction of a join line on the finished piece."""

    VERTICAL = "VERTICAL"
    HORIZONTAL = "HORIZONTAL"


@dataclass(frozen=True)
class PieceDimensions:
    """Nominal piece footprint."""

    length_mm: int
    width_mm: int
    thickness_mm: int | None = None


@dataclass(frozen=True)
class Segment:
    """One slab-sized portion of a split piece."""

    length_mm: int
    width_mm: int
    slab_index: int


@dataclass(frozen=True)
class JoinLocation:
    """A join line across the finished piece.

    Attributes:
        position_mm: Distance from the left (vertical) or bottom (horizontal) edge.
        orientation: Join direction.
        length_mm: Length of the join line.
    """

    position_mm: int
    orientation: JoinOrientation
    length_mm: int


@dataclass(frozen=True)
class CutPlan:
    """Result of ``calculate_cut_plan``.

    Attributes:
        fits_on_single_slab: True if the piece fits whole in either orientation.
        strategy: Join strategy applied.
        segments: Segments the piece is cut into (one when it fits).
        joins: Join lines between segments.
        total_slabs_required: Slabs consumed by this piece on its own.
        join_length_mm: Sum of join line lengths.
        join_cost: Join length in metres times the join rate, to the cent.
        warnings: Advisory notes for the fabricator.
        thickness_mm: Piece thickness carried through for display.
    """

    fits_on_single_slab: bool
    strategy: JoinStrategy
    segments: tuple[Segment, ...]
    joins: tuple[JoinLocation, ...]
    total_slabs_required: int
    join_length_mm: int
    join_cost: float = 0.0
    warnings: tuple[str, ...] = ()
    thickness_mm: int | None = None

    @property
    def join_count(self) -> int:
        return len(self.joins)

    @property
    def is_oversize(self) -> bool:
        return not self.fits_on_single_slab


def balanced_split(total: int, limit: float) -> list[int]:
    """Split ``total`` into the fewest near-equal parts no longer than ``limit``."""
    count = max(1, math.ceil(total / limit))
    size = math.ceil(total / count)
    while size > limit:
        count += 1
        size = math.ceil(total / count)
    sizes: list[int] = []
    remaining = total
    for _ in range(count):
        part = min(size, remaining)
        sizes.append(part)
        remaining -= part
    return [s for s in sizes if s > 0]


def _join_cost(join_length_mm: int, rate_per_metre: float) -> float:
    return round(join_length_mm / 1000 * rate_per_metre, 2)


def calculate_cut_plan(
    piece: PieceDimensions,
    material_name: str | None = None,
    thickness_mm: int | None = None,
    slab_length_mm: int | None = None,
    slab_width_mm: int | None = None,
    *,
    edge_trim_mm: float = 0,
    join_rate_per_metre: float = 0.0,
) -> CutPlan:
    """Calculate how a piece is cut from slab stock.

    A piece fits when, in at least one orientation, its length is within the
    usable slab length and its width within the usable slab width. Otherwise
    it is split along its longer dimension into the fewest segments that each
    fit the slab length; every join runs across the other dimension. When the
    shorter dimension is also wider than the slab, a grid split is reported.

    Args:
        piece: Piece dimensions.
        material_name: Category or brand used when explicit slab dimensions
            are not given.
        thickness_mm: Piece thickness; falls back to ``piece.thickness_mm``.
        slab_length_mm: Explicit slab length (requires ``slab_width_mm``).
        slab_width_mm: Explicit slab width (requires ``slab_length_mm``).
        edge_trim_mm: Unusable margin per slab side.
        join_rate_per_metre: Cost per metre of join.

    Returns:
        The cut plan. Oversize pieces never raise.

    Raises:
        ValueError: If piece dimensions or usable slab dimensions are not positive.
    """
    if piece.length_mm <= 0 or piece.width_mm <= 0:
        raise ValueError("Piece dimensions must be positive")

    if slab_length_mm and slab_width_mm:
        slab = SlabSize(length_mm=slab_length_mm, width_mm=slab_width_mm, name="explicit")
    else:
        slab = get_slab_size(material_name)

    usable_long = max(slab.length_mm, slab.width_mm) - 2 * edge_trim_mm
    usable_short = min(slab.length_mm, slab.width_mm) - 2 * edge_trim_mm
    if usable_long <= 0 or usable_short <= 0:
        raise ValueError("Usable slab dimensions must be positive")

    thickness = thickness_mm if thickness_mm is not None else piece.thickness_mm
    length, width = piece.length_mm, piece.width_mm

    fits_normal = length <= usable_long and width <= usable_short
    fits_rotated = width <= usable_long and length <= usable_short
    if fits_normal or fits_rotated:
        return CutPlan(
            fits_on_single_slab=True,
            strategy=JoinStrategy.NONE,
            segments=(Segment(length_mm=length, width_mm=width, slab_index=0),),
            joins=(),
            total_slabs_required=1,
            join_length_mm=0,
            warnings=(
                ("Piece must be rotated 90° to fit on slab",)
                if fits_rotated and not fits_normal
                else ()
            ),
            thickness_mm=thickness,
        )

    long_is_length = length >= width
    short = width if long_is_length else length

    if short <= usable_short:
        plan = _single_axis_plan(length, width, long_is_length, usable_long, join_rate_per_metre)
    else:
        plan = _grid_plan(length, width, long_is_length, usable_long, usable_short, join_rate_per_metre)

    logger.debug(
        "Cut plan for %sx%s on %sx%s: %s, %d join(s), %dmm",
        length,
        width,
        slab.length_mm,
        slab.width_mm,
        plan.strategy.value,
        plan.join_count,
        plan.join_length_mm,
    )
    return CutPlan(
        fits_on_single_slab=False,
        strategy=plan.strategy,
        segments=plan.segments,
        joins=plan.joins,
        total_slabs_required=plan.total_slabs_required,
        join_length_mm=plan.join_length_mm,
        join_cost=plan.join_cost,
        warnings=plan.warnings,
        thickness_mm=thickness,
    )


def _single_axis_plan(
    length: int,
    width: int,
    long_is_length: bool,
    usable_long: float,
    rate: float,
) -> CutPlan:
    long_side = length if long_is_length else width
    cross = width if long_is_length else length
    sizes = balanced_split(long_side, usable_long)

    segments: list[Segment] = []
    joins: list[JoinLocation] = []
    position = 0
    orientation = JoinOrientation.VERTICAL if long_is_length else JoinOrientation.HORIZONTAL
    for index, size in enumerate(sizes):
        if long_is_length:
            segments.append(Segment(length_mm=size, width_mm=width, slab_index=index))
        else:
            segments.append(Segment(length_mm=length, width_mm=size, slab_index=index))
        if index < len(sizes) - 1:
            position += size
            joins.append(JoinLocation(position_mm=position, orientation=orientation, length_mm=cross))

    join_length = sum(j.length_mm for j in joins)
    warnings: list[str] = []
    if long_is_length:
        centre = long_side / 2
        if any(abs(j.position_mm - centre) < CENTRE_JOIN_TOLERANCE_MM for j in joins):
            warnings.append("Join is near centre of piece - consider adjusting if possible")
    else:
        warnings.append("Widthwise join - ensure waterfall continuity if applicable")

    return CutPlan(
        fits_on_single_slab=False,
        strategy=JoinStrategy.LENGTHWISE if long_is_length else JoinStrategy.WIDTHWISE,
        segments=tuple(segments),
        joins=tuple(joins),
        total_slabs_required=len(segments),
        join_length_mm=join_length,
        join_cost=_join_cost(join_length, rate),
        warnings=tuple(warnings),
    )


def _grid_plan(
    length: int,
    width: int,
    long_is_length: bool,
    usable_long: float,
    usable_short: float,
    rate: float,
) -> CutPlan:
    # The long side follows the slab length, the short side the slab width
    length_limit = usable_long if long_is_length else usable_short
    width_limit = usable_short if long_is_length else usable_long
    length_sizes = balanced_split(length, length_limit)
    width_sizes = balanced_split(width, width_limit)

    segments = tuple(
        Segment(length_mm=seg_length, width_mm=seg_width, slab_index=row * len(length_sizes) + col)
        for row, seg_width in enumerate(width_sizes)
        for col, seg_length in enumerate(length_sizes)
    )

    joins: list[JoinLocation] = []
    position = 0
    for seg_length in length_sizes[:-1]:
        position += seg_length
        joins.append(JoinLocation(position_mm=position, orientation=JoinOrientation.VERTICAL, length_mm=width))
    position = 0
    for seg_width in width_sizes[:-1]:
        position += seg_width
        joins.append(JoinLocation(position_mm=position, orientation=JoinOrientation.HORIZONTAL, length_mm=length))

    join_length = sum(j.length_mm for j in joins)
    return CutPlan(
        fits_on_single_slab=False,
        strategy=JoinStrategy.MULTI_JOIN,
        segments=segments,
        joins=tuple(joins),
        total_slabs_required=len(segments),
        join_length_mm=join_length,
        join_cost=_join_cost(join_length, rate),
        warnings=(
            f"Complex piece requires {len(segments)} slabs and {len(joins)} joins",
            "Consider breaking into separate pieces if possible",
        ),
    )


def will_require_join(
    piece: PieceDimensions,
    material_name: str | None = None,
    slab_length_mm: int | None = None,
    slab_width_mm: int | None = None,
) -> bool:
    """True if the piece cannot be cut from a single slab."""
    plan = calculate_cut_plan(
        piece, material_name, slab_length_mm=slab_length_mm, slab_width_mm=slab_width_mm
    )
    return not plan.fits_on_single_slab


def estimate_waste(
    piece: PieceDimensions,
    material_name: str | None = None,
) -> tuple[float, int]:
    """Estimate slab waste when a piece is cut on its own.

    Returns:
        Tuple of (waste percentage rounded to 0.1, waste area in mm^2).
    """
    plan = calculate_cut_plan(piece, material_name)
    slab = get_slab_size(material_name)
    total_slab_area = plan.total_slabs_required * slab.area
    waste_mm2 = total_slab_area - piece.length_mm * piece.width_mm
    return round(waste_mm2 / total_slab_area * 100, 1), waste_mm2

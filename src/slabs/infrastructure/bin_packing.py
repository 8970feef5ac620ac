"""Bin packing data models and algorithm for stone slab optimization.

Pieces and their lamination strips are packed onto identical slabs with a
maximal-rectangles free-space tracker and a bottom-left placement rule.
Kerf is modelled by reserving a ``kerf_width`` margin on the right and top
of every placed piece; the free region of each slab is extended by the same
amount so pieces can still sit flush against the far edge allowance.

All result dataclasses are frozen (immutable) so results can be shared and
compared safely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from slabs.domain.diagnostics import Diagnostics
from slabs.domain.services.cut_plan import balanced_split
from slabs.domain.services.lamination import (
    LaminationConfig,
    StripPiece,
    generate_strip_pieces,
)
from slabs.domain.value_objects import EdgeSide, Piece

logger = logging.getLogger(__name__)

_EPSILON = 1e-9


@dataclass(frozen=True)
class SlabConfig:
    """Slab dimensions for one packing run.

    Attributes:
        width: Slab extent along the slab-length axis in mm.
        height: Slab extent along the slab-width axis in mm.
        edge_allowance_mm: Unusable margin on every side in mm.
    """

    width: float = 3200
    height: float = 1600
    edge_allowance_mm: float = 0

    def __post_init__(self) -> None:
        if self.edge_allowance_mm < 0:
            raise ValueError("Edge allowance must be non-negative")

    @property
    def usable_width(self) -> float:
        """Width available for piece placement after edge allowance."""
        return self.width - (2 * self.edge_allowance_mm)

    @property
    def usable_height(self) -> float:
        """Height available for piece placement after edge allowance."""
        return self.height - (2 * self.edge_allowance_mm)

    @property
    def usable_area(self) -> float:
        """Usable area in mm^2 (zero for degenerate slabs)."""
        if not self.is_usable:
            return 0.0
        return self.usable_width * self.usable_height

    @property
    def is_usable(self) -> bool:
        return self.usable_width > 0 and self.usable_height > 0


@dataclass(frozen=True)
class PackingConfig:
    """Configuration for a single-material packing run.

    Attributes:
        slab: Slab dimensions and edge allowance.
        kerf_width: Minimum gap between placed pieces in mm.
        allow_rotation: Whether 90 degree rotation is allowed at all.
        mitre_kerf_width: Width added to mitred lamination strips, if any.
        lamination: Lamination thresholds and strip sizes.
    """

    slab: SlabConfig = field(default_factory=SlabConfig)
    kerf_width: float = 3
    allow_rotation: bool = True
    mitre_kerf_width: float | None = None
    lamination: LaminationConfig = field(default_factory=LaminationConfig)

    def __post_init__(self) -> None:
        if self.kerf_width < 0:
            raise ValueError("Kerf width must be non-negative")
        if self.mitre_kerf_width is not None and self.mitre_kerf_width < 0:
            raise ValueError("Mitre kerf width must be non-negative")


@dataclass(frozen=True)
class Placement:
    """A piece, segment or strip placed on a slab.

    Coordinates are absolute slab coordinates with a bottom-left origin, so
    the first piece on an empty slab sits at ``(edge_allowance, edge_allowance)``.

    Attributes:
        piece_id: Input piece id (segments share their parent's id; strips
            use ``{parent}-lam-{side}``).
        slab_index: Zero-based slab within the run.
        x: Left edge in mm.
        y: Bottom edge in mm.
        width: Placed width (after rotation) in mm.
        height: Placed height (after rotation) in mm.
        rotated: True if turned 90 degrees from the input orientation.
        label: Display label.
        is_lamination_strip: True for lamination strips.
        is_segment: True for one part of a split oversize piece.
        parent_piece_id: Parent piece for strips.
        strip_position: Parent edge a strip belongs to.
        segment_index: One-based part number for segments.
        total_segments: Number of parts the piece was split into.
        grain_matched: Grain lock carried from the input piece.
    """

    piece_id: str
    slab_index: int
    x: float
    y: float
    width: float
    height: float
    rotated: bool = False
    label: str = ""
    is_lamination_strip: bool = False
    is_segment: bool = False
    parent_piece_id: str | None = None
    strip_position: EdgeSide | None = None
    segment_index: int | None = None
    total_segments: int | None = None
    grain_matched: bool = False

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def right_edge(self) -> float:
        return self.x + self.width

    @property
    def top_edge(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class SlabLayout:
    """Layout of placements on one physical slab.

    Attributes:
        slab_index: Zero-based index of this slab within its run.
        slab_config: Slab dimensions.
        placements: Placements in the order they were made.
    """

    slab_index: int
    slab_config: SlabConfig
    placements: tuple[Placement, ...]

    def __post_init__(self) -> None:
        if self.slab_index < 0:
            raise ValueError("Slab index must be non-negative")

    @property
    def width(self) -> float:
        return self.slab_config.width

    @property
    def height(self) -> float:
        return self.slab_config.height

    @property
    def used_area(self) -> float:
        """Total area of placed pieces and strips in mm^2."""
        return sum(p.area for p in self.placements)

    @property
    def waste_area(self) -> float:
        return self.slab_config.usable_area - self.used_area

    @property
    def waste_percent(self) -> float:
        """Percentage of the usable area not covered by placements."""
        usable = self.slab_config.usable_area
        if usable == 0:
            return 0.0
        return self.waste_area / usable * 100

    @property
    def piece_count(self) -> int:
        return len(self.placements)


@dataclass(frozen=True)
class StripSummary:
    """One strip as reported in the lamination summary."""

    position: EdgeSide
    length_mm: int
    width_mm: int


@dataclass(frozen=True)
class ParentStrips:
    """Strips generated for one parent piece."""

    parent_piece_id: str
    parent_label: str
    strips: tuple[StripSummary, ...]


@dataclass(frozen=True)
class LaminationSummary:
    """Totals for the lamination strips of a run.

    Attributes:
        total_strips: Number of strips generated.
        total_strip_area: Combined strip area in m^2.
        strips_by_parent: Strips grouped by parent, in input order.
    """

    total_strips: int
    total_strip_area: float
    strips_by_parent: tuple[ParentStrips, ...]


@dataclass(frozen=True)
class PackingResult:
    """Complete result of a single-material packing run.

    Attributes:
        slabs: Slab layouts in creation order.
        total_used_area: Sum of placed areas in mm^2.
        total_waste_area: Usable area of all slabs minus used area in mm^2.
        waste_percent: Waste as a percentage of total usable area.
        unplaced_pieces: Ids of input pieces that could not be placed.
        diagnostics: Warnings raised during the run.
        lamination_summary: Strip totals, or None when no strips were made.
        slab_config: Slab dimensions used.
        kerf_width: Kerf used.
    """

    slabs: tuple[SlabLayout, ...]
    total_used_area: float
    total_waste_area: float
    waste_percent: float
    unplaced_pieces: tuple[str, ...]
    diagnostics: Diagnostics
    lamination_summary: LaminationSummary | None
    slab_config: SlabConfig
    kerf_width: float

    def __post_init__(self) -> None:
        if self.waste_percent < 0 or self.waste_percent > 100:
            raise ValueError("Waste percentage must be between 0 and 100")

    @property
    def total_slabs(self) -> int:
        return len(self.slabs)

    @property
    def placements(self) -> tuple[Placement, ...]:
        """All placements, slab by slab."""
        return tuple(p for slab in self.slabs for p in slab.placements)

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.diagnostics.warnings

    @property
    def placed_piece_ids(self) -> tuple[str, ...]:
        """Distinct ids of placed main pieces (not strips) in placement order."""
        seen: dict[str, None] = {}
        for placement in self.placements:
            if not placement.is_lamination_strip:
                seen.setdefault(placement.piece_id, None)
        return tuple(seen)

    @classmethod
    def empty(
        cls,
        slab_config: SlabConfig,
        kerf_width: float,
        unplaced_pieces: tuple[str, ...] = (),
        diagnostics: Diagnostics | None = None,
    ) -> PackingResult:
        return cls(
            slabs=(),
            total_used_area=0.0,
            total_waste_area=0.0,
            waste_percent=0.0,
            unplaced_pieces=unplaced_pieces,
            diagnostics=diagnostics or Diagnostics(),
            lamination_summary=None,
            slab_config=slab_config,
            kerf_width=kerf_width,
        )


@dataclass(frozen=True)
class _Rect:
    """Axis-aligned rectangle used for free-space tracking."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    def intersects(self, other: _Rect) -> bool:
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.top
            and other.y < self.top
        )

    def contains(self, other: _Rect) -> bool:
        return (
            self.x <= other.x
            and self.y <= other.y
            and self.right >= other.right
            and self.top >= other.top
        )


@dataclass(frozen=True)
class _Candidate:
    """Internal packing candidate.

    Attributes:
        piece: Piece carrying the dimensions to place.
        placement_id: Id written to the placement.
        sort_area: Area used for ordering.
        order: Input position used to break ties.
        is_strip: True for lamination strips.
        parent_piece_id: Parent of a strip.
        strip_position: Edge a strip belongs to.
        segment_index: One-based part number for segments.
        total_segments: Part count for segments.
    """

    piece: Piece
    placement_id: str
    sort_area: float
    order: tuple[int, ...]
    is_strip: bool = False
    parent_piece_id: str | None = None
    strip_position: EdgeSide | None = None
    segment_index: int | None = None
    total_segments: int | None = None

    @property
    def sort_key(self) -> tuple[float, bool, tuple[int, ...]]:
        return (-self.sort_area, self.is_strip, self.order)


@dataclass
class _SlabState:
    """Mutable state for a slab during packing.

    Attributes:
        index: Slab index (0-based).
        free: Maximal free rectangles in kerf-extended space.
        placements: Placements made so far.
    """

    index: int
    free: list[_Rect]
    placements: list[Placement] = field(default_factory=list)


class SlabBinPacker:
    """Packs pieces and lamination strips onto a minimum number of slabs.

    Candidates are sorted largest area first (main pieces ahead of strips,
    ties by input order) and placed one at a time. For each candidate the
    open slabs are scanned in creation order; on each slab the natural
    orientation is tried before the rotated one, and the lowest then
    leftmost free position is taken. A new slab is opened when no open slab
    admits the candidate.

    Attributes:
        config: Packing configuration (slab, kerf, rotation, lamination).
    """

    def __init__(self, config: PackingConfig) -> None:
        """Initialize the packer with configuration.

        Args:
            config: Packing configuration.
        """
        self.config = config

    def pack(self, pieces: Sequence[Piece]) -> PackingResult:
        """Pack pieces onto slabs.

        Args:
            pieces: Rectangular pieces to pack. L and U shapes must already be
                decomposed.

        Returns:
            PackingResult with slab layouts, waste figures, unplaced piece ids
            and warnings. Never raises for oversize or degenerate input.
        """
        slab = self.config.slab
        kerf = self.config.kerf_width

        if not pieces:
            return PackingResult.empty(slab, kerf)

        if not slab.is_usable:
            message = (
                f"Slab {slab.width}x{slab.height}mm has no usable area with "
                f"{slab.edge_allowance_mm}mm edge allowance: "
                f"{len(pieces)} piece(s) could not be placed"
            )
            logger.warning(message)
            return PackingResult.empty(
                slab,
                kerf,
                unplaced_pieces=tuple(p.id for p in pieces),
                diagnostics=Diagnostics.of(message),
            )

        diagnostics = Diagnostics()
        unplaced: list[str] = []
        placeable: list[Piece] = []
        parent_order: dict[str, int] = {}
        candidates: list[_Candidate] = []

        for index, piece in enumerate(pieces):
            if piece.width <= 0 or piece.height <= 0:
                unplaced.append(piece.id)
                diagnostics = diagnostics.with_warning(
                    f"Piece '{piece.display_label}' has invalid dimensions "
                    f"{piece.width}x{piece.height}mm and was not placed"
                )
                continue
            if self._is_unplaceable(piece):
                unplaced.append(piece.id)
                message = (
                    f"Piece '{piece.display_label}' ({piece.width}x{piece.height}mm) "
                    f"exceeds the usable slab ({slab.usable_width:g}x{slab.usable_height:g}mm) "
                    "in both orientations and needs manual review"
                )
                logger.warning(message)
                diagnostics = diagnostics.with_warning(message)
                continue
            placeable.append(piece)
            parent_order.setdefault(piece.id, index)
            expanded, split_diagnostics = self._expand(
                piece,
                placement_id=piece.id,
                sort_area=piece.area,
                order=(index, 0),
            )
            candidates.extend(expanded)
            diagnostics = diagnostics.merge(split_diagnostics)

        strip_batch = generate_strip_pieces(
            placeable, self.config.lamination, self.config.mitre_kerf_width
        )
        diagnostics = diagnostics.merge(strip_batch.diagnostics)
        for strip_index, strip_piece in enumerate(strip_batch.strips):
            expanded, split_diagnostics = self._expand_strip(
                strip_piece, (parent_order[strip_piece.strip.parent_piece_id], strip_index + 1)
            )
            candidates.extend(expanded)
            diagnostics = diagnostics.merge(split_diagnostics)

        ordered = sorted(candidates, key=lambda c: c.sort_key)
        logger.debug("Packing %d candidates from %d pieces", len(ordered), len(pieces))

        slabs: list[_SlabState] = []
        for candidate in ordered:
            if not self._place_on_open_slabs(candidate, slabs):
                new_slab = self._open_slab(len(slabs))
                slabs.append(new_slab)
                if not self._place_on_slab(candidate, new_slab):
                    # Only reachable for strips wider than the usable slab
                    message = (
                        f"'{candidate.piece.display_label}' "
                        f"({candidate.piece.width}x{candidate.piece.height}mm) "
                        "does not fit on an empty slab and was not placed"
                    )
                    logger.warning(message)
                    diagnostics = diagnostics.with_warning(message)
                    slabs.pop()

        layouts = tuple(
            SlabLayout(slab_index=state.index, slab_config=slab, placements=tuple(state.placements))
            for state in slabs
        )
        for layout in layouts:
            logger.debug(
                "Slab %d: %d placements, %.1f%% waste",
                layout.slab_index,
                layout.piece_count,
                layout.waste_percent,
            )

        total_used = sum(layout.used_area for layout in layouts)
        total_usable = len(layouts) * slab.usable_area
        total_waste = total_usable - total_used
        waste_percent = total_waste / total_usable * 100 if total_usable else 0.0

        logger.info(
            "Packed %d pieces onto %d slabs (%.1f%% waste, %d unplaced)",
            len(pieces) - len(unplaced),
            len(layouts),
            waste_percent,
            len(unplaced),
        )

        return PackingResult(
            slabs=layouts,
            total_used_area=total_used,
            total_waste_area=total_waste,
            waste_percent=waste_percent,
            unplaced_pieces=tuple(unplaced),
            diagnostics=diagnostics,
            lamination_summary=self._summarize_strips(strip_batch.strips),
            slab_config=slab,
            kerf_width=kerf,
        )

    def _is_rotatable(self, piece: Piece) -> bool:
        return self.config.allow_rotation and piece.can_rotate and not piece.grain_matched

    def _fits_empty_slab(self, width: float, height: float, rotatable: bool) -> bool:
        slab = self.config.slab
        if width <= slab.usable_width and height <= slab.usable_height:
            return True
        return rotatable and height <= slab.usable_width and width <= slab.usable_height

    def _is_unplaceable(self, piece: Piece) -> bool:
        """True when the short side exceeds the usable short side."""
        slab = self.config.slab
        return min(piece.width, piece.height) > min(slab.usable_width, slab.usable_height)

    def _split_dimensions(self, piece: Piece) -> tuple[str, list[int]]:
        """Axis to split ("width" or "height") and the segment sizes along it.

        Fixed-orientation pieces split whichever axis overflows. Rotatable
        pieces lay their long side along the long usable axis.
        """
        slab = self.config.slab
        if not self._is_rotatable(piece):
            if piece.width > slab.usable_width:
                return "width", balanced_split(piece.width, slab.usable_width)
            return "height", balanced_split(piece.height, slab.usable_height)
        long_usable = max(slab.usable_width, slab.usable_height)
        if piece.width >= piece.height:
            return "width", balanced_split(piece.width, long_usable)
        return "height", balanced_split(piece.height, long_usable)

    def _expand(
        self,
        piece: Piece,
        placement_id: str,
        sort_area: float,
        order: tuple[int, ...],
        is_strip: bool = False,
        parent_piece_id: str | None = None,
        strip_position: EdgeSide | None = None,
    ) -> tuple[list[_Candidate], Diagnostics]:
        """Candidate list for a piece, splitting it if it overflows the slab."""
        base = dict(
            placement_id=placement_id,
            sort_area=sort_area,
            is_strip=is_strip,
            parent_piece_id=parent_piece_id,
            strip_position=strip_position,
        )
        if self._fits_empty_slab(piece.width, piece.height, self._is_rotatable(piece)):
            return [_Candidate(piece=piece, order=order, **base)], Diagnostics()

        axis, sizes = self._split_dimensions(piece)
        total = len(sizes)
        candidates: list[_Candidate] = []
        for number, size in enumerate(sizes, start=1):
            width, height = (size, piece.height) if axis == "width" else (piece.width, size)
            segment = piece.with_dimensions(
                width, height, label=f"{piece.display_label} (Part {number}/{total})"
            )
            candidates.append(
                _Candidate(
                    piece=segment,
                    order=order + (number,),
                    segment_index=number,
                    total_segments=total,
                    **base,
                )
            )

        slab = self.config.slab
        message = (
            f"Piece '{piece.display_label}' ({piece.width}x{piece.height}mm) exceeds the "
            f"usable slab ({slab.usable_width:g}x{slab.usable_height:g}mm): split into "
            f"{total} segments with {total - 1} join(s)"
        )
        logger.info(message)
        return candidates, Diagnostics.of(message)

    def _expand_strip(
        self,
        strip_piece: StripPiece,
        order: tuple[int, ...],
    ) -> tuple[list[_Candidate], Diagnostics]:
        strip = strip_piece.strip
        piece = strip_piece.piece
        if self._is_unplaceable(piece):
            message = (
                f"Lamination strip '{piece.display_label}' ({piece.width}x{piece.height}mm) "
                "does not fit the usable slab and was not placed"
            )
            logger.warning(message)
            return [], Diagnostics.of(message)
        return self._expand(
            piece,
            placement_id=piece.id,
            sort_area=min(piece.area, strip_piece.parent_area),
            order=order,
            is_strip=True,
            parent_piece_id=strip.parent_piece_id,
            strip_position=strip.side,
        )

    def _open_slab(self, index: int) -> _SlabState:
        slab = self.config.slab
        kerf = self.config.kerf_width
        origin = slab.edge_allowance_mm
        return _SlabState(
            index=index,
            free=[_Rect(origin, origin, slab.usable_width + kerf, slab.usable_height + kerf)],
        )

    def _place_on_open_slabs(self, candidate: _Candidate, slabs: list[_SlabState]) -> bool:
        for slab in slabs:
            if self._place_on_slab(candidate, slab):
                return True
        return False

    def _orientations(self, candidate: _Candidate) -> list[tuple[float, float, bool]]:
        piece = candidate.piece
        orientations = [(piece.width, piece.height, False)]
        if self._is_rotatable(piece) and piece.width != piece.height:
            orientations.append((piece.height, piece.width, True))
        return orientations

    def _find_position(self, slab: _SlabState, width: float, height: float) -> tuple[float, float] | None:
        """Lowest, then leftmost, free position admitting the footprint."""
        kerf = self.config.kerf_width
        best: tuple[float, float] | None = None
        for rect in slab.free:
            if width + kerf <= rect.width + _EPSILON and height + kerf <= rect.height + _EPSILON:
                if best is None or (rect.y, rect.x) < best:
                    best = (rect.y, rect.x)
        if best is None:
            return None
        return best[1], best[0]

    def _place_on_slab(self, candidate: _Candidate, slab: _SlabState) -> bool:
        for width, height, rotated in self._orientations(candidate):
            position = self._find_position(slab, width, height)
            if position is None:
                continue
            x, y = position
            placement = Placement(
                piece_id=candidate.placement_id,
                slab_index=slab.index,
                x=x,
                y=y,
                width=width,
                height=height,
                rotated=rotated,
                label=candidate.piece.display_label,
                is_lamination_strip=candidate.is_strip,
                is_segment=candidate.segment_index is not None,
                parent_piece_id=candidate.parent_piece_id,
                strip_position=candidate.strip_position,
                segment_index=candidate.segment_index,
                total_segments=candidate.total_segments,
                grain_matched=candidate.piece.grain_matched,
            )
            slab.placements.append(placement)
            kerf = self.config.kerf_width
            self._split_free(slab, _Rect(x, y, width + kerf, height + kerf))
            logger.debug(
                "Placed '%s' on slab %d at (%s, %s) as %sx%s%s",
                placement.label,
                slab.index,
                x,
                y,
                width,
                height,
                " rotated" if rotated else "",
            )
            return True
        return False

    def _split_free(self, slab: _SlabState, used: _Rect) -> None:
        """Carve ``used`` out of every free rectangle it overlaps."""
        remaining: list[_Rect] = []
        created: list[_Rect] = []
        for rect in slab.free:
            if not rect.intersects(used):
                remaining.append(rect)
                continue
            if used.x > rect.x:
                created.append(_Rect(rect.x, rect.y, used.x - rect.x, rect.height))
            if used.right < rect.right:
                created.append(_Rect(used.right, rect.y, rect.right - used.right, rect.height))
            if used.y > rect.y:
                created.append(_Rect(rect.x, rect.y, rect.width, used.y - rect.y))
            if used.top < rect.top:
                created.append(_Rect(rect.x, used.top, rect.width, rect.top - used.top))
        slab.free = self._prune(remaining + created)

    def _prune(self, rects: list[_Rect]) -> list[_Rect]:
        """Drop rectangles contained in another; the first of equal ones stays."""
        kept: list[_Rect] = []
        for i, rect in enumerate(rects):
            redundant = False
            for j, other in enumerate(rects):
                if i == j or not other.contains(rect):
                    continue
                if other != rect or j < i:
                    redundant = True
                    break
            if not redundant:
                kept.append(rect)
        return kept

    def _summarize_strips(self, strips: tuple[StripPiece, ...]) -> LaminationSummary | None:
        if not strips:
            return None
        grouped: dict[str, list[StripPiece]] = {}
        for strip_piece in strips:
            grouped.setdefault(strip_piece.strip.parent_piece_id, []).append(strip_piece)
        by_parent = tuple(
            ParentStrips(
                parent_piece_id=parent_id,
                parent_label=group[0].strip.parent_label,
                strips=tuple(
                    StripSummary(
                        position=sp.strip.side,
                        length_mm=sp.strip.length_mm,
                        width_mm=sp.strip.width_mm,
                    )
                    for sp in group
                ),
            )
            for parent_id, group in grouped.items()
        )
        total_area = sum(sp.strip.area for sp in strips) / 1_000_000
        return LaminationSummary(
            total_strips=len(strips),
            total_strip_area=round(total_area, 4),
            strips_by_parent=by_parent,
        )


def optimize_slabs(
    pieces: Sequence[Piece],
    slab_width: float,
    slab_height: float,
    kerf_width: float,
    allow_rotation: bool = True,
    edge_allowance_mm: float = 0,
    mitre_kerf_width: float | None = None,
    lamination: LaminationConfig | None = None,
) -> PackingResult:
    """Pack pieces onto slabs of one size.

    Convenience wrapper around ``SlabBinPacker``.

    Raises:
        ValueError: If kerf or edge allowance is negative.
    """
    config = PackingConfig(
        slab=SlabConfig(width=slab_width, height=slab_height, edge_allowance_mm=edge_allowance_mm),
        kerf_width=kerf_width,
        allow_rotation=allow_rotation,
        mitre_kerf_width=mitre_kerf_width,
        lamination=lamination or LaminationConfig(),
    )
    return SlabBinPacker(config).pack(pieces)


"""Value objects for stone pieces, materials and slab stock.

All value objects are frozen dataclasses so a packing run can share them
freely without copying. Dimensions are integer millimetres unless noted.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping


class EdgeSide(str, Enum):
    """Side of a rectangular piece as drawn on the slab.

    TOP and BOTTOM run along the piece width (slab-length axis); LEFT and
    RIGHT run along the piece height.
    """

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def runs_along_width(self) -> bool:
        """True if the edge spans the piece width."""
        return self in (EdgeSide.TOP, EdgeSide.BOTTOM)


class ShapeType(str, Enum):
    """Outline of a piece before decomposition into rectangles."""

    RECTANGLE = "RECTANGLE"
    L_SHAPE = "L_SHAPE"
    U_SHAPE = "U_SHAPE"


class FabricationCategory(str, Enum):
    """Slab stock families with their own standard sheet sizes."""

    ENGINEERED_QUARTZ_JUMBO = "ENGINEERED_QUARTZ_JUMBO"
    ENGINEERED_QUARTZ_STANDARD = "ENGINEERED_QUARTZ_STANDARD"
    NATURAL_STONE = "NATURAL_STONE"
    PORCELAIN = "PORCELAIN"


class MachineOperation(str, Enum):
    """Fabrication operations that map to a default machine (and kerf)."""

    INITIAL_CUT = "INITIAL_CUT"
    EDGE_POLISHING = "EDGE_POLISHING"
    MITRING = "MITRING"
    LAMINATION = "LAMINATION"
    CUTOUT = "CUTOUT"


@dataclass(frozen=True)
class FinishedEdges:
    """Which sides of a piece carry a non-raw edge profile."""

    top: bool = False
    bottom: bool = False
    left: bool = False
    right: bool = False

    def is_finished(self, side: EdgeSide) -> bool:
        return bool(getattr(self, side.value))

    @property
    def sides(self) -> tuple[EdgeSide, ...]:
        """Finished sides in TOP, BOTTOM, LEFT, RIGHT order."""
        return tuple(side for side in EdgeSide if self.is_finished(side))

    @property
    def any(self) -> bool:
        return bool(self.sides)


@dataclass(frozen=True)
class EdgeTypeNames:
    """Resolved edge profile name per side.

    ``None`` means the profile is unknown; an empty string means the side is
    explicitly raw. The two are not interchangeable.
    """

    top: str | None = None
    bottom: str | None = None
    left: str | None = None
    right: str | None = None

    def for_side(self, side: EdgeSide) -> str | None:
        return getattr(self, side.value)

    def is_raw(self, side: EdgeSide) -> bool:
        """True only when the side name is present and blank."""
        name = self.for_side(side)
        return name is not None and name.strip() == ""


@dataclass(frozen=True)
class Piece:
    """A stone piece to be cut from slab stock.

    Attributes:
        id: Identifier unique within one packing run.
        width: Footprint along the slab-length axis in mm.
        height: Footprint along the slab-width axis in mm.
        label: Display label (usually "Room: Piece").
        thickness: Finished thickness in mm, drives lamination.
        finished_edges: Which sides are finished.
        edge_type_names: Optional profile name per side.
        material_id: Assigned material, None when unassigned.
        grain_matched: Grain direction must be preserved (no rotation).
        can_rotate: Per-piece rotation veto.
        shape_type: Optional non-rectangular outline.
        shape_config: Leg dimensions for L/U shapes.
        no_strip_edges: Wall edges that never get a lamination strip.
    """

    id: str
    width: int
    height: int
    label: str = ""
    thickness: int = 20
    finished_edges: FinishedEdges = field(default_factory=FinishedEdges)
    edge_type_names: EdgeTypeNames | None = None
    material_id: str | None = None
    grain_matched: bool = False
    can_rotate: bool = True
    shape_type: ShapeType | None = None
    shape_config: Mapping[str, Any] | None = None
    no_strip_edges: frozenset[EdgeSide] = frozenset()

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def display_label(self) -> str:
        return self.label or self.id

    def edge_length(self, side: EdgeSide) -> int:
        """Length of the given edge in mm."""
        return self.width if side.runs_along_width else self.height

    def with_dimensions(self, width: int, height: int, **changes: Any) -> Piece:
        """Copy of this piece with a new footprint."""
        return replace(self, width=width, height=height, **changes)


@dataclass(frozen=True)
class SlabSize:
    """Raw slab footprint for a stock family."""

    length_mm: int
    width_mm: int
    name: str = ""

    @property
    def area(self) -> int:
        return self.length_mm * self.width_mm


@dataclass(frozen=True)
class MaterialInfo:
    """A stone material as known to the material catalogue.

    Slab dimensions are optional; when absent the fabrication category default
    applies.
    """

    id: str
    name: str
    slab_length_mm: int | None = None
    slab_width_mm: int | None = None
    fabrication_category: str | None = None


@dataclass(frozen=True)
class OversizeRecord:
    """Oversize and join flags persisted onto a piece after a run.

    ``requires_grain_match`` is set whenever the piece is oversize, since a
    join always needs a grain-matched continuation.
    """

    piece_id: str
    is_oversize: bool = False
    join_count: int = 0
    join_length_mm: int = 0
    requires_grain_match: bool = False

    def __post_init__(self) -> None:
        if self.join_count < 0:
            raise ValueError("Join count must be non-negative")
        if self.join_length_mm < 0:
            raise ValueError("Join length must be non-negative")

    @classmethod
    def cleared(cls, piece_id: str) -> OversizeRecord:
        """Not-oversize defaults for a piece."""
        return cls(piece_id=piece_id)

"""Domain layer - pieces, slabs and the pure optimization rules."""

from .diagnostics import Diagnostics
from .slab_sizes import (
    FALLBACK_SLAB,
    default_slab_size,
    get_slab_size,
    resolve_slab_size,
)
from .value_objects import (
    EdgeSide,
    EdgeTypeNames,
    FabricationCategory,
    FinishedEdges,
    MachineOperation,
    MaterialInfo,
    OversizeRecord,
    Piece,
    ShapeType,
    SlabSize,
)

__all__ = [
    "Diagnostics",
    "EdgeSide",
    "EdgeTypeNames",
    "FALLBACK_SLAB",
    "FabricationCategory",
    "FinishedEdges",
    "MachineOperation",
    "MaterialInfo",
    "OversizeRecord",
    "Piece",
    "ShapeType",
    "SlabSize",
    "default_slab_size",
    "get_slab_size",
    "resolve_slab_size",
]

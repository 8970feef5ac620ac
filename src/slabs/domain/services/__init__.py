"""Domain services for slab optimization.

- cut_plan: Join planning for pieces larger than a slab
- lamination: Strip generation for thick finished edges
- shapes: Decomposition of L and U shaped pieces
"""

from .cut_plan import (
    CutPlan,
    JoinLocation,
    JoinOrientation,
    JoinStrategy,
    PieceDimensions,
    Segment,
    balanced_split,
    calculate_cut_plan,
    estimate_waste,
    will_require_join,
)
from .lamination import (
    LaminationConfig,
    LaminationStrip,
    StripBatch,
    StripPiece,
    generate_lamination_strips,
    generate_strip_pieces,
    is_mitred,
    requires_lamination,
)
from .shapes import LegRect, decompose_piece, decompose_pieces, leg_rects

__all__ = [
    # Cut planning
    "CutPlan",
    "JoinLocation",
    "JoinOrientation",
    "JoinStrategy",
    "PieceDimensions",
    "Segment",
    "balanced_split",
    "calculate_cut_plan",
    "estimate_waste",
    "will_require_join",
    # Lamination
    "LaminationConfig",
    "LaminationStrip",
    "StripBatch",
    "StripPiece",
    "generate_lamination_strips",
    "generate_strip_pieces",
    "is_mitred",
    "requires_lamination",
    # Shapes
    "LegRect",
    "decompose_piece",
    "decompose_pieces",
    "leg_rects",
]

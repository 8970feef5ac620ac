"""Application layer - use cases and orchestration."""

from .commands import OptimizationInputError, OptimizeQuoteCommand
from .dtos import OptimizeOutput, OptimizeRequest

__all__ = [
    "OptimizationInputError",
    "OptimizeOutput",
    "OptimizeQuoteCommand",
    "OptimizeRequest",
]

"""Application services for slab optimization.

- OversizeSyncService: Recomputes and persists oversize/join flags per quote
"""

from .oversize_sync import OversizeSyncService

__all__ = [
    "OversizeSyncService",
]

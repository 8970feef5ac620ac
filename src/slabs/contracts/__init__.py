"""Contracts module - protocols for cross-layer communication.

Example:
    ```python
    from slabs.contracts import PieceRepository

    def sync(repository: PieceRepository) -> None:
        ...
    ```
"""

from .protocols import (
    MachineDefaults as MachineDefaults,
    MaterialCatalog as MaterialCatalog,
    PieceRepository as PieceRepository,
)

__all__ = [
    "MachineDefaults",
    "MaterialCatalog",
    "PieceRepository",
]

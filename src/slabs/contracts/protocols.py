"""Service protocols for dependency injection.

This module defines protocol classes for the collaborators the optimizer
consumes but does not own: the material catalogue, machine defaults and the
piece store that receives oversize flags. In-memory and SQLite
implementations live in ``slabs.infrastructure.persistence``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from slabs.domain.value_objects import MachineOperation, MaterialInfo, OversizeRecord


@runtime_checkable
class MaterialCatalog(Protocol):
    """Lookup of material records by id.

    Example:
        ```python
        class DictCatalog:
            def get_material(self, material_id: str) -> MaterialInfo | None:
                return self._materials.get(material_id)
        ```
    """

    def get_material(self, material_id: str) -> MaterialInfo | None:
        """Return the material record, or None if unknown."""
        ...

    def get_materials(self, material_ids: Sequence[str]) -> list[MaterialInfo]:
        """Return the known records among ``material_ids``, in the given order."""
        ...


@runtime_checkable
class MachineDefaults(Protocol):
    """Kerf width of the default machine per fabrication operation."""

    def kerf_for(self, operation: MachineOperation) -> float | None:
        """Kerf in mm, or None when no machine is configured."""
        ...


@runtime_checkable
class PieceRepository(Protocol):
    """Persistence sink for oversize and join flags.

    ``apply_oversize_updates`` must be all-or-nothing per quote: either every
    record is written or none is.
    """

    def apply_oversize_updates(self, quote_id: str, records: Sequence[OversizeRecord]) -> None:
        """Write all records for a quote atomically.

        Raises:
            PersistenceError: If the write fails; nothing is written.
        """
        ...

    def get_oversize_records(self, quote_id: str) -> dict[str, OversizeRecord]:
        """Current records for a quote keyed by piece id."""
        ...

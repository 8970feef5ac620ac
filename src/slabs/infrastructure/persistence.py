"""Collaborator implementations: piece stores, material catalogue, machine defaults.

Two piece stores are provided. ``InMemoryPieceRepository`` builds the new
state for a quote on a copy and swaps it in only when every record is valid.
``SqlitePieceRepository`` upserts all records for a quote inside one SQLite
transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Mapping, Sequence

from slabs.domain.value_objects import MachineOperation, MaterialInfo, OversizeRecord

logger = logging.getLogger(__name__)

# Seed values for the default machine of each operation, kerf in mm
DEFAULT_MACHINE_KERFS: dict[MachineOperation, float] = {
    MachineOperation.INITIAL_CUT: 4,
    MachineOperation.MITRING: 4,
    MachineOperation.EDGE_POLISHING: 0,
    MachineOperation.LAMINATION: 0,
    MachineOperation.CUTOUT: 1,
}


class PersistenceError(Exception):
    """Raised when oversize flags cannot be written.

    Attributes:
        quote_id: Quote whose write failed.
        message: Description of the failure.
    """

    def __init__(self, quote_id: str, message: str) -> None:
        self.quote_id = quote_id
        self.message = message
        super().__init__(f"Failed to persist oversize flags for quote {quote_id}: {message}")


class InMemoryPieceRepository:
    """Piece store keeping oversize records in a dict per quote."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, OversizeRecord]] = {}

    def apply_oversize_updates(self, quote_id: str, records: Sequence[OversizeRecord]) -> None:
        updated = dict(self._records.get(quote_id, {}))
        for record in records:
            if not record.piece_id:
                raise PersistenceError(quote_id, "record without piece id")
            updated[record.piece_id] = record
        self._records[quote_id] = updated
        logger.debug("Stored %d oversize records for quote %s", len(records), quote_id)

    def get_oversize_records(self, quote_id: str) -> dict[str, OversizeRecord]:
        return dict(self._records.get(quote_id, {}))


class SqlitePieceRepository:
    """Piece store backed by a SQLite ``quote_pieces`` table.

    Args:
        path: Database file, or ``":memory:"``.
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS quote_pieces (
            quote_id TEXT NOT NULL,
            piece_id TEXT NOT NULL,
            is_oversize INTEGER NOT NULL DEFAULT 0,
            join_count INTEGER NOT NULL DEFAULT 0,
            join_length_mm INTEGER NOT NULL DEFAULT 0,
            requires_grain_match INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (quote_id, piece_id)
        )
    """

    def __init__(self, path: str | Path = ":memory:") -> None:
        self.path = str(path)
        self._conn = sqlite3.connect(self.path)
        self._conn.row_factory = sqlite3.Row
        with self._conn:
            self._conn.execute(self.SCHEMA)

    def close(self) -> None:
        self._conn.close()

    def apply_oversize_updates(self, quote_id: str, records: Sequence[OversizeRecord]) -> None:
        try:
            with self._conn:
                self._conn.executemany(
                    """
                    INSERT INTO quote_pieces (
                        quote_id, piece_id, is_oversize, join_count,
                        join_length_mm, requires_grain_match
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT (quote_id, piece_id) DO UPDATE SET
                        is_oversize = excluded.is_oversize,
                        join_count = excluded.join_count,
                        join_length_mm = excluded.join_length_mm,
                        requires_grain_match = excluded.requires_grain_match
                    """,
                    [
                        (
                            quote_id,
                            record.piece_id,
                            int(record.is_oversize),
                            record.join_count,
                            record.join_length_mm,
                            int(record.requires_grain_match),
                        )
                        for record in records
                    ],
                )
        except sqlite3.Error as e:
            raise PersistenceError(quote_id, str(e)) from e
        logger.debug("Stored %d oversize records for quote %s", len(records), quote_id)

    def get_oversize_records(self, quote_id: str) -> dict[str, OversizeRecord]:
        rows = self._conn.execute(
            "SELECT * FROM quote_pieces WHERE quote_id = ? ORDER BY piece_id",
            (quote_id,),
        ).fetchall()
        return {
            row["piece_id"]: OversizeRecord(
                piece_id=row["piece_id"],
                is_oversize=bool(row["is_oversize"]),
                join_count=row["join_count"],
                join_length_mm=row["join_length_mm"],
                requires_grain_match=bool(row["requires_grain_match"]),
            )
            for row in rows
        }


class StaticMaterialCatalog:
    """Material catalogue over a fixed set of records."""

    def __init__(self, materials: Sequence[MaterialInfo] = ()) -> None:
        self._materials = {m.id: m for m in materials}

    def get_material(self, material_id: str) -> MaterialInfo | None:
        return self._materials.get(material_id)

    def get_materials(self, material_ids: Sequence[str]) -> list[MaterialInfo]:
        return [self._materials[i] for i in material_ids if i in self._materials]


class StaticMachineDefaults:
    """Machine defaults from a fixed operation-to-kerf mapping."""

    def __init__(self, kerfs: Mapping[MachineOperation, float] | None = None) -> None:
        self._kerfs = dict(DEFAULT_MACHINE_KERFS if kerfs is None else kerfs)

    def kerf_for(self, operation: MachineOperation) -> float | None:
        return self._kerfs.get(operation)

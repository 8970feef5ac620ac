"""Oversize/join flag synchronisation after an optimizer run.

Every piece of a quote is re-evaluated against the slab of its own material
and the resulting flags are written back in one atomic call. Pieces that now
fit get their flags explicitly cleared, so a resize never leaves stale
oversize markers behind.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from slabs.domain.services.cut_plan import PieceDimensions, calculate_cut_plan
from slabs.domain.services.shapes import leg_rects
from slabs.domain.slab_sizes import resolve_slab_size
from slabs.domain.value_objects import MaterialInfo, OversizeRecord, Piece, SlabSize

if TYPE_CHECKING:
    from slabs.contracts.protocols import PieceRepository

logger = logging.getLogger(__name__)


class OversizeSyncService:
    """Recomputes and persists oversize/join flags for a quote's pieces.

    Attributes:
        repository: Piece store receiving the records.
        edge_trim_mm: Unusable slab margin used for the cut plans.
    """

    def __init__(self, repository: PieceRepository, edge_trim_mm: float = 0) -> None:
        self.repository = repository
        self.edge_trim_mm = edge_trim_mm

    def evaluate(
        self,
        pieces: Sequence[Piece],
        materials: Sequence[MaterialInfo],
        fallback_slab: SlabSize,
        slab_override: SlabSize | None = None,
    ) -> tuple[OversizeRecord, ...]:
        """Compute oversize records without writing them.

        Each piece is checked against the slab its material resolves to,
        including the default slab for a material id with no record. The
        override wins over any material lookup.

        Args:
            pieces: All pieces of the quote, before shape decomposition.
            materials: Material records for slab lookup.
            fallback_slab: The run's slab, used for pieces without a
                material id.
            slab_override: Explicit slab size the run was packed on, if any.

        Returns:
            One record per piece, in input order.
        """
        materials_by_id = {m.id: m for m in materials}
        records: list[OversizeRecord] = []
        for piece in pieces:
            if piece.material_id:
                material = materials_by_id.get(piece.material_id)
                slab = resolve_slab_size(material, slab_override)[0]
            else:
                slab = slab_override or fallback_slab
            records.append(self._evaluate_piece(piece, slab))
        return tuple(records)

    def sync(
        self,
        quote_id: str,
        pieces: Sequence[Piece],
        materials: Sequence[MaterialInfo],
        fallback_slab: SlabSize,
        slab_override: SlabSize | None = None,
    ) -> tuple[OversizeRecord, ...]:
        """Evaluate every piece and write all records atomically.

        Raises:
            PersistenceError: If the repository write fails.
        """
        records = self.evaluate(pieces, materials, fallback_slab, slab_override)
        self.repository.apply_oversize_updates(quote_id, records)
        logger.info(
            "Synced oversize flags for quote %s: %d of %d pieces oversize",
            quote_id,
            sum(1 for r in records if r.is_oversize),
            len(records),
        )
        return records

    def _evaluate_piece(self, piece: Piece, slab: SlabSize) -> OversizeRecord:
        if min(slab.length_mm, slab.width_mm) - 2 * self.edge_trim_mm <= 0:
            logger.warning(
                "Slab %sx%s has no usable area; oversize flags for '%s' left cleared",
                slab.length_mm,
                slab.width_mm,
                piece.display_label,
            )
            return OversizeRecord.cleared(piece.id)

        join_count = 0
        join_length = 0
        oversize = False
        for leg in leg_rects(piece):
            if leg.length_mm <= 0 or leg.width_mm <= 0:
                logger.debug("Skipping oversize check for '%s': invalid dimensions", piece.display_label)
                continue
            plan = calculate_cut_plan(
                PieceDimensions(length_mm=leg.length_mm, width_mm=leg.width_mm),
                slab_length_mm=slab.length_mm,
                slab_width_mm=slab.width_mm,
                edge_trim_mm=self.edge_trim_mm,
            )
            if plan.fits_on_single_slab:
                continue
            oversize = True
            join_count += plan.join_count
            join_length += plan.join_length_mm

        if not oversize:
            return OversizeRecord.cleared(piece.id)
        return OversizeRecord(
            piece_id=piece.id,
            is_oversize=True,
            join_count=join_count,
            join_length_mm=int(round(join_length)),
            requires_grain_match=True,
        )

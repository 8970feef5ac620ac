"""Application commands (use cases) for slab optimization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from slabs.application.services.oversize_sync import OversizeSyncService
from slabs.domain.services.shapes import decompose_pieces
from slabs.domain.slab_sizes import FALLBACK_SLAB, resolve_slab_size
from slabs.domain.value_objects import MachineOperation, MaterialInfo

from .dtos import DEFAULT_KERF_MM, OptimizeOutput, OptimizeRequest

if TYPE_CHECKING:
    from slabs.contracts.protocols import MachineDefaults, MaterialCatalog, PieceRepository

logger = logging.getLogger(__name__)


class OptimizationInputError(ValueError):
    """Raised by callers when an optimize request fails validation.

    Attributes:
        errors: Validation messages.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


class OptimizeQuoteCommand:
    """Command to optimize slab usage for one quote.

    Resolves kerf from the request or the machine defaults, packs the pieces
    (per material when more than one material is in play) and finally syncs
    oversize flags to the piece repository. A failed sync is reported as a
    warning and never invalidates the packing result.
    """

    def __init__(
        self,
        material_catalog: MaterialCatalog | None = None,
        machine_defaults: MachineDefaults | None = None,
        repository: PieceRepository | None = None,
    ) -> None:
        self.material_catalog = material_catalog
        self.machine_defaults = machine_defaults
        self.repository = repository

    def execute(self, request: OptimizeRequest) -> OptimizeOutput:
        """Execute the optimize command.

        Args:
            request: Pieces, materials and options for the quote.

        Returns:
            OptimizeOutput with the packing result, oversize records and any
            run-level warnings. Validation problems are returned in ``errors``.
        """
        errors = request.validate()
        if errors:
            return OptimizeOutput(quote_id=request.quote_id, errors=errors)

        kerf = self._resolve_kerf(request)
        mitre_kerf = self._resolve_mitre_kerf(request)
        materials = self._collect_materials(request)
        material_ids = list(dict.fromkeys(p.material_id for p in request.pieces if p.material_id))

        output = OptimizeOutput(quote_id=request.quote_id, kerf_width=kerf, mitre_kerf_width=mitre_kerf)
        primary_id = request.primary_material_id or (material_ids[0] if material_ids else None)
        primary = self._find_material(materials, primary_id)
        output.slab, output.slab_source = resolve_slab_size(primary, request.slab_override)

        if request.group_by_material or len(material_ids) > 1:
            from slabs.infrastructure.multi_material import MultiMaterialOptimizer

            optimizer = MultiMaterialOptimizer(
                kerf_width=kerf,
                allow_rotation=request.allow_rotation,
                edge_allowance_mm=request.edge_allowance_mm,
                mitre_kerf_width=mitre_kerf,
                lamination=request.lamination,
            )
            overrides = (
                {material_id: request.slab_override for material_id in material_ids}
                if request.slab_override
                else None
            )
            output.multi_material = optimizer.optimize(
                request.pieces,
                materials,
                primary_material_id=request.primary_material_id,
                slab_overrides=overrides,
            )
        else:
            from slabs.infrastructure.bin_packing import PackingConfig, SlabBinPacker, SlabConfig

            rects = decompose_pieces(request.pieces)
            config = PackingConfig(
                slab=SlabConfig(
                    width=output.slab.length_mm,
                    height=output.slab.width_mm,
                    edge_allowance_mm=request.edge_allowance_mm,
                ),
                kerf_width=kerf,
                allow_rotation=request.allow_rotation,
                mitre_kerf_width=mitre_kerf,
                lamination=request.lamination,
            )
            output.result = SlabBinPacker(config).pack(rects)
            self._check_piece_count(len(rects), output)

        if self.repository is not None and request.persist:
            self._sync_oversize(request, materials, output)

        logger.info(
            "Optimized quote %s: %d slabs, %.1f%% waste",
            request.quote_id,
            output.total_slabs,
            output.waste_percent,
        )
        return output

    def _resolve_kerf(self, request: OptimizeRequest) -> float:
        if request.kerf_width is not None:
            return request.kerf_width
        if self.machine_defaults is not None:
            kerf = self.machine_defaults.kerf_for(MachineOperation.INITIAL_CUT)
            if kerf is not None:
                return kerf
        logger.info("No kerf configured, using default %smm", DEFAULT_KERF_MM)
        return DEFAULT_KERF_MM

    def _resolve_mitre_kerf(self, request: OptimizeRequest) -> float | None:
        if request.mitre_kerf_width is not None:
            return request.mitre_kerf_width
        if self.machine_defaults is not None:
            return self.machine_defaults.kerf_for(MachineOperation.MITRING)
        return None

    def _collect_materials(self, request: OptimizeRequest) -> list[MaterialInfo]:
        """Request materials plus catalogue records for any other referenced ids."""
        materials = list(request.materials)
        if self.material_catalog is None:
            return materials
        known = {m.id for m in materials}
        wanted = [
            material_id
            for material_id in dict.fromkeys(
                [request.primary_material_id] + [p.material_id for p in request.pieces]
            )
            if material_id and material_id not in known
        ]
        materials.extend(self.material_catalog.get_materials(wanted))
        return materials

    def _find_material(self, materials: list[MaterialInfo], material_id: str | None) -> MaterialInfo | None:
        if material_id is None:
            return None
        for material in materials:
            if material.id == material_id:
                return material
        return None

    def _check_piece_count(self, expected: int, output: OptimizeOutput) -> None:
        result = output.result
        if result is None:
            return
        placed = len(result.placed_piece_ids)
        unplaced = len(result.unplaced_pieces)
        if placed + unplaced != expected:
            logger.warning(
                "Piece count mismatch for quote %s: %d input, %d placed, %d unplaced",
                output.quote_id,
                expected,
                placed,
                unplaced,
            )
        else:
            logger.debug("Piece count check passed: %d placed, %d unplaced", placed, unplaced)

    def _sync_oversize(
        self,
        request: OptimizeRequest,
        materials: list[MaterialInfo],
        output: OptimizeOutput,
    ) -> None:
        from slabs.infrastructure.persistence import PersistenceError

        service = OversizeSyncService(self.repository, edge_trim_mm=request.edge_allowance_mm)
        # Single-material runs pack every piece on the run's slab
        override = request.slab_override if output.multi_material is not None else output.slab
        try:
            output.oversize_records = service.sync(
                request.quote_id,
                request.pieces,
                materials,
                output.slab or FALLBACK_SLAB,
                slab_override=override,
            )
        except PersistenceError as e:
            logger.error("Oversize sync failed for quote %s: %s", request.quote_id, e)
            output.warnings.append(f"Oversize flags could not be saved: {e.message}")

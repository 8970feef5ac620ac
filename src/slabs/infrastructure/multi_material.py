"""Multi-material orchestration of slab packing.

Quotes usually mix materials (a quartz benchtop with a marble splashback).
Slabs of different materials are physically distinct stock, so pieces are
grouped by material and each group is packed on its own slab size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from slabs.domain.diagnostics import Diagnostics
from slabs.domain.services.cut_plan import (
    JoinStrategy,
    PieceDimensions,
    Segment,
    calculate_cut_plan,
)
from slabs.domain.services.lamination import LaminationConfig
from slabs.domain.services.shapes import decompose_pieces
from slabs.domain.slab_sizes import resolve_slab_size
from slabs.domain.value_objects import MaterialInfo, Piece, SlabSize
from slabs.infrastructure.bin_packing import (
    PackingConfig,
    PackingResult,
    SlabBinPacker,
    SlabConfig,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OversizePieceInfo:
    """A piece in a material group that needs joins.

    Attributes:
        piece_id: Id of the (decomposed) piece.
        label: Display label.
        length_mm: Piece extent along the slab-length axis.
        width_mm: Piece extent along the slab-width axis.
        join_strategy: How the piece is split.
        segments: Segments from the cut plan.
        join_count: Number of joins.
        join_length_mm: Total join length.
        suggested_join_position_mm: Position of the first join, if any.
    """

    piece_id: str
    label: str
    length_mm: int
    width_mm: int
    join_strategy: JoinStrategy
    segments: tuple[Segment, ...]
    join_count: int
    join_length_mm: int
    suggested_join_position_mm: int | None = None


@dataclass(frozen=True)
class MaterialGroupResult:
    """Packing result for the pieces of one material.

    Attributes:
        material_id: Material id shared by the group.
        material_name: Display name of the material.
        slab: Slab size the group was packed on.
        slab_source: Where the slab size came from (see ``resolve_slab_size``).
        piece_ids: Input piece ids in the group.
        result: Single-material packing result.
        oversize_pieces: Pieces that need joins on this slab size.
        is_primary: True for the quote's primary material.
    """

    material_id: str
    material_name: str
    slab: SlabSize
    slab_source: str
    piece_ids: tuple[str, ...]
    result: PackingResult
    oversize_pieces: tuple[OversizePieceInfo, ...] = ()
    is_primary: bool = False

    @property
    def slab_count(self) -> int:
        return self.result.total_slabs

    @property
    def piece_count(self) -> int:
        return len(self.piece_ids)

    @property
    def waste_percent(self) -> float:
        return self.result.waste_percent

    @property
    def total_usable_area(self) -> float:
        return self.result.total_slabs * self.result.slab_config.usable_area


@dataclass(frozen=True)
class MultiMaterialResult:
    """Combined result across material groups.

    Attributes:
        material_groups: Group results, primary material first.
        total_slab_count: Slabs across all groups.
        overall_waste_percentage: Area-weighted waste across groups.
        diagnostics: Orchestrator warnings followed by prefixed group warnings.
        unassigned_piece_ids: Pieces excluded for having no material.
        primary_material_id: Primary material, carried for display.
    """

    material_groups: tuple[MaterialGroupResult, ...]
    total_slab_count: int
    overall_waste_percentage: float
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    unassigned_piece_ids: tuple[str, ...] = ()
    primary_material_id: str | None = None

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.diagnostics.warnings

    def group_for(self, material_id: str) -> MaterialGroupResult | None:
        for group in self.material_groups:
            if group.material_id == material_id:
                return group
        return None


class MultiMaterialOptimizer:
    """Coordinates slab packing across material groups.

    Groups pieces by material, resolves each material's slab size, runs a
    separate ``SlabBinPacker`` per group and combines the results. Slabs are
    never shared between groups.

    Attributes:
        kerf_width: Kerf applied to every group.
        allow_rotation: Global rotation switch.
        edge_allowance_mm: Edge allowance applied to every slab.
        mitre_kerf_width: Extra width for mitred strips.
        lamination: Lamination settings.
    """

    def __init__(
        self,
        kerf_width: float = 3,
        allow_rotation: bool = True,
        edge_allowance_mm: float = 0,
        mitre_kerf_width: float | None = None,
        lamination: LaminationConfig | None = None,
    ) -> None:
        self.kerf_width = kerf_width
        self.allow_rotation = allow_rotation
        self.edge_allowance_mm = edge_allowance_mm
        self.mitre_kerf_width = mitre_kerf_width
        self.lamination = lamination or LaminationConfig()

    def optimize(
        self,
        pieces: Sequence[Piece],
        materials: Sequence[MaterialInfo],
        primary_material_id: str | None = None,
        slab_overrides: Mapping[str, SlabSize] | None = None,
    ) -> MultiMaterialResult:
        """Pack pieces grouped by material.

        Args:
            pieces: Pieces of the quote; L and U shapes are decomposed here.
            materials: Material records for slab size lookup.
            primary_material_id: Material shown first; does not affect packing.
            slab_overrides: Explicit slab size per material id.

        Returns:
            MultiMaterialResult with one group per distinct material.
        """
        materials_by_id = {m.id: m for m in materials}
        overrides = slab_overrides or {}
        groups, unassigned = self._group_by_material(pieces)
        diagnostics = Diagnostics()

        if unassigned:
            labels = ", ".join(p.display_label for p in unassigned)
            message = f"{len(unassigned)} piece(s) have no material assigned: {labels}"
            logger.warning(message)
            diagnostics = diagnostics.with_warning(message)

        logger.info(
            "Optimizing %d pieces across %d material groups",
            len(pieces) - len(unassigned),
            len(groups),
        )

        group_results: list[MaterialGroupResult] = []
        group_diagnostics: list[Diagnostics] = []
        for material_id in self._group_order(groups, primary_material_id):
            group_pieces = groups[material_id]
            material = materials_by_id.get(material_id)
            material_name = material.name if material else material_id
            found = Diagnostics()
            if material is None:
                found = found.with_warning(
                    f"Material '{material_id}' not found; using default slab size"
                )

            slab, source = resolve_slab_size(material, overrides.get(material_id))
            rects = decompose_pieces(group_pieces)
            packer = SlabBinPacker(self._packing_config(slab))
            result = packer.pack(rects)

            logger.debug(
                "Material %s (%s, %dx%d from %s): %d pieces -> %d slabs",
                material_name,
                material_id,
                slab.length_mm,
                slab.width_mm,
                source,
                len(group_pieces),
                result.total_slabs,
            )

            group_results.append(
                MaterialGroupResult(
                    material_id=material_id,
                    material_name=material_name,
                    slab=slab,
                    slab_source=source,
                    piece_ids=tuple(p.id for p in group_pieces),
                    result=result,
                    oversize_pieces=(
                        self._oversize_pieces(rects, slab) if result.slab_config.is_usable else ()
                    ),
                    is_primary=material_id == primary_material_id,
                )
            )
            group_diagnostics.append(found.merge(result.diagnostics).prefixed(material_name))

        total_usable = sum(g.total_usable_area for g in group_results)
        total_waste = sum(g.result.total_waste_area for g in group_results)
        overall_waste = total_waste / total_usable * 100 if total_usable else 0.0

        return MultiMaterialResult(
            material_groups=tuple(group_results),
            total_slab_count=sum(g.slab_count for g in group_results),
            overall_waste_percentage=overall_waste,
            diagnostics=diagnostics.merge(*group_diagnostics),
            unassigned_piece_ids=tuple(p.id for p in unassigned),
            primary_material_id=primary_material_id,
        )

    def _packing_config(self, slab: SlabSize) -> PackingConfig:
        return PackingConfig(
            slab=SlabConfig(
                width=slab.length_mm,
                height=slab.width_mm,
                edge_allowance_mm=self.edge_allowance_mm,
            ),
            kerf_width=self.kerf_width,
            allow_rotation=self.allow_rotation,
            mitre_kerf_width=self.mitre_kerf_width,
            lamination=self.lamination,
        )

    def _group_by_material(
        self,
        pieces: Sequence[Piece],
    ) -> tuple[dict[str, list[Piece]], list[Piece]]:
        """Group pieces by material id in first-appearance order.

        Returns:
            Tuple of (groups keyed by material id, unassigned pieces).
        """
        groups: dict[str, list[Piece]] = {}
        unassigned: list[Piece] = []
        for piece in pieces:
            if not piece.material_id:
                unassigned.append(piece)
                continue
            groups.setdefault(piece.material_id, []).append(piece)
        return groups, unassigned

    def _group_order(
        self,
        groups: Mapping[str, list[Piece]],
        primary_material_id: str | None,
    ) -> list[str]:
        order = list(groups)
        if primary_material_id in groups:
            order.remove(primary_material_id)
            order.insert(0, primary_material_id)
        return order

    def _oversize_pieces(
        self,
        rects: Sequence[Piece],
        slab: SlabSize,
    ) -> tuple[OversizePieceInfo, ...]:
        oversize: list[OversizePieceInfo] = []
        for rect in rects:
            if rect.width <= 0 or rect.height <= 0:
                continue
            plan = calculate_cut_plan(
                PieceDimensions(length_mm=rect.width, width_mm=rect.height),
                slab_length_mm=slab.length_mm,
                slab_width_mm=slab.width_mm,
                edge_trim_mm=self.edge_allowance_mm,
            )
            if plan.fits_on_single_slab:
                continue
            oversize.append(
                OversizePieceInfo(
                    piece_id=rect.id,
                    label=rect.display_label,
                    length_mm=rect.width,
                    width_mm=rect.height,
                    join_strategy=plan.strategy,
                    segments=plan.segments,
                    join_count=plan.join_count,
                    join_length_mm=plan.join_length_mm,
                    suggested_join_position_mm=plan.joins[0].position_mm if plan.joins else None,
                )
            )
        return tuple(oversize)


def optimize_multi_material(
    pieces: Sequence[Piece],
    materials: Sequence[MaterialInfo],
    primary_material_id: str | None = None,
    kerf_width: float = 3,
    allow_rotation: bool = True,
    edge_allowance_mm: float = 0,
    mitre_kerf_width: float | None = None,
    slab_overrides: Mapping[str, SlabSize] | None = None,
    lamination: LaminationConfig | None = None,
) -> MultiMaterialResult:
    """Pack pieces grouped by material; see ``MultiMaterialOptimizer``."""
    optimizer = MultiMaterialOptimizer(
        kerf_width=kerf_width,
        allow_rotation=allow_rotation,
        edge_allowance_mm=edge_allowance_mm,
        mitre_kerf_width=mitre_kerf_width,
        lamination=lamination,
    )
    return optimizer.optimize(pieces, materials, primary_material_id, slab_overrides)

"""JSON exporter for optimization results.

Keys are camelCase so the document can be handed straight to a browser
client. The ``*_to_dict`` helpers are also used by the REST API.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from slabs.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from slabs.application.dtos import OptimizeOutput
    from slabs.domain.services.cut_plan import CutPlan
    from slabs.domain.value_objects import OversizeRecord
    from slabs.infrastructure.bin_packing import PackingResult, Placement, SlabLayout
    from slabs.infrastructure.multi_material import MaterialGroupResult, MultiMaterialResult


logger = logging.getLogger(__name__)

# Current schema version for the JSON result document
SCHEMA_VERSION = "1.0"


def placement_to_dict(placement: Placement) -> dict[str, Any]:
    data: dict[str, Any] = {
        "pieceId": placement.piece_id,
        "slabIndex": placement.slab_index,
        "x": placement.x,
        "y": placement.y,
        "width": placement.width,
        "height": placement.height,
        "rotated": placement.rotated,
        "label": placement.label,
        "isLaminationStrip": placement.is_lamination_strip,
        "isSegment": placement.is_segment,
        "grainMatched": placement.grain_matched,
    }
    if placement.is_lamination_strip:
        data["parentPieceId"] = placement.parent_piece_id
        data["stripPosition"] = placement.strip_position.value if placement.strip_position else None
    if placement.is_segment:
        data["segmentIndex"] = placement.segment_index
        data["totalSegments"] = placement.total_segments
    return data


def slab_layout_to_dict(layout: SlabLayout) -> dict[str, Any]:
    return {
        "slabIndex": layout.slab_index,
        "width": layout.width,
        "height": layout.height,
        "placements": [placement_to_dict(p) for p in layout.placements],
        "usedArea": layout.used_area,
        "wasteArea": layout.waste_area,
        "wastePercent": round(layout.waste_percent, 2),
    }


def packing_result_to_dict(result: PackingResult) -> dict[str, Any]:
    lamination = None
    if result.lamination_summary is not None:
        summary = result.lamination_summary
        lamination = {
            "totalStrips": summary.total_strips,
            "totalStripArea": summary.total_strip_area,
            "stripsByParent": [
                {
                    "parentPieceId": parent.parent_piece_id,
                    "parentLabel": parent.parent_label,
                    "strips": [
                        {
                            "position": strip.position.value,
                            "lengthMm": strip.length_mm,
                            "widthMm": strip.width_mm,
                        }
                        for strip in parent.strips
                    ],
                }
                for parent in summary.strips_by_parent
            ],
        }
    return {
        "slabWidth": result.slab_config.width,
        "slabHeight": result.slab_config.height,
        "edgeAllowanceMm": result.slab_config.edge_allowance_mm,
        "kerfWidth": result.kerf_width,
        "totalSlabs": result.total_slabs,
        "slabs": [slab_layout_to_dict(layout) for layout in result.slabs],
        "placements": [placement_to_dict(p) for p in result.placements],
        "totalUsedArea": result.total_used_area,
        "totalWasteArea": result.total_waste_area,
        "wastePercent": round(result.waste_percent, 2),
        "unplacedPieces": list(result.unplaced_pieces),
        "warnings": list(result.warnings),
        "laminationSummary": lamination,
    }


def cut_plan_to_dict(plan: CutPlan) -> dict[str, Any]:
    return {
        "fitsOnSingleSlab": plan.fits_on_single_slab,
        "strategy": plan.strategy.value,
        "segments": [
            {"lengthMm": s.length_mm, "widthMm": s.width_mm, "slabIndex": s.slab_index}
            for s in plan.segments
        ],
        "joins": [
            {
                "positionMm": j.position_mm,
                "orientation": j.orientation.value,
                "lengthMm": j.length_mm,
            }
            for j in plan.joins
        ],
        "joinCount": plan.join_count,
        "totalSlabsRequired": plan.total_slabs_required,
        "joinLengthMm": plan.join_length_mm,
        "joinCost": plan.join_cost,
        "warnings": list(plan.warnings),
    }


def material_group_to_dict(group: MaterialGroupResult) -> dict[str, Any]:
    return {
        "materialId": group.material_id,
        "materialName": group.material_name,
        "isPrimary": group.is_primary,
        "slabLengthMm": group.slab.length_mm,
        "slabWidthMm": group.slab.width_mm,
        "slabSource": group.slab_source,
        "pieceIds": list(group.piece_ids),
        "slabCount": group.slab_count,
        "wastePercent": round(group.waste_percent, 2),
        "result": packing_result_to_dict(group.result),
        "oversizePieces": [
            {
                "pieceId": info.piece_id,
                "label": info.label,
                "lengthMm": info.length_mm,
                "widthMm": info.width_mm,
                "joinStrategy": info.join_strategy.value,
                "joinCount": info.join_count,
                "joinLengthMm": info.join_length_mm,
                "suggestedJoinPositionMm": info.suggested_join_position_mm,
            }
            for info in group.oversize_pieces
        ],
    }


def multi_material_to_dict(result: MultiMaterialResult) -> dict[str, Any]:
    return {
        "materialGroups": [material_group_to_dict(g) for g in result.material_groups],
        "totalSlabCount": result.total_slab_count,
        "overallWastePercentage": round(result.overall_waste_percentage, 2),
        "primaryMaterialId": result.primary_material_id,
        "unassignedPieceIds": list(result.unassigned_piece_ids),
        "warnings": list(result.warnings),
    }


def oversize_record_to_dict(record: OversizeRecord) -> dict[str, Any]:
    return {
        "pieceId": record.piece_id,
        "isOversize": record.is_oversize,
        "joinCount": record.join_count,
        "joinLengthMm": record.join_length_mm,
        "requiresGrainMatch": record.requires_grain_match,
    }


def output_to_dict(output: OptimizeOutput) -> dict[str, Any]:
    """Full camelCase document for an optimize run."""
    return {
        "schemaVersion": SCHEMA_VERSION,
        "quoteId": output.quote_id,
        "isValid": output.is_valid,
        "errors": list(output.errors),
        "kerfWidth": output.kerf_width,
        "mitreKerfWidth": output.mitre_kerf_width,
        "slabSource": output.slab_source,
        "totalSlabs": output.total_slabs,
        "wastePercent": round(output.waste_percent, 2),
        "result": packing_result_to_dict(output.result) if output.result else None,
        "multiMaterial": (
            multi_material_to_dict(output.multi_material) if output.multi_material else None
        ),
        "oversizeRecords": [oversize_record_to_dict(r) for r in output.oversize_records],
        "warnings": output.all_warnings,
    }


@ExporterRegistry.register("json")
class JsonResultExporter:
    """Optimization result as a camelCase JSON document."""

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def export(self, output: OptimizeOutput, path: Path) -> None:
        path.write_text(self.export_string(output), encoding="utf-8")

    def export_string(self, output: OptimizeOutput) -> str:
        return json.dumps(output_to_dict(output), indent=self.indent, ensure_ascii=False)

"""CSV cut list exporter.

One row per placement, main pieces before the lamination strips cut from
them, followed by summary rows and a lamination breakdown.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from slabs.infrastructure.exporters.base import ExporterRegistry, packing_runs

if TYPE_CHECKING:
    from slabs.application.dtos import OptimizeOutput
    from slabs.infrastructure.bin_packing import PackingResult, Placement


logger = logging.getLogger(__name__)

CUT_LIST_HEADERS: tuple[str, ...] = (
    "Slab #",
    "Piece ID",
    "Piece Label",
    "Type",
    "Parent Piece",
    "Width (mm)",
    "Height (mm)",
    "X Position",
    "Y Position",
    "Rotated",
)


def placement_type(placement: Placement) -> str:
    if placement.is_lamination_strip:
        return "Lamination"
    if placement.is_segment:
        return "Segment"
    return "Main"


def _sort_key(placement: Placement) -> tuple[int, bool, str]:
    parent = placement.parent_piece_id or placement.piece_id
    return (placement.slab_index, placement.is_lamination_strip, parent)


def _padded(*cells: object) -> list[object]:
    return list(cells) + [""] * (len(CUT_LIST_HEADERS) - len(cells))


@ExporterRegistry.register("csv")
class CsvCutListExporter:
    """Cut list for the saw operator as CSV.

    Attributes:
        include_timestamp: Whether to add a "Generated" summary row.
    """

    format_name: ClassVar[str] = "csv"
    file_extension: ClassVar[str] = "csv"

    def __init__(self, include_timestamp: bool = True) -> None:
        self.include_timestamp = include_timestamp

    def export(self, output: OptimizeOutput, path: Path) -> None:
        path.write_text(self.export_string(output), encoding="utf-8")

    def export_string(self, output: OptimizeOutput) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        runs = packing_runs(output)
        for index, (material_name, result) in enumerate(runs):
            if index:
                writer.writerow(_padded())
            if material_name is not None:
                writer.writerow(_padded(f"--- MATERIAL: {material_name} ---"))
            self._write_run(writer, result)
        return buffer.getvalue()

    def _write_run(self, writer: Any, result: PackingResult) -> None:
        writer.writerow(CUT_LIST_HEADERS)
        labels = {p.piece_id: p.label for p in result.placements if not p.is_lamination_strip}

        # Stable sort: a parent's segments keep their placement order
        for placement in sorted(result.placements, key=_sort_key):
            parent_name = ""
            if placement.is_lamination_strip and placement.parent_piece_id:
                parent_name = labels.get(placement.parent_piece_id, placement.parent_piece_id)
            writer.writerow(
                [
                    placement.slab_index + 1,
                    placement.piece_id,
                    placement.label,
                    placement_type(placement),
                    parent_name,
                    f"{placement.width:g}",
                    f"{placement.height:g}",
                    round(placement.x),
                    round(placement.y),
                    "Yes" if placement.rotated else "No",
                ]
            )

        slab = result.slab_config
        writer.writerow(_padded())
        writer.writerow(_padded("--- SUMMARY ---"))
        writer.writerow(_padded("Total Slabs", result.total_slabs))
        writer.writerow(_padded("Total Pieces", len(result.placements)))
        writer.writerow(_padded("Slab Size", f"{slab.width:g} x {slab.height:g} mm"))
        writer.writerow(_padded("Total Area", f"{result.total_used_area:.2f} mm²"))
        writer.writerow(_padded("Waste", f"{result.total_waste_area:.2f} mm²"))
        writer.writerow(_padded("Waste %", f"{result.waste_percent:.1f}%"))
        if result.unplaced_pieces:
            writer.writerow(_padded("Unplaced", "; ".join(result.unplaced_pieces)))
        if self.include_timestamp:
            writer.writerow(_padded("Generated", datetime.now().isoformat(timespec="seconds")))

        summary = result.lamination_summary
        if summary is None or summary.total_strips == 0:
            return
        writer.writerow(_padded())
        writer.writerow(_padded("--- LAMINATION STRIPS ---"))
        writer.writerow(_padded("Total Strips", summary.total_strips))
        writer.writerow(_padded("Total Strip Area", f"{summary.total_strip_area:.4f} m²"))
        writer.writerow(_padded())
        writer.writerow(_padded("Strip Breakdown:"))
        for parent in summary.strips_by_parent:
            writer.writerow(_padded(parent.parent_label))
            for strip in parent.strips:
                writer.writerow(
                    _padded("", f"{strip.position.value}:", f"{strip.length_mm}mm x {strip.width_mm}mm")
                )

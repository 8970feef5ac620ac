"""Plain-text report formatters for optimization results."""

from __future__ import annotations

from slabs.domain.services.cut_plan import CutPlan
from slabs.infrastructure.bin_packing import PackingResult, Placement
from slabs.infrastructure.multi_material import MultiMaterialResult


def _kind(placement: Placement) -> str:
    if placement.is_lamination_strip:
        return "Strip"
    if placement.is_segment:
        return f"Seg {placement.segment_index}/{placement.total_segments}"
    return "Main"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


class OptimizationReportFormatter:
    """Formats a single-material packing result as a slab-by-slab table."""

    def format(self, result: PackingResult, title: str = "SLAB OPTIMIZATION") -> str:
        slab = result.slab_config
        lines = [
            title,
            "=" * 70,
            f"Slab: {slab.width:g} x {slab.height:g} mm"
            + (f" (edge allowance {slab.edge_allowance_mm:g} mm)" if slab.edge_allowance_mm else "")
            + f", kerf {result.kerf_width:g} mm",
        ]

        if not result.slabs:
            lines.append("No slabs used.")

        for layout in result.slabs:
            lines.append("")
            lines.append(
                f"Slab {layout.slab_index + 1}: {_plural(layout.piece_count, 'piece')}, "
                f"{layout.waste_percent:.1f}% waste"
            )
            lines.append("-" * 70)
            lines.append(f"{'Piece':<30} {'Kind':<10} {'Size (mm)':<14} {'Position':<12} {'Rot'}")
            for p in layout.placements:
                size = f"{p.width:g}x{p.height:g}"
                position = f"{p.x:g},{p.y:g}"
                lines.append(
                    f"{(p.label or p.piece_id)[:30]:<30} {_kind(p):<10} {size:<14} "
                    f"{position:<12} {'R' if p.rotated else ''}"
                )

        lines.append("")
        lines.append("=" * 70)
        lines.append(f"Total slabs: {result.total_slabs}")
        lines.append(f"Used area:   {result.total_used_area / 1_000_000:.3f} m²")
        lines.append(f"Waste:       {result.waste_percent:.1f}%")

        summary = result.lamination_summary
        if summary is not None and summary.total_strips:
            lines.append(
                f"Lamination:  {_plural(summary.total_strips, 'strip')}, "
                f"{summary.total_strip_area:.4f} m²"
            )
        if result.unplaced_pieces:
            lines.append(f"Unplaced:    {', '.join(result.unplaced_pieces)}")
        if result.warnings:
            lines.append("")
            lines.append("Warnings:")
            lines.extend(f"  - {w}" for w in result.warnings)
        return "\n".join(lines)


class MultiMaterialReportFormatter:
    """Formats a multi-material result: a summary table then one report per material."""

    def __init__(self) -> None:
        self._single = OptimizationReportFormatter()

    def format(self, result: MultiMaterialResult) -> str:
        lines = [
            "MULTI-MATERIAL SLAB OPTIMIZATION",
            "=" * 70,
            f"{'Material':<30} {'Pieces':<8} {'Slabs':<8} {'Slab (mm)':<14} {'Waste'}",
            "-" * 70,
        ]
        for group in result.material_groups:
            name = group.material_name + (" *" if group.is_primary else "")
            slab = f"{group.slab.length_mm}x{group.slab.width_mm}"
            lines.append(
                f"{name[:30]:<30} {group.piece_count:<8} {group.slab_count:<8} "
                f"{slab:<14} {group.waste_percent:.1f}%"
            )
        lines.append("-" * 70)
        lines.append(
            f"{'TOTAL':<30} {'':<8} {result.total_slab_count:<8} {'':<14} "
            f"{result.overall_waste_percentage:.1f}%"
        )
        if result.unassigned_piece_ids:
            lines.append(f"Unassigned: {', '.join(result.unassigned_piece_ids)}")

        for group in result.material_groups:
            lines.append("")
            lines.append(self._single.format(group.result, title=group.material_name.upper()))
            for info in group.oversize_pieces:
                lines.append(
                    f"  Oversize: {info.label} needs {_plural(info.join_count, 'join')} "
                    f"({info.join_strategy.value}, {info.join_length_mm} mm)"
                )

        orchestrator_warnings = [w for w in result.warnings if not w.startswith("[")]
        if orchestrator_warnings:
            lines.append("")
            lines.append("Warnings:")
            lines.extend(f"  - {w}" for w in orchestrator_warnings)
        return "\n".join(lines)


class CutPlanFormatter:
    """Formats a cut plan for one piece."""

    def format(self, plan: CutPlan, length_mm: int, width_mm: int) -> str:
        lines = [
            "CUT PLAN",
            "=" * 50,
            f"Piece: {length_mm} x {width_mm} mm"
            + (f", {plan.thickness_mm} mm thick" if plan.thickness_mm else ""),
        ]
        if plan.fits_on_single_slab:
            lines.append("Fits on a single slab.")
        else:
            lines.append(f"Strategy: {plan.strategy.value}")
            lines.append(f"Slabs required: {plan.total_slabs_required}")
            lines.append("")
            lines.append("Segments:")
            for i, segment in enumerate(plan.segments, start=1):
                lines.append(
                    f"  {i}. {segment.length_mm} x {segment.width_mm} mm (slab {segment.slab_index + 1})"
                )
            lines.append("")
            lines.append("Joins:")
            for join in plan.joins:
                lines.append(
                    f"  {join.orientation.value.lower()} at {join.position_mm} mm, "
                    f"{join.length_mm} mm long"
                )
            lines.append(f"Total join length: {plan.join_length_mm} mm")
            if plan.join_cost:
                lines.append(f"Join cost: ${plan.join_cost:.2f}")
        if plan.warnings:
            lines.append("")
            lines.append("Warnings:")
            lines.extend(f"  - {w}" for w in plan.warnings)
        return "\n".join(lines)

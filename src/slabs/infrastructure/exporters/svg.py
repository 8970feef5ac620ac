"""SVG exporter for slab cut diagrams."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from slabs.infrastructure.cut_diagram_renderer import CutDiagramRenderer
from slabs.infrastructure.exporters.base import ExporterRegistry, packing_runs

if TYPE_CHECKING:
    from slabs.application.dtos import OptimizeOutput


@ExporterRegistry.register("svg")
class SvgExporter:
    """SVG exporter wrapping CutDiagramRenderer.

    ``export`` writes every slab of every material into one stacked
    document; ``export_individual_slabs`` writes one file per slab.
    """

    format_name: ClassVar[str] = "svg"
    file_extension: ClassVar[str] = "svg"

    def __init__(
        self,
        scale: float = 0.25,
        show_dimensions: bool = True,
        show_labels: bool = True,
    ) -> None:
        self.renderer = CutDiagramRenderer(
            scale=scale,
            show_dimensions=show_dimensions,
            show_labels=show_labels,
        )

    def export(self, output: OptimizeOutput, path: Path) -> None:
        path.write_text(self.export_string(output), encoding="utf-8")

    def export_string(self, output: OptimizeOutput) -> str:
        return self.renderer.render_stacked_svg(packing_runs(output))

    def export_individual_slabs(self, output: OptimizeOutput, base_path: Path) -> list[Path]:
        """Write ``{stem}_{n}.svg`` per slab, numbering across materials.

        Returns:
            Paths of the created files.
        """
        base_path.parent.mkdir(parents=True, exist_ok=True)
        paths: list[Path] = []
        for material_name, result in packing_runs(output):
            for svg in self.renderer.render_all_svg(result, material_name):
                path = base_path.parent / f"{base_path.stem}_{len(paths) + 1}.svg"
                path.write_text(svg, encoding="utf-8")
                paths.append(path)
        return paths

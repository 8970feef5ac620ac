"""Cut diagram rendering for slab layouts.

This module provides SVG and ASCII rendering of slab layouts showing piece
placements, dimensions, rotation indicators and waste areas. Placement
coordinates have a bottom-left origin; SVG output flips them so the slab
reads the same way the saw operator sees it on the bench.
"""

from __future__ import annotations

from xml.sax.saxutils import escape

from slabs.infrastructure.bin_packing import PackingResult, Placement, SlabConfig, SlabLayout

# Fill colours by placement kind
PLACEMENT_COLORS: dict[str, str] = {
    "main": "#87CEEB",  # Sky blue
    "segment": "#FFB6C1",  # Light pink
    "lamination": "#F0E68C",  # Khaki
}


def placement_kind(placement: Placement) -> str:
    if placement.is_lamination_strip:
        return "lamination"
    if placement.is_segment:
        return "segment"
    return "main"


class CutDiagramRenderer:
    """Renders slab cut diagrams.

    Attributes:
        scale: Pixels per millimetre for SVG rendering.
        piece_stroke: Stroke colour for piece outlines.
        waste_fill: Fill colour for the usable area left uncut.
        slab_fill: Fill colour for the edge allowance band.
        text_color: Colour for labels and dimensions.
        show_dimensions: Whether to show piece dimensions.
        show_labels: Whether to show piece labels.
    """

    def __init__(
        self,
        scale: float = 0.25,
        piece_stroke: str = "#000000",
        waste_fill: str = "#D3D3D3",
        slab_fill: str = "#A9A9A9",
        text_color: str = "#000000",
        show_dimensions: bool = True,
        show_labels: bool = True,
    ) -> None:
        if scale <= 0:
            raise ValueError("Scale must be positive")
        self.scale = scale
        self.piece_stroke = piece_stroke
        self.waste_fill = waste_fill
        self.slab_fill = slab_fill
        self.text_color = text_color
        self.show_dimensions = show_dimensions
        self.show_labels = show_labels

    def render_svg(self, layout: SlabLayout, total_slabs: int = 1, title: str | None = None) -> str:
        """Generate the SVG cut diagram for one slab.

        Args:
            layout: Slab layout with placements.
            total_slabs: Slab count of the run, for the header.
            title: Optional prefix for the header, usually the material name.
        """
        slab = layout.slab_config
        header_height = 30
        svg_width = slab.width * self.scale
        svg_height = slab.height * self.scale + header_height

        parts: list[str] = [
            f'<svg width="{svg_width:g}" height="{svg_height:g}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            "",
            "  <!-- Background -->",
            f'  <rect x="0" y="0" width="{svg_width:g}" height="{svg_height:g}" fill="white"/>',
            "",
            self._render_header(layout, total_slabs, svg_width, header_height, title),
            "",
            "  <!-- Slab outline -->",
            f'  <rect x="0" y="{header_height}" width="{svg_width:g}" '
            f'height="{slab.height * self.scale:g}" fill="{self.slab_fill}" '
            f'stroke="{self.piece_stroke}" stroke-width="2"/>',
        ]

        if slab.is_usable:
            ea = slab.edge_allowance_mm * self.scale
            parts.append("  <!-- Usable area (inside edge allowance) -->")
            parts.append(
                f'  <rect x="{ea:g}" y="{header_height + ea:g}" '
                f'width="{slab.usable_width * self.scale:g}" '
                f'height="{slab.usable_height * self.scale:g}" '
                f'fill="{self.waste_fill}" stroke="#999999" stroke-dasharray="5,5"/>'
            )

        parts.append("")
        parts.append("  <!-- Placed pieces -->")
        for placement in layout.placements:
            parts.append(self._render_piece(placement, slab, header_height))

        parts.append("")
        parts.append("</svg>")
        return "\n".join(parts)

    def render_all_svg(self, result: PackingResult, title: str | None = None) -> list[str]:
        """One SVG document per slab."""
        total = result.total_slabs
        return [self.render_svg(layout, total, title) for layout in result.slabs]

    def _render_header(
        self,
        layout: SlabLayout,
        total_slabs: int,
        svg_width: float,
        header_height: float,
        title: str | None,
    ) -> str:
        slab = layout.slab_config
        header_text = (
            f"Slab {layout.slab_index + 1} of {total_slabs} - "
            f"{slab.width:g} x {slab.height:g} mm - {layout.waste_percent:.1f}% waste"
        )
        if title:
            header_text = f"{title} - {header_text}"
        return (
            f"  <!-- Header -->\n"
            f'  <rect x="0" y="0" width="{svg_width:g}" height="{header_height}" fill="#E0E0E0"/>\n'
            f'  <text x="10" y="{header_height - 8}" '
            f'font-family="Arial, sans-serif" font-size="14" '
            f'fill="{self.text_color}">{escape(header_text)}</text>'
        )

    def _render_piece(self, placement: Placement, slab: SlabConfig, header_height: float) -> str:
        x = placement.x * self.scale
        y = header_height + (slab.height - placement.top_edge) * self.scale
        w = placement.width * self.scale
        h = placement.height * self.scale
        fill = PLACEMENT_COLORS[placement_kind(placement)]

        dims = f"{placement.width:g} x {placement.height:g}"
        if placement.rotated:
            dims += " (R)"

        font_size = min(12, min(w, h) / 4)
        rect = (
            f'<rect x="{x:g}" y="{y:g}" width="{w:g}" height="{h:g}" '
            f'fill="{fill}" stroke="{self.piece_stroke}"/>'
        )
        if font_size < 5:
            # Too small for text
            return f"  {rect}"

        text_x = x + w / 2
        text_y = y + h / 2
        svg_parts = ["  <g>", f"    {rect}"]
        if self.show_labels:
            svg_parts.append(
                f'    <text x="{text_x:g}" y="{text_y - font_size / 2:g}" '
                f'text-anchor="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size:g}" fill="{self.text_color}">'
                f"{escape(placement.label or placement.piece_id)}</text>"
            )
        if self.show_dimensions:
            dims_y = text_y + font_size / 2 + 2 if self.show_labels else text_y
            svg_parts.append(
                f'    <text x="{text_x:g}" y="{dims_y:g}" '
                f'text-anchor="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size * 0.8:g}" fill="{self.text_color}">{dims}</text>'
            )
        svg_parts.append("  </g>")
        return "\n".join(svg_parts)

    def render_combined_svg(self, result: PackingResult, title: str | None = None) -> str:
        """Single SVG with all slabs stacked vertically."""
        return self.render_stacked_svg([(title, result)])

    def render_stacked_svg(self, runs: list[tuple[str | None, PackingResult]]) -> str:
        """Single SVG stacking the slabs of several runs, each titled by material."""
        layouts = [(title, result, layout) for title, result in runs for layout in result.slabs]
        if not layouts:
            return (
                '<svg width="200" height="50" xmlns="http://www.w3.org/2000/svg">'
                '<text x="10" y="30">No slabs to display</text></svg>'
            )

        header_height = 30
        spacing = 20
        svg_width = max(layout.width for _, _, layout in layouts) * self.scale
        svg_height = sum(
            layout.height * self.scale + header_height + spacing for _, _, layout in layouts
        )

        parts: list[str] = [
            f'<svg width="{svg_width:g}" height="{svg_height:g}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'  <rect x="0" y="0" width="{svg_width:g}" height="{svg_height:g}" fill="white"/>',
        ]

        y_offset = 0.0
        for title, result, layout in layouts:
            parts.append(f'  <g transform="translate(0, {y_offset:g})">')
            parts.append(f"    <!-- Slab {layout.slab_index + 1} -->")
            slab_svg = self.render_svg(layout, result.total_slabs, title)
            inner = slab_svg[slab_svg.find(">") + 1 : slab_svg.rfind("</svg>")]
            for line in inner.strip().split("\n"):
                if line.strip():
                    parts.append(f"  {line}")
            parts.append("  </g>")
            y_offset += layout.height * self.scale + header_height + spacing

        parts.append("</svg>")
        return "\n".join(parts)

    def render_ascii(self, layout: SlabLayout, width: int = 80, total_slabs: int = 1) -> str:
        """Text diagram of one slab for terminal display."""
        slab = layout.slab_config
        inner_width = width - 2
        scale_x = inner_width / slab.width
        grid_height = max(int(inner_width * (slab.height / slab.width) * 0.5), 10)
        scale_y = grid_height / slab.height

        grid = [[" " for _ in range(inner_width)] for _ in range(grid_height)]
        for placement in layout.placements:
            self._draw_piece_ascii(grid, placement, slab, scale_x, scale_y)

        lines = [
            f"Slab {layout.slab_index + 1} of {total_slabs} - {layout.waste_percent:.1f}% waste",
            "+" + "-" * inner_width + "+",
        ]
        # Top row of the grid is the far edge of the slab
        for row in reversed(grid):
            lines.append("|" + "".join(row) + "|")
        lines.append("+" + "-" * inner_width + "+")
        return "\n".join(lines)

    def _draw_piece_ascii(
        self,
        grid: list[list[str]],
        placement: Placement,
        slab: SlabConfig,
        scale_x: float,
        scale_y: float,
    ) -> None:
        rows = len(grid)
        cols = len(grid[0]) if grid else 0
        x1 = max(0, min(int(placement.x * scale_x), cols - 1))
        x2 = max(0, min(int(placement.right_edge * scale_x), cols - 1))
        y1 = max(0, min(int(placement.y * scale_y), rows - 1))
        y2 = max(0, min(int(placement.top_edge * scale_y), rows - 1))

        for x in range(x1, x2 + 1):
            grid[y1][x] = "-"
            grid[y2][x] = "-"
        for y in range(y1, y2 + 1):
            grid[y][x1] = "|"
            grid[y][x2] = "|"
        for y, x in ((y1, x1), (y1, x2), (y2, x1), (y2, x2)):
            grid[y][x] = "+"

        # Rows are reversed on output, so y2 - 1 prints just under the top border
        label_row = y2 - 1
        if label_row > y1 and x2 - x1 > 2:
            text = (placement.label or placement.piece_id)[: x2 - x1 - 1]
            for i, char in enumerate(text):
                grid[label_row][x1 + 1 + i] = char

    def render_all_ascii(self, result: PackingResult, width: int = 80) -> str:
        if not result.slabs:
            return "No slabs to display."
        parts: list[str] = []
        for layout in result.slabs:
            parts.append(self.render_ascii(layout, width, result.total_slabs))
            parts.append("")
        parts.append("=" * width)
        parts.append(
            f"SUMMARY: {result.total_slabs} slab{'s' if result.total_slabs != 1 else ''}, "
            f"{result.waste_percent:.1f}% total waste"
        )
        return "\n".join(parts)

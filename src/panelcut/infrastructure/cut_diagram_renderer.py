"""Cut diagram rendering for cutting plans.

This module provides SVG and ASCII rendering of sheet layouts showing piece
placements, dimensions, rotation indicators, trim margins and reusable
offcuts. Plan coordinates are millimetres with the origin at the sheet's
bottom-left corner and y growing upwards; both renderers flip y so the
diagram matches the physical sheet, with y = 0 along the bottom edge.
"""

from __future__ import annotations

from xml.sax.saxutils import escape

from panelcut.application.dtos import CuttingPlan, OffcutOutput, PlacementOutput, SheetOutput

# Fill colors cycled over piece labels in first-seen order
PIECE_PALETTE: tuple[str, ...] = (
    "#87CEEB",  # Sky blue
    "#90EE90",  # Light green
    "#DDA0DD",  # Plum
    "#F0E68C",  # Khaki
    "#FFB6C1",  # Light pink
    "#FFA07A",  # Light salmon
    "#DEB887",  # Burlywood
    "#E6E6FA",  # Lavender
    "#BC8F8F",  # Rosy brown
    "#D8BFD8",  # Thistle
)


def label_colors(plan: CuttingPlan) -> dict[str, str]:
    """Assign a palette color to every placed label, first-seen order."""
    colors: dict[str, str] = {}
    for sheet in plan.sheets:
        for placement in sheet.placements:
            if placement.label not in colors:
                colors[placement.label] = PIECE_PALETTE[len(colors) % len(PIECE_PALETTE)]
    return colors


class CutDiagramRenderer:
    """Renders cut diagrams in SVG and ASCII format.

    Attributes:
        scale: Pixels per millimetre for SVG rendering (default 0.25).
        piece_stroke: Stroke color for piece outlines.
        offcut_fill: Fill color for reusable offcuts.
        text_color: Color for labels and dimensions.
        show_dimensions: Whether to show piece dimensions in labels.
        show_labels: Whether to show piece labels.
        show_offcuts: Whether to highlight reusable offcuts.
    """

    def __init__(
        self,
        scale: float = 0.25,
        piece_stroke: str = "#000000",  # Black
        offcut_fill: str = "#D3D3D3",  # Light gray
        text_color: str = "#000000",  # Black
        show_dimensions: bool = True,
        show_labels: bool = True,
        show_offcuts: bool = True,
    ) -> None:
        """Initialize renderer with styling options.

        Args:
            scale: Pixels per millimetre for SVG rendering (default 0.25).
            piece_stroke: Stroke color for piece outlines (default black).
            offcut_fill: Fill color for reusable offcuts (default light gray).
            text_color: Color for labels and dimensions (default black).
            show_dimensions: Whether to show piece dimensions (default True).
            show_labels: Whether to show piece labels (default True).
            show_offcuts: Whether to highlight reusable offcuts (default True).
        """
        if scale <= 0:
            raise ValueError("Scale must be positive")
        self.scale = scale
        self.piece_stroke = piece_stroke
        self.offcut_fill = offcut_fill
        self.text_color = text_color
        self.show_dimensions = show_dimensions
        self.show_labels = show_labels
        self.show_offcuts = show_offcuts

    def render_svg(
        self,
        sheet: SheetOutput,
        total_sheets: int = 1,
        offcuts: tuple[OffcutOutput, ...] = (),
        colors: dict[str, str] | None = None,
    ) -> str:
        """Generate SVG cut diagram for a single sheet.

        Args:
            sheet: Sheet from the cutting plan.
            total_sheets: Total number of sheets (for header display).
            offcuts: Reusable offcuts on this sheet.
            colors: Fill color per piece label. Defaults to the first
                palette color for every piece.

        Returns:
            SVG string representation of the sheet.
        """
        header_height = 30  # Pixels for header text
        svg_width = sheet.width * self.scale
        sheet_height = sheet.height * self.scale
        svg_height = sheet_height + header_height

        parts: list[str] = [
            f'<svg width="{svg_width}" height="{svg_height}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            "",
            "  <!-- Background -->",
            f'  <rect x="0" y="0" width="{svg_width}" height="{svg_height}" '
            f'fill="white"/>',
            "",
        ]

        parts.append(self._render_header(sheet, total_sheets, svg_width, header_height))

        parts.append("  <!-- Sheet outline -->")
        parts.append(
            f'  <rect x="0" y="{header_height}" '
            f'width="{svg_width}" height="{sheet_height}" '
            f'fill="#f5deb3" stroke="{self.piece_stroke}" stroke-width="2"/>'
        )

        if sheet.trim > 0:
            t = sheet.trim * self.scale
            usable_w = (sheet.width - 2 * sheet.trim) * self.scale
            usable_h = (sheet.height - 2 * sheet.trim) * self.scale
            parts.append("  <!-- Usable area (inside trim) -->")
            parts.append(
                f'  <rect x="{t}" y="{header_height + t}" '
                f'width="{usable_w}" height="{usable_h}" '
                f'fill="none" stroke="#999999" stroke-dasharray="5,5"/>'
            )

        # Offcuts first so pieces render on top
        if self.show_offcuts and offcuts:
            parts.append("")
            parts.append("  <!-- Reusable offcuts -->")
            for offcut in offcuts:
                parts.append(self._render_offcut(offcut, sheet.height, header_height))

        parts.append("")
        parts.append("  <!-- Placed pieces -->")
        for placement in sheet.placements:
            fill = (colors or {}).get(placement.label, PIECE_PALETTE[0])
            parts.append(self._render_piece(placement, fill, sheet.height, header_height))

        parts.append("")
        parts.append("</svg>")

        return "\n".join(parts)

    def render_all_svg(self, plan: CuttingPlan) -> list[str]:
        """Generate SVG cut diagrams for all sheets.

        Args:
            plan: Complete cutting plan.

        Returns:
            List of SVG strings, one per sheet.
        """
        colors = label_colors(plan)
        total_sheets = len(plan.sheets)
        return [
            self.render_svg(sheet, total_sheets, self._offcuts_for(plan, sheet), colors)
            for sheet in plan.sheets
        ]

    def render_combined_svg(self, plan: CuttingPlan) -> str:
        """Generate single SVG with all sheets stacked vertically.

        Args:
            plan: Complete cutting plan.

        Returns:
            Combined SVG string with all sheets.
        """
        if not plan.sheets:
            return (
                '<svg width="200" height="50" xmlns="http://www.w3.org/2000/svg">'
                '<text x="10" y="30">No sheets to display</text></svg>'
            )

        header_height = 30
        sheet_spacing = 20
        svg_width = max(sheet.width for sheet in plan.sheets) * self.scale
        svg_height = sum(
            sheet.height * self.scale + header_height + sheet_spacing
            for sheet in plan.sheets
        )

        parts: list[str] = [
            f'<svg width="{svg_width}" height="{svg_height}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'  <rect x="0" y="0" width="{svg_width}" height="{svg_height}" '
            f'fill="white"/>',
        ]

        y_offset = 0.0
        for sheet, sheet_svg in zip(plan.sheets, self.render_all_svg(plan)):
            parts.append(f'  <g transform="translate(0, {y_offset})">')
            parts.append(f"    <!-- Sheet {sheet.sheet_index + 1} -->")

            # Keep only the content between <svg ...> and </svg>
            start_idx = sheet_svg.find(">") + 1
            end_idx = sheet_svg.rfind("</svg>")
            for line in sheet_svg[start_idx:end_idx].strip().split("\n"):
                if line.strip():
                    parts.append(f"  {line}")

            parts.append("  </g>")
            y_offset += sheet.height * self.scale + header_height + sheet_spacing

        parts.append("</svg>")
        return "\n".join(parts)

    def _render_header(
        self,
        sheet: SheetOutput,
        total_sheets: int,
        svg_width: float,
        header_height: float,
    ) -> str:
        header_text = escape(
            f"Sheet {sheet.sheet_index + 1} of {total_sheets} - "
            f"{_stock_description(sheet)} - {sheet.waste_percent:.1f}% waste"
        )
        return (
            f"  <!-- Header -->\n"
            f'  <rect x="0" y="0" width="{svg_width}" height="{header_height}" '
            f'fill="#E0E0E0"/>\n'
            f'  <text x="10" y="{header_height - 8}" '
            f'font-family="Arial, sans-serif" font-size="14" '
            f'fill="{self.text_color}">{header_text}</text>'
        )

    def _render_piece(
        self,
        placement: PlacementOutput,
        fill: str,
        sheet_height: int,
        header_height: float,
    ) -> str:
        """Render a single placed piece as SVG rect and text.

        Args:
            placement: The placed piece.
            fill: Fill color for the piece.
            sheet_height: Sheet height in millimetres, for flipping y.
            header_height: Header height offset.

        Returns:
            SVG elements for the piece.
        """
        x = placement.x * self.scale
        y = self._svg_y(placement.y, placement.height, sheet_height, header_height)
        w = placement.width * self.scale
        h = placement.height * self.scale

        dims = f"{placement.width} x {placement.height}"
        if placement.rotated:
            dims += " (R)"

        text_x = x + w / 2
        text_y = y + h / 2

        font_size = min(12, min(w, h) / 6)
        if font_size < 6:
            # Too small for text
            return (
                f'  <rect x="{x}" y="{y}" width="{w}" height="{h}" '
                f'fill="{fill}" stroke="{self.piece_stroke}"/>'
            )

        svg_parts = [
            "  <g>",
            f'    <rect x="{x}" y="{y}" width="{w}" height="{h}" '
            f'fill="{fill}" stroke="{self.piece_stroke}"/>',
        ]

        if self.show_labels:
            svg_parts.append(
                f'    <text x="{text_x}" y="{text_y - font_size / 2}" '
                f'text-anchor="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size}" fill="{self.text_color}">'
                f"{escape(placement.label)}</text>"
            )

        if self.show_dimensions:
            dims_y = text_y + font_size / 2 + 2 if self.show_labels else text_y
            svg_parts.append(
                f'    <text x="{text_x}" y="{dims_y}" '
                f'text-anchor="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size * 0.8}" fill="{self.text_color}">{dims}</text>'
            )

        svg_parts.append("  </g>")
        return "\n".join(svg_parts)

    def _svg_y(self, y: int, height: int, sheet_height: int, header_height: float) -> float:
        """SVG y of a rectangle's top edge; SVG y grows downwards."""
        return header_height + (sheet_height - y - height) * self.scale

    def _render_offcut(
        self, offcut: OffcutOutput, sheet_height: int, header_height: float
    ) -> str:
        x = offcut.x * self.scale
        y = self._svg_y(offcut.y, offcut.height, sheet_height, header_height)
        w = offcut.width * self.scale
        h = offcut.height * self.scale
        return (
            f'  <rect x="{x}" y="{y}" width="{w}" height="{h}" '
            f'fill="{self.offcut_fill}" stroke="#999999" stroke-dasharray="2,2"/>'
        )

    def render_ascii(
        self,
        sheet: SheetOutput,
        width: int = 80,
        total_sheets: int = 1,
    ) -> str:
        """Generate ASCII cut diagram for a single sheet.

        Creates a text-based representation of the sheet layout suitable
        for terminal display.

        Args:
            sheet: Sheet from the cutting plan.
            width: Terminal width in characters (default 80).
            total_sheets: Total number of sheets (for header display).

        Returns:
            ASCII string representation of the sheet.
        """
        # Reserve 2 chars for borders
        usable_width = max(width - 2, 10)
        scale_x = usable_width / sheet.width

        # 0.5 compensates for the character aspect ratio
        grid_height = max(int(usable_width * sheet.height / sheet.width * 0.5), 10)
        scale_y = grid_height / sheet.height

        grid = [[" " for _ in range(usable_width)] for _ in range(grid_height)]
        for placement in sheet.placements:
            self._draw_piece_ascii(grid, placement, scale_x, scale_y)

        lines: list[str] = [
            f"Sheet {sheet.sheet_index + 1} of {total_sheets} - "
            f"{_stock_description(sheet)} - {sheet.waste_percent:.1f}% waste",
            "+" + "-" * usable_width + "+",
        ]
        for row in grid:
            lines.append("|" + "".join(row) + "|")
        lines.append("+" + "-" * usable_width + "+")

        return "\n".join(lines)

    def _draw_piece_ascii(
        self,
        grid: list[list[str]],
        placement: PlacementOutput,
        scale_x: float,
        scale_y: float,
    ) -> None:
        """Draw a single piece onto the ASCII grid.

        Args:
            grid: 2D character grid.
            placement: The placed piece.
            scale_x: Characters per millimetre (horizontal).
            scale_y: Characters per millimetre (vertical).
        """
        grid_height = len(grid)
        grid_width = len(grid[0]) if grid else 0

        # Row 0 is the top of the sheet
        top = grid_height - 1 - int((placement.y + placement.height) * scale_y)
        bottom = grid_height - 1 - int(placement.y * scale_y)

        x1 = max(0, min(int(placement.x * scale_x), grid_width - 1))
        y1 = max(0, min(top, grid_height - 1))
        x2 = max(0, min(int((placement.x + placement.width) * scale_x), grid_width - 1))
        y2 = max(0, min(bottom, grid_height - 1))

        for x in range(x1, x2 + 1):
            grid[y1][x] = "-"
            grid[y2][x] = "-"
        for y in range(y1, y2 + 1):
            grid[y][x1] = "|"
            grid[y][x2] = "|"
        for y, x in ((y1, x1), (y1, x2), (y2, x1), (y2, x2)):
            grid[y][x] = "+"

        dims = f"{placement.width}x{placement.height}"
        if placement.rotated:
            dims += "R"

        for row, text in ((y1 + 1, placement.label), (y1 + 2, dims)):
            if row >= y2:
                break
            text = text[: max(0, x2 - x1 - 1)]
            for i, char in enumerate(text):
                grid[row][x1 + 1 + i] = char

    def render_all_ascii(self, plan: CuttingPlan, width: int = 80) -> str:
        """Generate ASCII cut diagrams for all sheets.

        Args:
            plan: Complete cutting plan.
            width: Terminal width in characters.

        Returns:
            Combined ASCII string with all sheets and a summary line.
        """
        if not plan.sheets:
            return "No sheets to display."

        total_sheets = len(plan.sheets)
        parts: list[str] = []
        for sheet in plan.sheets:
            parts.append(self.render_ascii(sheet, width, total_sheets))
            parts.append("")

        parts.append("=" * width)
        parts.append(
            f"SUMMARY: {total_sheets} sheet{'s' if total_sheets != 1 else ''}, "
            f"{plan.total_waste_percent:.1f}% total waste, "
            f"{plan.placed_pieces}/{plan.total_pieces} pieces placed"
        )
        return "\n".join(parts)

    @staticmethod
    def _offcuts_for(plan: CuttingPlan, sheet: SheetOutput) -> tuple[OffcutOutput, ...]:
        return tuple(
            offcut
            for offcut in plan.reusable_offcuts
            if offcut.sheet_index == sheet.sheet_index
        )


def _stock_description(sheet: SheetOutput) -> str:
    description = f"{sheet.width}x{sheet.height} mm"
    if sheet.stock_label:
        description = f"{sheet.stock_label} ({description})"
    return description

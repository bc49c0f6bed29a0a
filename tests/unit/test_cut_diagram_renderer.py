"""Unit tests for CutDiagramRenderer."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from panelcut.application.dtos import (
    CuttingPlan,
    OffcutOutput,
    PlacementOutput,
    SheetOutput,
)
from panelcut.infrastructure.cut_diagram_renderer import (
    PIECE_PALETTE,
    CutDiagramRenderer,
    label_colors,
)

SVG_NS = "{http://www.w3.org/2000/svg}"


def make_sheet(
    sheet_index: int = 0,
    placements: tuple[PlacementOutput, ...] = (),
    trim: int = 0,
    stock_label: str = "",
) -> SheetOutput:
    used = sum(p.width * p.height for p in placements)
    total = 2800 * 2070
    return SheetOutput(
        sheet_index=sheet_index,
        stock_index=0,
        stock_label=stock_label,
        width=2800,
        height=2070,
        kerf=3,
        placements=placements,
        used_area=used,
        waste_area=total - used,
        waste_percent=round((total - used) / total * 100, 2),
        trim=trim,
    )


@pytest.fixture
def door() -> PlacementOutput:
    return PlacementOutput(label="Door", x=0, y=0, width=1200, height=800, rotated=False)


@pytest.fixture
def shelf() -> PlacementOutput:
    return PlacementOutput(label="Shelf", x=1203, y=0, width=600, height=400, rotated=True)


@pytest.fixture
def plan(door: PlacementOutput, shelf: PlacementOutput) -> CuttingPlan:
    sheets = (
        make_sheet(0, (door, shelf)),
        make_sheet(1, (door,), stock_label="PB19"),
    )
    return CuttingPlan(
        sheets=sheets,
        unplaced=(),
        total_waste_percent=72.5,
        sheet_count=2,
        total_pieces=3,
        placed_pieces=3,
        efficiency_percent=27.5,
        reusable_offcuts=(OffcutOutput(sheet_index=0, x=0, y=803, width=2800, height=1267),),
    )


@pytest.fixture
def empty_plan() -> CuttingPlan:
    return CuttingPlan(
        sheets=(),
        unplaced=(),
        total_waste_percent=0.0,
        sheet_count=0,
        total_pieces=0,
        placed_pieces=0,
        efficiency_percent=0.0,
    )


class TestRendererInit:
    """Tests for renderer construction."""

    def test_defaults(self) -> None:
        renderer = CutDiagramRenderer()
        assert renderer.scale == 0.25
        assert renderer.show_labels
        assert renderer.show_dimensions
        assert renderer.show_offcuts

    @pytest.mark.parametrize("scale", [0, -1.0])
    def test_scale_must_be_positive(self, scale: float) -> None:
        with pytest.raises(ValueError, match="Scale"):
            CutDiagramRenderer(scale=scale)


class TestLabelColors:
    """Tests for label_colors."""

    def test_first_seen_order(self, plan: CuttingPlan) -> None:
        assert label_colors(plan) == {"Door": PIECE_PALETTE[0], "Shelf": PIECE_PALETTE[1]}


class TestRenderSvg:
    """Tests for single-sheet SVG output."""

    def test_valid_xml_with_dimensions(self, door: PlacementOutput) -> None:
        svg = CutDiagramRenderer().render_svg(make_sheet(placements=(door,)))
        root = ET.fromstring(svg)

        assert root.tag == f"{SVG_NS}svg"
        assert root.get("width") == "700.0"
        assert float(root.get("height")) == pytest.approx(2070 * 0.25 + 30)

    def test_piece_label_and_dimensions(
        self, door: PlacementOutput, shelf: PlacementOutput
    ) -> None:
        svg = CutDiagramRenderer().render_svg(make_sheet(placements=(door, shelf)))
        assert ">Door</text>" in svg
        assert "1200 x 800" in svg
        assert "600 x 400 (R)" in svg

    def test_header(self) -> None:
        svg = CutDiagramRenderer().render_svg(make_sheet(stock_label="PB19"), total_sheets=3)
        assert "Sheet 1 of 3 - PB19 (2800x2070 mm)" in svg

    def test_label_escaped(self) -> None:
        piece = PlacementOutput(label="A&B <1>", x=0, y=0, width=1000, height=1000, rotated=False)
        svg = CutDiagramRenderer().render_svg(make_sheet(placements=(piece,)))
        assert "A&amp;B &lt;1&gt;" in svg
        ET.fromstring(svg)

    def test_labels_hidden(self, door: PlacementOutput) -> None:
        svg = CutDiagramRenderer(show_labels=False).render_svg(make_sheet(placements=(door,)))
        assert ">Door</text>" not in svg
        assert "1200 x 800" in svg

    def test_trim_outline(self) -> None:
        renderer = CutDiagramRenderer()
        assert "stroke-dasharray=\"5,5\"" in renderer.render_svg(make_sheet(trim=10))
        assert "stroke-dasharray=\"5,5\"" not in renderer.render_svg(make_sheet())

    def test_offcuts(self) -> None:
        offcut = OffcutOutput(sheet_index=0, x=0, y=0, width=400, height=400)
        svg = CutDiagramRenderer().render_svg(make_sheet(), offcuts=(offcut,))
        assert "Reusable offcuts" in svg

        hidden = CutDiagramRenderer(show_offcuts=False).render_svg(make_sheet(), offcuts=(offcut,))
        assert "Reusable offcuts" not in hidden

    def test_y_axis_points_up(self, door: PlacementOutput) -> None:
        """A piece at y = 0 sits on the bottom edge of the drawn sheet."""
        svg = CutDiagramRenderer().render_svg(make_sheet(placements=(door,)))
        root = ET.fromstring(svg)
        rect = next(r for r in root.iter(f"{SVG_NS}rect") if r.get("width") == "300.0")

        top = float(rect.get("y"))
        assert top == pytest.approx(30 + (2070 - 800) * 0.25)
        assert top + float(rect.get("height")) == pytest.approx(30 + 2070 * 0.25)

    def test_offcut_at_top_of_sheet(self) -> None:
        offcut = OffcutOutput(sheet_index=0, x=0, y=1670, width=400, height=400)
        svg = CutDiagramRenderer().render_svg(make_sheet(), offcuts=(offcut,))
        root = ET.fromstring(svg)
        rect = next(r for r in root.iter(f"{SVG_NS}rect") if r.get("width") == "100.0")
        assert float(rect.get("y")) == pytest.approx(30)

    def test_palette_colors(self, door: PlacementOutput) -> None:
        svg = CutDiagramRenderer().render_svg(
            make_sheet(placements=(door,)), colors={"Door": "#123456"}
        )
        assert 'fill="#123456"' in svg


class TestRenderAllSvg:
    """Tests for multi-sheet SVG output."""

    def test_one_svg_per_sheet(self, plan: CuttingPlan) -> None:
        svgs = CutDiagramRenderer().render_all_svg(plan)
        assert len(svgs) == 2
        assert "Sheet 2 of 2" in svgs[1]
        assert "Reusable offcuts" in svgs[0]
        assert "Reusable offcuts" not in svgs[1]

    def test_combined_is_valid_xml(self, plan: CuttingPlan) -> None:
        svg = CutDiagramRenderer().render_combined_svg(plan)
        root = ET.fromstring(svg)
        groups = root.findall(f"{SVG_NS}g")
        assert len(groups) == 2

    def test_combined_empty(self, empty_plan: CuttingPlan) -> None:
        svg = CutDiagramRenderer().render_combined_svg(empty_plan)
        assert "No sheets to display" in svg
        ET.fromstring(svg)


class TestRenderAscii:
    """Tests for ASCII output."""

    def test_frame_and_width(self, door: PlacementOutput) -> None:
        output = CutDiagramRenderer().render_ascii(make_sheet(placements=(door,)), width=60)
        lines = output.split("\n")

        assert lines[0].startswith("Sheet 1 of 1")
        assert lines[1] == "+" + "-" * 58 + "+"
        assert lines[-1] == lines[1]
        assert all(len(line) == 60 for line in lines[1:])

    def test_piece_drawn(self, door: PlacementOutput, shelf: PlacementOutput) -> None:
        output = CutDiagramRenderer().render_ascii(make_sheet(placements=(door, shelf)))
        assert "Door" in output
        assert "1200x800" in output
        assert "600x400R" in output

    def test_piece_at_origin_drawn_at_bottom(self, door: PlacementOutput) -> None:
        lines = CutDiagramRenderer().render_ascii(make_sheet(placements=(door,))).split("\n")
        grid = lines[2:-1]

        assert grid[0] == "|" + " " * 78 + "|"
        assert grid[-1].startswith("|+-")
        label_row = next(i for i, line in enumerate(grid) if "Door" in line)
        assert label_row > len(grid) // 2

    def test_all_ascii_summary(self, plan: CuttingPlan) -> None:
        output = CutDiagramRenderer().render_all_ascii(plan)
        assert "Sheet 2 of 2" in output
        assert output.endswith("SUMMARY: 2 sheets, 72.5% total waste, 3/3 pieces placed")

    def test_all_ascii_empty(self, empty_plan: CuttingPlan) -> None:
        assert CutDiagramRenderer().render_all_ascii(empty_plan) == "No sheets to display."

"""Tests for the text report formatter and JSON exporter."""

from __future__ import annotations

import dataclasses
import json

import pytest

from panelcut.application.dtos import (
    CuttingPlan,
    OffcutOutput,
    PlacementOutput,
    SheetOutput,
    UnplacedOutput,
)
from panelcut.infrastructure.formatters import CuttingPlanFormatter, JsonExporter


@pytest.fixture
def sheet() -> SheetOutput:
    placements = (
        PlacementOutput(label="Side", x=0, y=0, width=720, height=560, rotated=False),
        PlacementOutput(label="Shelf", x=723, y=0, width=560, height=300, rotated=True),
    )
    return SheetOutput(
        sheet_index=0,
        stock_index=0,
        stock_label="Birch 18",
        width=2440,
        height=1220,
        kerf=3,
        placements=placements,
        used_area=571_200,
        waste_area=2_405_600,
        waste_percent=80.81,
    )


@pytest.fixture
def plan(sheet: SheetOutput) -> CuttingPlan:
    return CuttingPlan(
        sheets=(sheet,),
        unplaced=(
            UnplacedOutput(
                label="Top", count=2, reason="no_fitting_stock", width=3000, height=600
            ),
        ),
        total_waste_percent=80.81,
        sheet_count=1,
        total_pieces=4,
        placed_pieces=2,
        efficiency_percent=19.19,
        reusable_offcuts=(OffcutOutput(sheet_index=0, x=0, y=563, width=2440, height=657),),
        total_cost=62.5,
        strategy="by_area",
        iterations=35,
    )


class TestCuttingPlanFormatter:
    """Tests for CuttingPlanFormatter."""

    def test_summary(self, plan: CuttingPlan) -> None:
        report = CuttingPlanFormatter().format(plan)

        assert report.startswith("CUTTING PLAN")
        assert "Sheets used:     1" in report
        assert "Pieces placed:   2 / 4" in report
        assert "Efficiency:      19.19%" in report
        assert "Waste:           80.81%" in report
        assert "Total cost:      62.50" in report
        assert "Best ordering:   by_area (35 iterations)" in report

    def test_summary_names_placement_heuristic(self, plan: CuttingPlan) -> None:
        plan = dataclasses.replace(plan, placement_heuristic="bottom_left")
        report = CuttingPlanFormatter().format(plan)
        assert "Best ordering:   by_area with bottom_left placement (35 iterations)" in report

    def test_sheet_section(self, plan: CuttingPlan) -> None:
        report = CuttingPlanFormatter().format(plan)
        assert "SHEET 1 of 1: 2440 x 1220 mm (Birch 18)" in report
        assert "2 pieces, used 571200 mm²" in report

    def test_sheet_rows(self, sheet: SheetOutput) -> None:
        table = CuttingPlanFormatter().format_sheet(sheet).split("\n")
        side_row = next(line for line in table if line.startswith("Side"))
        shelf_row = next(line for line in table if line.startswith("Shelf"))
        assert side_row.endswith("no")
        assert shelf_row.endswith("yes")
        assert "723" in shelf_row

    def test_unplaced_section(self, plan: CuttingPlan) -> None:
        report = CuttingPlanFormatter().format(plan)
        assert "UNPLACED PIECES (2)" in report
        assert "(no fitting stock)" in report
        assert "x2" in report

    def test_offcuts_section(self, plan: CuttingPlan) -> None:
        report = CuttingPlanFormatter().format(plan)
        assert "REUSABLE OFFCUTS (1)" in report
        assert "Sheet 1: 2440 x 657 mm at (0, 563)" in report

    def test_optional_sections_omitted(self) -> None:
        plan = CuttingPlan(
            sheets=(),
            unplaced=(),
            total_waste_percent=0.0,
            sheet_count=0,
            total_pieces=0,
            placed_pieces=0,
            efficiency_percent=0.0,
        )
        report = CuttingPlanFormatter().format(plan)
        assert "Total cost" not in report
        assert "Best ordering" not in report
        assert "UNPLACED" not in report
        assert "REUSABLE OFFCUTS" not in report


class TestJsonExporter:
    """Tests for JsonExporter."""

    def test_camel_case_output(self, plan: CuttingPlan) -> None:
        data = json.loads(JsonExporter().export(plan))

        assert data["sheetCount"] == 1
        assert data["totalWastePercent"] == 80.81
        assert data["totalCost"] == 62.5
        assert data["sheets"][0]["stockLabel"] == "Birch 18"
        assert data["sheets"][0]["placements"][1]["rotated"] is True
        assert data["unplaced"][0]["reason"] == "no_fitting_stock"
        assert data["reusableOffcuts"][0]["sheetIndex"] == 0
        assert data["strategy"] == "by_area"
        assert data["placementHeuristic"] == ""

    def test_indent(self, plan: CuttingPlan) -> None:
        assert "\n" not in JsonExporter(indent=None).export(plan)
        assert "\n  " in JsonExporter().export(plan)

"""Output formatters and exporters for cutting plans."""

from __future__ import annotations

import json

from panelcut.application.dtos import CuttingPlan, SheetOutput


class CuttingPlanFormatter:
    """Formats a cutting plan as a plain-text report.

    The report has a summary block, one placement table per sheet, and
    sections for unplaced pieces and reusable offcuts when present.
    """

    def format(self, plan: CuttingPlan) -> str:
        """Format the complete report."""
        lines = [
            "CUTTING PLAN",
            "=" * 70,
            f"Sheets used:     {plan.sheet_count}",
            f"Pieces placed:   {plan.placed_pieces} / {plan.total_pieces}",
            f"Efficiency:      {plan.efficiency_percent:.2f}%",
            f"Waste:           {plan.total_waste_percent:.2f}%",
        ]
        if plan.total_cost is not None:
            lines.append(f"Total cost:      {plan.total_cost:.2f}")
        if plan.strategy:
            best = plan.strategy
            if plan.placement_heuristic:
                best = f"{best} with {plan.placement_heuristic} placement"
            lines.append(f"Best ordering:   {best} ({plan.iterations} iterations)")

        for sheet in plan.sheets:
            lines.append("")
            lines.append(self.format_sheet(sheet, len(plan.sheets)))

        if plan.unplaced:
            lines.append("")
            lines.append(self.format_unplaced(plan))

        if plan.reusable_offcuts:
            lines.append("")
            lines.append(f"REUSABLE OFFCUTS ({len(plan.reusable_offcuts)})")
            lines.append("-" * 70)
            for offcut in plan.reusable_offcuts:
                lines.append(
                    f"  Sheet {offcut.sheet_index + 1}: {offcut.width} x {offcut.height} mm "
                    f"at ({offcut.x}, {offcut.y})"
                )

        return "\n".join(lines)

    def format_sheet(self, sheet: SheetOutput, total_sheets: int = 1) -> str:
        """Format the placement table of one sheet."""
        title = f"SHEET {sheet.sheet_index + 1} of {total_sheets}: {sheet.width} x {sheet.height} mm"
        if sheet.stock_label:
            title += f" ({sheet.stock_label})"

        lines = [
            title,
            "-" * 70,
            f"{'Piece':<24} {'X':>6} {'Y':>6} {'Width':>7} {'Height':>7}  {'Rotated'}",
        ]
        for placement in sheet.placements:
            lines.append(
                f"{placement.label:<24} {placement.x:>6} {placement.y:>6} "
                f"{placement.width:>7} {placement.height:>7}  "
                f"{'yes' if placement.rotated else 'no'}"
            )
        lines.append("-" * 70)
        lines.append(
            f"{len(sheet.placements)} pieces, used {sheet.used_area} mm², "
            f"waste {sheet.waste_area} mm² ({sheet.waste_percent:.2f}%)"
        )
        return "\n".join(lines)

    def format_unplaced(self, plan: CuttingPlan) -> str:
        """Format the unplaced pieces report."""
        lines = [
            f"UNPLACED PIECES ({plan.unplaced_pieces})",
            "-" * 70,
        ]
        for entry in plan.unplaced:
            reason = entry.reason.replace("_", " ")
            lines.append(
                f"  {entry.label:<24} {entry.width} x {entry.height} mm  "
                f"x{entry.count}  ({reason})"
            )
        return "\n".join(lines)


class JsonExporter:
    """Exports cutting plans as JSON."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def export(self, plan: CuttingPlan) -> str:
        """Export the plan as a JSON string with camelCase keys."""
        return json.dumps(plan.to_dict(), indent=self.indent)

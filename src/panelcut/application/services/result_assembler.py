"""Result assembler service.

Converts the optimizer's winning Solution into the caller-facing
CuttingPlan. Pure transformation; no packing decisions are made here.
"""

from __future__ import annotations

from typing import Sequence

from panelcut.application.dtos import (
    CuttingPlan,
    OffcutOutput,
    PlacementOutput,
    SheetOutput,
    UnplacedOutput,
)
from panelcut.domain.geometry import overlaps
from panelcut.domain.value_objects import Rect
from panelcut.infrastructure.bin_packing import SheetLayout, Solution

# Offcut thresholds used by the shop: 30 cm long, 10 cm wide
DEFAULT_MIN_OFFCUT_LENGTH = 300
DEFAULT_MIN_OFFCUT_WIDTH = 100


class ResultAssemblerService:
    """Service for assembling CuttingPlan DTOs from solutions.

    Attributes:
        min_offcut_length: Minimum long side of a reusable offcut in mm.
        min_offcut_width: Minimum short side of a reusable offcut in mm.
    """

    def __init__(
        self,
        min_offcut_length: int = DEFAULT_MIN_OFFCUT_LENGTH,
        min_offcut_width: int = DEFAULT_MIN_OFFCUT_WIDTH,
    ) -> None:
        self.min_offcut_length = min_offcut_length
        self.min_offcut_width = min_offcut_width

    def assemble(self, solution: Solution, iterations: int = 0) -> CuttingPlan:
        """Assemble the complete plan.

        Args:
            solution: Best solution from the optimizer.
            iterations: Number of optimizer iterations that ran.

        Returns:
            CuttingPlan with per-sheet placements, the grouped unplaced
            report and global statistics.
        """
        sheets = tuple(self._assemble_sheet(layout) for layout in solution.sheets)
        placed = solution.placed_count
        total = placed + len(solution.unplaced)

        sheet_area = solution.sheet_area
        efficiency = solution.used_area / sheet_area * 100 if sheet_area else 0.0

        offcuts: list[OffcutOutput] = []
        for layout in solution.sheets:
            offcuts.extend(self.extract_offcuts(layout))

        return CuttingPlan(
            sheets=sheets,
            unplaced=self._group_unplaced(solution),
            total_waste_percent=round(solution.waste_percentage, 2),
            sheet_count=solution.sheet_count,
            total_pieces=total,
            placed_pieces=placed,
            efficiency_percent=round(efficiency, 2),
            reusable_offcuts=tuple(offcuts),
            total_cost=self._total_cost(solution.sheets),
            strategy=solution.strategy,
            placement_heuristic=solution.heuristic,
            iterations=iterations,
        )

    def extract_offcuts(self, layout: SheetLayout) -> list[OffcutOutput]:
        """Pick reusable offcuts from a sheet's free rectangles.

        Free rectangles may overlap each other, so they are taken largest
        first and any rectangle overlapping an already chosen one is
        skipped.

        Args:
            layout: Sheet layout with remaining free rectangles.

        Returns:
            Non-overlapping offcuts meeting the minimum size, in either
            orientation.
        """
        candidates = [
            rect
            for rect in layout.free_rects
            if max(rect.width, rect.height) >= self.min_offcut_length
            and min(rect.width, rect.height) >= self.min_offcut_width
        ]
        candidates.sort(key=lambda r: (-r.area, r.y, r.x))

        chosen: list[Rect] = []
        for rect in candidates:
            if any(overlaps(rect, other) for other in chosen):
                continue
            chosen.append(rect)

        return [
            OffcutOutput(
                sheet_index=layout.sheet_index,
                x=rect.x,
                y=rect.y,
                width=rect.width,
                height=rect.height,
            )
            for rect in chosen
        ]

    def _assemble_sheet(self, layout: SheetLayout) -> SheetOutput:
        stock = layout.stock
        return SheetOutput(
            sheet_index=layout.sheet_index,
            stock_index=layout.stock_index,
            stock_label=stock.label,
            width=stock.width,
            height=stock.height,
            kerf=stock.kerf,
            placements=tuple(
                PlacementOutput(
                    label=p.label,
                    x=p.x,
                    y=p.y,
                    width=p.placed_width,
                    height=p.placed_height,
                    rotated=p.rotated,
                )
                for p in layout.placements
            ),
            used_area=layout.used_area,
            waste_area=layout.waste_area,
            waste_percent=round(layout.waste_percentage, 2),
            trim=stock.trim,
            grain_direction=stock.grain_direction.value,
        )

    def _group_unplaced(self, solution: Solution) -> tuple[UnplacedOutput, ...]:
        """Group unplaced unit pieces by label and reason, first-seen order."""
        groups: dict[tuple[str, str], list] = {}
        for entry in solution.unplaced:
            key = (entry.piece.label, entry.reason.value)
            groups.setdefault(key, []).append(entry.piece)

        return tuple(
            UnplacedOutput(
                label=label,
                count=len(pieces),
                reason=reason,
                width=pieces[0].width,
                height=pieces[0].height,
            )
            for (label, reason), pieces in groups.items()
        )

    def _total_cost(self, sheets: Sequence[SheetLayout]) -> float | None:
        """Sum sheet prices when every used stock type carries one."""
        if not sheets:
            return 0.0
        if any(sheet.stock.price_per_sheet is None for sheet in sheets):
            return None
        return round(sum(sheet.stock.price_per_sheet or 0.0 for sheet in sheets), 2)

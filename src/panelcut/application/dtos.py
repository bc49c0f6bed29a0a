"""Data Transfer Objects for the caller-facing cutting plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PlacementOutput:
    """One placed piece in absolute sheet coordinates (mm)."""

    label: str
    x: int
    y: int
    width: int
    height: int
    rotated: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotated": self.rotated,
        }


@dataclass(frozen=True)
class OffcutOutput:
    """A leftover free rectangle large enough to keep for later jobs."""

    sheet_index: int
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheetIndex": self.sheet_index,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class SheetOutput:
    """One opened stock sheet in the plan."""

    sheet_index: int
    stock_index: int
    stock_label: str
    width: int
    height: int
    kerf: int
    placements: tuple[PlacementOutput, ...]
    used_area: int
    waste_area: int
    waste_percent: float
    trim: int = 0
    grain_direction: str = "none"

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheetIndex": self.sheet_index,
            "stockIndex": self.stock_index,
            "stockLabel": self.stock_label,
            "width": self.width,
            "height": self.height,
            "kerf": self.kerf,
            "trim": self.trim,
            "grainDirection": self.grain_direction,
            "placements": [p.to_dict() for p in self.placements],
            "usedArea": self.used_area,
            "wasteArea": self.waste_area,
            "wastePercent": self.waste_percent,
        }


@dataclass(frozen=True)
class UnplacedOutput:
    """Pieces of one label that could not be placed, grouped by reason."""

    label: str
    count: int
    reason: str
    width: int
    height: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "count": self.count,
            "reason": self.reason,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class CuttingPlan:
    """Complete cutting plan handed to the caller.

    Attributes:
        sheets: Opened sheets with their placements.
        unplaced: Pieces that could not be placed, grouped by label.
        total_waste_percent: Waste across all opened sheets.
        sheet_count: Number of opened sheets.
        total_pieces: Number of requested unit pieces.
        placed_pieces: Number of placed unit pieces.
        efficiency_percent: Share of opened sheet area covered by pieces.
        reusable_offcuts: Leftover rectangles worth keeping.
        total_cost: Sum of sheet prices, None if any used stock has no price.
        strategy: Name of the ordering that produced the plan.
        placement_heuristic: Name of the placement heuristic that produced the plan.
        iterations: Number of optimizer iterations that ran.
    """

    sheets: tuple[SheetOutput, ...]
    unplaced: tuple[UnplacedOutput, ...]
    total_waste_percent: float
    sheet_count: int
    total_pieces: int
    placed_pieces: int
    efficiency_percent: float
    reusable_offcuts: tuple[OffcutOutput, ...] = field(default_factory=tuple)
    total_cost: float | None = None
    strategy: str = ""
    placement_heuristic: str = ""
    iterations: int = 0

    @property
    def is_complete(self) -> bool:
        """True when every requested piece was placed."""
        return not self.unplaced

    @property
    def unplaced_pieces(self) -> int:
        return sum(u.count for u in self.unplaced)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON output shape (camelCase keys)."""
        return {
            "sheets": [s.to_dict() for s in self.sheets],
            "unplaced": [u.to_dict() for u in self.unplaced],
            "totalWastePercent": self.total_waste_percent,
            "sheetCount": self.sheet_count,
            "totalPieces": self.total_pieces,
            "placedPieces": self.placed_pieces,
            "efficiencyPercent": self.efficiency_percent,
            "reusableOffcuts": [o.to_dict() for o in self.reusable_offcuts],
            "totalCost": self.total_cost,
            "strategy": self.strategy,
            "placementHeuristic": self.placement_heuristic,
            "iterations": self.iterations,
        }

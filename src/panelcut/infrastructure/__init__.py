"""Infrastructure layer - packing engine, renderers and formatters."""

from .bin_packing import (
    PLACEMENT_HEURISTICS,
    STOCK_SELECTORS,
    BestAreaFit,
    BestShortSideFit,
    BestUtilizationSelector,
    BottomLeft,
    DeclaredOrderSelector,
    MultiSheetAllocator,
    Placement,
    PlacementHeuristic,
    SheetLayout,
    SheetPackResult,
    SingleSheetPacker,
    Solution,
    StockSelector,
    UnplacedPiece,
)
from .cut_diagram_renderer import CutDiagramRenderer
from .formatters import CuttingPlanFormatter, JsonExporter

__all__ = [
    # Bin packing
    "PLACEMENT_HEURISTICS",
    "STOCK_SELECTORS",
    "BestAreaFit",
    "BestShortSideFit",
    "BestUtilizationSelector",
    "BottomLeft",
    "DeclaredOrderSelector",
    "MultiSheetAllocator",
    "Placement",
    "PlacementHeuristic",
    "SheetLayout",
    "SheetPackResult",
    "SingleSheetPacker",
    "Solution",
    "StockSelector",
    "UnplacedPiece",
    # Output
    "CutDiagramRenderer",
    "CuttingPlanFormatter",
    "JsonExporter",
]

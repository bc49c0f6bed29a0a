"""Application layer - use cases and orchestration."""

from typing import Any

from .commands import OptimizeCuttingCommand
from .config import OptimizationRequestSchema
from .dtos import (
    CuttingPlan,
    OffcutOutput,
    PlacementOutput,
    SheetOutput,
    UnplacedOutput,
)
from .optimizer import IterativeOptimizer, OptimizationRun, OptimizerOptions
from .result import Err, Ok, Result


def optimize(
    request: dict[str, Any] | OptimizationRequestSchema,
) -> Ok[CuttingPlan] | Err:
    """Compute a cutting plan for a request.

    Args:
        request: Raw request dictionary (as parsed from JSON) or a
            validated OptimizationRequestSchema.

    Returns:
        Ok wrapping the CuttingPlan, or Err describing why the request
        was rejected.

    Example:
        >>> result = optimize({
        ...     "pieces": [{"width": 600, "height": 400, "quantity": 4}],
        ...     "stock": [{"width": 2800, "height": 2070, "kerf": 3}],
        ... })
        >>> result.unwrap().sheet_count
        1
    """
    return OptimizeCuttingCommand().execute_request(request)


__all__ = [
    "CuttingPlan",
    "Err",
    "IterativeOptimizer",
    "Ok",
    "OffcutOutput",
    "OptimizationRun",
    "OptimizeCuttingCommand",
    "OptimizerOptions",
    "PlacementOutput",
    "Result",
    "SheetOutput",
    "UnplacedOutput",
    "optimize",
]

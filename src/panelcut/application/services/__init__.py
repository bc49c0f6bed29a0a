"""Application services for the cutting optimizer.

This package contains application-level services that turn optimizer
output into caller-facing results:

- ResultAssemblerService: Builds CuttingPlan DTOs and extracts reusable offcuts
"""

from .result_assembler import (
    DEFAULT_MIN_OFFCUT_LENGTH,
    DEFAULT_MIN_OFFCUT_WIDTH,
    ResultAssemblerService,
)

__all__ = [
    "DEFAULT_MIN_OFFCUT_LENGTH",
    "DEFAULT_MIN_OFFCUT_WIDTH",
    "ResultAssemblerService",
]

"""FastAPI dependency injection for optimization services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from panelcut.application.commands import OptimizeCuttingCommand
from panelcut.infrastructure.formatters import CuttingPlanFormatter


@lru_cache(maxsize=1)
def get_optimize_command() -> OptimizeCuttingCommand:
    """Get cached OptimizeCuttingCommand instance."""
    return OptimizeCuttingCommand()


def get_plan_formatter() -> CuttingPlanFormatter:
    """Dependency for CuttingPlanFormatter."""
    return CuttingPlanFormatter()


# Type aliases for cleaner endpoint signatures
OptimizeCommandDep = Annotated[OptimizeCuttingCommand, Depends(get_optimize_command)]
PlanFormatterDep = Annotated[CuttingPlanFormatter, Depends(get_plan_formatter)]

"""Cutting optimization endpoints."""

from typing import Any

from fastapi import APIRouter, Body

from panelcut.application.commands import OptimizeCuttingCommand
from panelcut.application.config import OptionsSchema, StockSchema
from panelcut.application.dtos import CuttingPlan
from panelcut.web.dependencies import OptimizeCommandDep, PlanFormatterDep
from panelcut.web.exceptions import OptimizationError
from panelcut.web.schemas.responses import (
    CuttingPlanSchema,
    DefaultParamsSchema,
    OptimizationResponseSchema,
    ReportResponseSchema,
)

router = APIRouter(prefix="/optimization", tags=["optimization"])


def _run(command: OptimizeCuttingCommand, request: dict[str, Any]) -> CuttingPlan:
    result = command.execute_request(request)
    if not result.is_ok:
        raise OptimizationError(result.message, result.kind, result.details)
    return result.value


def _outcome_message(plan: CuttingPlan) -> str:
    if plan.is_complete:
        return (
            f"All {plan.total_pieces} pieces placed on {plan.sheet_count} "
            f"sheet{'s' if plan.sheet_count != 1 else ''}"
        )
    return (
        f"{plan.placed_pieces} of {plan.total_pieces} pieces placed; "
        f"{plan.unplaced_pieces} could not be placed"
    )


@router.post("/calculate", response_model=OptimizationResponseSchema)
def calculate_plan(
    command: OptimizeCommandDep,
    request: dict[str, Any] = Body(..., description="Optimization request JSON"),
) -> OptimizationResponseSchema:
    """Compute a cutting plan.

    Args:
        command: Injected optimization command.
        request: Pieces, stock catalogue and options.

    Returns:
        Outcome flag, message and the plan. A partial placement is still
        a 200 response with ``success`` false.

    Raises:
        OptimizationError: If the request is invalid (422).
    """
    plan = _run(command, request)
    return OptimizationResponseSchema(
        success=plan.is_complete,
        message=_outcome_message(plan),
        plan=CuttingPlanSchema.model_validate(plan.to_dict()),
    )


@router.get("/params/default", response_model=DefaultParamsSchema)
async def get_default_params() -> DefaultParamsSchema:
    """Return the default optimizer options and stock sheet fields."""
    # Placeholder dimensions; only the defaulted fields are reported
    stock = StockSchema(width=1, height=1)
    return DefaultParamsSchema(
        options=OptionsSchema().model_dump(mode="json", by_alias=True),
        stock=stock.model_dump(mode="json", by_alias=True, exclude={"width", "height"}),
    )


@router.post("/report", response_model=ReportResponseSchema)
def generate_report(
    command: OptimizeCommandDep,
    formatter: PlanFormatterDep,
    request: dict[str, Any] = Body(..., description="Optimization request JSON"),
) -> ReportResponseSchema:
    """Compute a cutting plan and return it as a plain-text report."""
    plan = _run(command, request)
    return ReportResponseSchema(report=formatter.format(plan))

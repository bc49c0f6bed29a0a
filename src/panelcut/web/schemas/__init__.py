"""Pydantic schemas for the REST API."""

from panelcut.web.schemas.responses import (
    CuttingPlanSchema,
    DefaultParamsSchema,
    ErrorResponseSchema,
    OffcutSchema,
    OptimizationResponseSchema,
    PlacementSchema,
    ReportResponseSchema,
    SheetSchema,
    UnplacedSchema,
)

__all__ = [
    "CuttingPlanSchema",
    "DefaultParamsSchema",
    "ErrorResponseSchema",
    "OffcutSchema",
    "OptimizationResponseSchema",
    "PlacementSchema",
    "ReportResponseSchema",
    "SheetSchema",
    "UnplacedSchema",
]

"""Pydantic response schemas for the REST API.

Field names are snake_case in Python and camelCase on the wire, matching
``CuttingPlan.to_dict()``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlacementSchema(_CamelModel):
    """Placed piece in absolute sheet coordinates."""

    label: str = Field(..., description="Piece label")
    x: int = Field(..., description="Offset from the sheet origin along x in mm")
    y: int = Field(..., description="Offset from the sheet origin along y in mm")
    width: int = Field(..., description="Placed width in mm")
    height: int = Field(..., description="Placed height in mm")
    rotated: bool = Field(..., description="Whether the piece was rotated 90°")


class SheetSchema(_CamelModel):
    """One opened stock sheet."""

    sheet_index: int = Field(..., description="Position of the sheet in the plan")
    stock_index: int = Field(..., description="Index of the stock type in the request")
    stock_label: str = Field(default="", description="Stock type label")
    width: int = Field(..., description="Sheet width in mm")
    height: int = Field(..., description="Sheet height in mm")
    kerf: int = Field(..., description="Saw kerf in mm")
    trim: int = Field(default=0, description="Edge trim in mm")
    grain_direction: str = Field(default="none", description="Sheet grain direction")
    placements: list[PlacementSchema] = Field(default_factory=list)
    used_area: int = Field(..., description="Area covered by pieces in mm²")
    waste_area: int = Field(..., description="Sheet area not covered by pieces in mm²")
    waste_percent: float = Field(..., description="Waste share of the sheet area")


class UnplacedSchema(_CamelModel):
    """Pieces of one label that could not be placed."""

    label: str
    count: int
    reason: str = Field(..., description="no_fitting_stock or stock_exhausted")
    width: int
    height: int


class OffcutSchema(_CamelModel):
    """Reusable leftover rectangle."""

    sheet_index: int
    x: int
    y: int
    width: int
    height: int


class CuttingPlanSchema(_CamelModel):
    """Complete cutting plan."""

    sheets: list[SheetSchema] = Field(default_factory=list)
    unplaced: list[UnplacedSchema] = Field(default_factory=list)
    total_waste_percent: float
    sheet_count: int
    total_pieces: int
    placed_pieces: int
    efficiency_percent: float
    reusable_offcuts: list[OffcutSchema] = Field(default_factory=list)
    total_cost: float | None = None
    strategy: str = ""
    placement_heuristic: str = ""
    iterations: int = 0


class OptimizationResponseSchema(BaseModel):
    """Response for plan calculation."""

    success: bool = Field(..., description="True when every piece was placed")
    message: str = Field(..., description="Human-readable outcome")
    plan: CuttingPlanSchema


class ReportResponseSchema(BaseModel):
    """Plain-text report of a cutting plan."""

    report: str


class DefaultParamsSchema(BaseModel):
    """Default request parameters."""

    options: dict[str, Any] = Field(..., description="Default optimizer options")
    stock: dict[str, Any] = Field(..., description="Default stock sheet fields")


class ErrorResponseSchema(BaseModel):
    """Error response body."""

    error: str
    error_type: str
    details: list[dict[str, Any]] | None = None

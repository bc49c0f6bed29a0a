"""Pydantic schemas for optimization requests.

The request format mirrors the JSON accepted by the web API and the CLI.
Field names are snake_case; the camelCase names used by the storefront
are accepted as aliases.
"""

from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

from panelcut.domain.value_objects import GrainDirection


class StockSelectionConfig(str, Enum):
    """Stock selection policy for new sheets."""

    DECLARED_ORDER = "declared_order"
    BEST_UTILIZATION = "best_utilization"


class PlacementHeuristicConfig(str, Enum):
    """Placement heuristic that scores candidate positions on a sheet."""

    BEST_AREA_FIT = "best_area_fit"
    BEST_SHORT_SIDE_FIT = "best_short_side_fit"
    BOTTOM_LEFT = "bottom_left"


class PieceSchema(BaseModel):
    """A requested piece.

    Attributes:
        width: Finished width in mm.
        height: Finished height in mm.
        quantity: Number of identical pieces.
        grain_locked: Keep orientation relative to the sheet grain.
        label: Identifier used to trace placements back to the request.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    width: int = Field(gt=0, description="Piece width in mm")
    height: int = Field(gt=0, description="Piece height in mm")
    quantity: int = Field(default=1, ge=1, description="Number of pieces")
    grain_locked: bool = Field(
        default=False,
        alias="grainLocked",
        description="Forbid rotation on grained sheets",
    )
    label: str = Field(default="", max_length=200, description="Piece label")


class StockSchema(BaseModel):
    """A stock sheet type.

    Attributes:
        width: Sheet width in mm.
        height: Sheet height in mm.
        kerf: Saw blade width in mm.
        grain_direction: Grain axis of the sheet.
        quantity_available: Sheets available, None for unbounded.
        trim: Unusable edge margin in mm.
        price_per_sheet: Optional sheet price.
        label: Optional stock name.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    width: int = Field(gt=0, description="Sheet width in mm")
    height: int = Field(gt=0, description="Sheet height in mm")
    kerf: int = Field(default=4, ge=0, le=20, description="Saw kerf width in mm")
    grain_direction: GrainDirection = Field(
        default=GrainDirection.NONE,
        alias="grainDirection",
        description="Grain direction of the sheet",
    )
    quantity_available: int | None = Field(
        default=None,
        ge=0,
        alias="quantityAvailable",
        description="Sheets available (null for unbounded)",
    )
    trim: int = Field(default=0, ge=0, description="Edge trim in mm")
    price_per_sheet: float | None = Field(
        default=None,
        ge=0,
        alias="pricePerSheet",
        description="Price of one sheet",
    )
    label: str = Field(default="", max_length=200, description="Stock label")

    @model_validator(mode="after")
    def validate_trim(self) -> "StockSchema":
        """Validate trim leaves a usable area."""
        if 2 * self.trim >= min(self.width, self.height):
            raise ValueError("Trim leaves no usable sheet area")
        return self


class OptionsSchema(BaseModel):
    """Optimizer options.

    Attributes:
        max_iterations: Cap on total iterations (deterministic runs always complete).
        time_budget_ms: Wall-clock budget for random iterations.
        random_seed: Seed for reproducible random iterations.
        random_iterations: Number of random orderings to try.
        workers: Worker threads for iterations.
        allow_rotation: Global rotation switch.
        strict_validation: Reject pieces that fit no stock before packing.
        stock_selection: Stock selection policy for new sheets.
        placement_heuristic: Only placement heuristic to try. Omit to try all.
        min_offcut_length: Minimum long side of a reusable offcut in mm.
        min_offcut_width: Minimum short side of a reusable offcut in mm.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    max_iterations: int | None = Field(default=None, ge=1, alias="maxIterations")
    time_budget_ms: int | None = Field(default=None, ge=0, alias="timeBudgetMs")
    random_seed: int | None = Field(default=None, alias="randomSeed")
    random_iterations: int = Field(default=30, ge=0, le=10000, alias="randomIterations")
    workers: int = Field(default=1, ge=1, le=64)
    allow_rotation: bool = Field(default=True, alias="allowRotation")
    strict_validation: bool = Field(default=True, alias="strictValidation")
    stock_selection: StockSelectionConfig = Field(
        default=StockSelectionConfig.DECLARED_ORDER, alias="stockSelection"
    )
    placement_heuristic: PlacementHeuristicConfig | None = Field(
        default=None, alias="placementHeuristic"
    )
    min_offcut_length: int = Field(default=300, ge=0, alias="minOffcutLength")
    min_offcut_width: int = Field(default=100, ge=0, alias="minOffcutWidth")


class OptimizationRequestSchema(BaseModel):
    """Root request model: pieces, stock catalogue and options.

    Empty piece or stock lists pass schema validation; the normalizer
    reports them as invalid_piece and empty_stock errors.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    pieces: list[PieceSchema] = Field(default_factory=list)
    stock: list[StockSchema] = Field(default_factory=list)
    options: OptionsSchema = Field(default_factory=OptionsSchema)


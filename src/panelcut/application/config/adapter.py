"""Adapter to convert validated request schemas into domain objects.

The Pydantic schema is the boundary format shared by the CLI and the web
API. The optimizer core only sees frozen domain dataclasses, so every
entry point goes through ``config_to_domain`` before packing.
"""

from panelcut.application.config.schema import (
    OptimizationRequestSchema,
    OptionsSchema,
    PieceSchema,
    StockSchema,
)
from panelcut.application.optimizer import OptimizerOptions
from panelcut.domain.value_objects import PieceRequest, StockSheet


def config_to_domain(
    config: OptimizationRequestSchema,
) -> tuple[list[PieceRequest], list[StockSheet], OptimizerOptions]:
    """Convert an OptimizationRequestSchema to domain inputs.

    Args:
        config: A validated OptimizationRequestSchema instance

    Returns:
        A tuple of (piece requests, stock catalogue, optimizer options)
        ready for OptimizeCuttingCommand.

    Example:
        >>> config = load_config(Path("kitchen-job.json"))
        >>> requests, stock, options = config_to_domain(config)
    """
    requests = [
        _piece_to_domain(piece, index) for index, piece in enumerate(config.pieces)
    ]
    stock = [_stock_to_domain(sheet) for sheet in config.stock]
    return requests, stock, config_to_options(config.options)


def config_to_options(config: OptionsSchema) -> OptimizerOptions:
    """Convert request options to OptimizerOptions."""
    return OptimizerOptions(
        random_iterations=config.random_iterations,
        max_iterations=config.max_iterations,
        time_budget_ms=config.time_budget_ms,
        random_seed=config.random_seed,
        workers=config.workers,
        allow_rotation=config.allow_rotation,
        stock_selection=config.stock_selection.value,
        placement_heuristic=(
            config.placement_heuristic.value if config.placement_heuristic else None
        ),
    )


def _piece_to_domain(piece: PieceSchema, index: int) -> PieceRequest:
    # Unlabelled pieces get a positional label so they stay traceable
    label = piece.label or f"piece-{index + 1}"
    return PieceRequest(
        width=piece.width,
        height=piece.height,
        quantity=piece.quantity,
        label=label,
        grain_locked=piece.grain_locked,
    )


def _stock_to_domain(sheet: StockSchema) -> StockSheet:
    return StockSheet(
        width=sheet.width,
        height=sheet.height,
        kerf=sheet.kerf,
        grain_direction=sheet.grain_direction,
        quantity_available=sheet.quantity_available,
        trim=sheet.trim,
        price_per_sheet=sheet.price_per_sheet,
        label=sheet.label,
    )

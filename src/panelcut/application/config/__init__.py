"""Request schema and loading system for cutting optimization jobs.

This package provides JSON-based request loading and validation. It
includes Pydantic models for schema validation, a loader with
comprehensive error handling, and the adapter that turns a validated
request into domain objects.

Public API:
    - OptimizationRequestSchema: Root request model
    - PieceSchema: Requested piece model
    - StockSchema: Stock sheet type model
    - OptionsSchema: Optimizer options model
    - StockSelectionConfig: Stock selection policy enum
    - PlacementHeuristicConfig: Placement heuristic enum
    - load_config: Load a request from a JSON file
    - load_config_from_dict: Load a request from a dictionary
    - ConfigError: Exception for request loading errors
    - config_to_domain: Convert a request to domain objects
    - config_to_options: Convert request options to OptimizerOptions

Example:
    >>> from pathlib import Path
    >>> from panelcut.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     request = load_config(Path("kitchen-job.json"))
    ...     print(f"{len(request.pieces)} piece rows, {len(request.stock)} stock types")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from panelcut.application.config.adapter import config_to_domain, config_to_options
from panelcut.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from panelcut.application.config.schema import (
    OptimizationRequestSchema,
    OptionsSchema,
    PieceSchema,
    PlacementHeuristicConfig,
    StockSchema,
    StockSelectionConfig,
)

__all__ = [
    # Schema models
    "OptimizationRequestSchema",
    "OptionsSchema",
    "PieceSchema",
    "PlacementHeuristicConfig",
    "StockSchema",
    "StockSelectionConfig",
    # Loader
    "ConfigError",
    "load_config",
    "load_config_from_dict",
    # Adapter
    "config_to_domain",
    "config_to_options",
]

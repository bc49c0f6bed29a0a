"""Domain exceptions for cutting optimization.

Validation errors are raised eagerly by the piece normalizer, before any
packing work starts. A piece that merely does not fit on one particular
sheet is never an error; it surfaces as an unplaced entry in the plan.
"""

from __future__ import annotations

from typing import Any


class PanelCutError(Exception):
    """Base exception for cutting optimization errors.

    Attributes:
        message: Human-readable error message.
        error_type: Machine-readable error category.
        details: Additional structured details for API consumers.
    """

    error_type: str = "panelcut"

    def __init__(
        self,
        message: str,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidPieceError(PanelCutError):
    """Raised when a piece request is invalid or can never be placed.

    Covers non-positive dimensions or quantities, and pieces that fit no
    stock type in any orientation their grain lock allows.

    Attributes:
        pieces: Labels of the offending piece requests.
    """

    error_type = "invalid_piece"

    def __init__(
        self,
        message: str,
        pieces: list[str] | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.pieces = pieces or []
        super().__init__(message, details)


class EmptyStockError(PanelCutError):
    """Raised when no stock types are supplied or all have zero quantity."""

    error_type = "empty_stock"

"""Piece catalog normalizer.

Expands piece requests into individual unit pieces and validates them
against the stock catalogue before any packing work starts.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .exceptions import EmptyStockError, InvalidPieceError
from .value_objects import PieceRequest, StockSheet, UnitPiece

logger = logging.getLogger(__name__)


def rotation_allowed(
    piece: UnitPiece | PieceRequest,
    stock: StockSheet,
    allow_rotation: bool = True,
) -> bool:
    """Check whether a piece may be turned 90 degrees on a stock sheet.

    A grain-locked piece keeps its orientation on a grained sheet. On a
    sheet without grain there is nothing to align with, so the lock does
    not apply.

    Args:
        piece: The piece (or request) to check.
        stock: The stock sheet the piece would be placed on.
        allow_rotation: Global rotation switch from the optimizer options.

    Returns:
        True if the rotated orientation may be tried.
    """
    if not allow_rotation:
        return False
    if piece.width == piece.height:
        # Rotating a square changes nothing
        return False
    if piece.grain_locked and stock.has_grain:
        return False
    return True


def fits_stock(width: int, height: int, stock: StockSheet, rotatable: bool) -> bool:
    """Check whether a piece fits an empty sheet's usable area.

    Kerf is charged on trailing edges and clipped at the sheet edge, so a
    piece as large as the usable area still fits.
    """
    if width <= stock.usable_width and height <= stock.usable_height:
        return True
    if rotatable:
        return height <= stock.usable_width and width <= stock.usable_height
    return False


def fits_any_stock(
    piece: UnitPiece | PieceRequest,
    stock: Sequence[StockSheet],
    allow_rotation: bool = True,
) -> bool:
    """Check whether a piece fits at least one stock type in an allowed orientation."""
    return any(
        fits_stock(
            piece.width,
            piece.height,
            sheet,
            rotation_allowed(piece, sheet, allow_rotation),
        )
        for sheet in stock
    )


def available_stock(stock: Sequence[StockSheet]) -> list[StockSheet]:
    """Return the stock types that still have at least one sheet."""
    return [s for s in stock if s.quantity_available is None or s.quantity_available > 0]


def expand_pieces(requests: Sequence[PieceRequest]) -> list[UnitPiece]:
    """Expand requests with quantity > 1 into individual unit pieces.

    Each unit keeps the request label so placements can be grouped back
    by request in the final plan.
    """
    expanded: list[UnitPiece] = []
    for request_index, request in enumerate(requests):
        for unit_index in range(request.quantity):
            expanded.append(
                UnitPiece(
                    label=request.label,
                    width=request.width,
                    height=request.height,
                    grain_locked=request.grain_locked,
                    request_index=request_index,
                    unit_index=unit_index,
                )
            )
    return expanded


def normalize_pieces(
    requests: Sequence[PieceRequest],
    stock: Sequence[StockSheet],
    *,
    allow_rotation: bool = True,
    strict: bool = True,
) -> list[UnitPiece]:
    """Validate piece requests against the stock catalogue and expand them.

    Args:
        requests: Caller-supplied piece requests.
        stock: Stock catalogue.
        allow_rotation: Global rotation switch.
        strict: If True, reject pieces that fit no stock type. If False,
            keep them; they are reported as unplaced after packing.

    Returns:
        Expanded unit pieces in request order.

    Raises:
        EmptyStockError: If no stock is supplied or every quantity is zero.
        InvalidPieceError: If there are no requests, or (in strict mode)
            some pieces can never be placed. All offending labels are
            collected into a single error.
    """
    if not stock:
        raise EmptyStockError("No stock sheets supplied")

    usable_stock = available_stock(stock)
    if not usable_stock:
        raise EmptyStockError("All stock sheet quantities are zero")

    if not requests:
        raise InvalidPieceError("No pieces to place")

    if strict:
        oversized = [
            request
            for request in requests
            if not fits_any_stock(request, usable_stock, allow_rotation)
        ]
        if oversized:
            labels = [request.label for request in oversized]
            raise InvalidPieceError(
                "Pieces too large for every available stock sheet: "
                + ", ".join(
                    f"'{r.label}' ({r.width}x{r.height})" for r in oversized
                ),
                pieces=labels,
                details=[
                    {
                        "label": r.label,
                        "width": r.width,
                        "height": r.height,
                        "grain_locked": r.grain_locked,
                    }
                    for r in oversized
                ],
            )

    units = expand_pieces(requests)
    logger.debug(
        "Normalized %d requests into %d unit pieces", len(requests), len(units)
    )
    return units

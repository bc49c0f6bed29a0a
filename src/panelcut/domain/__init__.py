"""Domain layer - geometry, value objects and piece validation."""

from .exceptions import EmptyStockError, InvalidPieceError, PanelCutError
from .geometry import contains, inflate, overlaps, prune_contained, subtract
from .normalizer import (
    expand_pieces,
    fits_any_stock,
    fits_stock,
    normalize_pieces,
    rotation_allowed,
)
from .ordering import (
    DETERMINISTIC_STRATEGIES,
    ByArea,
    ByLongSide,
    ByPerimeter,
    ByShortSide,
    InputOrder,
    OrderingStrategy,
    Randomized,
)
from .value_objects import (
    GrainDirection,
    PieceRequest,
    Rect,
    StockSheet,
    UnitPiece,
    UnplacedReason,
)

__all__ = [
    # Exceptions
    "EmptyStockError",
    "InvalidPieceError",
    "PanelCutError",
    # Geometry
    "contains",
    "inflate",
    "overlaps",
    "prune_contained",
    "subtract",
    # Normalizer
    "expand_pieces",
    "fits_any_stock",
    "fits_stock",
    "normalize_pieces",
    "rotation_allowed",
    # Ordering
    "DETERMINISTIC_STRATEGIES",
    "ByArea",
    "ByLongSide",
    "ByPerimeter",
    "ByShortSide",
    "InputOrder",
    "OrderingStrategy",
    "Randomized",
    # Value objects
    "GrainDirection",
    "PieceRequest",
    "Rect",
    "StockSheet",
    "UnitPiece",
    "UnplacedReason",
]

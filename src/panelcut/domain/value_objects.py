"""Value objects for the cutting optimization domain.

All dimensions and coordinates are integers in millimetres. Integer
arithmetic keeps overlap and containment tests exact.

All dataclasses are frozen (immutable) so they can be shared between
optimizer iterations without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidPieceError


class GrainDirection(str, Enum):
    """Grain direction of a stock sheet.

    Attributes:
        NONE: No grain, pieces may be placed in any orientation.
        LENGTH: Grain runs along the sheet width (x) axis.
        WIDTH: Grain runs along the sheet height (y) axis.
    """

    NONE = "none"
    LENGTH = "length"
    WIDTH = "width"


class UnplacedReason(str, Enum):
    """Why a unit piece ended up outside every sheet.

    Attributes:
        NO_FITTING_STOCK: The piece fits no stock type in any allowed orientation.
        STOCK_EXHAUSTED: The piece fits some stock type, but no sheet with
            remaining quantity could take it.
    """

    NO_FITTING_STOCK = "no_fitting_stock"
    STOCK_EXHAUSTED = "stock_exhausted"


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle, origin at the bottom-left corner."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Rectangle dimensions must be non-negative")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def top(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class PieceRequest:
    """A cutting requirement as supplied by the caller.

    Attributes:
        width: Finished width in mm, in the piece's natural orientation.
        height: Finished height in mm, in the piece's natural orientation.
        quantity: Number of identical pieces required.
        label: Opaque identifier used to trace placements back to the request.
        grain_locked: If True the piece keeps its orientation relative to
            the sheet grain and is never rotated on a grained sheet.
    """

    width: int
    height: int
    quantity: int = 1
    label: str = ""
    grain_locked: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidPieceError(
                f"Piece '{self.label}' dimensions must be positive "
                f"(got {self.width}x{self.height})",
                pieces=[self.label],
            )
        if self.quantity < 1:
            raise InvalidPieceError(
                f"Piece '{self.label}' quantity must be at least 1 "
                f"(got {self.quantity})",
                pieces=[self.label],
            )

    @property
    def area(self) -> int:
        """Total area for all units of this request in mm²."""
        return self.width * self.height * self.quantity


@dataclass(frozen=True)
class UnitPiece:
    """A single physical piece expanded from a PieceRequest.

    Attributes:
        label: Label of the originating request.
        width: Width in mm (natural orientation).
        height: Height in mm (natural orientation).
        grain_locked: Copied from the originating request.
        request_index: Position of the originating request in the input list.
        unit_index: Zero-based copy number within the request.
    """

    label: str
    width: int
    height: int
    grain_locked: bool = False
    request_index: int = 0
    unit_index: int = 0

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def long_side(self) -> int:
        return max(self.width, self.height)

    @property
    def short_side(self) -> int:
        return min(self.width, self.height)

    @property
    def is_square(self) -> bool:
        return self.width == self.height


@dataclass(frozen=True)
class StockSheet:
    """A stock sheet type offered for cutting.

    Attributes:
        width: Sheet width in mm.
        height: Sheet height in mm.
        kerf: Saw blade width consumed per cut in mm.
        grain_direction: Grain axis of the sheet, or NONE.
        quantity_available: Number of sheets available, None for unbounded.
        trim: Unusable margin trimmed from every sheet edge in mm.
        price_per_sheet: Optional price of one sheet, used for plan costing.
        label: Optional human-readable name (e.g. material reference).
    """

    width: int
    height: int
    kerf: int = 0
    grain_direction: GrainDirection = GrainDirection.NONE
    quantity_available: int | None = None
    trim: int = 0
    price_per_sheet: float | None = None
    label: str = ""

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("Sheet width must be positive")
        if self.height <= 0:
            raise ValueError("Sheet height must be positive")
        if self.kerf < 0:
            raise ValueError("Kerf must be non-negative")
        if self.trim < 0:
            raise ValueError("Trim must be non-negative")
        if 2 * self.trim >= min(self.width, self.height):
            raise ValueError("Trim leaves no usable sheet area")
        if self.quantity_available is not None and self.quantity_available < 0:
            raise ValueError("Quantity available must be non-negative")

    @property
    def usable_width(self) -> int:
        """Width available for piece placement after trim."""
        return self.width - 2 * self.trim

    @property
    def usable_height(self) -> int:
        """Height available for piece placement after trim."""
        return self.height - 2 * self.trim

    @property
    def area(self) -> int:
        """Full sheet area in mm², trim included."""
        return self.width * self.height

    @property
    def usable_rect(self) -> Rect:
        """The placement region of an empty sheet."""
        return Rect(self.trim, self.trim, self.usable_width, self.usable_height)

    @property
    def has_grain(self) -> bool:
        return self.grain_direction != GrainDirection.NONE

    @property
    def is_unbounded(self) -> bool:
        return self.quantity_available is None

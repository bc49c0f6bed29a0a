"""Bin packing data models and algorithms for sheet material optimization.

This module provides the single-sheet guillotine packer, the multi-sheet
allocator that opens stock sheets as needed, and the data structures
describing placements, sheet layouts and complete solutions.

Public dataclasses are frozen (immutable) so solutions can be handed
between optimizer iterations and threads without copying. The free
rectangle list of a sheet is owned by one ``pack`` call and never shared.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from abc import ABC, abstractmethod
from typing import Protocol, Sequence

from panelcut.domain.geometry import (
    contains,
    inflate,
    overlaps,
    prune_contained,
    subtract,
)
from panelcut.domain.normalizer import available_stock, fits_any_stock, rotation_allowed
from panelcut.domain.value_objects import (
    Rect,
    StockSheet,
    UnitPiece,
    UnplacedReason,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """A unit piece placed at a specific position on a sheet.

    Coordinates are absolute sheet coordinates (trim included), origin at
    the bottom-left corner.

    Attributes:
        piece: The unit piece being placed.
        x: Horizontal position of the piece's left edge in mm.
        y: Vertical position of the piece's bottom edge in mm.
        rotated: True if the piece is turned 90 degrees from its natural orientation.
        footprint: Area claimed on the sheet: the piece plus kerf on its
            right and top edges, clipped at the usable area boundary.
    """

    piece: UnitPiece
    x: int
    y: int
    rotated: bool
    footprint: Rect

    @property
    def placed_width(self) -> int:
        """Width of piece as placed (accounts for rotation)."""
        return self.piece.height if self.rotated else self.piece.width

    @property
    def placed_height(self) -> int:
        """Height of piece as placed (accounts for rotation)."""
        return self.piece.width if self.rotated else self.piece.height

    @property
    def rect(self) -> Rect:
        """The finished piece outline on the sheet."""
        return Rect(self.x, self.y, self.placed_width, self.placed_height)

    @property
    def label(self) -> str:
        return self.piece.label


@dataclass(frozen=True)
class SheetLayout:
    """Layout of pieces on a single opened stock sheet.

    Attributes:
        sheet_index: Zero-based index of this sheet in the solution.
        stock_index: Index of the stock type in the caller's catalogue.
        stock: The stock type this sheet was cut from.
        placements: Placed pieces, in placement order.
        free_rects: Free rectangles left after packing (may overlap).
    """

    sheet_index: int
    stock_index: int
    stock: StockSheet
    placements: tuple[Placement, ...]
    free_rects: tuple[Rect, ...] = ()

    def __post_init__(self) -> None:
        if self.sheet_index < 0:
            raise ValueError("Sheet index must be non-negative")
        if self.stock_index < 0:
            raise ValueError("Stock index must be non-negative")

    @property
    def used_area(self) -> int:
        """Total area covered by finished pieces in mm²."""
        return sum(p.piece.area for p in self.placements)

    @property
    def waste_area(self) -> int:
        """Sheet area not covered by finished pieces in mm² (kerf and trim included)."""
        return self.stock.area - self.used_area

    @property
    def waste_percentage(self) -> float:
        """Percentage of the full sheet area that is waste."""
        return self.waste_area / self.stock.area * 100

    @property
    def piece_count(self) -> int:
        """Number of pieces placed on this sheet."""
        return len(self.placements)


@dataclass(frozen=True)
class UnplacedPiece:
    """A unit piece that no sheet could take."""

    piece: UnitPiece
    reason: UnplacedReason


@dataclass(frozen=True)
class Solution:
    """Complete multi-sheet result of one allocator run.

    Attributes:
        sheets: Opened sheets, in opening order.
        unplaced: Pieces that could not be placed on any available stock.
        strategy: Name of the ordering strategy that produced this solution.
        heuristic: Name of the placement heuristic used by the packer.
    """

    sheets: tuple[SheetLayout, ...]
    unplaced: tuple[UnplacedPiece, ...] = ()
    strategy: str = ""
    heuristic: str = "best_area_fit"

    @property
    def sheet_count(self) -> int:
        return len(self.sheets)

    @property
    def placed_count(self) -> int:
        """Total number of pieces placed across all sheets."""
        return sum(sheet.piece_count for sheet in self.sheets)

    @property
    def sheet_area(self) -> int:
        return sum(sheet.stock.area for sheet in self.sheets)

    @property
    def used_area(self) -> int:
        return sum(sheet.used_area for sheet in self.sheets)

    @property
    def waste_area(self) -> int:
        return sum(sheet.waste_area for sheet in self.sheets)

    @property
    def waste_percentage(self) -> float:
        """Waste as a percentage of the total area of all opened sheets."""
        total = self.sheet_area
        if total == 0:
            return 0.0
        return self.waste_area / total * 100

    @property
    def score(self) -> tuple[int, int, int]:
        """Ranking key, lower is better.

        Fewer unplaced pieces always wins; then less waste area; then
        fewer sheets.
        """
        return (len(self.unplaced), self.waste_area, self.sheet_count)


@dataclass(frozen=True)
class SheetPackResult:
    """Outcome of packing one sheet.

    Attributes:
        placements: Pieces placed on the sheet.
        free_rects: Free rectangles remaining on the sheet.
        unplaced: Pieces that did not fit, in input order.
    """

    placements: tuple[Placement, ...]
    free_rects: tuple[Rect, ...]
    unplaced: tuple[UnitPiece, ...]

    @property
    def used_area(self) -> int:
        return sum(p.piece.area for p in self.placements)


@dataclass(frozen=True)
class _Fit:
    """Best position found for one piece."""

    key: tuple[int, ...]
    rect: Rect
    footprint: Rect
    rotated: bool


class PlacementHeuristic(ABC):
    """Scores a candidate position for a piece; lower scores win.

    The packer appends (y, x, rotated) of the free rectangle to every
    score, so heuristics only rank what they care about.
    """

    name: str = ""

    @abstractmethod
    def score(self, space: Rect, footprint: Rect) -> tuple[int, ...]:
        """Rank placing ``footprint`` at the origin of free rectangle ``space``."""

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class BestAreaFit(PlacementHeuristic):
    """Least leftover area, then the smaller longer leftover side."""

    name = "best_area_fit"

    def score(self, space: Rect, footprint: Rect) -> tuple[int, ...]:
        leftover_w = space.width - footprint.width
        leftover_h = space.height - footprint.height
        return (space.area - footprint.area, max(leftover_w, leftover_h))


@dataclass(frozen=True)
class BestShortSideFit(PlacementHeuristic):
    """Smallest shorter leftover side, then the smaller longer leftover side."""

    name = "best_short_side_fit"

    def score(self, space: Rect, footprint: Rect) -> tuple[int, ...]:
        leftover_w = space.width - footprint.width
        leftover_h = space.height - footprint.height
        return (min(leftover_w, leftover_h), max(leftover_w, leftover_h))


@dataclass(frozen=True)
class BottomLeft(PlacementHeuristic):
    """Lowest top edge, then leftmost position."""

    name = "bottom_left"

    def score(self, space: Rect, footprint: Rect) -> tuple[int, ...]:
        return (space.y + footprint.height, space.x)


PLACEMENT_HEURISTICS: dict[str, type[PlacementHeuristic]] = {
    BestAreaFit.name: BestAreaFit,
    BestShortSideFit.name: BestShortSideFit,
    BottomLeft.name: BottomLeft,
}


class SingleSheetPacker:
    """Guillotine packer for one sheet.

    Tracks the sheet's free space as a set of maximal free rectangles. Each
    piece goes into the free rectangle the placement heuristic scores
    lowest (best-area-fit by default), ties broken by the lowest (y, x)
    origin, then the natural orientation.

    Attributes:
        allow_rotation: Global rotation switch. Grain locks are applied on
            top of it per piece and stock type.
        heuristic: Scores candidate positions.
    """

    def __init__(
        self,
        allow_rotation: bool = True,
        heuristic: PlacementHeuristic | None = None,
    ) -> None:
        self.allow_rotation = allow_rotation
        self.heuristic = heuristic or BestAreaFit()

    def pack(
        self,
        stock: StockSheet,
        pieces: Sequence[UnitPiece],
        free_rects: Sequence[Rect] | None = None,
    ) -> SheetPackResult:
        """Place as many pieces as fit on one sheet, in the given order.

        Args:
            stock: Stock type of the sheet.
            pieces: Pieces to place, in packing order.
            free_rects: Free space of a partially occupied sheet. Defaults
                to the whole usable area of an empty sheet.

        Returns:
            SheetPackResult with placements, remaining free space and the
            pieces that did not fit. A piece that does not fit is not an
            error.
        """
        bounds = stock.usable_rect
        free = list(free_rects) if free_rects is not None else [bounds]
        placements: list[Placement] = []
        deferred: list[UnitPiece] = []

        for piece in pieces:
            fit = self._find_position(piece, stock, bounds, free)
            if fit is None:
                deferred.append(piece)
                continue

            placements.append(
                Placement(
                    piece=piece,
                    x=fit.rect.x,
                    y=fit.rect.y,
                    rotated=fit.rotated,
                    footprint=fit.footprint,
                )
            )
            free = self._claim(free, fit.footprint)

            if fit.rotated:
                logger.debug(
                    "Piece '%s' placed rotated at (%d, %d), placed dimensions: %dx%d",
                    piece.label,
                    fit.rect.x,
                    fit.rect.y,
                    fit.rect.width,
                    fit.rect.height,
                )

        return SheetPackResult(
            placements=tuple(placements),
            free_rects=tuple(free),
            unplaced=tuple(deferred),
        )

    def _orientations(
        self, piece: UnitPiece, stock: StockSheet
    ) -> list[tuple[int, int, bool]]:
        """List (width, height, rotated) orientations allowed for a piece."""
        orientations = [(piece.width, piece.height, False)]
        if rotation_allowed(piece, stock, self.allow_rotation):
            orientations.append((piece.height, piece.width, True))
        return orientations

    def _find_position(
        self,
        piece: UnitPiece,
        stock: StockSheet,
        bounds: Rect,
        free: Sequence[Rect],
    ) -> _Fit | None:
        """Find the best free rectangle and orientation for a piece.

        Returns:
            The best fit, or None if the piece fits nowhere on this sheet.
        """
        best: _Fit | None = None
        for width, height, rotated in self._orientations(piece, stock):
            for space in free:
                if width > space.width or height > space.height:
                    continue
                rect = Rect(space.x, space.y, width, height)
                footprint = inflate(rect, stock.kerf, bounds)
                if not contains(space, footprint):
                    continue
                key = (
                    *self.heuristic.score(space, footprint),
                    space.y,
                    space.x,
                    int(rotated),
                )
                if best is None or key < best.key:
                    best = _Fit(key=key, rect=rect, footprint=footprint, rotated=rotated)
        return best

    def _claim(self, free: Sequence[Rect], footprint: Rect) -> list[Rect]:
        """Remove a footprint from every free rectangle it touches."""
        updated: list[Rect] = []
        for space in free:
            if overlaps(space, footprint):
                updated.extend(subtract(space, footprint))
            else:
                updated.append(space)
        return prune_contained(updated)


class StockSelector(Protocol):
    """Protocol for choosing which stock type to open next.

    Implementations try candidate stock types with the packer and return
    the chosen stock index together with its pack result, or None if no
    stock type with remaining quantity can take any of the pieces.
    """

    def select(
        self,
        packer: SingleSheetPacker,
        stock: Sequence[StockSheet],
        remaining: Sequence[int | None],
        pieces: Sequence[UnitPiece],
    ) -> tuple[int, SheetPackResult] | None: ...


class DeclaredOrderSelector:
    """Open the first stock type, in catalogue order, that can take a piece.

    Callers wanting cost-optimal stock choice order their catalogue
    accordingly.
    """

    name = "declared_order"

    def select(
        self,
        packer: SingleSheetPacker,
        stock: Sequence[StockSheet],
        remaining: Sequence[int | None],
        pieces: Sequence[UnitPiece],
    ) -> tuple[int, SheetPackResult] | None:
        for index, sheet in enumerate(stock):
            if remaining[index] == 0:
                continue
            result = packer.pack(sheet, pieces)
            if result.placements:
                return index, result
        return None


class BestUtilizationSelector:
    """Open the stock type whose sheet ends up with the highest fill ratio.

    Every stock type with remaining quantity is packed trially; ties keep
    the earlier catalogue entry.
    """

    name = "best_utilization"

    def select(
        self,
        packer: SingleSheetPacker,
        stock: Sequence[StockSheet],
        remaining: Sequence[int | None],
        pieces: Sequence[UnitPiece],
    ) -> tuple[int, SheetPackResult] | None:
        best: tuple[int, SheetPackResult] | None = None
        best_ratio = 0.0
        for index, sheet in enumerate(stock):
            if remaining[index] == 0:
                continue
            result = packer.pack(sheet, pieces)
            if not result.placements:
                continue
            ratio = result.used_area / sheet.area
            if best is None or ratio > best_ratio:
                best = (index, result)
                best_ratio = ratio
        return best


STOCK_SELECTORS: dict[str, type] = {
    DeclaredOrderSelector.name: DeclaredOrderSelector,
    BestUtilizationSelector.name: BestUtilizationSelector,
}


class MultiSheetAllocator:
    """Spreads pieces over as many stock sheets as needed.

    Opens one sheet at a time, packs it with the remaining pieces and
    continues with whatever did not fit. Every opened sheet holds at least
    one piece, so the loop always terminates: either all pieces are placed
    or no available stock type can take any of the remaining ones.

    Attributes:
        packer: Single-sheet packer used for every sheet.
        selector: Strategy choosing the stock type of each new sheet.
        allow_rotation: Global rotation switch, also used to classify
            unplaced pieces.
    """

    def __init__(
        self,
        packer: SingleSheetPacker | None = None,
        selector: StockSelector | None = None,
        allow_rotation: bool = True,
    ) -> None:
        self.allow_rotation = allow_rotation
        self.packer = packer or SingleSheetPacker(allow_rotation=allow_rotation)
        self.selector = selector or DeclaredOrderSelector()

    def allocate(
        self,
        pieces: Sequence[UnitPiece],
        stock: Sequence[StockSheet],
        strategy: str = "",
    ) -> Solution:
        """Place all pieces across stock sheets.

        Args:
            pieces: Unit pieces in packing order.
            stock: Stock catalogue; quantities are tracked locally and the
                catalogue itself is never modified.
            strategy: Name of the ordering strategy, recorded on the solution.

        Returns:
            Solution with opened sheets and any unplaced pieces.
        """
        remaining_counts: list[int | None] = [s.quantity_available for s in stock]
        remaining: list[UnitPiece] = list(pieces)
        sheets: list[SheetLayout] = []

        while remaining:
            selection = self.selector.select(
                self.packer, stock, remaining_counts, remaining
            )
            if selection is None:
                break

            stock_index, result = selection
            layout = SheetLayout(
                sheet_index=len(sheets),
                stock_index=stock_index,
                stock=stock[stock_index],
                placements=result.placements,
                free_rects=result.free_rects,
            )
            sheets.append(layout)

            count = remaining_counts[stock_index]
            if count is not None:
                remaining_counts[stock_index] = count - 1

            logger.debug(
                "Sheet %d (stock %d): %d pieces, %.1f%% waste",
                layout.sheet_index,
                stock_index,
                layout.piece_count,
                layout.waste_percentage,
            )
            remaining = list(result.unplaced)

        offered = available_stock(stock)
        unplaced = tuple(
            UnplacedPiece(piece=piece, reason=self._classify(piece, offered))
            for piece in remaining
        )

        return Solution(
            sheets=tuple(sheets),
            unplaced=unplaced,
            strategy=strategy,
            heuristic=self.packer.heuristic.name,
        )

    def _classify(
        self, piece: UnitPiece, offered: Sequence[StockSheet]
    ) -> UnplacedReason:
        """Tell apart pieces that ran out of stock from pieces that never fit."""
        if fits_any_stock(piece, offered, self.allow_rotation):
            return UnplacedReason.STOCK_EXHAUSTED
        return UnplacedReason.NO_FITTING_STOCK

"""Piece ordering strategies for the iterative optimizer.

Guillotine packing is order-sensitive, so the optimizer feeds the same
pieces through the allocator in several orders. Each strategy is a small
frozen value with a ``name`` and an ``order`` method, so every strategy
can be constructed, compared and tested in isolation.

All sorts are stable and descending; ties keep input order.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from .value_objects import UnitPiece


class OrderingStrategy(ABC):
    """Base class for piece ordering strategies."""

    name: str = ""

    @abstractmethod
    def order(self, pieces: Sequence[UnitPiece]) -> list[UnitPiece]:
        """Return a new list with the pieces in packing order."""

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class InputOrder(OrderingStrategy):
    """Keep the caller's order."""

    name = "input_order"

    def order(self, pieces: Sequence[UnitPiece]) -> list[UnitPiece]:
        return list(pieces)


@dataclass(frozen=True)
class ByArea(OrderingStrategy):
    """Largest area first (first-fit decreasing)."""

    name = "by_area"

    def order(self, pieces: Sequence[UnitPiece]) -> list[UnitPiece]:
        return sorted(pieces, key=lambda p: p.area, reverse=True)


@dataclass(frozen=True)
class ByLongSide(OrderingStrategy):
    """Longest side first."""

    name = "by_long_side"

    def order(self, pieces: Sequence[UnitPiece]) -> list[UnitPiece]:
        return sorted(pieces, key=lambda p: p.long_side, reverse=True)


@dataclass(frozen=True)
class ByShortSide(OrderingStrategy):
    """Longest short side first."""

    name = "by_short_side"

    def order(self, pieces: Sequence[UnitPiece]) -> list[UnitPiece]:
        return sorted(pieces, key=lambda p: p.short_side, reverse=True)


@dataclass(frozen=True)
class ByPerimeter(OrderingStrategy):
    """Largest perimeter first."""

    name = "by_perimeter"

    def order(self, pieces: Sequence[UnitPiece]) -> list[UnitPiece]:
        return sorted(pieces, key=lambda p: p.width + p.height, reverse=True)


@dataclass(frozen=True)
class Randomized(OrderingStrategy):
    """Seeded shuffle. The same seed always gives the same order."""

    seed: int = 0

    @property
    def name(self) -> str:  # type: ignore[override]
        return f"randomized({self.seed})"

    def order(self, pieces: Sequence[UnitPiece]) -> list[UnitPiece]:
        shuffled = list(pieces)
        random.Random(self.seed).shuffle(shuffled)
        return shuffled


# Deterministic strategies, in the order the optimizer runs them.
# InputOrder comes first so it always serves as the baseline.
DETERMINISTIC_STRATEGIES: tuple[OrderingStrategy, ...] = (
    InputOrder(),
    ByArea(),
    ByLongSide(),
    ByShortSide(),
    ByPerimeter(),
)

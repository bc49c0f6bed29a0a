"""Iterative cutting optimizer.

Runs the multi-sheet allocator once per (piece ordering, placement
heuristic) candidate and keeps the best solution. Every deterministic
ordering is paired with every enabled heuristic; these candidates always
run first and always complete. Seeded random shuffles follow, cycling
through the heuristics, until the iteration cap or the time budget is
reached.

Each iteration builds its own allocator state, so iterations can run on a
thread pool. Only the keep-best reduction is shared; it ranks candidates
by (score, iteration index), which makes the winner independent of the
order in which threads finish.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Sequence

from panelcut.domain.ordering import (
    DETERMINISTIC_STRATEGIES,
    OrderingStrategy,
    Randomized,
)
from panelcut.domain.value_objects import StockSheet, UnitPiece
from panelcut.infrastructure.bin_packing import (
    PLACEMENT_HEURISTICS,
    STOCK_SELECTORS,
    MultiSheetAllocator,
    PlacementHeuristic,
    SingleSheetPacker,
    Solution,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchCandidate:
    """One optimizer iteration: a piece ordering packed with a heuristic."""

    ordering: OrderingStrategy
    heuristic: PlacementHeuristic

    @property
    def name(self) -> str:
        return f"{self.ordering.name}/{self.heuristic.name}"


@dataclass(frozen=True)
class OptimizerOptions:
    """Configuration for the iterative optimizer.

    Attributes:
        random_iterations: Number of seeded random orderings to try after
            the deterministic ones.
        max_iterations: Cap on the total number of iterations. Never cuts
            the deterministic orderings short.
        time_budget_ms: Wall-clock budget. Checked before each random
            iteration is launched.
        random_seed: Seed for the random orderings. Same seed, same plan.
        workers: Number of worker threads. 1 runs sequentially.
        allow_rotation: Global rotation switch.
        stock_selection: Name of the stock selection policy.
        placement_heuristic: Name of the only placement heuristic to use.
            None tries every heuristic.
    """

    random_iterations: int = 30
    max_iterations: int | None = None
    time_budget_ms: int | None = None
    random_seed: int | None = None
    workers: int = 1
    allow_rotation: bool = True
    stock_selection: str = "declared_order"
    placement_heuristic: str | None = None

    def __post_init__(self) -> None:
        if self.random_iterations < 0:
            raise ValueError("Random iterations must be non-negative")
        if self.max_iterations is not None and self.max_iterations < 1:
            raise ValueError("Max iterations must be at least 1")
        if self.time_budget_ms is not None and self.time_budget_ms < 0:
            raise ValueError("Time budget must be non-negative")
        if self.workers < 1:
            raise ValueError("Workers must be at least 1")
        if self.stock_selection not in STOCK_SELECTORS:
            raise ValueError(
                f"Unknown stock selection '{self.stock_selection}'. "
                f"Available: {', '.join(sorted(STOCK_SELECTORS))}"
            )
        if (
            self.placement_heuristic is not None
            and self.placement_heuristic not in PLACEMENT_HEURISTICS
        ):
            raise ValueError(
                f"Unknown placement heuristic '{self.placement_heuristic}'. "
                f"Available: {', '.join(sorted(PLACEMENT_HEURISTICS))}"
            )

    def heuristics(self) -> list[PlacementHeuristic]:
        """Placement heuristics to search, best-area-fit first."""
        if self.placement_heuristic is not None:
            return [PLACEMENT_HEURISTICS[self.placement_heuristic]()]
        return [heuristic() for heuristic in PLACEMENT_HEURISTICS.values()]


@dataclass(frozen=True)
class OptimizationRun:
    """Best solution of an optimizer run plus run statistics.

    Attributes:
        solution: Best-scoring solution found.
        iterations: Number of iterations that actually ran.
        elapsed_ms: Wall-clock duration of the run.
        baseline: Solution of the input-order iteration, kept for comparison.
    """

    solution: Solution
    iterations: int
    elapsed_ms: float
    baseline: Solution


class _BestTracker:
    """Thread-safe keep-best reduction."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._best: Solution | None = None
        self._best_key: tuple | None = None
        self.iterations = 0

    def offer(self, index: int, solution: Solution) -> None:
        key = (solution.score, index)
        with self._lock:
            self.iterations += 1
            if self._best_key is None or key < self._best_key:
                self._best = solution
                self._best_key = key
                logger.debug(
                    "New best from %s: %d unplaced, waste %d mm², %d sheets",
                    solution.strategy,
                    *solution.score,
                )

    @property
    def best(self) -> Solution | None:
        return self._best


class IterativeOptimizer:
    """Searches orderings and placement heuristics for the lowest-waste solution.

    Attributes:
        options: Optimizer configuration.
    """

    def __init__(
        self,
        options: OptimizerOptions | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the optimizer.

        Args:
            options: Optimizer configuration, defaults apply when omitted.
            clock: Monotonic clock in seconds, injectable for tests.
        """
        self.options = options or OptimizerOptions()
        self._clock = clock

    def candidates(self) -> list[SearchCandidate]:
        """Build the full list of iterations for one run.

        Each deterministic ordering is paired with every heuristic, input
        order with best-area-fit first so it serves as the baseline. Random
        seeds are drawn from an explicit generator seeded with
        ``random_seed``; random orderings cycle through the heuristics.
        """
        heuristics = self.options.heuristics()
        deterministic = [
            SearchCandidate(ordering, heuristic)
            for ordering in DETERMINISTIC_STRATEGIES
            for heuristic in heuristics
        ]

        count = self.options.random_iterations
        if self.options.max_iterations is not None:
            count = min(count, max(0, self.options.max_iterations - len(deterministic)))

        rng = random.Random(self.options.random_seed)
        randomized = [
            SearchCandidate(
                Randomized(seed=rng.getrandbits(32)),
                heuristics[index % len(heuristics)],
            )
            for index in range(count)
        ]
        return [*deterministic, *randomized]

    def optimize(
        self,
        pieces: Sequence[UnitPiece],
        stock: Sequence[StockSheet],
    ) -> Solution:
        """Return the best solution found within the configured budget."""
        return self.run(pieces, stock).solution

    def run(
        self,
        pieces: Sequence[UnitPiece],
        stock: Sequence[StockSheet],
    ) -> OptimizationRun:
        """Run every candidate within budget and keep the best solution.

        Args:
            pieces: Validated unit pieces (see ``normalize_pieces``).
            stock: Stock catalogue.

        Returns:
            OptimizationRun with the best solution and run statistics.
        """
        start = self._clock()
        deadline = None
        if self.options.time_budget_ms is not None:
            deadline = start + self.options.time_budget_ms / 1000

        candidates = self.candidates()
        deterministic_count = len(DETERMINISTIC_STRATEGIES) * len(self.options.heuristics())
        tracker = _BestTracker()
        baseline: list[Solution] = []

        def run_one(index: int, candidate: SearchCandidate) -> bool:
            # Budget applies to random orderings only
            if index >= deterministic_count and deadline is not None:
                if self._clock() >= deadline:
                    return False
            solution = self._allocate(pieces, stock, candidate)
            if index == 0:
                baseline.append(solution)
            tracker.offer(index, solution)
            return True

        if self.options.workers == 1:
            for index, candidate in enumerate(candidates):
                if not run_one(index, candidate):
                    logger.debug("Time budget exhausted after %d iterations", index)
                    break
        else:
            with ThreadPoolExecutor(max_workers=self.options.workers) as executor:
                futures = [
                    executor.submit(run_one, index, candidate)
                    for index, candidate in enumerate(candidates)
                ]
                for future in futures:
                    future.result()

        best = tracker.best
        if best is None:
            # Deterministic candidates always run, so this is a logic error
            raise RuntimeError("Optimizer produced no candidate solution")

        elapsed_ms = (self._clock() - start) * 1000
        logger.info(
            "Optimized %d pieces in %d iterations (%.0f ms): %d sheets, "
            "%.1f%% waste, %d unplaced (best: %s/%s)",
            len(pieces),
            tracker.iterations,
            elapsed_ms,
            best.sheet_count,
            best.waste_percentage,
            len(best.unplaced),
            best.strategy,
            best.heuristic,
        )

        return OptimizationRun(
            solution=best,
            iterations=tracker.iterations,
            elapsed_ms=elapsed_ms,
            baseline=baseline[0],
        )

    def _allocate(
        self,
        pieces: Sequence[UnitPiece],
        stock: Sequence[StockSheet],
        candidate: SearchCandidate,
    ) -> Solution:
        """Run one isolated allocator pass for a single candidate."""
        selector = STOCK_SELECTORS[self.options.stock_selection]()
        packer = SingleSheetPacker(
            allow_rotation=self.options.allow_rotation,
            heuristic=candidate.heuristic,
        )
        allocator = MultiSheetAllocator(
            packer=packer,
            selector=selector,
            allow_rotation=self.options.allow_rotation,
        )
        return allocator.allocate(
            candidate.ordering.order(pieces), stock, strategy=candidate.ordering.name
        )

"""End-to-end tests for OptimizeCuttingCommand.

Covers the reference cutting scenarios and the plan invariants that must
hold for every request: no overlapping saw footprints, containment in the
usable sheet area, conservation of piece counts, determinism under a
fixed seed and improvement over the input-order baseline.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from itertools import combinations
from typing import Any

import pytest

from panelcut.application.commands import OptimizeCuttingCommand
from panelcut.application.config import config_to_domain, load_config_from_dict
from panelcut.application.dtos import CuttingPlan
from panelcut.application.optimizer import IterativeOptimizer
from panelcut.domain.geometry import contains, overlaps
from panelcut.domain.normalizer import normalize_pieces

JOBS: dict[str, dict[str, Any]] = {
    "kitchen": {
        "pieces": [
            {"width": 720, "height": 560, "quantity": 4, "label": "Side"},
            {"width": 564, "height": 560, "quantity": 6, "label": "Shelf"},
            {"width": 1200, "height": 300, "quantity": 3, "label": "Rail"},
            {"width": 715, "height": 447, "quantity": 5, "label": "Door", "grainLocked": True},
        ],
        "stock": [
            {"width": 2800, "height": 2070, "kerf": 4, "grainDirection": "length"},
        ],
        "options": {"randomSeed": 3, "randomIterations": 6},
    },
    "trimmed_mixed_stock": {
        "pieces": [
            {"width": 900, "height": 450, "quantity": 7, "label": "Front"},
            {"width": 300, "height": 300, "quantity": 9, "label": "Block"},
            {"width": 1800, "height": 200, "quantity": 2, "label": "Plinth"},
        ],
        "stock": [
            {"width": 1250, "height": 2500, "kerf": 3, "trim": 10, "quantityAvailable": 1},
            {"width": 2440, "height": 1220, "kerf": 3, "trim": 5},
        ],
        "options": {"randomSeed": 11, "randomIterations": 4},
    },
    "stock_limited": {
        "pieces": [
            {"width": 1000, "height": 800, "quantity": 9, "label": "Panel"},
            {"width": 5000, "height": 100, "quantity": 1, "label": "Beam"},
        ],
        "stock": [{"width": 2000, "height": 1700, "kerf": 5, "quantityAvailable": 1}],
        "options": {"randomSeed": 5, "randomIterations": 3, "strictValidation": False},
    },
}


def solve(
    command: OptimizeCuttingCommand, request: dict[str, Any]
) -> CuttingPlan:
    result = command.execute_request(request)
    assert result.is_ok, getattr(result, "message", "")
    return result.value


def requested_counts(request: dict[str, Any]) -> Counter[str]:
    counts: Counter[str] = Counter()
    for piece in request["pieces"]:
        counts[piece["label"]] += piece.get("quantity", 1)
    return counts


class TestScenarios:
    """Reference cutting scenarios."""

    def test_single_sheet_four_pieces(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        plan = solve(
            optimize_command,
            {
                "pieces": [{"width": 600, "height": 400, "quantity": 4}],
                "stock": [{"width": 2800, "height": 2070, "kerf": 3}],
            },
        )

        assert plan.sheet_count == 1
        assert plan.placed_pieces == 4
        assert plan.unplaced == ()
        assert plan.is_complete

    def test_too_long_piece_rejected_before_packing(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        request = {
            "pieces": [{"width": 3000, "height": 400, "label": "Worktop"}],
            "stock": [{"width": 2800, "height": 2070, "kerf": 3}],
        }
        result = optimize_command.execute_request(request)

        assert not result.is_ok
        assert result.kind == "invalid_piece"
        assert "Worktop" in result.message

    def test_too_long_piece_unplaced_when_lenient(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        plan = solve(
            optimize_command,
            {
                "pieces": [{"width": 3000, "height": 400, "label": "Worktop"}],
                "stock": [{"width": 2800, "height": 2070, "kerf": 3}],
                "options": {"strictValidation": False},
            },
        )

        assert [(u.label, u.count, u.reason) for u in plan.unplaced] == [
            ("Worktop", 1, "no_fitting_stock")
        ]

    def test_overflow_onto_second_sheet(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        plan = solve(
            optimize_command,
            {
                "pieces": [
                    {"width": 1300, "height": 1000, "quantity": 4, "label": "Carcass"},
                    {"width": 1300, "height": 600, "quantity": 2, "label": "Top"},
                    {"width": 600, "height": 400, "quantity": 4, "label": "Shelf"},
                ],
                "stock": [
                    {"width": 2800, "height": 2070, "kerf": 3, "quantityAvailable": 2}
                ],
                "options": {"randomSeed": 42, "randomIterations": 5},
            },
        )

        assert plan.sheet_count == 2
        assert plan.unplaced == ()
        assert plan.placed_pieces == 10

    def test_grain_locked_piece_never_rotated(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        plan = solve(
            optimize_command,
            {
                "pieces": [{"width": 500, "height": 300, "grainLocked": True, "label": "Door"}],
                "stock": [
                    {"width": 400, "height": 600, "kerf": 0, "grainDirection": "width"}
                ],
                "options": {"strictValidation": False},
            },
        )

        assert plan.sheet_count == 0
        assert [(u.label, u.reason) for u in plan.unplaced] == [
            ("Door", "no_fitting_stock")
        ]

    def test_grain_locked_piece_kept_upright(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        plan = solve(
            optimize_command,
            {
                "pieces": [
                    {"width": 300, "height": 500, "quantity": 3, "grainLocked": True}
                ],
                "stock": [
                    {"width": 2000, "height": 600, "kerf": 3, "grainDirection": "width"}
                ],
            },
        )

        placements = plan.sheets[0].placements
        assert len(placements) == 3
        assert not any(p.rotated for p in placements)

    def test_seeded_runs_identical(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        request = JOBS["kitchen"] | {
            "options": {"randomSeed": 42, "randomIterations": 8}
        }
        first = solve(optimize_command, request)
        second = solve(OptimizeCuttingCommand(), request)

        assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("job", sorted(JOBS))
class TestPlanInvariants:
    """Invariants checked on every sample job."""

    def test_footprints_do_not_overlap(self, job: str) -> None:
        requests, stock, options = config_to_domain(load_config_from_dict(JOBS[job]))
        pieces = normalize_pieces(requests, stock, strict=False)
        solution = IterativeOptimizer(options).optimize(pieces, stock)

        for sheet in solution.sheets:
            for a, b in combinations(sheet.placements, 2):
                assert not overlaps(a.footprint, b.footprint)

    def test_placements_inside_usable_area(
        self, optimize_command: OptimizeCuttingCommand, job: str
    ) -> None:
        plan = solve(optimize_command, JOBS[job])

        for sheet in plan.sheets:
            for p in sheet.placements:
                assert p.x >= sheet.trim and p.y >= sheet.trim
                assert p.x + p.width <= sheet.width - sheet.trim
                assert p.y + p.height <= sheet.height - sheet.trim

    def test_footprints_inside_usable_area(self, job: str) -> None:
        requests, stock, options = config_to_domain(load_config_from_dict(JOBS[job]))
        pieces = normalize_pieces(requests, stock, strict=False)
        solution = IterativeOptimizer(options).optimize(pieces, stock)

        for sheet in solution.sheets:
            for placement in sheet.placements:
                assert contains(sheet.stock.usable_rect, placement.footprint)

    def test_piece_counts_conserved(
        self, optimize_command: OptimizeCuttingCommand, job: str
    ) -> None:
        request = JOBS[job]
        plan = solve(optimize_command, request)

        accounted: Counter[str] = Counter()
        for sheet in plan.sheets:
            accounted.update(p.label for p in sheet.placements)
        for entry in plan.unplaced:
            accounted[entry.label] += entry.count

        assert accounted == requested_counts(request)
        assert plan.placed_pieces + plan.unplaced_pieces == plan.total_pieces

    def test_no_worse_than_input_order(self, job: str) -> None:
        requests, stock, options = config_to_domain(load_config_from_dict(JOBS[job]))
        pieces = normalize_pieces(requests, stock, strict=False)
        run = IterativeOptimizer(options).run(pieces, stock)

        assert run.baseline.strategy == "input_order"
        assert run.solution.score <= run.baseline.score
        if len(run.solution.unplaced) == len(run.baseline.unplaced):
            assert run.solution.waste_percentage <= run.baseline.waste_percentage

    def test_worker_count_does_not_change_result(self, job: str) -> None:
        requests, stock, options = config_to_domain(load_config_from_dict(JOBS[job]))
        pieces = normalize_pieces(requests, stock, strict=False)

        sequential = IterativeOptimizer(options).optimize(pieces, stock)
        parallel = IterativeOptimizer(replace(options, workers=4)).optimize(pieces, stock)

        assert parallel == sequential

    def test_validation_is_idempotent(self, job: str) -> None:
        requests, stock, _ = config_to_domain(load_config_from_dict(JOBS[job]))
        assert normalize_pieces(requests, stock, strict=False) == normalize_pieces(
            requests, stock, strict=False
        )


class TestStockLimits:
    """Stock quantity handling."""

    def test_exhausted_stock_reported(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        plan = solve(optimize_command, JOBS["stock_limited"])

        reasons = {u.label: u.reason for u in plan.unplaced}
        assert plan.sheet_count == 1
        assert reasons["Panel"] == "stock_exhausted"
        assert reasons["Beam"] == "no_fitting_stock"

    def test_stock_index_recorded(
        self, optimize_command: OptimizeCuttingCommand
    ) -> None:
        plan = solve(optimize_command, JOBS["trimmed_mixed_stock"])

        # The first stock type can be opened once only
        assert sum(1 for s in plan.sheets if s.stock_index == 0) <= 1
        assert all(s.stock_index in (0, 1) for s in plan.sheets)


class TestPartialPlacementRanking:
    """Fewer unplaced pieces outrank lower waste."""

    def test_fewer_unplaced_beats_lower_waste(self) -> None:
        """The big panel alone wastes least, but the three small ones place more."""
        request = {
            "pieces": [
                {"width": 900, "height": 900, "label": "Big"},
                {"width": 600, "height": 300, "quantity": 3, "label": "Small"},
            ],
            "stock": [{"width": 1000, "height": 1000, "kerf": 0, "quantityAvailable": 1}],
            "options": {"randomSeed": 1, "randomIterations": 12},
        }
        requests, stock, options = config_to_domain(load_config_from_dict(request))
        run = IterativeOptimizer(options).run(normalize_pieces(requests, stock), stock)

        assert len(run.baseline.unplaced) == 3
        assert run.baseline.waste_percentage == pytest.approx(19.0)
        assert len(run.solution.unplaced) == 1
        assert run.solution.waste_percentage == pytest.approx(46.0)
        assert run.solution.score < run.baseline.score

"""Application commands (use cases) for cutting optimization."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Sequence

from panelcut.application.config import (
    ConfigError,
    OptimizationRequestSchema,
    config_to_domain,
    load_config_from_dict,
)
from panelcut.application.dtos import CuttingPlan
from panelcut.application.optimizer import IterativeOptimizer, OptimizerOptions
from panelcut.application.result import Err, Ok
from panelcut.application.services.result_assembler import ResultAssemblerService
from panelcut.domain.exceptions import PanelCutError
from panelcut.domain.normalizer import normalize_pieces
from panelcut.domain.value_objects import PieceRequest, StockSheet

logger = logging.getLogger(__name__)


class OptimizeCuttingCommand:
    """Command to compute a multi-sheet cutting plan.

    Validates the pieces against the stock catalogue, runs the iterative
    optimizer and assembles the caller-facing plan. Validation failures
    are returned as ``Err`` values; a plan with unplaced pieces is an
    ``Ok``.
    """

    def __init__(
        self,
        assembler: ResultAssemblerService | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.assembler = assembler or ResultAssemblerService()
        self._clock = clock

    def execute(
        self,
        requests: Sequence[PieceRequest],
        stock: Sequence[StockSheet],
        options: OptimizerOptions | None = None,
        strict: bool = True,
    ) -> Ok[CuttingPlan] | Err:
        """Execute the optimization.

        Args:
            requests: Piece requests in caller order.
            stock: Stock catalogue in declared order.
            options: Optimizer configuration, defaults apply when omitted.
            strict: Reject pieces that fit no stock type up front instead
                of reporting them as unplaced.

        Returns:
            Ok wrapping the CuttingPlan, or Err with the error kind
            (``invalid_piece`` or ``empty_stock``).
        """
        return self._run(requests, stock, options or OptimizerOptions(), strict, self.assembler)

    def execute_request(
        self, request: dict[str, Any] | OptimizationRequestSchema
    ) -> Ok[CuttingPlan] | Err:
        """Execute the optimization for a raw or validated request.

        Raw dictionaries are validated against the request schema first;
        the loader's error type (``invalid_piece`` or ``invalid_request``)
        becomes the error kind.
        """
        if isinstance(request, OptimizationRequestSchema):
            schema = request
        else:
            try:
                schema = load_config_from_dict(request)
            except ConfigError as e:
                logger.warning("Rejected request (%s): %s", e.error_type, e.message)
                return Err(kind=e.error_type, message=e.message, details=e.details)

        try:
            requests, stock, options = config_to_domain(schema)
        except PanelCutError as e:
            return Err(kind=e.error_type, message=e.message, details=e.details)

        assembler = ResultAssemblerService(
            min_offcut_length=schema.options.min_offcut_length,
            min_offcut_width=schema.options.min_offcut_width,
        )
        return self._run(
            requests, stock, options, schema.options.strict_validation, assembler
        )

    def _run(
        self,
        requests: Sequence[PieceRequest],
        stock: Sequence[StockSheet],
        options: OptimizerOptions,
        strict: bool,
        assembler: ResultAssemblerService,
    ) -> Ok[CuttingPlan] | Err:
        try:
            pieces = normalize_pieces(
                requests,
                stock,
                allow_rotation=options.allow_rotation,
                strict=strict,
            )
        except PanelCutError as e:
            logger.warning("Rejected request (%s): %s", e.error_type, e.message)
            return Err(kind=e.error_type, message=e.message, details=e.details)

        optimizer = IterativeOptimizer(options, clock=self._clock)
        run = optimizer.run(pieces, stock)
        plan = assembler.assemble(run.solution, iterations=run.iterations)

        if not plan.is_complete:
            logger.warning(
                "%d of %d pieces could not be placed",
                plan.unplaced_pieces,
                plan.total_pieces,
            )
        return Ok(plan)

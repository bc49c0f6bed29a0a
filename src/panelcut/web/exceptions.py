"""Custom exceptions and error handlers for the REST API."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class OptimizationError(Exception):
    """Raised when an optimization request is rejected."""

    def __init__(
        self,
        message: str,
        error_type: str,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.details = details or []
        super().__init__(message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(OptimizationError)
    async def optimization_error_handler(
        request: Request, exc: OptimizationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details,
            },
        )

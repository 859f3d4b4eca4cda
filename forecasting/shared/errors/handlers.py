"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from forecasting.domain.forecast.errors import (
    AlgorithmNotFoundError,
    ForecastDomainError,
    OrchestrationError,
)

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_500 = 500
HTTP_502 = 502


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(AlgorithmNotFoundError)
    async def handle_algorithm_not_found(
        _request: Request, exc: AlgorithmNotFoundError
    ) -> JSONResponse:
        """Handle unknown algorithm identifiers."""
        logger.warning("Algorithm not found: %s", exc.name)
        return _error_response(HTTP_404, "Algorithm not found", exc.name)

    @app.exception_handler(OrchestrationError)
    async def handle_orchestration(
        _request: Request, exc: OrchestrationError
    ) -> JSONResponse:
        """Handle failed prediction runs. Already logged by the orchestrator."""
        return _error_response(HTTP_502, "Prediction failed", exc.message)

    @app.exception_handler(ForecastDomainError)
    async def handle_forecast_domain(
        _request: Request, exc: ForecastDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled forecast domain errors."""
        logger.error("Unhandled forecast domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")

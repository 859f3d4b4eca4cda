"""
Health check router.

Reports application version and whether the prediction store is reachable.
The service stays "ok" only while predictions can be persisted; an
unreachable store reports "degraded" with HTTP 503.
"""

from fastapi import APIRouter, Depends, Response, status

from forecasting.core.config import settings
from forecasting.infrastructure.forecast.prediction_result_repository import (
    PredictionResultRepositoryAdapter,
)
from forecasting.interfaces.forecast.dependencies import get_prediction_repository
from forecasting.interfaces.forecast.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
    summary="Health check",
    description="Returns service status, version and prediction store state.",
)
def health_check(
    response: Response,
    repository: PredictionResultRepositoryAdapter = Depends(get_prediction_repository),
) -> HealthResponse:
    """Return current application health status."""
    if repository.is_available():
        return HealthResponse(status="ok", version=settings.version, database="ok")
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="degraded", version=settings.version, database="unavailable"
    )

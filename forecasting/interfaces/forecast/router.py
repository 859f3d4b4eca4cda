"""
FastAPI router for the forecast bounded context.

All routes delegate to the orchestrator or use cases. No business logic here.
Endpoints that invoke a model or the anomaly detector share the heavy
rate limit.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from forecasting.application.forecast.dtos import GetRecentPredictionsQuery
from forecasting.application.forecast.get_recent_predictions import (
    GetRecentPredictionsUseCase,
)
from forecasting.application.forecast.orchestrator import PredictionOrchestrator
from forecasting.interfaces.forecast.dependencies import (
    get_prediction_orchestrator,
    get_recent_predictions_use_case,
)
from forecasting.interfaces.forecast.schemas import (
    AlgorithmInfoResponse,
    AlgorithmListResponse,
    AnomalyDetectionRequest,
    CloudPredictionRequest,
    ErrorResponse,
    LocalPredictionRequest,
    PredictionHistoryResponse,
    PredictionRecordItem,
)
from forecasting.shared.security.rate_limiting import HEAVY_RATE_LIMIT, limiter

router = APIRouter(prefix="/forecast", tags=["forecast"])


@router.post(
    "/predictions/local",
    response_model=dict[str, Any],
    responses={502: {"model": ErrorResponse}},
    summary="Run a local model prediction",
    description=(
        "Run the local model script, persist the canonical record and "
        "return the model output with the assigned prediction id."
    ),
)
@limiter.limit(HEAVY_RATE_LIMIT)
def run_local_prediction(
    request: Request,
    body: LocalPredictionRequest,
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
) -> dict[str, Any]:
    """Run a local prediction for a symbol and algorithm."""
    return orchestrator.run_local_prediction(
        symbol=body.symbol,
        algorithm_name=body.algorithm,
        feature=body.feature,
    )


@router.post(
    "/predictions/cloud",
    response_model=dict[str, Any],
    responses={502: {"model": ErrorResponse}},
    summary="Run a cloud model prediction",
    description="Call the remote model endpoint and return its output.",
)
@limiter.limit(HEAVY_RATE_LIMIT)
def run_cloud_prediction(
    request: Request,
    body: CloudPredictionRequest,
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
) -> dict[str, Any]:
    """Run a cloud prediction for a symbol and algorithm."""
    return orchestrator.run_cloud_prediction(
        symbol=body.symbol,
        algorithm_name=body.algorithm,
        prediction_type=body.prediction_type,
    )


@router.post(
    "/anomalies",
    response_model=dict[str, Any],
    responses={502: {"model": ErrorResponse}},
    summary="Detect anomalies",
    description="Return the anomaly verdict for a symbol and algorithm.",
)
@limiter.limit(HEAVY_RATE_LIMIT)
def run_anomaly_detection(
    request: Request,
    body: AnomalyDetectionRequest,
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
) -> dict[str, Any]:
    """Run anomaly detection for a symbol and algorithm."""
    return orchestrator.run_anomaly_detection(
        symbol=body.symbol,
        algorithm_name=body.algorithm,
    )


@router.get(
    "/predictions",
    response_model=PredictionHistoryResponse,
    summary="Get prediction history",
    description="Return up to 50 recent predictions for a symbol, newest first.",
)
def get_recent_predictions(
    symbol: str = Query(..., min_length=1, max_length=32),
    limit: int = Query(default=50, ge=1, le=50),
    use_case: GetRecentPredictionsUseCase = Depends(get_recent_predictions_use_case),
) -> PredictionHistoryResponse:
    """Get recent predictions for a symbol."""
    results = use_case.execute(GetRecentPredictionsQuery(symbol=symbol, limit=limit))
    return PredictionHistoryResponse(
        predictions=[
            PredictionRecordItem(
                id=r.id,
                symbol=r.symbol,
                algorithm_name=r.algorithm_name,
                prediction_type=r.prediction_type,
                prediction_time=r.prediction_time,
                predicted_value=r.predicted_value,
                confidence_score=r.confidence_score,
                is_anomaly=r.is_anomaly,
            )
            for r in results
        ]
    )


@router.get(
    "/algorithms",
    response_model=AlgorithmListResponse,
    summary="List algorithms",
)
def list_algorithms(
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
) -> AlgorithmListResponse:
    """List supported algorithm identifiers in display order."""
    return AlgorithmListResponse(algorithms=orchestrator.list_algorithms())


@router.get(
    "/algorithms/{name}",
    response_model=AlgorithmInfoResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Describe an algorithm",
)
def describe_algorithm(
    name: str,
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
) -> AlgorithmInfoResponse:
    """Return metadata for one algorithm (case-insensitive)."""
    descriptor = orchestrator.describe_algorithm(name)
    return AlgorithmInfoResponse(
        name=descriptor.name,
        display_name=descriptor.display_name,
        description=descriptor.description,
        type=descriptor.type,
        input_shape=descriptor.input_shape,
    )

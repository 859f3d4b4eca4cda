"""
Dependency injection for the forecast bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the forecast context.
"""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from forecasting.application.forecast.get_recent_predictions import (
    GetRecentPredictionsUseCase,
)
from forecasting.application.forecast.orchestrator import PredictionOrchestrator
from forecasting.core.config import settings
from forecasting.infrastructure.forecast.anomaly_detection_adapter import (
    RecentPredictionAnomalyDetector,
)
from forecasting.infrastructure.forecast.cloud_model_client import CloudModelClient
from forecasting.infrastructure.forecast.local_process_invoker import (
    LocalProcessInvoker,
)
from forecasting.infrastructure.forecast.prediction_result_repository import (
    PredictionResultRepositoryAdapter,
)


@lru_cache(maxsize=1)
def _get_db_engine() -> Engine:
    """Build the SQLAlchemy engine once and make sure the table exists."""
    engine = create_engine(settings.database_url, pool_pre_ping=True)
    PredictionResultRepositoryAdapter(engine=engine).ensure_table()
    return engine


def get_prediction_repository() -> PredictionResultRepositoryAdapter:
    """Build the prediction result repository."""
    return PredictionResultRepositoryAdapter(engine=_get_db_engine())


def get_prediction_orchestrator() -> PredictionOrchestrator:
    """Build PredictionOrchestrator with its infrastructure dependencies."""
    repository = get_prediction_repository()
    return PredictionOrchestrator(
        settings=settings,
        local_model=LocalProcessInvoker(settings),
        cloud_model=CloudModelClient(settings),
        anomaly_detector=RecentPredictionAnomalyDetector(settings, repository),
        repository=repository,
    )


def get_recent_predictions_use_case() -> GetRecentPredictionsUseCase:
    """Build GetRecentPredictionsUseCase with its infrastructure dependencies."""
    return GetRecentPredictionsUseCase(repository=get_prediction_repository())

"""
Adapter: Anomaly detection from prediction history.

Implements AnomalyDetectionPort.
Reports the anomaly verdict of the most recent persisted prediction for a
symbol/algorithm pair. The verdict was computed by the confidence
threshold policy when that prediction was recorded.
"""

import logging

from forecasting.core.config import Settings
from forecasting.domain.forecast.entities import (
    BackendPayload,
    DataSource,
    PredictionRequest,
)
from forecasting.domain.forecast.ports import (
    AnomalyDetectionPort,
    PredictionResultRepository,
)

logger = logging.getLogger(__name__)


class RecentPredictionAnomalyDetector(AnomalyDetectionPort):
    """Anomaly backend reading the latest stored prediction."""

    def __init__(
        self, settings: Settings, repository: PredictionResultRepository
    ) -> None:
        self._settings = settings
        self._repository = repository

    def detect(self, request: PredictionRequest) -> BackendPayload:
        """Return the anomaly verdict for a symbol/algorithm pair.

        With no stored prediction (or one without a confidence score) the
        verdict is not anomalous and ``anomaly_score`` is None.
        """
        latest = self._repository.get_latest(
            request.symbol, request.algorithm_name
        )
        if latest is None:
            logger.info(
                "No prediction history for symbol=%s algorithm=%s",
                request.symbol,
                request.algorithm_name,
            )

        score = None
        if latest is not None and latest.confidence_score is not None:
            score = float(latest.confidence_score)

        fields = {
            "is_anomaly": bool(latest and latest.is_anomaly),
            "anomaly_score": score,
            "threshold": float(self._settings.anomaly_threshold),
            "algorithm": request.algorithm_name,
            "symbol": request.symbol,
            "based_on_prediction_id": latest.id if latest else None,
        }
        return BackendPayload(source=DataSource.LOCAL, fields=fields)

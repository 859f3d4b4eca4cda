"""
Use case: Run predictions on the local or cloud model backends.

Input: symbol, algorithm identifier, optional feature / prediction type.
Output: the backend's raw fields, annotated with run metadata.
Side effects: local predictions are normalized, classified and persisted.
Failure cases: OrchestrationError wrapping any backend, payload or
persistence failure.

This is the single place where prediction failures are logged before
being converted into the caller-facing error.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from forecasting.core.config import Settings
from forecasting.domain.forecast import algorithm_catalog
from forecasting.domain.forecast.anomaly_classifier import classify
from forecasting.domain.forecast.entities import (
    AlgorithmDescriptor,
    DataSource,
    PredictionRequest,
    PredictionResult,
    PredictionType,
)
from forecasting.domain.forecast.errors import (
    AlgorithmNotFoundError,
    OrchestrationError,
)
from forecasting.domain.forecast.normalizer import normalize
from forecasting.domain.forecast.ports import (
    AnomalyDetectionPort,
    CloudModelPort,
    LocalModelPort,
    PredictionResultRepository,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PredictionOrchestrator:
    """Drives one prediction run end to end.

    Selects the backend, normalizes the payload into a canonical record,
    applies the confidence-threshold anomaly policy and persists the
    record. Also answers algorithm catalog queries. All dependencies are
    injected; calls are synchronous.
    """

    def __init__(
        self,
        settings: Settings,
        local_model: LocalModelPort,
        cloud_model: CloudModelPort,
        anomaly_detector: AnomalyDetectionPort,
        repository: PredictionResultRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._settings = settings
        self._local_model = local_model
        self._cloud_model = cloud_model
        self._anomaly_detector = anomaly_detector
        self._repository = repository
        self._clock = clock

    def run_local_prediction(
        self,
        symbol: str,
        algorithm_name: str,
        feature: Optional[str] = None,
    ) -> dict[str, Any]:
        """Run the local model, persist the canonical record, return the payload.

        Args:
            symbol: Market ticker symbol.
            algorithm_name: Algorithm identifier for the model script.
            feature: Optional input feature; defaults to the configured one.

        Returns:
            The backend's fields plus ``prediction_id`` and
            ``saved_to_database``.

        Raises:
            OrchestrationError: If any step fails.
        """
        request = PredictionRequest(
            symbol=symbol,
            algorithm_name=algorithm_name,
            feature_name=feature,
            prediction_type=PredictionType.PRICE,
        )
        try:
            payload = self._local_model.invoke(request)
            normalized = normalize(payload.fields)
            record = PredictionResult(
                symbol=symbol,
                algorithm_name=algorithm_name,
                prediction_type=PredictionType.PRICE.value,
                prediction_time=self._clock(),
                predicted_value=normalized.predicted_value,
                confidence_score=normalized.confidence_score,
                is_anomaly=classify(
                    normalized.confidence_score, self._settings.anomaly_threshold
                ),
            )
            saved = self._repository.save(record)
        except Exception as exc:
            logger.error(
                "Local prediction failed: symbol=%s algorithm=%s: %s",
                symbol,
                algorithm_name,
                exc,
                exc_info=True,
            )
            raise OrchestrationError("Local prediction", str(exc)) from exc

        logger.info(
            "Local prediction saved: id=%s symbol=%s algorithm=%s anomaly=%s",
            saved.id,
            symbol,
            algorithm_name,
            saved.is_anomaly,
        )
        result = dict(payload.fields)
        result["prediction_id"] = saved.id
        result["saved_to_database"] = True
        return result

    def run_cloud_prediction(
        self,
        symbol: str,
        algorithm_name: str,
        prediction_type: str = PredictionType.PRICE.value,
    ) -> dict[str, Any]:
        """Run the cloud model and return its payload with run metadata.

        The result is neither normalized nor persisted.

        Raises:
            OrchestrationError: If the remote call fails.
        """
        request = PredictionRequest(symbol=symbol, algorithm_name=algorithm_name)
        try:
            payload = self._cloud_model.invoke(request)
        except Exception as exc:
            logger.error(
                "Cloud prediction failed: symbol=%s algorithm=%s: %s",
                symbol,
                algorithm_name,
                exc,
                exc_info=True,
            )
            raise OrchestrationError("Cloud prediction", str(exc)) from exc

        result = dict(payload.fields)
        result.update(
            symbol=symbol,
            algorithm_name=algorithm_name,
            prediction_type=prediction_type,
            prediction_time=self._clock(),
            data_source=DataSource.CLOUD.value,
        )
        return result

    def run_anomaly_detection(
        self, symbol: str, algorithm_name: str
    ) -> dict[str, Any]:
        """Run anomaly detection and return the verdict with run metadata.

        Raises:
            OrchestrationError: If the detection backend fails.
        """
        request = PredictionRequest(
            symbol=symbol,
            algorithm_name=algorithm_name,
            prediction_type=PredictionType.ANOMALY,
        )
        try:
            payload = self._anomaly_detector.detect(request)
        except Exception as exc:
            logger.error(
                "Anomaly detection failed: symbol=%s algorithm=%s: %s",
                symbol,
                algorithm_name,
                exc,
                exc_info=True,
            )
            raise OrchestrationError("Anomaly detection", str(exc)) from exc

        result = dict(payload.fields)
        result.update(
            symbol=symbol,
            algorithm_name=algorithm_name,
            detection_time=self._clock(),
            data_source=DataSource.LOCAL.value,
        )
        return result

    def list_algorithms(self) -> list[str]:
        """Return the supported algorithm identifiers in display order."""
        return algorithm_catalog.list_algorithms()

    def describe_algorithm(self, name: str) -> AlgorithmDescriptor:
        """Return catalog metadata for an algorithm (case-insensitive).

        Raises:
            AlgorithmNotFoundError: If the identifier is not in the catalog.
        """
        descriptor = algorithm_catalog.describe(name)
        if descriptor is None:
            raise AlgorithmNotFoundError(name)
        return descriptor

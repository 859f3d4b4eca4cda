"""
Tests for the PredictionOrchestrator and history use case.

Unit tests use mocked ports and verify orchestration logic.
The end-to-end test runs a real model script and a SQLite store.
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from forecasting.application.forecast.dtos import GetRecentPredictionsQuery
from forecasting.application.forecast.get_recent_predictions import (
    GetRecentPredictionsUseCase,
)
from forecasting.application.forecast.orchestrator import PredictionOrchestrator
from forecasting.domain.forecast.anomaly_classifier import classify
from forecasting.domain.forecast.entities import (
    BackendPayload,
    DataSource,
    PredictionRequest,
    PredictionType,
)
from forecasting.domain.forecast.errors import (
    AlgorithmNotFoundError,
    BackendExecutionError,
    OrchestrationError,
    RemoteInvocationError,
)
from forecasting.domain.forecast.ports import (
    AnomalyDetectionPort,
    CloudModelPort,
    LocalModelPort,
)
from forecasting.infrastructure.forecast.anomaly_detection_adapter import (
    RecentPredictionAnomalyDetector,
)
from forecasting.infrastructure.forecast.local_process_invoker import (
    LocalProcessInvoker,
)
from forecasting.infrastructure.forecast.path_resolver import PathResolver

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _local_payload(**fields) -> BackendPayload:
    return BackendPayload(source=DataSource.LOCAL, fields=fields)


def _request_for(symbol: str, algorithm: str) -> PredictionRequest:
    return PredictionRequest(symbol=symbol, algorithm_name=algorithm)


@pytest.fixture
def local_model():
    return MagicMock(spec=LocalModelPort)


@pytest.fixture
def cloud_model():
    return MagicMock(spec=CloudModelPort)


@pytest.fixture
def anomaly_detector():
    return MagicMock(spec=AnomalyDetectionPort)


@pytest.fixture
def orchestrator(settings, local_model, cloud_model, anomaly_detector, repository):
    return PredictionOrchestrator(
        settings=settings,
        local_model=local_model,
        cloud_model=cloud_model,
        anomaly_detector=anomaly_detector,
        repository=repository,
        clock=lambda: NOW,
    )


class TestRunLocalPrediction:

    def test_persists_canonical_record(self, orchestrator, local_model, repository):
        local_model.invoke.return_value = _local_payload(
            predicted_value=150.25, confidence_score=0.42
        )

        result = orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        stored = repository.get_latest("AAPL", "SINGLE_LSTM")
        assert stored.id == result["prediction_id"]
        assert stored.prediction_type == "price_prediction"
        assert stored.predicted_value == Decimal("150.25")
        assert stored.confidence_score == Decimal("0.42")
        assert stored.is_anomaly is True

    def test_returns_backend_fields_plus_persistence_markers(
        self, orchestrator, local_model
    ):
        local_model.invoke.return_value = _local_payload(
            predicted_value=150.25, confidence_score=0.9, extra="kept"
        )

        result = orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        assert result["extra"] == "kept"
        assert result["predicted_value"] == 150.25
        assert result["saved_to_database"] is True
        assert isinstance(result["prediction_id"], int)

    def test_passes_request_to_backend(self, orchestrator, local_model):
        local_model.invoke.return_value = _local_payload()

        orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM", feature="ask_price")

        request = local_model.invoke.call_args.args[0]
        assert request.symbol == "AAPL"
        assert request.algorithm_name == "SINGLE_LSTM"
        assert request.feature_name == "ask_price"
        assert request.prediction_type is PredictionType.PRICE

    def test_missing_confidence_leaves_anomaly_unset(
        self, orchestrator, local_model, repository
    ):
        local_model.invoke.return_value = _local_payload(predicted_value="99.5")

        orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        stored = repository.get_latest("AAPL", "SINGLE_LSTM")
        assert stored.confidence_score is None
        assert stored.is_anomaly is None

    def test_confidence_at_threshold_is_not_anomalous(
        self, orchestrator, local_model, repository
    ):
        local_model.invoke.return_value = _local_payload(confidence_score="0.5")

        orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        assert repository.get_latest("AAPL", "SINGLE_LSTM").is_anomaly is False

    def test_stored_record_agrees_with_its_anomaly_flag(
        self, settings, orchestrator, local_model, repository
    ):
        local_model.invoke.return_value = _local_payload(
            predicted_value="123.456789012345", confidence_score="0.4999999"
        )

        orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        stored = repository.get_latest("AAPL", "SINGLE_LSTM")
        assert stored.predicted_value == Decimal("123.456789012345")
        assert stored.confidence_score == Decimal("0.4999999")
        assert stored.is_anomaly is True
        assert stored.is_anomaly == classify(
            stored.confidence_score, settings.anomaly_threshold
        )

    def test_backend_failure_is_wrapped(self, orchestrator, local_model, repository):
        local_model.invoke.side_effect = BackendExecutionError(
            "local model exit code: 1, output: boom", exit_code=1, output="boom"
        )

        with pytest.raises(OrchestrationError) as exc_info:
            orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        assert "boom" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, BackendExecutionError)
        assert repository.get_recent("AAPL") == []

    def test_invalid_payload_is_wrapped(self, orchestrator, local_model, repository):
        local_model.invoke.return_value = _local_payload(predicted_value="n/a")

        with pytest.raises(OrchestrationError, match="predicted_value"):
            orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        assert repository.get_recent("AAPL") == []

    def test_persistence_failure_is_wrapped(
        self, settings, local_model, cloud_model, anomaly_detector
    ):
        repository = MagicMock()
        repository.save.side_effect = RuntimeError("database is locked")
        local_model.invoke.return_value = _local_payload(predicted_value=1)
        orchestrator = PredictionOrchestrator(
            settings, local_model, cloud_model, anomaly_detector, repository
        )

        with pytest.raises(OrchestrationError, match="database is locked"):
            orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

    def test_failure_is_logged(self, orchestrator, local_model, caplog):
        local_model.invoke.side_effect = BackendExecutionError("boom")

        with pytest.raises(OrchestrationError):
            orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        assert "Local prediction failed" in caplog.text


class TestRunCloudPrediction:

    def test_annotates_payload_without_persisting(
        self, orchestrator, cloud_model, repository
    ):
        cloud_model.invoke.return_value = BackendPayload(
            source=DataSource.CLOUD, fields={"predicted_value": 101.5}
        )

        result = orchestrator.run_cloud_prediction("AAPL", "SINGLE_TRANSFORMER")

        assert result == {
            "predicted_value": 101.5,
            "symbol": "AAPL",
            "algorithm_name": "SINGLE_TRANSFORMER",
            "prediction_type": "price_prediction",
            "prediction_time": NOW,
            "data_source": "CLOUD",
        }
        assert repository.get_recent("AAPL") == []

    def test_remote_failure_is_wrapped(self, orchestrator, cloud_model):
        cloud_model.invoke.side_effect = RemoteInvocationError("empty response")

        with pytest.raises(OrchestrationError, match="empty response"):
            orchestrator.run_cloud_prediction("AAPL", "SINGLE_TRANSFORMER")


class TestRunAnomalyDetection:

    def test_annotates_detector_verdict(self, orchestrator, anomaly_detector):
        anomaly_detector.detect.return_value = _local_payload(
            is_anomaly=False, anomaly_score=0.8
        )

        result = orchestrator.run_anomaly_detection("AAPL", "SINGLE_LSTM")

        assert result["is_anomaly"] is False
        assert result["anomaly_score"] == 0.8
        assert result["detection_time"] == NOW
        assert result["data_source"] == "LOCAL"
        request = anomaly_detector.detect.call_args.args[0]
        assert request.prediction_type is PredictionType.ANOMALY

    def test_detector_failure_is_wrapped(self, orchestrator, anomaly_detector):
        anomaly_detector.detect.side_effect = RuntimeError("no connection")

        with pytest.raises(OrchestrationError, match="no connection"):
            orchestrator.run_anomaly_detection("AAPL", "SINGLE_LSTM")


class TestAlgorithmQueries:

    def test_lists_catalog_in_display_order(self, orchestrator):
        algorithms = orchestrator.list_algorithms()

        assert algorithms[0] == "SINGLE_LSTM"
        assert algorithms[-1] == "FUSION_LSTM_TRANSFORMER"
        assert len(algorithms) == 4

    def test_describe_is_case_insensitive(self, orchestrator):
        descriptor = orchestrator.describe_algorithm("single_transformer")

        assert descriptor.name == "SINGLE_TRANSFORMER"
        assert descriptor == orchestrator.describe_algorithm("SINGLE_TRANSFORMER")

    def test_describe_unknown_raises(self, orchestrator):
        with pytest.raises(AlgorithmNotFoundError, match="OTHER"):
            orchestrator.describe_algorithm("OTHER")


class TestRecentPredictionAnomalyDetector:

    def test_reports_latest_stored_verdict(
        self, settings, orchestrator, local_model, repository
    ):
        local_model.invoke.return_value = _local_payload(confidence_score=0.42)
        saved = orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")
        detector = RecentPredictionAnomalyDetector(settings, repository)

        payload = detector.detect(_request_for("AAPL", "SINGLE_LSTM"))

        assert payload.fields["is_anomaly"] is True
        assert payload.fields["anomaly_score"] == pytest.approx(0.42)
        assert payload.fields["threshold"] == 0.5
        assert payload.fields["based_on_prediction_id"] == saved["prediction_id"]

    def test_without_history_is_not_anomalous(self, settings, repository):
        detector = RecentPredictionAnomalyDetector(settings, repository)

        payload = detector.detect(_request_for("AAPL", "SINGLE_LSTM"))

        assert payload.fields["is_anomaly"] is False
        assert payload.fields["anomaly_score"] is None
        assert payload.fields["based_on_prediction_id"] is None


class TestGetRecentPredictionsUseCase:

    def test_maps_records_newest_first(self, orchestrator, local_model, repository):
        local_model.invoke.return_value = _local_payload(predicted_value=1)
        first = orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")
        second = orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        records = GetRecentPredictionsUseCase(repository).execute(
            GetRecentPredictionsQuery(symbol="AAPL")
        )

        assert [r.id for r in records] == [
            second["prediction_id"],
            first["prediction_id"],
        ]

    def test_limit_is_capped(self):
        repository = MagicMock()
        repository.get_recent.return_value = []

        GetRecentPredictionsUseCase(repository).execute(
            GetRecentPredictionsQuery(symbol="AAPL", limit=500)
        )

        repository.get_recent.assert_called_once_with("AAPL", 50)


class TestEndToEnd:
    """Real model script, real subprocess, SQLite persistence."""

    def test_local_prediction_for_aapl(
        self,
        settings,
        tmp_path,
        module_root,
        model_script,
        echo_model_source,
        cloud_model,
        anomaly_detector,
        repository,
    ):
        model_script(module_root, echo_model_source)
        invoker = LocalProcessInvoker(
            settings,
            resolver=PathResolver(
                settings.local_model_path, settings.local_data_file, cwd=tmp_path
            ),
        )
        orchestrator = PredictionOrchestrator(
            settings, invoker, cloud_model, anomaly_detector, repository
        )

        result = orchestrator.run_local_prediction("AAPL", "SINGLE_LSTM")

        stored = repository.get_latest("AAPL", "SINGLE_LSTM")
        assert stored.predicted_value == Decimal("150.25")
        assert stored.confidence_score == Decimal("0.42")
        assert stored.is_anomaly is True
        assert result["prediction_id"] == stored.id
        assert result["saved_to_database"] is True
        assert result["symbol"] == "AAPL"
        assert result["feature"] == "bid_price"
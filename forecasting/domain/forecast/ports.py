"""
Port interfaces (ABCs) for the forecast bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from forecasting.domain.forecast.entities import (
    BackendPayload,
    PredictionRequest,
    PredictionResult,
)


class LocalModelPort(ABC):
    """Port for running a prediction with the local model process."""

    @abstractmethod
    def invoke(self, request: PredictionRequest) -> BackendPayload:
        """Run the local model for a request and return its raw payload.

        Raises:
            BackendExecutionError: If the process fails or reports an error.
        """
        raise NotImplementedError


class CloudModelPort(ABC):
    """Port for running a prediction against the remote model endpoint."""

    @abstractmethod
    def invoke(self, request: PredictionRequest) -> BackendPayload:
        """Perform one request/response round trip and return the payload.

        Raises:
            RemoteInvocationError: If the call fails or the response is empty.
        """
        raise NotImplementedError


class AnomalyDetectionPort(ABC):
    """Port for anomaly detection backends."""

    @abstractmethod
    def detect(self, request: PredictionRequest) -> BackendPayload:
        """Return the backend's anomaly verdict for a symbol/algorithm."""
        raise NotImplementedError


class PredictionResultRepository(ABC):
    """Port for persisting and retrieving canonical prediction records."""

    @abstractmethod
    def save(self, result: PredictionResult) -> PredictionResult:
        """Persist a record and return it with its assigned id."""
        raise NotImplementedError

    @abstractmethod
    def get_recent(self, symbol: str, limit: int = 50) -> list[PredictionResult]:
        """Return the latest records for a symbol, newest first."""
        raise NotImplementedError

    @abstractmethod
    def get_latest(
        self, symbol: str, algorithm_name: str
    ) -> Optional[PredictionResult]:
        """Return the newest record for a symbol/algorithm pair, or None."""
        raise NotImplementedError

"""
Adapter: Cloud model endpoint.

Implements CloudModelPort.
Performs a single blocking HTTP POST against the configured remote
prediction endpoint. No retries are attempted here.
"""

import logging
from typing import Optional

import httpx

from forecasting.core.config import Settings
from forecasting.domain.forecast.entities import (
    BackendPayload,
    DataSource,
    PredictionRequest,
)
from forecasting.domain.forecast.errors import RemoteInvocationError
from forecasting.domain.forecast.ports import CloudModelPort

logger = logging.getLogger(__name__)


class CloudModelClient(CloudModelPort):
    """HTTP client for the remote prediction model.

    Args:
        settings: Application settings (endpoint URL, window, timeout).
        client: Optional preconfigured ``httpx.Client``. When omitted a
            short-lived client is created per call.
    """

    def __init__(
        self, settings: Settings, client: Optional[httpx.Client] = None
    ) -> None:
        self._settings = settings
        self._client = client

    def invoke(self, request: PredictionRequest) -> BackendPayload:
        """POST the request and return the decoded JSON object.

        Raises:
            RemoteInvocationError: On missing configuration, transport or
                HTTP status failure, or an empty or non-object response.
        """
        url = self._settings.cloud_model_url
        if not url:
            raise RemoteInvocationError("cloud model URL is not configured")

        body = {
            "symbol": request.symbol,
            "algorithm": request.algorithm_name,
            "prediction_window": self._settings.prediction_window,
        }
        logger.info(
            "Calling cloud model: symbol=%s algorithm=%s",
            request.symbol,
            request.algorithm_name,
        )

        try:
            response = self._post(url, body)
            response.raise_for_status()
            data = response.json() if response.content.strip() else None
        except httpx.HTTPError as exc:
            raise RemoteInvocationError(str(exc)) from exc
        except ValueError as exc:
            raise RemoteInvocationError(f"invalid JSON response: {exc}") from exc

        if not data:
            raise RemoteInvocationError("empty response")
        if not isinstance(data, dict):
            raise RemoteInvocationError(
                f"expected a JSON object, got {type(data).__name__}"
            )
        return BackendPayload(source=DataSource.CLOUD, fields=data)

    def _post(self, url: str, body: dict) -> httpx.Response:
        timeout = self._settings.cloud_timeout_seconds
        if self._client is not None:
            return self._client.post(url, json=body, timeout=timeout)
        with httpx.Client(timeout=timeout) as client:
            return client.post(url, json=body)

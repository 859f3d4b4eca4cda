"""
Domain entities for the forecast bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class PredictionType(Enum):
    """Kind of prediction requested from a backend."""

    PRICE = "price_prediction"
    ANOMALY = "anomaly_detection"


class DataSource(Enum):
    """Backend family that produced a payload."""

    LOCAL = "LOCAL"
    CLOUD = "CLOUD"


@dataclass(frozen=True)
class PredictionRequest:
    """A single (symbol, algorithm) prediction request.

    Attributes:
        symbol: Market ticker symbol.
        algorithm_name: Algorithm identifier passed through to the backend.
        feature_name: Optional input feature for single-feature models.
            When absent, the configured default feature is used.
        prediction_type: Kind of prediction requested.
    """

    symbol: str
    algorithm_name: str
    feature_name: Optional[str] = None
    prediction_type: PredictionType = PredictionType.PRICE


@dataclass(frozen=True)
class BackendPayload:
    """Raw result returned verbatim by a prediction backend.

    ``fields`` has no fixed schema. Only the result normalizer may
    interpret its values; everything else treats it as opaque.
    """

    source: DataSource
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizedPrediction:
    """Numeric values extracted from a backend payload."""

    predicted_value: Optional[Decimal] = None
    confidence_score: Optional[Decimal] = None


@dataclass(frozen=True)
class PredictionResult:
    """Canonical, persisted prediction record.

    ``id`` is assigned by the repository on save. ``is_anomaly`` stays
    ``None`` unless the backend reported a numeric confidence score.
    """

    symbol: str
    algorithm_name: str
    prediction_type: str
    prediction_time: datetime
    predicted_value: Optional[Decimal] = None
    confidence_score: Optional[Decimal] = None
    is_anomaly: Optional[bool] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class AlgorithmDescriptor:
    """Descriptive metadata for one prediction algorithm."""

    name: str
    display_name: str
    description: str
    type: str
    input_shape: str

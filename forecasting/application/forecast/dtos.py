"""
Data Transfer Objects for the forecast application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class GetRecentPredictionsQuery:
    """Input DTO for reading prediction history.

    Attributes:
        symbol: Market ticker symbol.
        limit: Maximum number of records to return.
    """

    symbol: str
    limit: int = 50


@dataclass(frozen=True)
class PredictionRecord:
    """Output DTO for one persisted prediction."""

    id: int
    symbol: str
    algorithm_name: str
    prediction_type: str
    prediction_time: datetime
    predicted_value: Optional[Decimal]
    confidence_score: Optional[Decimal]
    is_anomaly: Optional[bool]

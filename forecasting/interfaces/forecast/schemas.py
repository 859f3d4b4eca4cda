"""
Pydantic schemas for forecast API request/response validation.

These schemas enforce input validation and define the API contract.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

SYMBOL_DESCRIPTION = "Market ticker symbol"
SYMBOL_PATTERN = r"^[A-Za-z0-9._-]+$"
SYMBOL_MIN_LEN = 1
SYMBOL_MAX_LEN = 32
ALGORITHM_DESCRIPTION = "Algorithm identifier, e.g. SINGLE_LSTM"


class LocalPredictionRequest(BaseModel):
    """Request schema for the local model prediction endpoint.

    Attributes:
        symbol: Market ticker symbol.
        algorithm: Algorithm identifier passed to the model script.
        feature: Optional input feature for single-feature models.
    """

    symbol: str = Field(
        ...,
        min_length=SYMBOL_MIN_LEN,
        max_length=SYMBOL_MAX_LEN,
        pattern=SYMBOL_PATTERN,
        description=SYMBOL_DESCRIPTION,
    )
    algorithm: str = Field(..., min_length=1, max_length=64, description=ALGORITHM_DESCRIPTION)
    feature: Optional[str] = Field(
        default=None, max_length=64, description="Input feature name"
    )


class CloudPredictionRequest(BaseModel):
    """Request schema for the cloud model prediction endpoint."""

    symbol: str = Field(
        ...,
        min_length=SYMBOL_MIN_LEN,
        max_length=SYMBOL_MAX_LEN,
        pattern=SYMBOL_PATTERN,
        description=SYMBOL_DESCRIPTION,
    )
    algorithm: str = Field(..., min_length=1, max_length=64, description=ALGORITHM_DESCRIPTION)
    prediction_type: str = Field(default="price_prediction", max_length=32)


class AnomalyDetectionRequest(BaseModel):
    """Request schema for the anomaly detection endpoint."""

    symbol: str = Field(
        ...,
        min_length=SYMBOL_MIN_LEN,
        max_length=SYMBOL_MAX_LEN,
        pattern=SYMBOL_PATTERN,
        description=SYMBOL_DESCRIPTION,
    )
    algorithm: str = Field(..., min_length=1, max_length=64, description=ALGORITHM_DESCRIPTION)


class PredictionRecordItem(BaseModel):
    """A single persisted prediction in the history response."""

    id: int
    symbol: str
    algorithm_name: str
    prediction_type: str
    prediction_time: datetime
    predicted_value: Optional[Decimal]
    confidence_score: Optional[Decimal]
    is_anomaly: Optional[bool]


class PredictionHistoryResponse(BaseModel):
    """Response schema for the prediction history endpoint."""

    predictions: list[PredictionRecordItem]


class AlgorithmListResponse(BaseModel):
    """Supported algorithm identifiers in display order."""

    algorithms: list[str]


class AlgorithmInfoResponse(BaseModel):
    """Descriptive metadata for one algorithm."""

    name: str
    display_name: str
    description: str
    type: str
    input_shape: str


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    database: str

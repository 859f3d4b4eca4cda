"""
Use case: Read the recent prediction history of a symbol.

Input: GetRecentPredictionsQuery (symbol, limit)
Output: list[PredictionRecord], newest first.
Side effects: None.
"""

import logging

from forecasting.application.forecast.dtos import (
    GetRecentPredictionsQuery,
    PredictionRecord,
)
from forecasting.domain.forecast.ports import PredictionResultRepository

logger = logging.getLogger(__name__)

MAX_LIMIT = 50


class GetRecentPredictionsUseCase:
    """Returns up to 50 persisted predictions for a symbol."""

    def __init__(self, repository: PredictionResultRepository) -> None:
        self._repository = repository

    def execute(self, query: GetRecentPredictionsQuery) -> list[PredictionRecord]:
        limit = max(1, min(query.limit, MAX_LIMIT))
        logger.debug("Reading prediction history: symbol=%s limit=%d", query.symbol, limit)

        return [
            PredictionRecord(
                id=r.id,
                symbol=r.symbol,
                algorithm_name=r.algorithm_name,
                prediction_type=r.prediction_type,
                prediction_time=r.prediction_time,
                predicted_value=r.predicted_value,
                confidence_score=r.confidence_score,
                is_anomaly=r.is_anomaly,
            )
            for r in self._repository.get_recent(query.symbol, limit)
        ]

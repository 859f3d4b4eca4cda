"""
Adapter: Prediction result repository.

Implements PredictionResultRepository port.
Persists canonical prediction records to the ``prediction_results`` table
and reads back prediction history. Ids are assigned by the database.
Decimal values are stored as their exact text form, so a stored record
reads back with the same digits its anomaly flag was computed from.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    insert,
    select,
)
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import TypeDecorator

from forecasting.domain.forecast.entities import PredictionResult
from forecasting.domain.forecast.ports import PredictionResultRepository

logger = logging.getLogger(__name__)


class ExactDecimal(TypeDecorator):
    """Stores ``Decimal`` values as text, without rounding or scale limits."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect) -> Optional[str]:
        if value is None:
            return None
        return str(Decimal(str(value)))

    def process_result_value(self, value, dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)


metadata = MetaData()

prediction_results = Table(
    "prediction_results",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("symbol", String(32), nullable=False),
    Column("algorithm_name", String(64), nullable=False),
    Column("prediction_type", String(32), nullable=False),
    Column("prediction_time", DateTime(timezone=True), nullable=False),
    Column("predicted_value", ExactDecimal, nullable=True),
    Column("confidence_score", ExactDecimal, nullable=True),
    Column("is_anomaly", Boolean, nullable=True),
    Index("ix_prediction_results_symbol_time", "symbol", "prediction_time"),
)


def _row_to_entity(row: RowMapping) -> PredictionResult:
    return PredictionResult(
        id=row["id"],
        symbol=row["symbol"],
        algorithm_name=row["algorithm_name"],
        prediction_type=row["prediction_type"],
        prediction_time=row["prediction_time"],
        predicted_value=row["predicted_value"],
        confidence_score=row["confidence_score"],
        is_anomaly=row["is_anomaly"],
    )


class PredictionResultRepositoryAdapter(PredictionResultRepository):
    """SQLAlchemy implementation of the prediction result repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def ensure_table(self) -> None:
        """Create the table and index if they do not exist (idempotent)."""
        metadata.create_all(self._engine)

    def save(self, result: PredictionResult) -> PredictionResult:
        """Insert a record and return a copy carrying the assigned id.

        Args:
            result: The record to persist. Its ``id`` is ignored.

        Returns:
            The persisted record with its database id.
        """
        stmt = insert(prediction_results).values(
            symbol=result.symbol,
            algorithm_name=result.algorithm_name,
            prediction_type=result.prediction_type,
            prediction_time=result.prediction_time,
            predicted_value=result.predicted_value,
            confidence_score=result.confidence_score,
            is_anomaly=result.is_anomaly,
        )
        with self._engine.begin() as conn:
            new_id = conn.execute(stmt).inserted_primary_key[0]
        logger.debug(
            "Saved prediction result: id=%s symbol=%s algorithm=%s",
            new_id,
            result.symbol,
            result.algorithm_name,
        )
        return replace(result, id=new_id)

    def get_recent(self, symbol: str, limit: int = 50) -> list[PredictionResult]:
        """Return the newest records for a symbol, newest first."""
        stmt = (
            select(prediction_results)
            .where(prediction_results.c.symbol == symbol)
            .order_by(
                prediction_results.c.prediction_time.desc(),
                prediction_results.c.id.desc(),
            )
            .limit(limit)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_entity(row) for row in rows]

    def get_latest(
        self, symbol: str, algorithm_name: str
    ) -> Optional[PredictionResult]:
        """Return the newest record for a symbol/algorithm pair, or None."""
        stmt = (
            select(prediction_results)
            .where(
                prediction_results.c.symbol == symbol,
                prediction_results.c.algorithm_name == algorithm_name,
            )
            .order_by(
                prediction_results.c.prediction_time.desc(),
                prediction_results.c.id.desc(),
            )
            .limit(1)
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_to_entity(row) if row else None

    def is_available(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self._engine.connect() as conn:
                conn.execute(select(1))
        except SQLAlchemyError:
            logger.warning("Prediction store is unreachable", exc_info=True)
            return False
        return True

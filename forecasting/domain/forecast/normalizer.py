"""
Result normalization for backend payloads.

This is the only place where untyped backend fields are interpreted.
Numbers are coerced through their string representation into exact
decimals, so ``150.25`` and ``"150.25"`` yield the same value and
trailing digits such as ``"123.456000"`` are preserved.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from forecasting.domain.forecast.entities import NormalizedPrediction
from forecasting.domain.forecast.errors import InvalidPayloadError

PREDICTED_VALUE_KEY = "predicted_value"
CONFIDENCE_SCORE_KEY = "confidence_score"


def to_decimal(field: str, value: Any) -> Optional[Decimal]:
    """Coerce a payload value to an exact decimal.

    Args:
        field: Payload key, used for error context.
        value: Native number, numeric string, or None.

    Returns:
        The decimal value, or None when the value is absent.

    Raises:
        InvalidPayloadError: If the value is not a finite number.
    """
    if value is None:
        return None
    # bool is an int subclass; str(True) is not a number anyway
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise InvalidPayloadError(field, value)
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise InvalidPayloadError(field, value) from exc
    if not result.is_finite():
        raise InvalidPayloadError(field, value)
    return result


def normalize(fields: Mapping[str, Any]) -> NormalizedPrediction:
    """Extract the canonical numeric values from a raw payload."""
    return NormalizedPrediction(
        predicted_value=to_decimal(
            PREDICTED_VALUE_KEY, fields.get(PREDICTED_VALUE_KEY)
        ),
        confidence_score=to_decimal(
            CONFIDENCE_SCORE_KEY, fields.get(CONFIDENCE_SCORE_KEY)
        ),
    )

"""Confidence-threshold anomaly policy."""

from decimal import Decimal
from typing import Optional


def classify(
    confidence_score: Optional[Decimal], threshold: Decimal
) -> Optional[bool]:
    """Flag a prediction as anomalous when its confidence is below threshold.

    A score equal to the threshold is not anomalous. Without a score there
    is nothing to compare, so the flag stays unset.
    """
    if confidence_score is None:
        return None
    return confidence_score < threshold

"""
Static registry of the supported prediction algorithms.

The listing order is the display order. Adding an algorithm means adding
an entry to ``_CATALOG``.
"""

from typing import Optional

from forecasting.domain.forecast.entities import AlgorithmDescriptor

_DEEP_LEARNING = "Deep learning"
_HYBRID = "Deep learning hybrid"

_CATALOG: dict[str, AlgorithmDescriptor] = {
    "SINGLE_LSTM": AlgorithmDescriptor(
        name="SINGLE_LSTM",
        display_name="Single-feature LSTM",
        description="LSTM time-series model over a single input feature",
        type=_DEEP_LEARNING,
        input_shape="Univariate time series",
    ),
    "SINGLE_TRANSFORMER": AlgorithmDescriptor(
        name="SINGLE_TRANSFORMER",
        display_name="Single-feature Transformer",
        description="Transformer time-series model over a single input feature",
        type=_DEEP_LEARNING,
        input_shape="Univariate time series",
    ),
    "SERIAL_LSTM_TRANSFORMER": AlgorithmDescriptor(
        name="SERIAL_LSTM_TRANSFORMER",
        display_name="Serial hybrid (LSTM -> Transformer)",
        description="LSTM encoder followed by a Transformer sequence model",
        type=_HYBRID,
        input_shape="Univariate or low-dimensional time series",
    ),
    "FUSION_LSTM_TRANSFORMER": AlgorithmDescriptor(
        name="FUSION_LSTM_TRANSFORMER",
        display_name="Feature-fusion hybrid (multivariate, learned positions)",
        description=(
            "Multivariate input with fused LSTM and Transformer branches "
            "and learnable positional encoding"
        ),
        type=_HYBRID,
        input_shape="Multivariate time series",
    ),
}


def list_algorithms() -> list[str]:
    """Return the supported algorithm identifiers in display order."""
    return list(_CATALOG)


def describe(identifier: str) -> Optional[AlgorithmDescriptor]:
    """Return metadata for an algorithm, matching case-insensitively.

    Returns:
        The descriptor, or None if the identifier is unknown.
    """
    return _CATALOG.get(identifier.strip().upper())

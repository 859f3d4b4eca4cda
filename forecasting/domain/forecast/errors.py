"""
Domain-specific errors for the forecast bounded context.

All errors raised from the domain and its adapters are defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from typing import Any, Optional


class ForecastDomainError(Exception):
    """Base error for all forecast domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class BackendExecutionError(ForecastDomainError):
    """Raised when the local model process fails or returns an error.

    Carries the process exit code and the captured output, when known,
    as diagnostic context.
    """

    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        output: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output


class RemoteInvocationError(ForecastDomainError):
    """Raised when the cloud model round trip fails or returns nothing."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Cloud model call failed: {reason}")
        self.reason = reason


class InvalidPayloadError(ForecastDomainError):
    """Raised when a numeric payload field cannot be coerced to a decimal."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"Invalid numeric value for {field}: {value!r}")
        self.field = field
        self.value = value


class OrchestrationError(ForecastDomainError):
    """Caller-facing error wrapping any failure of a prediction run."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"{operation} failed: {reason}")
        self.operation = operation
        self.reason = reason


class AlgorithmNotFoundError(ForecastDomainError):
    """Raised when an algorithm identifier is not in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Algorithm not found: {name}")
        self.name = name

from __future__ import annotations

DEFAULT_PROVIDER_MESSAGE = (
    "An unexpected error occurred while analyzing the stock."
)


class AnalysisError(Exception):
    """Base class for every error raised by the analysis engine."""

    error_code = "ANALYSIS_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AnalysisError, ValueError):
    """Rejected user input (e.g. an empty ticker symbol)."""

    error_code = "ANALYSIS_INPUT_INVALID"


class ProviderError(AnalysisError):
    """The external analysis provider failed; the message is user-facing."""

    error_code = "ANALYSIS_PROVIDER_FAILED"


class SchemaError(ProviderError):
    """The provider returned a payload that breaks the analysis contract."""

    error_code = "ANALYSIS_PAYLOAD_SCHEMA_INVALID"

    def __init__(self, message: str, *, missing_keys: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing_keys = missing_keys


class PersistenceError(AnalysisError):
    """Durable storage could not be read, written or parsed."""

    error_code = "ANALYSIS_PERSISTENCE_FAILED"

from .saved_store import SavedAnalysisStore, format_capture_date
from .session import (
    AnalysisSession,
    SessionState,
    SessionStatus,
    as_provider_error,
    normalize_symbol,
)

__all__ = [
    "AnalysisSession",
    "SavedAnalysisStore",
    "SessionState",
    "SessionStatus",
    "format_capture_date",
    "as_provider_error",
    "normalize_symbol",
]

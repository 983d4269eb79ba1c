from .analysis_client import AnalysisProvider, LlmAnalysisProvider
from .storage import (
    DurableStorage,
    InMemoryStorage,
    SqlKeyValueStorage,
    build_sql_storage,
)

__all__ = [
    "AnalysisProvider",
    "DurableStorage",
    "InMemoryStorage",
    "LlmAnalysisProvider",
    "SqlKeyValueStorage",
    "build_sql_storage",
]

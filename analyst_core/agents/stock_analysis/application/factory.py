from __future__ import annotations

from analyst_core.agents.stock_analysis.application.saved_store import (
    SavedAnalysisStore,
)
from analyst_core.agents.stock_analysis.application.session import AnalysisSession
from analyst_core.agents.stock_analysis.data.analysis_client import (
    AnalysisProvider,
    LlmAnalysisProvider,
)
from analyst_core.agents.stock_analysis.data.storage import (
    DurableStorage,
    build_sql_storage,
)


def build_saved_analysis_store(
    storage: DurableStorage | None = None,
) -> SavedAnalysisStore:
    return SavedAnalysisStore(storage or build_sql_storage())


def build_analysis_session(
    *,
    provider: AnalysisProvider | None = None,
    storage: DurableStorage | None = None,
) -> AnalysisSession:
    return AnalysisSession(
        provider=provider or LlmAnalysisProvider(),
        store=build_saved_analysis_store(storage),
    )

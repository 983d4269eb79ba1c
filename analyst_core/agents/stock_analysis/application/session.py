from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from analyst_core.agents.stock_analysis.application.saved_store import (
    SavedAnalysisStore,
)
from analyst_core.agents.stock_analysis.data.analysis_client import AnalysisProvider
from analyst_core.agents.stock_analysis.domain.models import (
    AnalysisPayload,
    SavedAnalysis,
    ScoreResult,
)
from analyst_core.agents.stock_analysis.domain.policies import score_analysis
from analyst_core.agents.stock_analysis.interface.serializers import build_share_text
from analyst_core.shared.kernel.errors import (
    DEFAULT_PROVIDER_MESSAGE,
    ProviderError,
    ValidationError,
)
from analyst_core.shared.kernel.tools.logger import get_logger, log_context, log_event

logger = get_logger(__name__)


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    symbol: str = ""
    error: str | None = None
    payload: AnalysisPayload | None = None
    result: ScoreResult | None = None
    browsing_saved: bool = False
    request_token: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "symbol": self.symbol,
            "error": self.error,
            "payload": self.payload.to_dict() if self.payload else None,
            "result": self.result.to_dict() if self.result else None,
            "browsing_saved": self.browsing_saved,
        }


def normalize_symbol(symbol: object) -> str:
    if not isinstance(symbol, str) or not symbol.strip():
        raise ValidationError("Please enter a stock symbol.")
    return symbol.strip()


def as_provider_error(error: BaseException) -> ProviderError:
    """Anything other than a ProviderError surfaces with the generic message."""
    if isinstance(error, ProviderError) and error.message:
        return error
    wrapped = ProviderError(DEFAULT_PROVIDER_MESSAGE)
    wrapped.__cause__ = error
    return wrapped


class AnalysisSession:
    """
    One user's analysis cycle: idle -> loading -> success | failed.

    A submit made while another is in flight replaces it. Every completion
    carries the token of the submit that started it and is dropped unless it
    is still the latest one.
    """

    def __init__(
        self,
        provider: AnalysisProvider,
        store: SavedAnalysisStore,
        *,
        score_fn: Callable[[AnalysisPayload], ScoreResult] = score_analysis,
    ) -> None:
        self._provider = provider
        self._store = store
        self._score_fn = score_fn
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def store(self) -> SavedAnalysisStore:
        return self._store

    def snapshot(self) -> SessionState:
        return self._state

    def begin_submit(self, symbol: object) -> int:
        normalized = normalize_symbol(symbol)
        token = self._state.request_token + 1
        if self._state.status is SessionStatus.LOADING:
            log_event(
                logger,
                event="analysis_request_superseded",
                message="pending analysis request replaced by a newer submit",
                fields={"symbol": self._state.symbol, "new_symbol": normalized},
            )
        self._state = SessionState(
            status=SessionStatus.LOADING,
            symbol=normalized,
            request_token=token,
        )
        return token

    def complete_success(self, token: int, payload: AnalysisPayload) -> bool:
        if self._is_stale(token):
            return False
        try:
            result = self._score_fn(payload)
        except ProviderError as exc:
            return self.complete_failure(token, exc)

        self._state = replace(
            self._state,
            status=SessionStatus.SUCCESS,
            error=None,
            payload=payload,
            result=result,
        )
        log_event(
            logger,
            event="analysis_scored",
            message="analysis scored",
            fields={
                "symbol": payload.symbol,
                "total_score": result.total_score,
                "rating": result.rating,
            },
        )
        return True

    def complete_failure(self, token: int, error: BaseException) -> bool:
        if self._is_stale(token):
            return False
        provider_error = as_provider_error(error)
        self._state = replace(
            self._state,
            status=SessionStatus.FAILED,
            error=provider_error.message,
            payload=None,
            result=None,
        )
        log_event(
            logger,
            event="analysis_failed",
            message="analysis request failed",
            level=logging.WARNING,
            error_code=provider_error.error_code,
            fields={"symbol": self._state.symbol, "exception": str(error)},
        )
        return True

    def _is_stale(self, token: int) -> bool:
        stale = (
            token != self._state.request_token
            or self._state.status is not SessionStatus.LOADING
        )
        if stale:
            log_event(
                logger,
                event="analysis_response_discarded",
                message="stale analysis response discarded",
                fields={"token": token, "latest_token": self._state.request_token},
            )
        return stale

    async def submit(self, symbol: object) -> SessionState:
        token = self.begin_submit(symbol)
        requested = self._state.symbol
        with log_context(ticker=requested, request_token=token):
            try:
                payload = await self._provider.fetch_analysis(requested)
            except Exception as exc:
                self.complete_failure(token, exc)
            else:
                self.complete_success(token, payload)
        return self._state

    async def save(self) -> str | None:
        state = self._state
        if (
            state.status is not SessionStatus.SUCCESS
            or state.payload is None
            or state.result is None
        ):
            log_event(
                logger,
                event="analysis_save_skipped",
                message="nothing to save; no scored analysis is displayed",
                level=logging.WARNING,
            )
            return None
        return await self._store.save(state.payload, state.result)

    def load_saved(self, entry: SavedAnalysis) -> SessionState:
        self._state = SessionState(
            status=SessionStatus.SUCCESS,
            symbol=entry.symbol,
            payload=entry.data,
            result=entry.result,
            browsing_saved=False,
            request_token=self._state.request_token + 1,
        )
        log_event(
            logger,
            event="saved_analysis_loaded",
            message="saved analysis loaded into session",
            fields={"id": entry.id, "symbol": entry.symbol},
        )
        return self._state

    async def load_saved_by_id(self, analysis_id: str) -> SessionState | None:
        entry = await self._store.load(analysis_id)
        if entry is None:
            return None
        return self.load_saved(entry)

    def toggle_saved(self) -> SessionState:
        self._state = replace(
            self._state, browsing_saved=not self._state.browsing_saved
        )
        return self._state

    def reset(self) -> SessionState:
        self._state = SessionState(request_token=self._state.request_token + 1)
        return self._state

    def share_text(self) -> str | None:
        state = self._state
        if state.payload is None or state.result is None:
            return None
        return build_share_text(state.payload, state.result)

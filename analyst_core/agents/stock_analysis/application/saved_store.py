from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime

from analyst_core.agents.stock_analysis.data.storage import DurableStorage
from analyst_core.agents.stock_analysis.domain.models import (
    AnalysisPayload,
    SavedAnalysis,
    ScoreResult,
)
from analyst_core.agents.stock_analysis.interface.parsers import (
    parse_saved_analyses,
)
from analyst_core.agents.stock_analysis.interface.serializers import (
    serialize_saved_analyses,
)
from analyst_core.config.storage_config import SAVED_ANALYSES_KEY
from analyst_core.shared.kernel.errors import PersistenceError
from analyst_core.shared.kernel.tools.logger import get_logger, log_event

logger = get_logger(__name__)


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def format_capture_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


class SavedAnalysisStore:
    """
    Most-recent-first collection of saved analyses.

    The whole collection is persisted as one JSON document under a single
    storage key. It is read lazily on first use; unreadable data counts as an
    empty collection. The first read and every mutation run under one lock.
    Write failures are logged and the in-session collection keeps the change.
    """

    def __init__(
        self,
        storage: DurableStorage,
        *,
        key: str = SAVED_ANALYSES_KEY,
        clock: Callable[[], int] = _epoch_millis,
        today: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._today = today
        self._entries: list[SavedAnalysis] | None = None
        self._last_id = 0
        self._lock = asyncio.Lock()

    async def _ensure_loaded(self) -> list[SavedAnalysis]:
        # Caller holds self._lock
        if self._entries is None:
            self._entries = await self._read()
        return self._entries

    async def _read(self) -> list[SavedAnalysis]:
        try:
            raw = await self._storage.get(self._key)
            if raw is None:
                return []
            return parse_saved_analyses(raw)
        except PersistenceError as exc:
            self._log_persistence_failure("saved_analyses_corrupt", exc)
        except Exception as exc:
            self._log_persistence_failure(
                "saved_analyses_read_failed",
                PersistenceError(f"Saved analyses could not be read: {exc}"),
            )
        return []

    async def _persist(self, entries: list[SavedAnalysis]) -> None:
        try:
            await self._storage.set(self._key, serialize_saved_analyses(entries))
        except Exception as exc:
            self._log_persistence_failure(
                "saved_analyses_write_failed",
                PersistenceError(f"Saved analyses could not be written: {exc}"),
            )

    def _log_persistence_failure(self, event: str, exc: PersistenceError) -> None:
        log_event(
            logger,
            event=event,
            message="saved analysis storage unavailable; continuing without it",
            level=logging.WARNING,
            error_code=exc.error_code,
            fields={"key": self._key, "exception": exc.message},
        )

    def _next_id(self, entries: list[SavedAnalysis]) -> str:
        taken = {entry.id for entry in entries}
        candidate = max(self._clock(), self._last_id + 1)
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    async def refresh(self) -> list[SavedAnalysis]:
        """Drop the in-session copy and re-read durable storage."""
        async with self._lock:
            self._entries = await self._read()
            return list(self._entries)

    async def _snapshot(self) -> list[SavedAnalysis]:
        async with self._lock:
            return list(await self._ensure_loaded())

    async def list(self) -> list[SavedAnalysis]:
        return await self._snapshot()

    async def count(self) -> int:
        return len(await self._snapshot())

    async def load(self, analysis_id: str) -> SavedAnalysis | None:
        for entry in await self._snapshot():
            if entry.id == analysis_id:
                return entry
        return None

    async def save(self, payload: AnalysisPayload, result: ScoreResult) -> str:
        async with self._lock:
            entries = await self._ensure_loaded()
            entry = SavedAnalysis(
                id=self._next_id(entries),
                symbol=payload.symbol,
                date=format_capture_date(self._today()),
                result=result,
                data=payload,
            )
            self._entries = [entry, *entries]
            await self._persist(self._entries)

        log_event(
            logger,
            event="saved_analysis_created",
            message="analysis saved",
            fields={"id": entry.id, "symbol": entry.symbol},
        )
        return entry.id

    async def delete(self, analysis_id: str) -> bool:
        async with self._lock:
            entries = await self._ensure_loaded()
            remaining = [entry for entry in entries if entry.id != analysis_id]
            if len(remaining) == len(entries):
                return False
            self._entries = remaining
            await self._persist(self._entries)

        log_event(
            logger,
            event="saved_analysis_deleted",
            message="saved analysis deleted",
            fields={"id": analysis_id},
        )
        return True

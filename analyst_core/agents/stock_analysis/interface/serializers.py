from __future__ import annotations

import json
from collections.abc import Sequence

from analyst_core.agents.stock_analysis.domain.models import (
    AnalysisPayload,
    SavedAnalysis,
    ScoreResult,
)
from analyst_core.agents.stock_analysis.domain.policies import derive_rating
from analyst_core.shared.kernel.types import JSONObject


def format_score(value: float) -> str:
    return f"{value:g}"


def serialize_saved_analyses(entries: Sequence[SavedAnalysis]) -> str:
    return json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False)


def build_share_text(payload: AnalysisPayload, result: ScoreResult) -> str:
    return (
        f"📊 Stock Analyst Report for {payload.symbol.upper()}\n"
        f"⭐ Score: {format_score(result.total_score)}/10 ({result.rating})\n"
        f"💰 Price: {payload.current_price}\n"
        f"🎯 Action: {result.action}\n"
        "\n"
        "Check the full analysis in the app!"
    )


def build_saved_summary(entry: SavedAnalysis) -> JSONObject:
    """Card view of a saved analysis; the band drives the score colour."""
    return {
        "id": entry.id,
        "symbol": entry.symbol,
        "date": entry.date,
        "total_score": entry.result.total_score,
        "rating": entry.result.rating,
        "band": derive_rating(entry.result.total_score).band.value,
    }

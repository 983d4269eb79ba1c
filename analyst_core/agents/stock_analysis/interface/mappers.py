from __future__ import annotations

from analyst_core.agents.stock_analysis.domain.models import (
    CRITERION_KEYS,
    AnalysisPayload,
    Criterion,
    PricePoint,
    SavedAnalysis,
    ScoreResult,
)

from .contracts import (
    AnalysisPayloadModel,
    SavedAnalysisModel,
    ScoreResultModel,
)


def to_analysis_payload(model: AnalysisPayloadModel) -> AnalysisPayload:
    criteria = {
        key: Criterion(
            value=getattr(model.criteria, key).value,
            reason=getattr(model.criteria, key).reason,
        )
        for key in CRITERION_KEYS
    }
    return AnalysisPayload(
        symbol=model.symbol.strip(),
        current_price=model.current_price,
        historical_data=tuple(
            PricePoint(date=point.date, price=point.price)
            for point in model.historical_data
        ),
        criteria=criteria,
    )


def to_score_result(model: ScoreResultModel) -> ScoreResult:
    return ScoreResult(
        fa_score=model.fa_score,
        ta_score=model.ta_score,
        mom_score=model.mom_score,
        total_score=model.total_score,
        rating=model.rating,
        action=model.action,
        reasons=tuple(model.reasons),
    )


def to_saved_analysis(model: SavedAnalysisModel) -> SavedAnalysis:
    return SavedAnalysis(
        id=model.id,
        symbol=model.symbol,
        date=model.date,
        result=to_score_result(model.result),
        data=to_analysis_payload(model.data),
    )

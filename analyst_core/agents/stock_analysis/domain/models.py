from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

FA_CRITERIA = ("rev_growth_pos", "val_attractive", "health_safe", "story_clear")
TA_CRITERIA = ("trend_up", "price_abv_ma", "vol_support", "indicators_good")
MOM_CRITERIA = ("news_support", "foreign_buy")

CRITERION_KEYS = FA_CRITERIA + TA_CRITERIA + MOM_CRITERIA


@dataclass(frozen=True)
class Criterion:
    value: bool
    reason: str

    def to_dict(self) -> dict[str, bool | str]:
        return {"value": self.value, "reason": self.reason}


@dataclass(frozen=True)
class PricePoint:
    date: str
    price: float

    def to_dict(self) -> dict[str, str | float]:
        return {"date": self.date, "price": self.price}


@dataclass(frozen=True)
class AnalysisPayload:
    symbol: str
    current_price: str
    historical_data: tuple[PricePoint, ...]
    criteria: Mapping[str, Criterion]

    def to_dict(self) -> dict[str, object]:
        return {
            "symbol": self.symbol,
            "current_price": self.current_price,
            "historical_data": [point.to_dict() for point in self.historical_data],
            "criteria": {
                key: criterion.to_dict() for key, criterion in self.criteria.items()
            },
        }


class RatingBand(str, Enum):
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"


@dataclass(frozen=True)
class Rating:
    band: RatingBand
    rating: str
    action: str


@dataclass(frozen=True)
class ScoreResult:
    fa_score: float
    ta_score: float
    mom_score: float
    total_score: float
    rating: str
    action: str
    reasons: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "faScore": self.fa_score,
            "taScore": self.ta_score,
            "momScore": self.mom_score,
            "totalScore": self.total_score,
            "rating": self.rating,
            "action": self.action,
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class SavedAnalysis:
    id: str
    symbol: str
    date: str
    result: ScoreResult
    data: AnalysisPayload

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "date": self.date,
            "result": self.result.to_dict(),
            "data": self.data.to_dict(),
        }

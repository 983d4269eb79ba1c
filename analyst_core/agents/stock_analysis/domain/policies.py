from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from analyst_core.shared.kernel.errors import SchemaError

from .models import (
    CRITERION_KEYS,
    AnalysisPayload,
    Rating,
    RatingBand,
    ScoreResult,
)


@dataclass(frozen=True)
class CriterionRule:
    key: str
    weight: Decimal
    # None means a failed criterion costs points but adds no reason
    deduction_reason: str | None


FA_RULES = (
    CriterionRule(
        "rev_growth_pos",
        Decimal("1"),
        "FA: Revenue/profit growth is negative or flat",
    ),
    CriterionRule(
        "val_attractive",
        Decimal("1"),
        "FA: Valuation (P/E, P/B) is above the industry average",
    ),
    CriterionRule("health_safe", Decimal("1"), "FA: High leverage or weak cash flow"),
    CriterionRule("story_clear", Decimal("1"), None),
)

TA_RULES = (
    CriterionRule("trend_up", Decimal("1.5"), "TA: Primary trend is not up"),
    CriterionRule(
        "price_abv_ma",
        Decimal("1.0"),
        "TA: Price is below key moving averages (MA20, MA50)",
    ),
    CriterionRule(
        "vol_support",
        Decimal("1.0"),
        "TA: Volume is not confirming the trend",
    ),
    CriterionRule("indicators_good", Decimal("0.5"), None),
)

MOM_RULES = (
    CriterionRule("news_support", Decimal("1.0"), None),
    CriterionRule(
        "foreign_buy",
        Decimal("1.0"),
        "MOM: No net buying from foreign or institutional investors",
    ),
)

FA_CAP = Decimal("4")
TA_CAP = Decimal("4")
MOM_CAP = Decimal("2")

NEUTRAL_FLOOR = 5.0
NEUTRAL_CEILING = 7.0

NEGATIVE_RATING = Rating(
    band=RatingBand.NEGATIVE,
    rating="🔴 WEAK (High risk)",
    action="Sell on strength / Avoid",
)
NEUTRAL_RATING = Rating(
    band=RatingBand.NEUTRAL,
    rating="🟡 NEUTRAL (Watch)",
    action="Hold / Keep watching",
)
POSITIVE_RATING = Rating(
    band=RatingBand.POSITIVE,
    rating="🟢 STRONG (Buy opportunity)",
    action="Add to position / Buy",
)


def missing_criteria(criteria: object) -> tuple[str, ...]:
    if not hasattr(criteria, "keys"):
        return CRITERION_KEYS
    present = set(criteria.keys())
    return tuple(key for key in CRITERION_KEYS if key not in present)


def derive_rating(total_score: float) -> Rating:
    """Map a total score onto its band; 5.0 and 7.0 are both neutral."""
    if total_score < NEUTRAL_FLOOR:
        return NEGATIVE_RATING
    if total_score <= NEUTRAL_CEILING:
        return NEUTRAL_RATING
    return POSITIVE_RATING


def _score_category(
    payload: AnalysisPayload,
    rules: tuple[CriterionRule, ...],
    cap: Decimal,
    reasons: list[str],
) -> Decimal:
    score = Decimal("0")
    for rule in rules:
        if payload.criteria[rule.key].value:
            score += rule.weight
        elif rule.deduction_reason is not None:
            reasons.append(rule.deduction_reason)
    return min(score, cap)


def score_analysis(payload: AnalysisPayload) -> ScoreResult:
    """
    Deterministically score a provider assessment.

    Categories are evaluated FA, TA, MOM in rule order, which fixes the order
    of the deduction reasons. Raises SchemaError when any of the ten criteria
    is absent instead of treating it as a negative signal.
    """
    missing = missing_criteria(payload.criteria)
    if missing:
        raise SchemaError(
            f"Analysis payload for {payload.symbol!r} is missing criteria: "
            f"{', '.join(missing)}",
            missing_keys=missing,
        )

    reasons: list[str] = []
    fa_score = _score_category(payload, FA_RULES, FA_CAP, reasons)
    ta_score = _score_category(payload, TA_RULES, TA_CAP, reasons)
    mom_score = _score_category(payload, MOM_RULES, MOM_CAP, reasons)
    total_score = fa_score + ta_score + mom_score

    rating = derive_rating(float(total_score))
    return ScoreResult(
        fa_score=float(fa_score),
        ta_score=float(ta_score),
        mom_score=float(mom_score),
        total_score=float(total_score),
        rating=rating.rating,
        action=rating.action,
        reasons=tuple(reasons),
    )

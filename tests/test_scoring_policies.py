from __future__ import annotations

import itertools

import pytest

from analyst_core.agents.stock_analysis.domain.models import (
    CRITERION_KEYS,
    AnalysisPayload,
    Criterion,
    RatingBand,
)
from analyst_core.agents.stock_analysis.domain.policies import (
    FA_RULES,
    MOM_RULES,
    NEGATIVE_RATING,
    NEUTRAL_RATING,
    POSITIVE_RATING,
    TA_RULES,
    derive_rating,
    score_analysis,
)
from analyst_core.shared.kernel.errors import ProviderError, SchemaError


def test_all_criteria_met_scores_ten_without_reasons(make_payload) -> None:
    result = score_analysis(make_payload(value=True))

    assert result.fa_score == 4
    assert result.ta_score == 4
    assert result.mom_score == 2
    assert result.total_score == 10
    assert result.reasons == ()
    assert result.rating == POSITIVE_RATING.rating
    assert result.action == POSITIVE_RATING.action


def test_all_criteria_failed_scores_zero_with_ordered_reasons(make_payload) -> None:
    result = score_analysis(make_payload(value=False))

    assert result.fa_score == 0
    assert result.ta_score == 0
    assert result.mom_score == 0
    assert result.total_score == 0
    assert result.rating == NEGATIVE_RATING.rating
    assert result.action == NEGATIVE_RATING.action

    expected = [
        rule.deduction_reason
        for rule in (*FA_RULES, *TA_RULES, *MOM_RULES)
        if rule.deduction_reason is not None
    ]
    assert len(result.reasons) == 7
    assert list(result.reasons) == expected
    assert [reason.split(":")[0] for reason in result.reasons] == [
        "FA",
        "FA",
        "FA",
        "TA",
        "TA",
        "TA",
        "MOM",
    ]


@pytest.mark.parametrize(
    "criterion", ["story_clear", "indicators_good", "news_support"]
)
def test_silent_criteria_cost_points_without_reason(make_payload, criterion) -> None:
    result = score_analysis(make_payload(overrides={criterion: False}))

    assert result.reasons == ()
    assert result.total_score < 10


def test_technical_weights(make_payload) -> None:
    no_trend = score_analysis(make_payload(overrides={"trend_up": False}))
    assert no_trend.ta_score == 2.5
    assert no_trend.reasons == ("TA: Primary trend is not up",)

    no_indicators = score_analysis(make_payload(overrides={"indicators_good": False}))
    assert no_indicators.ta_score == 3.5
    assert no_indicators.total_score == 9.5


def test_mixed_assessment_lands_in_neutral_band(make_payload) -> None:
    result = score_analysis(
        make_payload(
            overrides={
                "val_attractive": False,
                "trend_up": False,
                "vol_support": False,
                "foreign_buy": False,
            }
        )
    )

    assert result.fa_score == 3
    assert result.ta_score == 1.5
    assert result.mom_score == 1
    assert result.total_score == 5.5
    assert result.rating == NEUTRAL_RATING.rating
    assert result.reasons == (
        "FA: Valuation (P/E, P/B) is above the industry average",
        "TA: Primary trend is not up",
        "TA: Volume is not confirming the trend",
        "MOM: No net buying from foreign or institutional investors",
    )


@pytest.mark.parametrize(
    ("total", "band"),
    [
        (0.0, RatingBand.NEGATIVE),
        (4.99, RatingBand.NEGATIVE),
        (5.0, RatingBand.NEUTRAL),
        (6.5, RatingBand.NEUTRAL),
        (7.0, RatingBand.NEUTRAL),
        (7.01, RatingBand.POSITIVE),
        (10.0, RatingBand.POSITIVE),
    ],
)
def test_derive_rating_band_boundaries(total, band) -> None:
    assert derive_rating(total).band is band


def test_scores_respect_category_caps_for_every_combination() -> None:
    for flags in itertools.product([True, False], repeat=len(CRITERION_KEYS)):
        payload = AnalysisPayload(
            symbol="VCB",
            current_price="90,000",
            historical_data=(),
            criteria={
                key: Criterion(value=flag, reason="")
                for key, flag in zip(CRITERION_KEYS, flags, strict=True)
            },
        )
        result = score_analysis(payload)

        assert 0 <= result.fa_score <= 4
        assert 0 <= result.ta_score <= 4
        assert 0 <= result.mom_score <= 2
        assert result.total_score == result.fa_score + result.ta_score + result.mom_score
        assert result.rating == derive_rating(result.total_score).rating


def test_rescoring_is_deterministic(make_payload) -> None:
    payload = make_payload(overrides={"trend_up": False, "indicators_good": False})

    assert score_analysis(payload) == score_analysis(payload)


@pytest.mark.parametrize("missing", ["rev_growth_pos", "indicators_good", "foreign_buy"])
def test_missing_criterion_is_rejected(make_payload, missing) -> None:
    payload = make_payload(drop=(missing,))

    with pytest.raises(SchemaError) as exc_info:
        score_analysis(payload)

    assert exc_info.value.missing_keys == (missing,)
    assert missing in str(exc_info.value)
    assert isinstance(exc_info.value, ProviderError)


def test_empty_history_is_scored(make_payload) -> None:
    payload = make_payload()
    bare = AnalysisPayload(
        symbol=payload.symbol,
        current_price=payload.current_price,
        historical_data=(),
        criteria=payload.criteria,
    )

    assert score_analysis(bare).total_score == 10

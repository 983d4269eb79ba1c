from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CriterionModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: bool
    reason: str = Field(..., description="Short factual explanation for the value")


class PricePointModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    date: str = Field(..., description="Month/Year, e.g. 'Oct 23'")
    price: float = Field(..., description="Closing price")


class CriteriaModel(BaseModel):
    """The ten fixed analytical judgments. Every field is required."""

    model_config = ConfigDict(extra="ignore")

    rev_growth_pos: CriterionModel = Field(
        ..., description="Explanation for revenue/profit growth status"
    )
    val_attractive: CriterionModel = Field(
        ..., description="Explanation for P/E or P/B valuation status"
    )
    health_safe: CriterionModel = Field(
        ..., description="Explanation for debt/cashflow status"
    )
    story_clear: CriterionModel = Field(
        ..., description="Explanation for the growth story"
    )
    trend_up: CriterionModel = Field(..., description="Is the main trend UP?")
    price_abv_ma: CriterionModel = Field(
        ..., description="Is price above MA20 and MA50?"
    )
    vol_support: CriterionModel = Field(
        ..., description="Is volume increasing on price increases?"
    )
    indicators_good: CriterionModel = Field(
        ..., description="Are RSI/MACD positive?"
    )
    news_support: CriterionModel = Field(
        ..., description="Is macro/industry news supportive?"
    )
    foreign_buy: CriterionModel = Field(
        ..., description="Are foreign investors buying?"
    )


class AnalysisPayloadModel(BaseModel):
    """Structured stock assessment returned by the analyst model."""

    model_config = ConfigDict(extra="ignore")

    symbol: str = Field(..., description="The stock symbol analyzed")
    current_price: str = Field(..., description="Current market price of the stock")
    historical_data: list[PricePointModel] = Field(
        default_factory=list,
        description="Approximate monthly closing prices for the last 6 months",
    )
    criteria: CriteriaModel

    @field_validator("current_price", mode="before")
    @classmethod
    def _price_as_text(cls, value: object) -> object:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value


class ScoreResultModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    fa_score: float = Field(..., alias="faScore", ge=0, le=4)
    ta_score: float = Field(..., alias="taScore", ge=0, le=4)
    mom_score: float = Field(..., alias="momScore", ge=0, le=2)
    total_score: float = Field(..., alias="totalScore", ge=0, le=10)
    rating: str
    action: str
    reasons: list[str] = Field(default_factory=list)


class SavedAnalysisModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    symbol: str
    date: str
    result: ScoreResultModel
    data: AnalysisPayloadModel

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from analyst_core.agents.stock_analysis.domain.models import (  # noqa: E402
    CRITERION_KEYS,
    AnalysisPayload,
    Criterion,
    PricePoint,
)


def build_payload(
    symbol: str = "FPT",
    *,
    value: bool = True,
    overrides: dict[str, bool] | None = None,
    drop: tuple[str, ...] = (),
    current_price: str = "132,500 VND",
) -> AnalysisPayload:
    flags = {key: value for key in CRITERION_KEYS}
    flags.update(overrides or {})
    criteria = {
        key: Criterion(value=flag, reason=f"{key} is {'met' if flag else 'not met'}")
        for key, flag in flags.items()
        if key not in drop
    }
    return AnalysisPayload(
        symbol=symbol,
        current_price=current_price,
        historical_data=(
            PricePoint(date="May 26", price=118.2),
            PricePoint(date="Jun 26", price=121.0),
            PricePoint(date="Jul 26", price=132.5),
        ),
        criteria=criteria,
    )


class StubProvider:
    """Returns canned payloads (or raises canned errors) per symbol."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    async def fetch_analysis(self, symbol: str) -> AnalysisPayload:
        self.calls.append(symbol)
        response = self.responses.get(symbol)
        if response is None:
            return build_payload(symbol)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def make_payload():
    return build_payload


@pytest.fixture
def stub_provider():
    return StubProvider()

from __future__ import annotations

import httpx
import pytest

from analyst_core.agents.stock_analysis.application.saved_store import (
    SavedAnalysisStore,
)
from analyst_core.agents.stock_analysis.application.session import AnalysisSession
from analyst_core.agents.stock_analysis.data.storage import InMemoryStorage
from analyst_core.shared.kernel.errors import ProviderError
from api.server import create_app


def _client(session: AnalysisSession) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=create_app(session)),
        base_url="http://testserver",
    )


@pytest.fixture
def session(stub_provider) -> AnalysisSession:
    return AnalysisSession(
        provider=stub_provider, store=SavedAnalysisStore(InMemoryStorage())
    )


@pytest.mark.asyncio
async def test_health_and_idle_state(session) -> None:
    async with _client(session) as client:
        health = await client.get("/")
        state = await client.get("/analysis")

    assert health.json() == {"status": "ok"}
    assert state.json()["status"] == "idle"
    assert state.json()["result"] is None


@pytest.mark.asyncio
async def test_analyze_returns_scored_state(session) -> None:
    async with _client(session) as client:
        response = await client.post("/analysis", json={"symbol": " fpt "})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["symbol"] == "fpt"
    assert body["result"]["totalScore"] == 10
    assert body["payload"]["criteria"]["trend_up"]["value"] is True


@pytest.mark.asyncio
async def test_blank_symbol_is_unprocessable(session) -> None:
    async with _client(session) as client:
        response = await client.post("/analysis", json={"symbol": "  "})

    assert response.status_code == 422
    assert response.json()["detail"] == "Please enter a stock symbol."


@pytest.mark.asyncio
async def test_provider_failure_is_reported_in_state(session, stub_provider) -> None:
    stub_provider.responses["XYZ"] = ProviderError("Symbol not found.")

    async with _client(session) as client:
        response = await client.post("/analysis", json={"symbol": "XYZ"})

    assert response.status_code == 200
    assert response.json()["status"] == "failed"
    assert response.json()["error"] == "Symbol not found."


@pytest.mark.asyncio
async def test_save_and_share_require_a_scored_analysis(session) -> None:
    async with _client(session) as client:
        save = await client.post("/analysis/save")
        share = await client.get("/analysis/share")

    assert save.status_code == 409
    assert share.status_code == 409


@pytest.mark.asyncio
async def test_saved_analysis_lifecycle(session) -> None:
    async with _client(session) as client:
        await client.post("/analysis", json={"symbol": "HPG"})
        saved = await client.post("/analysis/save")
        analysis_id = saved.json()["id"]

        listing = await client.get("/saved")
        detail = await client.get(f"/saved/{analysis_id}")
        share = await client.get("/analysis/share")

        await client.delete("/analysis")
        loaded = await client.post(f"/saved/{analysis_id}/load")

        deleted = await client.delete(f"/saved/{analysis_id}")
        deleted_again = await client.delete(f"/saved/{analysis_id}")
        missing = await client.get(f"/saved/{analysis_id}")
        missing_load = await client.post(f"/saved/{analysis_id}/load")

    assert listing.json()["count"] == 1
    assert listing.json()["items"][0]["symbol"] == "HPG"
    assert listing.json()["items"][0]["band"] == "positive"
    assert detail.json()["result"]["totalScore"] == 10
    assert detail.json()["data"]["symbol"] == "HPG"
    assert "Stock Analyst Report for HPG" in share.json()["text"]

    assert loaded.json()["status"] == "success"
    assert loaded.json()["symbol"] == "HPG"

    assert deleted.json() == {"deleted": True}
    assert deleted_again.json() == {"deleted": False}
    assert missing.status_code == 404
    assert missing_load.status_code == 404


@pytest.mark.asyncio
async def test_toggle_saved_flips_overlay(session) -> None:
    async with _client(session) as client:
        opened = await client.post("/saved/toggle")
        closed = await client.post("/saved/toggle")

    assert opened.json()["browsing_saved"] is True
    assert closed.json()["browsing_saved"] is False

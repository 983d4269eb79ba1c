from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from analyst_core.agents.stock_analysis.application.factory import (
    build_analysis_session,
)
from analyst_core.agents.stock_analysis.application.session import AnalysisSession
from analyst_core.agents.stock_analysis.interface.serializers import (
    build_saved_summary,
)
from analyst_core.infrastructure.database import init_db
from analyst_core.shared.kernel.errors import ValidationError
from analyst_core.shared.kernel.tools.logger import get_logger, log_event

logger = get_logger(__name__)


class AnalyzeRequest(BaseModel):
    symbol: str


def get_session(request: Request) -> AnalysisSession:
    return request.app.state.session


def create_app(session: AnalysisSession | None = None) -> FastAPI:
    """
    HTTP surface over a single analysis session.
    Without an explicit session the SQL-backed default is built on startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "session", None) is None:
            await init_db()
            app.state.session = build_analysis_session()
            log_event(
                logger,
                event="api_session_initialized",
                message="default analysis session initialized",
            )
        yield

    app = FastAPI(
        title="Stock Analyst API",
        version="1.0",
        description="Scores LLM stock assessments and manages saved reports",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if session is not None:
        app.state.session = session

    @app.get("/")
    async def health_check():
        return {"status": "ok"}

    @app.get("/analysis")
    async def current_analysis(session: AnalysisSession = Depends(get_session)):
        return session.snapshot().to_dict()

    @app.post("/analysis")
    async def analyze(
        body: AnalyzeRequest, session: AnalysisSession = Depends(get_session)
    ):
        try:
            state = await session.submit(body.symbol)
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=exc.message) from exc
        return state.to_dict()

    @app.delete("/analysis")
    async def reset_analysis(session: AnalysisSession = Depends(get_session)):
        return session.reset().to_dict()

    @app.post("/analysis/save")
    async def save_analysis(session: AnalysisSession = Depends(get_session)):
        analysis_id = await session.save()
        if analysis_id is None:
            raise HTTPException(status_code=409, detail="No scored analysis to save")
        return {"id": analysis_id}

    @app.get("/analysis/share")
    async def share_analysis(session: AnalysisSession = Depends(get_session)):
        text = session.share_text()
        if text is None:
            raise HTTPException(status_code=409, detail="No scored analysis to share")
        return {"text": text}

    @app.get("/saved")
    async def list_saved(session: AnalysisSession = Depends(get_session)):
        entries = await session.store.list()
        return {
            "count": len(entries),
            "items": [build_saved_summary(entry) for entry in entries],
        }

    @app.post("/saved/toggle")
    async def toggle_saved(session: AnalysisSession = Depends(get_session)):
        return session.toggle_saved().to_dict()

    @app.get("/saved/{analysis_id}")
    async def get_saved(
        analysis_id: str, session: AnalysisSession = Depends(get_session)
    ):
        entry = await session.store.load(analysis_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Saved analysis not found")
        return entry.to_dict()

    @app.delete("/saved/{analysis_id}")
    async def delete_saved(
        analysis_id: str, session: AnalysisSession = Depends(get_session)
    ):
        return {"deleted": await session.store.delete(analysis_id)}

    @app.post("/saved/{analysis_id}/load")
    async def load_saved(
        analysis_id: str, session: AnalysisSession = Depends(get_session)
    ):
        state = await session.load_saved_by_id(analysis_id)
        if state is None:
            raise HTTPException(status_code=404, detail="Saved analysis not found")
        return state.to_dict()

    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)

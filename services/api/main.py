"""
Leaderboard API Service - FastAPI boundary for the dancer referral leaderboard
Serializes LeaderboardEngine snapshots to JSON for the front-end
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from services.pipeline.engine import LeaderboardEngine
from shared.errors import LeaderboardError
from shared.schemas.leaderboard import ErrorResponse

logger = structlog.get_logger()

# Configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))


def get_engine(request: Request) -> LeaderboardEngine:
    """Get the process-wide engine (lazy init)."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        engine = LeaderboardEngine()
        request.app.state.engine = engine
    return engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the engine on startup"""
    if getattr(app.state, "engine", None) is None:
        app.state.engine = LeaderboardEngine()
    engine = app.state.engine
    logger.info(
        "Starting Leaderboard API",
        port=PORT,
        token_configured=engine.is_configured(),
        cache_duration=engine.config.cache_duration,
        events=len(engine.config.event_ids),
        sheets_configured=engine.config.sheets_configured,
    )
    yield
    logger.info("Shutting down Leaderboard API")


app = FastAPI(
    title="Leaderboard API",
    description="Dancer referral leaderboard - Eventbrite and Google Sheets ticket reconciliation",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for the React front-end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    timestamp: datetime
    token_configured: bool
    cache_age: Optional[int] = None


@app.get("/api/tickets")
async def get_tickets(
    nocache: bool = Query(False, description="Bypass the cached snapshot"),
    refresh: bool = Query(False, description="Alias for nocache"),
    engine: LeaderboardEngine = Depends(get_engine),
):
    """Get the referral leaderboard (cached for the configured duration)."""
    try:
        payload = await engine.get_tickets(bypass_cache=nocache or refresh)
    except LeaderboardError as e:
        logger.error("Error fetching ticket data", error=str(e), error_type=type(e).__name__)
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(e)).model_dump())
    except Exception as e:
        logger.exception("Unexpected error building leaderboard")
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(e)).model_dump())

    return JSONResponse(content=payload.to_json())


@app.get("/api/health")
async def health_check(engine: LeaderboardEngine = Depends(get_engine)):
    """Liveness probe; reports whether the Eventbrite token is configured."""
    health = HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        token_configured=engine.is_configured(),
        cache_age=engine.cache_age(),
    )
    return health.model_dump(mode="json", by_alias=True)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)

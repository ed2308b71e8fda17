"""Main FastAPI application with hexagonal architecture."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from . import __version__
from .api.rest.routes import router as league_router
from .api.websocket.handlers import handle_summary_websocket

# Load environment variables
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    yield


app = FastAPI(
    title="League Scout API",
    description="FACEIT league match aggregation and team scouting API",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "*",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    api_key_configured: bool


@app.get("/", tags=["meta"])
async def root():
    """API root with information and available endpoints."""
    return {
        "name": "League Scout API",
        "version": __version__,
        "description": "FACEIT league scouting API",
        "docs": "/docs",
        "endpoints": {
            "health": "GET /health",
            "teams": "GET /api/championships/{championship_id}/teams?q=",
            "resolve": "GET /api/championships/{championship_id}/teams/resolve?name=",
            "summary": "GET /api/championships/{championship_id}/teams/{team_id}/summary",
            "record": "GET /api/championships/{championship_id}/teams/{team_id}/record",
            "manualVeto": "PUT /api/teams/{team_id}/matches/{match_id}/manual-veto",
            "manualVetoSummary": "GET /api/teams/{team_id}/manual-veto-summary",
            "websocket": "WS /ws/summary",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health_check():
    """Check API health and configuration status."""
    api_key = os.environ.get("FACEIT_API_KEY")
    return HealthResponse(
        status="healthy",
        version=__version__,
        api_key_configured=bool(api_key),
    )


app.include_router(league_router)


@app.websocket("/ws/summary")
async def websocket_summary(websocket: WebSocket):
    """WebSocket endpoint for a league summary with progress.

    Send {"action": "summarize", "teamId": "...", "championshipId": "..."}.
    Progress messages follow; the last one has status "completed" and carries
    the summary, or status "error". Closing the socket early discards the
    result.
    """
    await handle_summary_websocket(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "leaguescout_api.main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "8000")),
    )

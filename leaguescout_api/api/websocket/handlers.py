"""WebSocket handlers for league summaries with live progress."""

import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect

from leaguescout.concurrency import CancellationToken
from leaguescout.config import faceit_config_from_env

from ..transformers.summary_transformer import transform_summary_to_frontend
from ...application.ports.league_data import LeagueDataPort, ProgressCallbackPort
from ...application.use_cases.league_summary import LeagueSummaryUseCase
from ...infrastructure.adapters.faceit_league_adapter import FaceitLeagueAdapter

logger = logging.getLogger(__name__)


class WebSocketProgressCallback(ProgressCallbackPort):
    """Progress callback that sends updates via WebSocket."""

    def __init__(self, websocket: WebSocket):
        self._websocket = websocket

    async def report_progress(
        self, progress: int, message: str, status: str = "processing"
    ) -> None:
        await self._websocket.send_json({
            "status": status,
            "progress": progress,
            "message": message,
        })


async def _watch_disconnect(websocket: WebSocket, token: CancellationToken) -> None:
    """Cancel the query as soon as the client goes away."""
    try:
        while True:
            message = await websocket.receive()
            if message.get("type") == "websocket.disconnect":
                break
    except (WebSocketDisconnect, RuntimeError):
        pass
    token.cancel()


async def handle_summary_websocket(
    websocket: WebSocket, league_data: LeagueDataPort | None = None
) -> None:
    """Handle a WebSocket connection for one league summary query.

    Expected client message format:
    {
        "action": "summarize",
        "teamId": "...",
        "championshipId": "..."  // optional, defaults to the configured one
    }

    Server sends progress updates:
    {
        "status": "connecting" | "processing" | "completed" | "error",
        "progress": 0-100,
        "message": "Human-readable status"
    }

    Args:
        websocket: FastAPI WebSocket connection
        league_data: Data port override, mainly for tests
    """
    await websocket.accept()

    try:
        data = await websocket.receive_json()
    except WebSocketDisconnect:
        return
    except ValueError:
        await websocket.send_json({
            "status": "error",
            "progress": 0,
            "message": "Invalid JSON message",
        })
        await websocket.close()
        return

    action = data.get("action") if isinstance(data, dict) else None
    if action != "summarize":
        await websocket.send_json({
            "status": "error",
            "progress": 0,
            "message": f"Unknown action: {action}",
        })
        await websocket.close()
        return

    team_id = data.get("teamId")
    if not team_id:
        await websocket.send_json({
            "status": "error",
            "progress": 0,
            "message": "teamId is required",
        })
        await websocket.close()
        return

    try:
        if league_data is None:
            league_data = FaceitLeagueAdapter()
        championship_id = data.get("championshipId") or faceit_config_from_env().championship_id
    except ValueError as e:
        await websocket.send_json({"status": "error", "progress": 0, "message": str(e)})
        await websocket.close()
        return

    token = CancellationToken()
    watcher = asyncio.create_task(_watch_disconnect(websocket, token))
    try:
        use_case = LeagueSummaryUseCase(league_data)
        result = await use_case.execute(
            team_id,
            championship_id,
            title=data.get("title"),
            progress_callback=WebSocketProgressCallback(websocket),
            cancel_token=token,
        )

        if result is None:
            logger.info("Summary for %s discarded; client left", team_id)
            return

        if not result.success or result.summary is None:
            await websocket.send_json({
                "status": "error",
                "progress": 0,
                "message": result.error or "Failed to load league matches.",
            })
            return

        await websocket.send_json({
            "status": "completed",
            "progress": 100,
            "message": "Summary ready!",
            "summary": transform_summary_to_frontend(result.summary),
        })
    except (WebSocketDisconnect, RuntimeError) as e:
        # Send after the peer closed.
        logger.debug("WebSocket for %s closed early: %s", team_id, e)
    finally:
        watcher.cancel()
        if not token.cancelled:
            try:
                await websocket.close()
            except RuntimeError:
                pass

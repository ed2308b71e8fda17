"""REST API routes for league summaries and manual veto annotations."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from leaguescout.aggregate import season_record
from leaguescout.errors import FETCH_ERRORS
from leaguescout.manual_vetoes import (
    InMemoryManualVetoStore,
    ManualMatchVeto,
    ManualVetoAction,
    VetoAction,
    load_manual_vetoes,
    save_manual_match_veto,
    summarize_manual_vetoes,
)
from leaguescout.reconcile import LeagueTeam, find_teams, resolve_team_by_name

from ..transformers.summary_transformer import (
    transform_manual_summary,
    transform_record,
    transform_summary_to_frontend,
    transform_team,
)
from ...application.ports.league_data import LeagueDataPort
from ...application.ports import ManualVetoStore
from ...application.use_cases.league_summary import (
    LeagueSummaryResult,
    LeagueSummaryUseCase,
)
from ...infrastructure.adapters.faceit_league_adapter import FaceitLeagueAdapter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["league"])

_manual_store = InMemoryManualVetoStore()


def _error(status_code: int, code: str, message: str, details: Dict[str, Any] | None = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            }
        },
    )


def get_league_adapter() -> LeagueDataPort:
    """Build the FACEIT adapter; a missing API key is a bad request."""
    try:
        return FaceitLeagueAdapter()
    except ValueError as e:
        raise _error(400, "INVALID_REQUEST", str(e))


def get_manual_veto_store() -> ManualVetoStore:
    return _manual_store


class ManualVetoActionBody(BaseModel):
    map: str = Field(..., min_length=1)
    type: VetoAction


class ManualVetoBody(BaseModel):
    """Request body for saving one match's manual veto."""

    model_config = ConfigDict(populate_by_name=True)

    team_name: str = Field(default="", alias="teamName")
    actions: List[ManualVetoActionBody] = Field(default_factory=list)


async def _team_index(league_data: LeagueDataPort, championship_id: str) -> List[LeagueTeam]:
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, league_data.team_index, championship_id)
    except FETCH_ERRORS as e:
        logger.warning("Team index failed for %s: %s", championship_id, e)
        raise _error(502, "UPSTREAM_ERROR", str(e), {"championshipId": championship_id})


async def _run_summary(
    league_data: LeagueDataPort, team_id: str, championship_id: str
) -> LeagueSummaryResult:
    use_case = LeagueSummaryUseCase(league_data)
    result = await use_case.execute(team_id, championship_id)
    if result is None or not result.success or result.summary is None:
        raise _error(
            502,
            "UPSTREAM_ERROR",
            (result.error if result else None) or "Failed to load league matches.",
            {"teamId": team_id, "championshipId": championship_id},
        )
    if not result.summary.rows:
        index = await _team_index(league_data, championship_id)
        if not any(t.team_id == team_id for t in index):
            raise _error(
                404,
                "TEAM_NOT_FOUND",
                "Team has no matches in this championship",
                {"teamId": team_id, "championshipId": championship_id},
            )
    return result


@router.get("/championships/{championship_id}/teams")
async def list_teams(
    championship_id: str,
    q: Optional[str] = Query(None, description="Case-insensitive name filter"),
    league_data: LeagueDataPort = Depends(get_league_adapter),
):
    """List or search the teams that appear in a championship."""
    index = await _team_index(league_data, championship_id)
    teams = find_teams(index, q) if q else index
    return {"teams": [transform_team(t) for t in teams]}


@router.get("/championships/{championship_id}/teams/resolve")
async def resolve_team(
    championship_id: str,
    name: str = Query(..., min_length=1),
    league_data: LeagueDataPort = Depends(get_league_adapter),
):
    """Resolve a team by name: exact match first, then partial."""
    index = await _team_index(league_data, championship_id)
    team = resolve_team_by_name(index, name)
    if team is None:
        raise _error(404, "TEAM_NOT_FOUND", f"No team matching '{name}'", {"name": name})
    return transform_team(team)


@router.get("/championships/{championship_id}/teams/{team_id}/summary")
async def get_team_summary(
    championship_id: str,
    team_id: str,
    league_data: LeagueDataPort = Depends(get_league_adapter),
):
    """Full league summary for a team in the championship format expected by the frontend."""
    result = await _run_summary(league_data, team_id, championship_id)
    return transform_summary_to_frontend(result.summary)


@router.get("/championships/{championship_id}/teams/{team_id}/record")
async def get_team_record(
    championship_id: str,
    team_id: str,
    league_data: LeagueDataPort = Depends(get_league_adapter),
):
    """Season win/loss/tie record; null when no match has finished yet."""
    result = await _run_summary(league_data, team_id, championship_id)
    return {"record": transform_record(season_record(result.summary.rows))}


@router.put("/teams/{team_id}/matches/{match_id}/manual-veto")
async def put_manual_veto(
    team_id: str,
    match_id: str,
    body: ManualVetoBody,
    store: ManualVetoStore = Depends(get_manual_veto_store),
):
    """Replace the manual veto annotations of one match."""
    entry = ManualMatchVeto(
        match_id=match_id,
        team_id=team_id,
        team_name=body.team_name,
        actions=[ManualVetoAction(map=a.map, action=a.type) for a in body.actions],
    )
    rows = save_manual_match_veto(store, entry)
    return {
        "teamId": team_id,
        "matchId": match_id,
        "actions": [{"map": r.map, "type": r.action.value} for r in rows],
    }


@router.get("/teams/{team_id}/manual-veto-summary")
async def get_manual_veto_summary(
    team_id: str,
    store: ManualVetoStore = Depends(get_manual_veto_store),
):
    """Veto tendencies from manual annotations; null summary when none exist."""
    summary = summarize_manual_vetoes(load_manual_vetoes(store, team_id))
    return {"teamId": team_id, "summary": transform_manual_summary(summary)}

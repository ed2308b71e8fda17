"""Use case for building a team's league summary."""

import asyncio
import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Dict, List

from leaguescout.concurrency import CancellationToken, fan_out
from leaguescout.config import DEFAULT_MAX_WORKERS
from leaguescout.errors import FETCH_ERRORS
from leaguescout.models import LeagueSummary, Player
from leaguescout.payloads import FaceitTeam
from leaguescout.players import player_from_profile, roster_members
from leaguescout.summary import build_league_summary

from ..ports.league_data import LeagueDataPort, ProgressCallbackPort

logger = logging.getLogger(__name__)

# Thread pools for running blocking I/O operations, one per pool width
_executors: Dict[int, ThreadPoolExecutor] = {}
_executors_lock = threading.Lock()


def shared_executor(max_workers: int = DEFAULT_MAX_WORKERS) -> ThreadPoolExecutor:
    """Process-wide pool for the given width, created on first use."""
    width = max(1, max_workers)
    with _executors_lock:
        if width not in _executors:
            _executors[width] = ThreadPoolExecutor(max_workers=width)
        return _executors[width]


@dataclass
class LeagueSummaryResult:
    """Result of a league summary query."""

    success: bool
    summary: LeagueSummary | None = None
    error: str | None = None


class LeagueSummaryUseCase:
    """Builds the league summary for one team in one championship.

    Stages:
    1. Team lookup and roster enrichment (fan-out per member)
    2. Match reconciliation (championship feed + player histories)
    3. Statistics and veto history (fan-out per match)
    4. Pure aggregation into a LeagueSummary

    A cancelled query finishes its in-flight work but publishes nothing and
    returns None.
    """

    def __init__(self, league_data: LeagueDataPort, executor: Executor | None = None):
        self._league_data = league_data
        self._executor = executor or shared_executor(league_data.max_workers)

    async def _publish(
        self,
        progress_callback: ProgressCallbackPort | None,
        cancel_token: CancellationToken | None,
        progress: int,
        message: str,
        status: str = "processing",
    ) -> bool:
        if cancel_token is not None and cancel_token.cancelled:
            return False
        if progress_callback:
            await progress_callback.report_progress(progress, message, status)
        return True

    async def _load_team(self, team_id: str) -> FaceitTeam | None:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                self._executor, self._league_data.get_team, team_id
            )
        except FETCH_ERRORS as e:
            logger.warning("Team lookup failed for %s: %s", team_id, e)
            return None

    async def _load_players(self, team: FaceitTeam | None) -> List[Player]:
        members = roster_members(team)
        profiles = await fan_out(
            members,
            lambda m: m.lookup_key,
            lambda m: self._league_data.get_player(m.lookup_key),
            self._executor,
        )
        return [player_from_profile(m, profiles.get(m.lookup_key)) for m in members]

    async def execute(
        self,
        team_id: str,
        championship_id: str,
        title: str | None = None,
        progress_callback: ProgressCallbackPort | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> LeagueSummaryResult | None:
        """Execute the league summary query.

        Args:
            team_id: Team to summarize
            championship_id: Competition id
            title: Fallback display name for the league
            progress_callback: Optional callback for progress updates
            cancel_token: Optional token; once cancelled nothing more is published

        Returns:
            Summary result, or None if the query was cancelled
        """
        if not team_id or not championship_id:
            return LeagueSummaryResult(
                success=False, error="Both a team id and a championship id are required."
            )

        loop = asyncio.get_running_loop()

        try:
            if not await self._publish(
                progress_callback, cancel_token, 5, "Loading team roster...", "connecting"
            ):
                return None

            team = await self._load_team(team_id)
            players = await self._load_players(team)

            if not await self._publish(
                progress_callback, cancel_token, 25, f"Loaded {len(players)} players..."
            ):
                return None

            fetch_matches = partial(
                self._league_data.league_matches,
                team_id,
                championship_id,
                team,
                lookup_team=False,
            )
            matches = await loop.run_in_executor(self._executor, fetch_matches)
            logger.info("Query %s/%s: %s matches", team_id, championship_id, len(matches))

            if not await self._publish(
                progress_callback, cancel_token, 50, f"Found {len(matches)} league matches..."
            ):
                return None

            finished = [m for m in matches if m.is_finished]
            stats_by_id, veto_by_id = await asyncio.gather(
                fan_out(
                    finished,
                    lambda m: m.match_id,
                    lambda m: self._league_data.get_match_stats(m.match_id),
                    self._executor,
                ),
                fan_out(
                    matches,
                    lambda m: m.match_id,
                    lambda m: self._league_data.get_veto(m.match_id),
                    self._executor,
                ),
            )

            if not await self._publish(
                progress_callback, cancel_token, 80, "Aggregating map and player statistics..."
            ):
                return None

            build = partial(
                build_league_summary,
                team_id,
                championship_id,
                matches,
                stats_by_id,
                veto_by_id,
                players,
                title,
            )
            summary = await loop.run_in_executor(self._executor, build)

            if cancel_token is not None and cancel_token.cancelled:
                logger.info("Query %s/%s cancelled; discarding result", team_id, championship_id)
                return None

            return LeagueSummaryResult(success=True, summary=summary)

        except FETCH_ERRORS as e:
            logger.warning("League summary failed for %s: %s", team_id, e)
            if cancel_token is not None and cancel_token.cancelled:
                return None
            if progress_callback:
                await progress_callback.report_progress(0, f"Error: {str(e)}", "error")
            return LeagueSummaryResult(success=False, error=str(e) or "Failed to load league matches.")

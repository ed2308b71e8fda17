"""Adapter wrapping the FACEIT client and match reconciler."""

import logging
from typing import List

from leaguescout.cache import InMemoryCache, KeyedCache
from leaguescout.config import FaceitConfig, faceit_config_from_env
from leaguescout.faceit_client import FaceitClient
from leaguescout.models import Match, VetoResult
from leaguescout.payloads import FaceitMatch, FaceitPlayer, FaceitTeam, MatchStatistics
from leaguescout.reconcile import LeagueTeam, MatchReconciler
from leaguescout.veto import veto_from_history

from ...application.ports.league_data import LeagueDataPort

logger = logging.getLogger(__name__)

# Process-wide caches keyed by championship id; never invalidated.
_match_cache: KeyedCache[List[FaceitMatch]] = InMemoryCache()
_team_index_cache: KeyedCache[List[LeagueTeam]] = InMemoryCache()


class FaceitLeagueAdapter(LeagueDataPort):
    """League data from the FACEIT open data and democracy APIs."""

    def __init__(
        self,
        config: FaceitConfig | None = None,
        client: FaceitClient | None = None,
        match_cache: KeyedCache[List[FaceitMatch]] | None = None,
        team_index_cache: KeyedCache[List[LeagueTeam]] | None = None,
    ):
        """Initialize the adapter.

        Args:
            config: FACEIT settings. If None, read from the environment.
            client: Prebuilt client, mainly for tests.
            match_cache: Championship feed cache (defaults to the process-wide one)
            team_index_cache: Team index cache (defaults to the process-wide one)
        """
        self._config = config or faceit_config_from_env()
        if client is None:
            if not self._config.api_key:
                raise ValueError("FACEIT_API_KEY not configured")
            client = FaceitClient.from_config(self._config)
        self._client = client
        self._reconciler = MatchReconciler(
            client,
            match_cache=match_cache if match_cache is not None else _match_cache,
            team_index_cache=team_index_cache if team_index_cache is not None else _team_index_cache,
            game=self._config.game,
        )

    @property
    def config(self) -> FaceitConfig:
        return self._config

    @property
    def max_workers(self) -> int:
        return self._config.max_workers

    def team_index(self, championship_id: str) -> List[LeagueTeam]:
        return self._reconciler.team_index(championship_id)

    def get_team(self, team_id: str) -> FaceitTeam:
        return self._client.get_team(team_id)

    def league_matches(
        self,
        team_id: str,
        championship_id: str,
        team: FaceitTeam | None = None,
        lookup_team: bool = True,
    ) -> List[Match]:
        return self._reconciler.reconcile(team_id, championship_id, team, lookup_team)

    def get_player(self, player_key: str) -> FaceitPlayer:
        return self._client.get_player(player_key)

    def get_match_stats(self, match_id: str) -> MatchStatistics | None:
        return self._client.get_match_stats(match_id)

    def get_veto(self, match_id: str) -> VetoResult | None:
        return veto_from_history(self._client.get_veto_history(match_id))

"""Port (interface) for league data."""

from abc import ABC, abstractmethod
from typing import List

from leaguescout.config import DEFAULT_MAX_WORKERS
from leaguescout.models import Match, VetoResult
from leaguescout.payloads import FaceitPlayer, FaceitTeam, MatchStatistics
from leaguescout.reconcile import LeagueTeam


class LeagueDataPort(ABC):
    """Port for fetching league matches and the entities around them."""

    @abstractmethod
    def team_index(self, championship_id: str) -> List[LeagueTeam]:
        """Distinct teams seen in a championship.

        Args:
            championship_id: Competition id

        Returns:
            Teams sorted by name
        """
        ...

    @abstractmethod
    def get_team(self, team_id: str) -> FaceitTeam:
        """Fetch a team with its roster.

        Args:
            team_id: Team id

        Returns:
            Team payload
        """
        ...

    @abstractmethod
    def league_matches(
        self,
        team_id: str,
        championship_id: str,
        team: FaceitTeam | None = None,
        lookup_team: bool = True,
    ) -> List[Match]:
        """Reconciled matches of a team in a championship, newest first.

        Args:
            team_id: Team id
            championship_id: Competition id
            team: Already fetched team payload, if any
            lookup_team: Fetch the team when `team` is None; False when the
                caller already tried and failed

        Returns:
            Matches oriented around the team
        """
        ...

    @abstractmethod
    def get_player(self, player_key: str) -> FaceitPlayer:
        ...

    @abstractmethod
    def get_match_stats(self, match_id: str) -> MatchStatistics | None:
        ...

    @abstractmethod
    def get_veto(self, match_id: str) -> VetoResult | None:
        """Veto decisions from the veto-history source, None when absent."""
        ...

    @property
    def max_workers(self) -> int:
        """Width of the thread pool used to fan out blocking calls."""
        return DEFAULT_MAX_WORKERS


class ProgressCallbackPort(ABC):
    """Port for reporting progress during long operations."""

    @abstractmethod
    async def report_progress(
        self, progress: int, message: str, status: str = "processing"
    ) -> None:
        """Report progress update.

        Args:
            progress: Progress percentage (0-100)
            message: Human-readable status message
            status: Status type (connecting, processing, completed, error)
        """
        ...

"""Match reconciliation: championship feed + player-history fallback -> one match set."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set

from .cache import InMemoryCache, KeyedCache
from .config import DEFAULT_GAME, PLAYER_HISTORY_LIMIT
from .errors import FETCH_ERRORS
from .models import Match, MatchStatus, TeamRef
from .payloads import (
    FaceitMatch,
    FaceitTeam,
    faction_roster_ids,
    match_factions,
    match_url,
    team_player_ids,
    team_roster,
    member_id,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeagueTeam:
    team_id: str
    name: str
    avatar: Optional[str] = None
    game: str = DEFAULT_GAME


def involves_team(match: FaceitMatch, team_id: str) -> bool:
    f1, f2 = match_factions(match)
    if f1 is None or f2 is None:
        return False
    return f1.faction_id == team_id or f2.faction_id == team_id


def merge_matches(
    primary: Iterable[FaceitMatch], fallback: Iterable[FaceitMatch]
) -> List[FaceitMatch]:
    """Union by match id. The primary version wins whenever both sources have a match."""
    by_id: Dict[str, FaceitMatch] = {}
    for m in primary:
        if m.match_id:
            by_id[m.match_id] = m
    for m in fallback:
        if m.match_id and m.match_id not in by_id:
            by_id[m.match_id] = m
    return list(by_id.values())


def to_match(
    payload: FaceitMatch, team_id: str, extra_roster_ids: Iterable[str] = ()
) -> Optional[Match]:
    """Orient a raw match around the queried team; None if the team is not in exactly one slot."""
    f1, f2 = match_factions(payload)
    if f1 is None or f2 is None or not payload.match_id:
        return None
    in_f1 = f1.faction_id == team_id
    in_f2 = f2.faction_id == team_id
    if in_f1 == in_f2:
        return None

    ours, theirs = (f1, f2) if in_f1 else (f2, f1)
    roster_ids = faction_roster_ids(ours) | set(extra_roster_ids)
    return Match(
        match_id=payload.match_id,
        our=TeamRef(
            team_id=team_id,
            name=ours.name,
            avatar=ours.avatar,
            roster_ids=frozenset(roster_ids),
        ),
        opponent=TeamRef(
            team_id=theirs.faction_id or "",
            name=theirs.name,
            avatar=theirs.avatar,
            roster_ids=frozenset(faction_roster_ids(theirs)),
        ),
        our_faction="faction1" if in_f1 else "faction2",
        status=MatchStatus.from_raw(payload.status),
        raw_status=payload.status or "UNKNOWN",
        scheduled_at=payload.scheduled_at,
        started_at=payload.started_at,
        finished_at=payload.finished_at,
        url=match_url(payload),
        competition_name=payload.competition_name,
        payload=payload,
    )


def sort_newest_first(matches: Iterable[Match]) -> List[Match]:
    """Finished, else started, else scheduled time; undated matches sort last."""
    return sorted(
        matches,
        key=lambda m: m.sort_key if m.sort_key is not None else float("-inf"),
        reverse=True,
    )


def build_team_index(matches: Iterable[FaceitMatch]) -> List[LeagueTeam]:
    teams: Dict[str, LeagueTeam] = {}
    for m in matches:
        for faction in match_factions(m):
            if faction is None or not faction.faction_id or not faction.name:
                continue
            if faction.faction_id not in teams:
                teams[faction.faction_id] = LeagueTeam(
                    team_id=faction.faction_id,
                    name=faction.name,
                    avatar=faction.avatar,
                    game=m.game or DEFAULT_GAME,
                )
    return sorted(teams.values(), key=lambda t: t.name.lower())


def find_teams(index: Iterable[LeagueTeam], query: str) -> List[LeagueTeam]:
    q = query.strip().lower()
    if not q:
        return []
    return [t for t in index if q in t.name.lower()]


def resolve_team_by_name(index: Iterable[LeagueTeam], name: str) -> Optional[LeagueTeam]:
    """Exact (case-insensitive) name first, then the first partial match."""
    wanted = name.strip().lower()
    if not wanted:
        return None
    teams = list(index)
    exact = next((t for t in teams if t.name.lower() == wanted), None)
    if exact:
        return exact
    return next((t for t in teams if wanted in t.name.lower()), None)


class MatchReconciler:
    """Builds the authoritative match set for one team in one championship.

    Input A is the championship feed (cached per championship id). Input B
    walks the recent history of every player tied to the team and keeps the
    league matches the feed may have dropped.
    """

    def __init__(
        self,
        client: Any,
        match_cache: Optional[KeyedCache[List[FaceitMatch]]] = None,
        team_index_cache: Optional[KeyedCache[List[LeagueTeam]]] = None,
        game: str = DEFAULT_GAME,
    ):
        self._client = client
        self._match_cache = match_cache if match_cache is not None else InMemoryCache()
        self._team_index_cache = (
            team_index_cache if team_index_cache is not None else InMemoryCache()
        )
        self._game = game

    def championship_matches(self, championship_id: str) -> List[FaceitMatch]:
        if not championship_id:
            return []
        return self._match_cache.get_or_populate(
            championship_id,
            lambda: self._client.list_championship_matches(championship_id),
        )

    def team_index(self, championship_id: str) -> List[LeagueTeam]:
        if not championship_id:
            return []
        return self._team_index_cache.get_or_populate(
            championship_id,
            lambda: build_team_index(self.championship_matches(championship_id)),
        )

    def primary_matches(self, team_id: str, championship_id: str) -> List[FaceitMatch]:
        return [m for m in self.championship_matches(championship_id) if involves_team(m, team_id)]

    def _lookup_team(self, team_id: str) -> Optional[FaceitTeam]:
        try:
            return self._client.get_team(team_id)
        except FETCH_ERRORS as exc:
            logger.warning("Team lookup failed for %s; no history fallback: %s", team_id, exc)
            return None

    def _history_for_player(
        self, team_id: str, championship_id: str, player_id: str
    ) -> List[FaceitMatch]:
        history = self._client.get_player_history(player_id, self._game, PLAYER_HISTORY_LIMIT)
        league_ids = [
            item.match_id
            for item in history
            if item.match_id and item.competition_id == championship_id
        ]
        found: List[FaceitMatch] = []
        for match_id in league_ids:
            try:
                match = self._client.get_match(match_id)
            except FETCH_ERRORS as exc:
                logger.warning("Could not resolve history match %s: %s", match_id, exc)
                continue
            if involves_team(match, team_id):
                found.append(match)
        return found

    def history_matches(
        self,
        team_id: str,
        championship_id: str,
        team: Optional[FaceitTeam] = None,
        lookup_team: bool = True,
    ) -> List[FaceitMatch]:
        if team is None and lookup_team:
            team = self._lookup_team(team_id)
        if team is None:
            return []

        seen: Set[str] = set()
        found: List[FaceitMatch] = []
        for player_id in team_player_ids(team):
            try:
                matches = self._history_for_player(team_id, championship_id, player_id)
            except FETCH_ERRORS as exc:
                logger.warning("History fallback failed for player %s: %s", player_id, exc)
                continue
            for m in matches:
                if m.match_id and m.match_id not in seen:
                    seen.add(m.match_id)
                    found.append(m)
        return found

    def reconcile(
        self,
        team_id: str,
        championship_id: str,
        team: Optional[FaceitTeam] = None,
        lookup_team: bool = True,
    ) -> List[Match]:
        """Championship feed merged with roster histories, newest first.

        With ``lookup_team=False`` a missing ``team`` means the caller's own
        lookup already failed, so it is not attempted again.
        """
        if not team_id or not championship_id:
            return []

        primary = self.primary_matches(team_id, championship_id)
        if team is None and lookup_team:
            team = self._lookup_team(team_id)
        fallback = (
            self.history_matches(team_id, championship_id, team, lookup_team=False) if team else []
        )
        merged = merge_matches(primary, fallback)

        roster_ids = [pid for pid in (member_id(m) for m in team_roster(team)) if pid] if team else []
        matches = [m for m in (to_match(p, team_id, roster_ids) for p in merged) if m is not None]
        logger.info(
            "Reconciled %s: primary=%s fallback=%s merged=%s",
            team_id,
            len(primary),
            len(fallback),
            len(matches),
        )
        return sort_newest_first(matches)

from typing import Any, Dict, List, Optional

from leaguescout.cache import InMemoryCache
from leaguescout.errors import FaceitApiError, FaceitNotFound
from leaguescout.models import MatchStatus
from leaguescout.payloads import FaceitMatch, FaceitTeam, PlayerHistoryItem
from leaguescout.reconcile import (
    MatchReconciler,
    build_team_index,
    find_teams,
    merge_matches,
    resolve_team_by_name,
    sort_newest_first,
    to_match,
)


def _match(
    match_id: str,
    f1: str = "team-a",
    f2: str = "team-b",
    status: str = "FINISHED",
    finished_at: Optional[int] = None,
    started_at: Optional[int] = None,
    scheduled_at: Optional[int] = None,
    score: Optional[Dict[str, int]] = None,
    names: Optional[Dict[str, str]] = None,
) -> FaceitMatch:
    names = names or {}
    return FaceitMatch.model_validate(
        {
            "match_id": match_id,
            "competition_id": "champ",
            "competition_name": "ESEA Intermediate",
            "status": status,
            "finished_at": finished_at,
            "started_at": started_at,
            "scheduled_at": scheduled_at,
            "faceit_url": "https://www.faceit.com/{lang}/cs2/room/" + match_id,
            "teams": {
                "faction1": {"faction_id": f1, "name": names.get(f1, f1.title())},
                "faction2": {"faction_id": f2, "name": names.get(f2, f2.title())},
            },
            "results": {"score": score or {}},
        }
    )


class _Client:
    def __init__(
        self,
        feed: List[FaceitMatch],
        team: Optional[Dict[str, Any]] = None,
        histories: Optional[Dict[str, List[str]]] = None,
        lookups: Optional[Dict[str, FaceitMatch]] = None,
        failing_players: Optional[List[str]] = None,
        failing_matches: Optional[List[str]] = None,
    ):
        self.feed = feed
        self.team = team
        self.histories = histories or {}
        self.lookups = lookups or {}
        self.failing_players = failing_players or []
        self.failing_matches = failing_matches or []
        self.feed_calls = 0
        self.match_calls: List[str] = []

    def list_championship_matches(self, championship_id: str) -> List[FaceitMatch]:
        self.feed_calls += 1
        return list(self.feed)

    def get_team(self, team_id: str) -> FaceitTeam:
        if self.team is None:
            raise FaceitNotFound(404, "/teams/" + team_id)
        return FaceitTeam.model_validate(self.team)

    def get_player_history(self, player_id: str, game: str = "cs2", limit: int = 100):
        if player_id in self.failing_players:
            raise FaceitApiError(500, "/players/" + player_id + "/history")
        return [
            PlayerHistoryItem(match_id=mid, competition_id="champ")
            for mid in self.histories.get(player_id, [])
        ] + [PlayerHistoryItem(match_id="other-league", competition_id="elsewhere")]

    def get_match(self, match_id: str) -> FaceitMatch:
        self.match_calls.append(match_id)
        if match_id in self.failing_matches:
            raise FaceitApiError(503, "/matches/" + match_id)
        return self.lookups[match_id]


_TEAM = {"team_id": "team-a", "leader": "p1", "members": [{"user_id": "p1"}, {"user_id": "p2"}]}


def test_merge_keeps_primary_version() -> None:
    primary = _match("m1", score={"faction1": 2, "faction2": 1})
    fallback = _match("m1", score={"faction1": 0, "faction2": 2})
    merged = merge_matches([primary], [fallback, _match("m2")])

    assert [m.match_id for m in merged] == ["m1", "m2"]
    assert merged[0].results.score == {"faction1": 2, "faction2": 1}


def test_reconcile_prefers_feed_over_history() -> None:
    client = _Client(
        feed=[_match("m1", score={"faction1": 2, "faction2": 1})],
        team=_TEAM,
        histories={"p1": ["m1"]},
        lookups={"m1": _match("m1", score={"faction1": 0, "faction2": 2})},
    )
    matches = MatchReconciler(client).reconcile("team-a", "champ")

    assert len(matches) == 1
    assert matches[0].payload.results.score == {"faction1": 2, "faction2": 1}


def test_history_duplicates_across_players_appear_once() -> None:
    client = _Client(
        feed=[],
        team=_TEAM,
        histories={"p1": ["m9"], "p2": ["m9"]},
        lookups={"m9": _match("m9", f1="team-x", f2="team-a")},
    )
    matches = MatchReconciler(client).reconcile("team-a", "champ")

    assert [m.match_id for m in matches] == ["m9"]
    assert matches[0].our_faction == "faction2"


def test_history_keeps_only_matches_with_the_team() -> None:
    client = _Client(
        feed=[],
        team=_TEAM,
        histories={"p1": ["m5", "m6"]},
        lookups={
            "m5": _match("m5", f1="team-a", f2="team-c"),
            # p1 played this one as a stand-in for another team.
            "m6": _match("m6", f1="team-x", f2="team-y"),
        },
    )
    reconciler = MatchReconciler(client)
    assert [m.match_id for m in reconciler.reconcile("team-a", "champ")] == ["m5"]
    assert "other-league" not in client.match_calls


def test_failing_history_candidate_is_skipped() -> None:
    client = _Client(
        feed=[_match("m1")],
        team=_TEAM,
        histories={"p2": ["m2", "m3"]},
        lookups={"m2": _match("m2")},
        failing_players=["p1"],
        failing_matches=["m3"],
    )
    matches = MatchReconciler(client).reconcile("team-a", "champ")
    assert sorted(m.match_id for m in matches) == ["m1", "m2"]


def test_team_lookup_failure_uses_feed_only() -> None:
    client = _Client(feed=[_match("m1"), _match("m2", f1="team-x", f2="team-y")])
    matches = MatchReconciler(client).reconcile("team-a", "champ")
    assert [m.match_id for m in matches] == ["m1"]
    assert client.match_calls == []


def test_sort_newest_first_with_undated_last() -> None:
    raw = [
        _match("old", finished_at=100),
        _match("undated", status="SCHEDULED"),
        _match("upcoming", status="SCHEDULED", scheduled_at=500),
        _match("live", status="ONGOING", started_at=300),
    ]
    matches = [to_match(m, "team-a") for m in raw]
    assert [m.match_id for m in sort_newest_first(matches)] == ["upcoming", "live", "old", "undated"]


def test_to_match_orients_and_discards() -> None:
    m = to_match(_match("m1", f1="team-x", f2="team-a"), "team-a", ["p1"])
    assert m is not None
    assert m.opponent.team_id == "team-x"
    assert m.status is MatchStatus.FINISHED
    assert m.url == "https://www.faceit.com/en/cs2/room/m1"
    assert "p1" in m.our.roster_ids

    assert to_match(_match("m2", f1="team-a", f2="team-a"), "team-a") is None
    assert to_match(_match("m3", f1="team-x", f2="team-y"), "team-a") is None
    assert to_match(FaceitMatch(match_id="m4"), "team-a") is None


def test_feed_is_cached_per_championship() -> None:
    client = _Client(feed=[_match("m1")])
    cache = InMemoryCache()
    reconciler = MatchReconciler(client, match_cache=cache)

    reconciler.reconcile("team-a", "champ")
    reconciler.reconcile("team-b", "champ")

    assert client.feed_calls == 1
    assert "champ" in cache


def test_team_index_and_search() -> None:
    feed = [
        _match("m1", names={"team-a": "Lakeside", "team-b": "Night Owls"}),
        _match("m2", f1="team-c", f2="team-a", names={"team-c": "lake effect", "team-a": "Renamed"}),
    ]
    index = build_team_index(feed)

    assert [t.name for t in index] == ["lake effect", "Lakeside", "Night Owls"]
    assert all(t.game == "cs2" for t in index)
    assert [t.team_id for t in find_teams(index, "LAKE")] == ["team-c", "team-a"]
    assert find_teams(index, "  ") == []

    assert resolve_team_by_name(index, "lakeside").team_id == "team-a"
    assert resolve_team_by_name(index, "owls").team_id == "team-b"
    assert resolve_team_by_name(index, "nobody") is None


def test_team_index_uses_reconciler_cache() -> None:
    client = _Client(feed=[_match("m1")])
    reconciler = MatchReconciler(client)
    first = reconciler.team_index("champ")
    second = reconciler.team_index("champ")
    assert first is second
    assert client.feed_calls == 1

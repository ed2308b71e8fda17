from typing import List, Optional

from leaguescout.aggregate import count_locations, count_maps_played, season_record
from leaguescout.models import MatchRow, MatchStatus, Outcome, VetoResult
from leaguescout.payloads import FaceitMatch, MatchStatistics
from leaguescout.reconcile import to_match
from leaguescout.summary import build_league_summary


def _row(
    outcome: Outcome,
    picked: Optional[List[str]] = None,
    locations: Optional[List[str]] = None,
    status: MatchStatus = MatchStatus.FINISHED,
) -> MatchRow:
    return MatchRow(
        match_id="m",
        opponent="Night Owls",
        status=status,
        raw_status=status.value.upper(),
        picked=picked or [],
        locations=locations or [],
        outcome=outcome,
    )


def _payload(match_id: str, status: str, ts: int, competition_name: Optional[str] = None):
    return FaceitMatch.model_validate(
        {
            "match_id": match_id,
            "status": status,
            "competition_name": competition_name,
            "finished_at": ts if status == "FINISHED" else None,
            "scheduled_at": ts,
            "teams": {
                "faction1": {"faction_id": "team-a", "name": "Lakeside"},
                "faction2": {"faction_id": "team-b", "name": None},
            },
            "results": {"score": {"faction1": 2, "faction2": 0}},
        }
    )


def test_maps_played_counts_primary_pick_of_finished_matches() -> None:
    rows = [
        _row(Outcome.WIN, picked=["Nuke", "Mirage"], locations=["Chicago"]),
        _row(Outcome.LOSS, picked=["Nuke"], locations=["Dallas", "Chicago"]),
        _row(Outcome.UNKNOWN, picked=["Inferno"], status=MatchStatus.SCHEDULED),
    ]
    assert count_maps_played(rows) == {"Nuke": 2}
    assert count_locations(rows) == {"Chicago": 1, "Dallas": 1}


def test_season_record() -> None:
    rows = [
        _row(Outcome.WIN),
        _row(Outcome.WIN),
        _row(Outcome.LOSS),
        _row(Outcome.TIE),
        _row(Outcome.UNKNOWN),
        _row(Outcome.UNKNOWN, status=MatchStatus.SCHEDULED),
    ]
    record = season_record(rows)
    assert (record.wins, record.losses, record.ties, record.total) == (2, 1, 1, 4)


def test_season_record_none_without_finished_matches() -> None:
    assert season_record([_row(Outcome.UNKNOWN, status=MatchStatus.SCHEDULED)]) is None


def test_build_league_summary() -> None:
    matches = [
        to_match(_payload("m1", "FINISHED", 100), "team-a"),
        to_match(_payload("m2", "FINISHED", 200, "ESEA Intermediate"), "team-a"),
        to_match(_payload("m3", "SCHEDULED", 400), "team-a"),
        to_match(_payload("m4", "SCHEDULED", 300), "team-a"),
    ]
    stats = {
        "m1": MatchStatistics.model_validate({"rounds": [{"round_stats": {"Map": "de_nuke"}}]}),
        "m2": None,
    }
    vetoes = {"m2": VetoResult(picked=["de_mirage"], banned=["de_train"])}

    summary = build_league_summary("team-a", "champ", matches, stats, vetoes, title="Fallback")

    assert summary.league_name == "ESEA Intermediate"
    assert [r.match_id for r in summary.finished] == ["m2", "m1"]
    assert [r.match_id for r in summary.upcoming] == ["m4", "m3"]
    assert summary.maps_played == {"de_nuke": 1, "de_mirage": 1}
    assert all(r.outcome is Outcome.WIN for r in summary.finished)
    assert summary.finished[0].opponent == "Unknown"
    assert summary.tendencies.matches_tracked == 2


def test_league_name_falls_back_to_title() -> None:
    matches = [to_match(_payload("m1", "SCHEDULED", 100), "team-a")]
    summary = build_league_summary("team-a", "champ", matches, {}, {}, title="Fallback")
    assert summary.league_name == "Fallback"

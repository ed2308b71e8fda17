from leaguescout.models import (
    LeagueSummary,
    MatchRow,
    MatchStatus,
    Outcome,
    Player,
    PlayerMapStat,
    PlayerMapSummary,
)
from leaguescout.render import render_text
from leaguescout.tendencies import compute_veto_tendencies


def test_render_text_sections() -> None:
    rows = [
        MatchRow(
            match_id="m1",
            opponent="Night Owls",
            status=MatchStatus.FINISHED,
            raw_status="FINISHED",
            picked=["Nuke"],
            our_score=13,
            opp_score=9,
            outcome=Outcome.WIN,
            sort_key=100,
        ),
        MatchRow(
            match_id="m2",
            opponent="Harbor",
            status=MatchStatus.SCHEDULED,
            raw_status="SCHEDULED",
            sort_key=200,
        ),
    ]
    summary = LeagueSummary(
        team_id="team-a",
        championship_id="champ",
        rows=rows,
        maps_played={"Nuke": 1},
        league_name="ESEA Intermediate",
        players=[Player(player_id="a1", nickname="lake1", skill_rating=2000)],
        player_map_stats=[
            PlayerMapSummary(
                player_id="a1",
                nickname="lake1",
                maps={"Nuke": PlayerMapStat(kills=5, deaths=0, adr_sum=80.0, rounds=1)},
            )
        ],
        tendencies=compute_veto_tendencies(rows),
    )

    text = render_text(summary, "Lakeside")

    assert "League: ESEA Intermediate" in text
    assert "Record: 1W-0L-0T (1 played)" in text
    assert "- vs Night Owls | win 13-9 | maps Nuke" in text
    assert "- vs Harbor | SCHEDULED" in text
    assert "K/D ∞" in text

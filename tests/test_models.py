import math

from leaguescout.models import (
    KD_INFINITE,
    NO_DATA,
    MatchStatus,
    PlayerMapStat,
    PlayerMapSummary,
    format_adr,
    format_kd,
    kd_ratio,
)
from leaguescout.payloads import parse_number, parse_score


def test_kd_sentinels() -> None:
    assert format_kd(5, 0) == KD_INFINITE
    assert format_kd(0, 0) == NO_DATA
    assert format_kd(10, 4) == "2.50"
    assert math.isinf(kd_ratio(5, 0))


def test_adr_formatting() -> None:
    assert format_adr(170.0, 2) == "85.0"
    assert format_adr(0.0, 0) == NO_DATA


def test_totals_across_maps() -> None:
    summary = PlayerMapSummary(
        player_id="a1",
        nickname="lake1",
        maps={
            "Mirage": PlayerMapStat(kills=20, deaths=10, adr_sum=90.0, rounds=1),
            "Nuke": PlayerMapStat(kills=10, deaths=10, adr_sum=70.0, rounds=1),
        },
    )
    totals = summary.totals()
    assert (totals.kills, totals.deaths, totals.rounds) == (30, 20, 2)
    assert totals.adr == 80.0
    assert totals.kd == 1.5


def test_status_mapping() -> None:
    assert MatchStatus.from_raw("FINISHED") is MatchStatus.FINISHED
    assert MatchStatus.from_raw("SCHEDULED") is MatchStatus.SCHEDULED
    assert MatchStatus.from_raw("ONGOING") is MatchStatus.ONGOING
    assert MatchStatus.from_raw("CANCELLED") is MatchStatus.OTHER
    assert MatchStatus.from_raw(None) is MatchStatus.OTHER


def test_number_parsing() -> None:
    assert parse_number("71,5") == 71.5
    assert parse_number("n/a") is None
    assert parse_number(True) is None
    assert parse_score("13") == 13
    assert parse_score("13.5") is None

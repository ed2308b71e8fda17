"""Transform league summaries to the frontend's camelCase format."""

import math
from typing import Any, Dict, List

from leaguescout.aggregate import season_record
from leaguescout.manual_vetoes import ManualVetoSummary
from leaguescout.models import (
    LeagueSummary,
    MapTendency,
    MatchRow,
    PlayerMapStat,
    SeasonRecord,
    format_adr,
    format_kd,
)
from leaguescout.reconcile import LeagueTeam


def _round(value: float | None, digits: int) -> float | None:
    if value is None:
        return None
    return round(value, digits)


def _transform_row(row: MatchRow) -> Dict[str, Any]:
    return {
        "matchId": row.match_id,
        "opponent": row.opponent,
        "status": row.raw_status,
        "picked": row.picked,
        "banned": row.banned,
        "locations": row.locations,
        "ourScore": row.our_score,
        "oppScore": row.opp_score,
        "outcome": row.outcome.value,
        "url": row.url,
        "sortKey": row.sort_key or 0,
    }


def _transform_map_stat(stat: PlayerMapStat) -> Dict[str, Any]:
    kd = stat.kd
    return {
        "kills": stat.kills,
        "deaths": stat.deaths,
        "adrSum": round(stat.adr_sum, 2),
        "hsKills": round(stat.hs_kills, 2),
        "rounds": stat.rounds,
        # JSON has no infinity; the display string carries the sentinel.
        "kd": None if kd is None or math.isinf(kd) else round(kd, 2),
        "kdDisplay": format_kd(stat.kills, stat.deaths),
        "adr": _round(stat.adr, 1),
        "adrDisplay": format_adr(stat.adr_sum, stat.rounds),
    }


def _transform_tendency(t: MapTendency) -> Dict[str, Any]:
    return {
        "map": t.map,
        "picks": t.picks,
        "bans": t.bans,
        "pickRate": round(t.pick_rate, 3),
        "banRate": round(t.ban_rate, 3),
    }


def transform_record(record: SeasonRecord | None) -> Dict[str, Any] | None:
    if record is None:
        return None
    return {
        "wins": record.wins,
        "losses": record.losses,
        "ties": record.ties,
        "total": record.total,
    }


def transform_team(team: LeagueTeam) -> Dict[str, Any]:
    return {
        "teamId": team.team_id,
        "name": team.name,
        "avatar": team.avatar,
        "game": team.game,
    }


def transform_summary_to_frontend(summary: LeagueSummary) -> Dict[str, Any]:
    """Convert a LeagueSummary into the frontend payload.

    Args:
        summary: Summary built by the league summary use case

    Returns:
        JSON-ready dictionary with camelCase keys
    """
    tendencies = summary.tendencies
    player_map_stats: List[Dict[str, Any]] = []
    for p in summary.player_map_stats:
        player_map_stats.append(
            {
                "playerId": p.player_id,
                "nickname": p.nickname,
                "maps": {name: _transform_map_stat(s) for name, s in p.maps.items()},
                "totals": _transform_map_stat(p.totals()),
            }
        )

    return {
        "teamId": summary.team_id,
        "championshipId": summary.championship_id,
        "leagueName": summary.league_name,
        "record": transform_record(season_record(summary.rows)),
        "finished": [_transform_row(r) for r in summary.finished],
        "upcoming": [_transform_row(r) for r in summary.upcoming],
        "mapStats": {name: {"played": n} for name, n in summary.maps_played.items()},
        "locations": dict(summary.locations),
        "players": [
            {
                "playerId": p.player_id,
                "nickname": p.nickname,
                "faceitElo": p.skill_rating,
            }
            for p in summary.players
        ],
        "playerMapStats": player_map_stats,
        "vetoTendencies": {
            "matchesTracked": tendencies.matches_tracked,
            "maps": [_transform_tendency(t) for t in tendencies.maps],
            "permabans": tendencies.permabans,
            "comfortPicks": tendencies.comfort_picks,
            "topComfort": (
                _transform_tendency(tendencies.top_comfort)
                if tendencies.top_comfort is not None
                else None
            ),
        },
    }


def transform_manual_summary(summary: ManualVetoSummary | None) -> Dict[str, Any] | None:
    if summary is None:
        return None
    return {
        "matchesTracked": summary.matches_tracked,
        "maps": [
            {
                "map": m.map,
                "picks": m.picks,
                "bans": m.bans,
                "totalMatches": m.total_matches,
                "pickRate": round(m.pick_rate, 3),
                "banRate": round(m.ban_rate, 3),
            }
            for m in summary.maps
        ],
        "likelyPermabans": summary.likely_permabans,
        "likelyComfortPicks": summary.likely_comfort_picks,
    }

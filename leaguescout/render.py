from __future__ import annotations

from typing import List, Optional

from .aggregate import season_record
from .models import LeagueSummary, MatchRow, format_adr, format_kd


def _score(row: MatchRow) -> str:
    if row.our_score is None or row.opp_score is None:
        return "-"
    return f"{row.our_score}-{row.opp_score}"


def _maps(row: MatchRow) -> str:
    return ", ".join(row.picked) if row.picked else "-"


def render_text(summary: LeagueSummary, team_name: Optional[str] = None) -> str:
    record = season_record(summary.rows)
    tendencies = summary.tendencies

    lines: List[str] = []
    lines.append("LEAGUE SUMMARY")
    lines.append(f"League: {summary.league_name or summary.championship_id}")
    lines.append(f"Team: {team_name or summary.team_id}")
    if record is not None:
        lines.append(
            f"Record: {record.wins}W-{record.losses}L-{record.ties}T ({record.total} played)"
        )
    lines.append("")

    lines.append("Finished")
    for row in summary.finished:
        lines.append(
            f"- vs {row.opponent} | {row.outcome.value} {_score(row)} | maps {_maps(row)}"
        )
    lines.append("")

    lines.append("Upcoming")
    for row in summary.upcoming:
        lines.append(f"- vs {row.opponent} | {row.raw_status}")
    lines.append("")

    lines.append("Maps Played")
    for name, count in sorted(summary.maps_played.items(), key=lambda kv: (-kv[1], kv[0])):
        lines.append(f"- {name}: {count}")
    if summary.locations:
        lines.append(
            "Locations: "
            + ", ".join(f"{loc}:{n}" for loc, n in sorted(summary.locations.items()))
        )
    lines.append("")

    if tendencies.matches_tracked:
        lines.append(f"Veto Tendencies ({tendencies.matches_tracked} matches)")
        lines.append("Permabans: " + (", ".join(tendencies.permabans) or "-"))
        lines.append("Comfort picks: " + (", ".join(tendencies.comfort_picks) or "-"))
        if tendencies.top_comfort is not None:
            top = tendencies.top_comfort
            lines.append(f"Top comfort: {top.map} ({top.pick_rate:.0%} of {top.events} vetoes)")
        lines.append("")

    lines.append("Players")
    for p in summary.players:
        elo = p.skill_rating if p.skill_rating is not None else "-"
        lines.append(f"- {p.nickname} (elo {elo})")
    for stats in summary.player_map_stats:
        totals = stats.totals()
        lines.append(
            f"  {stats.nickname}: K/D {format_kd(totals.kills, totals.deaths)} | "
            f"ADR {format_adr(totals.adr_sum, totals.rounds)} | maps {totals.rounds}"
        )
        for name, stat in sorted(stats.maps.items()):
            lines.append(
                f"    {name}: K/D {format_kd(stat.kills, stat.deaths)} | "
                f"ADR {format_adr(stat.adr_sum, stat.rounds)} | {stat.rounds}x"
            )

    return "\n".join(lines)

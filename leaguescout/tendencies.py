from __future__ import annotations

from typing import Dict, Iterable, List

from .models import MapTendency, MatchRow, MatchStatus, VetoTendencies

# Conservative on purpose: one regular season is a small sample.
THRESHOLDS = {
    "permaban_min_events": 3,
    "permaban_rate": 0.8,
    "comfort_min_events": 2,
    "comfort_pick_rate": 0.6,
}


def count_pick_ban_events(rows: Iterable[MatchRow]) -> Dict[str, Dict[str, int]]:
    """Per map pick/ban counts over finished matches that recorded any veto.

    A map counts at most once per side per match.
    """
    counts: Dict[str, Dict[str, int]] = {}
    for row in rows:
        if row.status is not MatchStatus.FINISHED:
            continue
        if not row.picked and not row.banned:
            continue
        for name in dict.fromkeys(row.picked):
            counts.setdefault(name, {"picks": 0, "bans": 0})["picks"] += 1
        for name in dict.fromkeys(row.banned):
            counts.setdefault(name, {"picks": 0, "bans": 0})["bans"] += 1
    return counts


def _is_permaban(t: MapTendency) -> bool:
    return (
        t.picks == 0
        and t.bans >= THRESHOLDS["permaban_min_events"]
        and t.ban_rate >= THRESHOLDS["permaban_rate"]
    )


def _is_comfort(t: MapTendency) -> bool:
    return (
        t.events >= THRESHOLDS["comfort_min_events"]
        and t.pick_rate >= THRESHOLDS["comfort_pick_rate"]
        and t.picks >= t.bans
    )


def compute_veto_tendencies(rows: Iterable[MatchRow]) -> VetoTendencies:
    rows = list(rows)
    tracked = sum(
        1
        for r in rows
        if r.status is MatchStatus.FINISHED and (r.picked or r.banned)
    )

    aggs: List[MapTendency] = []
    for name, c in count_pick_ban_events(rows).items():
        total = max(1, c["picks"] + c["bans"])
        aggs.append(
            MapTendency(
                map=name,
                picks=c["picks"],
                bans=c["bans"],
                pick_rate=c["picks"] / total,
                ban_rate=c["bans"] / total,
            )
        )

    picked_maps = sorted(
        (t for t in aggs if t.picks >= 1), key=lambda t: (-t.pick_rate, -t.picks)
    )
    comfort = sorted(
        (t for t in aggs if _is_comfort(t)), key=lambda t: (-t.pick_rate, -t.picks, t.map)
    )

    return VetoTendencies(
        matches_tracked=tracked,
        maps=sorted(aggs, key=lambda t: (-t.events, -t.pick_rate)),
        permabans=sorted(t.map for t in aggs if _is_permaban(t)),
        comfort_picks=[t.map for t in comfort],
        top_comfort=picked_maps[0] if picked_maps else None,
    )

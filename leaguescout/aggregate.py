from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional

from .models import (
    Match,
    MatchOutcome,
    MatchRow,
    MatchStatus,
    Outcome,
    SeasonRecord,
    VetoResult,
)

UNKNOWN_OPPONENT = "Unknown"


def build_match_row(match: Match, outcome: MatchOutcome, veto: VetoResult) -> MatchRow:
    return MatchRow(
        match_id=match.match_id,
        opponent=match.opponent.name or UNKNOWN_OPPONENT,
        status=match.status,
        raw_status=match.raw_status,
        picked=list(veto.picked),
        banned=list(veto.banned),
        locations=list(veto.locations),
        our_score=outcome.our_score,
        opp_score=outcome.opp_score,
        outcome=outcome.result,
        url=match.url,
        sort_key=match.sort_key,
    )


def build_match_rows(
    matches: Iterable[Match],
    outcomes: Dict[str, MatchOutcome],
    vetoes: Dict[str, VetoResult],
) -> List[MatchRow]:
    return [
        build_match_row(
            m,
            outcomes.get(m.match_id, MatchOutcome()),
            vetoes.get(m.match_id, VetoResult()),
        )
        for m in matches
    ]


def count_maps_played(rows: Iterable[MatchRow]) -> Dict[str, int]:
    """One count per finished match, for the first picked map only."""
    counts: Counter = Counter()
    for row in rows:
        if row.status is MatchStatus.FINISHED and row.picked:
            counts[row.picked[0]] += 1
    return dict(counts)


def count_locations(rows: Iterable[MatchRow]) -> Dict[str, int]:
    counts: Counter = Counter()
    for row in rows:
        if row.status is MatchStatus.FINISHED and row.locations:
            counts[row.locations[0]] += 1
    return dict(counts)


def league_name(matches: Iterable[Match], title: Optional[str] = None) -> Optional[str]:
    for m in matches:
        if m.competition_name:
            return m.competition_name
    return title or None


def season_record(rows: Iterable[MatchRow]) -> Optional[SeasonRecord]:
    """W/L/T over finished rows; None when nothing has been played yet."""
    finished = [r for r in rows if r.status is MatchStatus.FINISHED]
    if not finished:
        return None
    return SeasonRecord(
        wins=sum(1 for r in finished if r.outcome is Outcome.WIN),
        losses=sum(1 for r in finished if r.outcome is Outcome.LOSS),
        ties=sum(1 for r in finished if r.outcome is Outcome.TIE),
    )

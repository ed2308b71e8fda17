"""Pure assembly of a league summary from fetched inputs."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .aggregate import build_match_rows, count_locations, count_maps_played, league_name
from .models import LeagueSummary, Match, MatchOutcome, Player, VetoResult
from .outcome import aggregate_player_map_stats, resolve_outcome
from .payloads import MatchStatistics
from .tendencies import compute_veto_tendencies
from .veto import resolve_veto

logger = logging.getLogger(__name__)


def build_league_summary(
    team_id: str,
    championship_id: str,
    matches: List[Match],
    stats_by_id: Dict[str, Optional[MatchStatistics]],
    veto_by_id: Dict[str, Optional[VetoResult]],
    players: Optional[List[Player]] = None,
    title: Optional[str] = None,
) -> LeagueSummary:
    outcomes: Dict[str, MatchOutcome] = {}
    vetoes: Dict[str, VetoResult] = {}
    for m in matches:
        stats = stats_by_id.get(m.match_id)
        outcomes[m.match_id] = resolve_outcome(m, stats)
        vetoes[m.match_id] = resolve_veto(m, veto_by_id.get(m.match_id), stats)

    rows = build_match_rows(matches, outcomes, vetoes)
    summary = LeagueSummary(
        team_id=team_id,
        championship_id=championship_id,
        rows=rows,
        maps_played=count_maps_played(rows),
        locations=count_locations(rows),
        league_name=league_name(matches, title),
        players=list(players or []),
        player_map_stats=aggregate_player_map_stats(matches, stats_by_id),
        tendencies=compute_veto_tendencies(rows),
    )
    logger.info(
        "Summary for %s: %s matches, %s finished, %s maps",
        team_id,
        len(rows),
        len(summary.finished),
        len(summary.maps_played),
    )
    return summary

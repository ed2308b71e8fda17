"""Score and outcome resolution for finished matches, plus per-player map stats."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Match, MatchOutcome, Outcome, PlayerMapStat, PlayerMapSummary
from .payloads import (
    MatchStatistics,
    StatsRound,
    StatsTeam,
    faction_score,
    iter_stats_rounds,
    parse_score,
    player_stat,
    round_map_name,
    stats_final_score,
    stats_player_id,
    stats_player_ids,
    stats_team_id,
)

logger = logging.getLogger(__name__)

ScorePair = Tuple[Optional[int], Optional[int]]

HEADSHOT_KEYS = ("Headshots %", "HS %", "HS%")


def _other_slot(slot: str) -> str:
    return "faction2" if slot == "faction1" else "faction1"


def locate_team_blocks(
    round_: StatsRound, match: Match
) -> Tuple[Optional[StatsTeam], Optional[StatsTeam]]:
    """Return (ours, theirs) from one statistics round.

    Identifier match first (team id chain vs. our faction id or the queried
    team id). Otherwise the single block whose players overlap our roster is
    ours; zero or two overlapping blocks leave both sides unresolved.
    """
    teams = round_.teams
    # Our faction id is the queried team id once a match is oriented.
    by_id = [t for t in teams if stats_team_id(t) == match.our.team_id]
    if len(by_id) == 1:
        ours = by_id[0]
        others = [t for t in teams if t is not ours]
        return ours, (others[0] if others else None)

    roster = match.our.roster_ids
    if not roster:
        return None, None
    overlapping = [t for t in teams if stats_player_ids(t) & roster]
    if len(overlapping) != 1:
        if len(overlapping) > 1:
            logger.debug("Ambiguous roster overlap in stats for %s", match.match_id)
        return None, None
    ours = overlapping[0]
    others = [t for t in teams if t is not ours]
    return ours, (others[0] if others else None)


def scores_from_statistics(match: Match, stats: Optional[MatchStatistics]) -> ScorePair:
    rounds = list(iter_stats_rounds(stats))
    if not rounds:
        return None, None
    ours, theirs = locate_team_blocks(rounds[0], match)
    return stats_final_score(ours), stats_final_score(theirs)


def scores_from_results(match: Match) -> ScorePair:
    results = match.payload.results
    if results is None:
        return None, None
    score = results.score
    return (
        parse_score(score.get(match.our_faction)),
        parse_score(score.get(_other_slot(match.our_faction))),
    )


def scores_from_detailed_results(match: Match) -> ScorePair:
    detailed = match.payload.detailed_results
    if not detailed:
        return None, None
    factions = detailed[-1].factions
    return (
        faction_score(factions, match.our_faction),
        faction_score(factions, _other_slot(match.our_faction)),
    )


def _complete(pair: ScorePair) -> bool:
    return pair[0] is not None and pair[1] is not None


def outcome_from_winner(match: Match) -> Outcome:
    results = match.payload.results
    winner = (results.winner if results else None) or ""
    if winner == match.our_faction:
        return Outcome.WIN
    if winner == _other_slot(match.our_faction):
        return Outcome.LOSS
    return Outcome.UNKNOWN


def resolve_outcome(match: Match, stats: Optional[MatchStatistics] = None) -> MatchOutcome:
    """Scores from the first source yielding both sides; outcome from scores or the winner flag."""
    if not match.is_finished:
        return MatchOutcome()

    scores: ScorePair = (None, None)
    for source in (
        lambda: scores_from_statistics(match, stats),
        lambda: scores_from_results(match),
        lambda: scores_from_detailed_results(match),
    ):
        scores = source()
        if _complete(scores):
            break
    else:
        return MatchOutcome(result=outcome_from_winner(match))

    ours, theirs = scores
    if ours > theirs:
        result = Outcome.WIN
    elif ours < theirs:
        result = Outcome.LOSS
    else:
        result = Outcome.TIE
    return MatchOutcome(our_score=ours, opp_score=theirs, result=result)


def aggregate_player_map_stats(
    matches: Iterable[Match], stats_by_id: Dict[str, Optional[MatchStatistics]]
) -> List[PlayerMapSummary]:
    """Per player, per map totals from our statistics block in every finished match.

    Each round (map) a player appears in adds one to ``rounds`` for that map.
    Rounds without a map name are skipped.
    """
    summaries: Dict[str, PlayerMapSummary] = {}
    for match in matches:
        if not match.is_finished:
            continue
        for round_ in iter_stats_rounds(stats_by_id.get(match.match_id)):
            map_name = round_map_name(round_)
            if map_name is None:
                continue
            ours, _ = locate_team_blocks(round_, match)
            if ours is None:
                continue
            for player in ours.players:
                pid = stats_player_id(player)
                if pid is None:
                    continue
                summary = summaries.get(pid)
                if summary is None:
                    summary = PlayerMapSummary(player_id=pid, nickname=player.nickname or pid)
                    summaries[pid] = summary
                stat = summary.maps.setdefault(map_name, PlayerMapStat())

                ps = player.player_stats
                kills = player_stat(ps, "Kills")
                hs_pct = player_stat(ps, *HEADSHOT_KEYS)
                stat.kills += int(kills)
                stat.deaths += int(player_stat(ps, "Deaths"))
                stat.adr_sum += player_stat(ps, "ADR")
                stat.rounds += 1
                if kills > 0 and hs_pct > 0:
                    stat.hs_kills += kills * hs_pct / 100
    return list(summaries.values())

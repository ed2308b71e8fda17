"""Map veto resolution: veto history, then embedded voting, then the played map."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .models import Match, VetoResult
from .payloads import (
    MatchStatistics,
    VetoHistory,
    VetoTicket,
    VotingSection,
    entity_keys,
    entity_name,
    iter_stats_rounds,
    pick_ids,
    round_map_name,
)

PICKED_STATUSES = {"pick", "picked", "selected", "decider"}
BANNED_STATUSES = {"drop", "dropped", "ban", "banned"}


def partition_section(section: Optional[VotingSection]) -> Tuple[List[str], List[str]]:
    """Split a voting section into (picked, not picked) display names.

    An entity is picked when any of its identifiers is in the pick list.
    """
    if section is None or not section.entities:
        return [], []
    ids = pick_ids(section)
    picked: List[str] = []
    rest: List[str] = []
    for entity in section.entities:
        name = entity_name(entity)
        if not name:
            continue
        if entity_keys(entity) & ids:
            picked.append(name)
        else:
            rest.append(name)
    return picked, rest


def _partition_tickets(tickets: List[VetoTicket]) -> Tuple[List[str], List[str], List[str]]:
    picked: List[str] = []
    banned: List[str] = []
    locations: List[str] = []
    for ticket in tickets:
        kind = (ticket.entity_type or "").lower()
        for entity in ticket.entities:
            name = entity_name(entity)
            status = (entity.status or "").lower()
            if not name:
                continue
            if kind == "map":
                if status in PICKED_STATUSES:
                    picked.append(name)
                elif status in BANNED_STATUSES:
                    banned.append(name)
            elif kind == "location" and status in PICKED_STATUSES:
                locations.append(name)
    return picked, banned, locations


def veto_from_history(history: Optional[VetoHistory]) -> Optional[VetoResult]:
    """Parse either veto-history shape; None when nothing usable is in it."""
    if history is None:
        return None
    voting = history.voting
    map_section = history.map or (voting.map if voting else None)
    location_section = history.location or (voting.location if voting else None)

    picked, banned = partition_section(map_section)
    locations, _ = partition_section(location_section)

    if history.payload is not None and history.payload.tickets:
        t_picked, t_banned, t_locations = _partition_tickets(history.payload.tickets)
        picked += t_picked
        banned += t_banned
        locations += t_locations

    result = VetoResult.partition(picked, banned, locations)
    return None if result.is_empty else result


def veto_from_voting(match: Match) -> VetoResult:
    voting = match.payload.voting
    if voting is None:
        return VetoResult()
    picked, banned = partition_section(voting.map)
    locations, _ = partition_section(voting.location)
    return VetoResult.partition(picked, banned, locations)


def map_from_statistics(stats: Optional[MatchStatistics]) -> Optional[str]:
    for round_ in iter_stats_rounds(stats):
        return round_map_name(round_)
    return None


def resolve_veto(
    match: Match,
    history: Optional[VetoResult] = None,
    stats: Optional[MatchStatistics] = None,
) -> VetoResult:
    """Veto history if it has anything, else embedded voting; the stats map fills a missing pick."""
    result = history if history is not None and not history.is_empty else veto_from_voting(match)
    if result.picked:
        return result
    played = map_from_statistics(stats)
    if played is None:
        return result
    return VetoResult.partition([played], result.banned, result.locations)

"""Hand-entered veto annotations per (team, match) and their summary.

Rows live in an external table keyed by team id and match id. Saving a match
clears its key and inserts the new rows; the two steps are not atomic, so a
failed insert leaves that match without annotations.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

logger = logging.getLogger(__name__)

MAP_KEYWORDS = (
    ("mirage", "Mirage"),
    ("inferno", "Inferno"),
    ("nuke", "Nuke"),
    ("ancient", "Ancient"),
    ("anubis", "Anubis"),
    ("vertigo", "Vertigo"),
    ("dust", "Dust2"),
    ("overpass", "Overpass"),
    ("train", "Train"),
)

# Server locations that show up in pasted veto logs.
LOCATION_NOISE = ("chicago", "dallas", "denver", "newyork", "new york")

PERMABAN_MIN_BANS = 2
PERMABAN_RATE = 0.7
COMFORT_MIN_PICKS = 2
COMFORT_RATE = 0.5


class VetoAction(str, Enum):
    PICK = "pick"
    BAN = "ban"


@dataclass(frozen=True)
class ManualVetoAction:
    map: str
    action: VetoAction


@dataclass
class ManualMatchVeto:
    match_id: str
    team_id: str
    team_name: str
    actions: List[ManualVetoAction] = field(default_factory=list)


@dataclass(frozen=True)
class ManualVetoRow:
    """One stored row of the veto log table."""

    team_id: str
    team_name: str
    match_id: str
    map: str
    action: VetoAction


@dataclass(frozen=True)
class ManualMapSummary:
    map: str
    picks: int
    bans: int
    total_matches: int
    pick_rate: float
    ban_rate: float


@dataclass
class ManualVetoSummary:
    matches_tracked: int
    maps: List[ManualMapSummary] = field(default_factory=list)
    likely_permabans: List[str] = field(default_factory=list)
    likely_comfort_picks: List[str] = field(default_factory=list)


class ManualVetoStore(ABC):
    """Port for the annotation table."""

    @abstractmethod
    def delete(self, team_id: str, match_id: str) -> None:
        """Remove every row stored for (team_id, match_id)."""
        ...

    @abstractmethod
    def insert(self, rows: List[ManualVetoRow]) -> None:
        ...

    @abstractmethod
    def select_for_team(self, team_id: str) -> List[ManualVetoRow]:
        ...


class InMemoryManualVetoStore(ManualVetoStore):
    def __init__(self) -> None:
        self._rows: List[ManualVetoRow] = []
        self._lock = threading.Lock()

    def delete(self, team_id: str, match_id: str) -> None:
        with self._lock:
            self._rows = [
                r for r in self._rows if not (r.team_id == team_id and r.match_id == match_id)
            ]

    def insert(self, rows: List[ManualVetoRow]) -> None:
        with self._lock:
            self._rows.extend(rows)

    def select_for_team(self, team_id: str) -> List[ManualVetoRow]:
        with self._lock:
            return [r for r in self._rows if r.team_id == team_id]


def normalize_map_name(raw: Optional[str]) -> Optional[str]:
    """Canonical map name, None for server-location noise, else the trimmed input."""
    if not raw or not raw.strip():
        return None
    lowered = raw.strip().lower()
    for keyword, canonical in MAP_KEYWORDS:
        if keyword in lowered:
            return canonical
    if any(city in lowered for city in LOCATION_NOISE):
        return None
    return raw.strip()


def save_manual_match_veto(store: ManualVetoStore, entry: ManualMatchVeto) -> List[ManualVetoRow]:
    rows: List[ManualVetoRow] = []
    for action in entry.actions:
        name = normalize_map_name(action.map)
        if name is None:
            continue
        rows.append(
            ManualVetoRow(
                team_id=entry.team_id,
                team_name=entry.team_name,
                match_id=entry.match_id,
                map=name,
                action=action.action,
            )
        )

    store.delete(entry.team_id, entry.match_id)
    if rows:
        store.insert(rows)
    logger.info(
        "Saved %s manual veto rows for team %s match %s",
        len(rows),
        entry.team_id,
        entry.match_id,
    )
    return rows


def load_manual_vetoes(store: ManualVetoStore, team_id: str) -> List[ManualMatchVeto]:
    by_match: Dict[str, ManualMatchVeto] = {}
    for row in store.select_for_team(team_id):
        entry = by_match.get(row.match_id)
        if entry is None:
            entry = ManualMatchVeto(
                match_id=row.match_id, team_id=row.team_id, team_name=row.team_name
            )
            by_match[row.match_id] = entry
        entry.actions.append(ManualVetoAction(map=row.map, action=row.action))
    return list(by_match.values())


def summarize_manual_vetoes(entries: Iterable[ManualMatchVeto]) -> Optional[ManualVetoSummary]:
    """Rates are per distinct annotated match for each map."""
    entries = list(entries)
    if not entries:
        return None

    counts: Dict[str, Dict[str, int]] = {}
    matches: Dict[str, Set[str]] = {}
    for entry in entries:
        for action in entry.actions:
            name = normalize_map_name(action.map)
            if name is None:
                continue
            c = counts.setdefault(name, {"picks": 0, "bans": 0})
            if action.action is VetoAction.PICK:
                c["picks"] += 1
            elif action.action is VetoAction.BAN:
                c["bans"] += 1
            matches.setdefault(name, set()).add(entry.match_id)

    maps: List[ManualMapSummary] = []
    for name, c in counts.items():
        total = len(matches[name]) or 1
        maps.append(
            ManualMapSummary(
                map=name,
                picks=c["picks"],
                bans=c["bans"],
                total_matches=total,
                pick_rate=c["picks"] / total,
                ban_rate=c["bans"] / total,
            )
        )

    permabans = [
        m.map for m in maps if m.bans >= PERMABAN_MIN_BANS and m.ban_rate >= PERMABAN_RATE
    ]
    comfort = [
        m.map for m in maps if m.picks >= COMFORT_MIN_PICKS and m.pick_rate >= COMFORT_RATE
    ]
    maps.sort(key=lambda m: -(m.picks + m.bans))
    return ManualVetoSummary(
        matches_tracked=len(entries),
        maps=maps,
        likely_permabans=permabans,
        likely_comfort_picks=comfort,
    )

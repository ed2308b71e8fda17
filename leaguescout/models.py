from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence

from .payloads import FaceitMatch


KD_INFINITE = "∞"
NO_DATA = "-"


class MatchStatus(str, Enum):
    """Lifecycle status of a league match."""

    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    FINISHED = "finished"
    OTHER = "other"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "MatchStatus":
        value = (raw or "").strip().lower()
        if value in {"finished", "closed", "played"}:
            return cls.FINISHED
        if value in {"ongoing", "ready", "voting", "configuring", "started", "checking_in"}:
            return cls.ONGOING
        if value in {"scheduled", "upcoming", "created"}:
            return cls.SCHEDULED
        return cls.OTHER


class Outcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    TIE = "tie"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TeamRef:
    team_id: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    roster_ids: FrozenSet[str] = frozenset()


@dataclass
class Match:
    """A league match seen from the queried team's side."""

    match_id: str
    our: TeamRef
    opponent: TeamRef
    our_faction: str  # "faction1" or "faction2"
    status: MatchStatus
    raw_status: str
    scheduled_at: Optional[int] = None
    started_at: Optional[int] = None
    finished_at: Optional[int] = None
    url: Optional[str] = None
    competition_name: Optional[str] = None
    payload: FaceitMatch = field(default_factory=FaceitMatch, repr=False)

    @property
    def sort_key(self) -> Optional[int]:
        for ts in (self.finished_at, self.started_at, self.scheduled_at):
            if ts:
                return ts
        return None

    @property
    def is_finished(self) -> bool:
        return self.status is MatchStatus.FINISHED


@dataclass(frozen=True)
class MatchOutcome:
    our_score: Optional[int] = None
    opp_score: Optional[int] = None
    result: Outcome = Outcome.UNKNOWN


@dataclass(frozen=True)
class VetoResult:
    picked: List[str] = field(default_factory=list)
    banned: List[str] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)

    @classmethod
    def partition(
        cls,
        picked: Sequence[str],
        banned: Sequence[str] = (),
        locations: Sequence[str] = (),
    ) -> "VetoResult":
        """Dedupe in order; a name that was picked is never also reported as banned."""
        picked_names = _dedupe(picked)
        banned_names = [b for b in _dedupe(banned) if b not in picked_names]
        return cls(picked=picked_names, banned=banned_names, locations=_dedupe(locations))

    @property
    def is_empty(self) -> bool:
        return not (self.picked or self.banned or self.locations)


def _dedupe(names: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(n for n in names if n))


def kd_ratio(kills: float, deaths: float) -> Optional[float]:
    """kills/deaths; math.inf when deaths is 0 but kills are not, None with no data."""
    if deaths > 0:
        return kills / deaths
    if kills > 0:
        return math.inf
    return None


def format_kd(kills: float, deaths: float) -> str:
    ratio = kd_ratio(kills, deaths)
    if ratio is None:
        return NO_DATA
    if math.isinf(ratio):
        return KD_INFINITE
    return f"{ratio:.2f}"


def average_adr(adr_sum: float, rounds: int) -> Optional[float]:
    return adr_sum / rounds if rounds > 0 else None


def format_adr(adr_sum: float, rounds: int) -> str:
    adr = average_adr(adr_sum, rounds)
    return NO_DATA if adr is None else f"{adr:.1f}"


@dataclass
class PlayerMapStat:
    kills: int = 0
    deaths: int = 0
    adr_sum: float = 0.0
    hs_kills: float = 0.0
    rounds: int = 0

    @property
    def kd(self) -> Optional[float]:
        return kd_ratio(self.kills, self.deaths)

    @property
    def adr(self) -> Optional[float]:
        return average_adr(self.adr_sum, self.rounds)


@dataclass
class PlayerMapSummary:
    player_id: str
    nickname: str
    maps: Dict[str, PlayerMapStat] = field(default_factory=dict)

    def totals(self) -> PlayerMapStat:
        total = PlayerMapStat()
        for stat in self.maps.values():
            total.kills += stat.kills
            total.deaths += stat.deaths
            total.adr_sum += stat.adr_sum
            total.hs_kills += stat.hs_kills
            total.rounds += stat.rounds
        return total


@dataclass(frozen=True)
class Player:
    player_id: str
    nickname: str
    skill_rating: Optional[int] = None


@dataclass
class MatchRow:
    """One match as presented in the summary."""

    match_id: str
    opponent: str
    status: MatchStatus
    raw_status: str
    picked: List[str] = field(default_factory=list)
    banned: List[str] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)
    our_score: Optional[int] = None
    opp_score: Optional[int] = None
    outcome: Outcome = Outcome.UNKNOWN
    url: Optional[str] = None
    sort_key: Optional[int] = None


@dataclass(frozen=True)
class MapTendency:
    map: str
    picks: int
    bans: int
    pick_rate: float
    ban_rate: float

    @property
    def events(self) -> int:
        return self.picks + self.bans


@dataclass
class VetoTendencies:
    matches_tracked: int = 0
    maps: List[MapTendency] = field(default_factory=list)
    permabans: List[str] = field(default_factory=list)
    comfort_picks: List[str] = field(default_factory=list)
    top_comfort: Optional[MapTendency] = None


@dataclass(frozen=True)
class SeasonRecord:
    wins: int
    losses: int
    ties: int

    @property
    def total(self) -> int:
        return self.wins + self.losses + self.ties


@dataclass
class LeagueSummary:
    team_id: str
    championship_id: str
    rows: List[MatchRow] = field(default_factory=list)
    maps_played: Dict[str, int] = field(default_factory=dict)
    locations: Dict[str, int] = field(default_factory=dict)
    league_name: Optional[str] = None
    players: List[Player] = field(default_factory=list)
    player_map_stats: List[PlayerMapSummary] = field(default_factory=list)
    tendencies: VetoTendencies = field(default_factory=VetoTendencies)

    @property
    def finished(self) -> List[MatchRow]:
        rows = [r for r in self.rows if r.status is MatchStatus.FINISHED]
        return sorted(rows, key=lambda r: r.sort_key or 0, reverse=True)

    @property
    def upcoming(self) -> List[MatchRow]:
        rows = [r for r in self.rows if r.status is not MatchStatus.FINISHED]
        return sorted(rows, key=lambda r: r.sort_key or 0)

"""Optional-field schemas for FACEIT payloads plus the accessor fallback chains.

FACEIT payloads are populated inconsistently across matches and endpoints, so
every field here is optional and unknown keys are kept. The accessor functions
below own the "try this key, then that one" chains so the resolvers can be
tested against plain model instances.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _dicts_only(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _list_or_empty(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _dict_or_empty(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


class Payload(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True, populate_by_name=True)


# ---- match feed / match lookup ---------------------------------------------


class Faction(Payload):
    faction_id: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    leader: Optional[str] = None
    roster: List[Dict[str, Any]] = Field(default_factory=list)
    players: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("roster", "players", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)


class MatchTeams(Payload):
    faction1: Optional[Faction] = None
    faction2: Optional[Faction] = None


class MatchResults(Payload):
    winner: Optional[str] = None
    score: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("score", mode="before")
    @classmethod
    def keep_dict(cls, value: Any) -> Any:
        return _dict_or_empty(value)


class DetailedResult(Payload):
    winner: Optional[str] = None
    factions: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("factions", mode="before")
    @classmethod
    def keep_dict(cls, value: Any) -> Any:
        return _dict_or_empty(value)


class VotingEntity(Payload):
    name: Optional[str] = None
    class_name: Optional[str] = None
    game_map_id: Optional[str] = None
    game_location_id: Optional[str] = None
    guid: Optional[str] = None
    id: Optional[str] = None


class VotingSection(Payload):
    entities: List[VotingEntity] = Field(default_factory=list)
    pick: List[Any] = Field(default_factory=list)
    picks: List[Any] = Field(default_factory=list)

    @field_validator("entities", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)

    @field_validator("pick", "picks", mode="before")
    @classmethod
    def keep_list(cls, value: Any) -> Any:
        return _list_or_empty(value)


class Voting(Payload):
    map: Optional[VotingSection] = None
    location: Optional[VotingSection] = None


class FaceitMatch(Payload):
    match_id: Optional[str] = None
    game: Optional[str] = None
    competition_id: Optional[str] = None
    competition_name: Optional[str] = None
    status: Optional[str] = None
    scheduled_at: Optional[int] = None
    started_at: Optional[int] = None
    finished_at: Optional[int] = None
    faceit_url: Optional[str] = None
    teams: Optional[MatchTeams] = None
    results: Optional[MatchResults] = None
    detailed_results: List[DetailedResult] = Field(default_factory=list)
    voting: Optional[Voting] = None

    @field_validator("detailed_results", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)

    @field_validator("scheduled_at", "started_at", "finished_at", mode="before")
    @classmethod
    def lenient_timestamp(cls, value: Any) -> Optional[int]:
        number = parse_number(value)
        if number is None or number <= 0:
            return None
        return int(number)


# ---- match statistics --------------------------------------------------------


class StatsPlayer(Payload):
    player_id: Optional[str] = None
    user_id: Optional[str] = None
    id: Optional[str] = None
    guid: Optional[str] = None
    nickname: Optional[str] = None
    player_stats: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("player_stats", mode="before")
    @classmethod
    def keep_dict(cls, value: Any) -> Any:
        return _dict_or_empty(value)


class StatsTeam(Payload):
    team_id: Optional[str] = None
    faction_id: Optional[str] = None
    guid: Optional[str] = None
    name: Optional[str] = None
    team_stats: Dict[str, Any] = Field(default_factory=dict)
    players: List[StatsPlayer] = Field(default_factory=list)

    @field_validator("team_stats", mode="before")
    @classmethod
    def keep_dict(cls, value: Any) -> Any:
        return _dict_or_empty(value)

    @field_validator("players", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)


class StatsRound(Payload):
    round_stats: Dict[str, Any] = Field(default_factory=dict)
    teams: List[StatsTeam] = Field(default_factory=list)

    @field_validator("round_stats", mode="before")
    @classmethod
    def keep_dict(cls, value: Any) -> Any:
        return _dict_or_empty(value)

    @field_validator("teams", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)


class MatchStatistics(Payload):
    rounds: List[StatsRound] = Field(default_factory=list)

    @field_validator("rounds", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)


# ---- team / player / history -------------------------------------------------


class FaceitTeam(Payload):
    team_id: Optional[str] = None
    name: Optional[str] = None
    nickname: Optional[str] = None
    avatar: Optional[str] = None
    game: Optional[str] = None
    leader: Optional[str] = None
    roster: List[Dict[str, Any]] = Field(default_factory=list)
    members: List[Dict[str, Any]] = Field(default_factory=list)
    players: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("roster", "members", "players", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)


class FaceitPlayer(Payload):
    player_id: Optional[str] = None
    nickname: Optional[str] = None
    faceit_elo: Optional[Any] = None
    games: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("games", mode="before")
    @classmethod
    def keep_dict(cls, value: Any) -> Any:
        return _dict_or_empty(value)


class PlayerHistoryItem(Payload):
    match_id: Optional[str] = None
    competition_id: Optional[str] = None
    competition_name: Optional[str] = None
    status: Optional[str] = None


# ---- veto history (democracy API) --------------------------------------------


class VetoTicketEntity(VotingEntity):
    status: Optional[str] = None
    selected_by: Optional[str] = None
    round: Optional[Any] = None


class VetoTicket(Payload):
    entity_type: Optional[str] = None
    entities: List[VetoTicketEntity] = Field(default_factory=list)

    @field_validator("entities", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)


class DemocracyPayload(Payload):
    tickets: List[VetoTicket] = Field(default_factory=list)

    @field_validator("tickets", mode="before")
    @classmethod
    def keep_dicts(cls, value: Any) -> Any:
        return _dicts_only(value)


class VetoHistory(Payload):
    map: Optional[VotingSection] = None
    location: Optional[VotingSection] = None
    voting: Optional[Voting] = None
    payload: Optional[DemocracyPayload] = None


# ---- accessors ---------------------------------------------------------------


def first_non_empty(*values: Any) -> Optional[str]:
    for value in values:
        if value is None or isinstance(value, bool):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def parse_number(value: Any) -> Optional[float]:
    """Return a finite float, or None when the value is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_score(value: Any) -> Optional[int]:
    number = parse_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _entity_chain(entity: VotingEntity) -> Tuple[Optional[str], ...]:
    return (
        entity.name,
        entity.class_name,
        entity.game_map_id,
        entity.game_location_id,
        entity.guid,
        entity.id,
    )


def entity_name(entity: VotingEntity) -> Optional[str]:
    """Display name: name, class name, game map/location id, guid, id."""
    return first_non_empty(*_entity_chain(entity))


def entity_keys(entity: VotingEntity) -> Set[str]:
    """Every identifier the entity can be referenced by in a pick list.

    The display name is always one of them, so an entity that only carries a
    class name is matched by that class name.
    """
    return {key for key in (first_non_empty(v) for v in _entity_chain(entity)) if key}


def pick_ids(section: Optional[VotingSection]) -> Set[str]:
    if section is None:
        return set()
    raw = section.picks or section.pick
    ids: Set[str] = set()
    for item in raw:
        if isinstance(item, dict):
            ids.update(entity_keys(VotingEntity.model_validate(item)))
        else:
            key = first_non_empty(item)
            if key:
                ids.add(key)
    return ids


def match_factions(match: FaceitMatch) -> Tuple[Optional[Faction], Optional[Faction]]:
    teams = match.teams
    if teams is None:
        return None, None
    return teams.faction1, teams.faction2


def faction_roster_ids(faction: Optional[Faction]) -> Set[str]:
    if faction is None:
        return set()
    members = faction.roster or faction.players
    return {pid for pid in (member_id(m) for m in members) if pid}


def match_url(match: FaceitMatch, lang: str = "en") -> Optional[str]:
    if not match.faceit_url:
        return None
    return match.faceit_url.replace("{lang}", lang)


def team_roster(team: FaceitTeam) -> List[Dict[str, Any]]:
    return team.roster or team.members or team.players


def member_id(member: Dict[str, Any]) -> Optional[str]:
    return first_non_empty(
        member.get("player_id"), member.get("user_id"), member.get("id"), member.get("guid")
    )


def member_nickname(member: Dict[str, Any]) -> Optional[str]:
    return first_non_empty(member.get("nickname"), member.get("name"))


def team_player_ids(team: FaceitTeam) -> List[str]:
    """Leader first, then roster members, without duplicates."""
    ids: List[str] = []
    for pid in [first_non_empty(team.leader)] + [member_id(m) for m in team_roster(team)]:
        if pid and pid not in ids:
            ids.append(pid)
    return ids


def skill_rating(player: FaceitPlayer, game: str = "cs2") -> Optional[int]:
    game_info = player.games.get(game)
    rating = None
    if isinstance(game_info, dict):
        rating = parse_number(game_info.get("faceit_elo"))
    if rating is None:
        rating = parse_number(player.faceit_elo)
    return int(rating) if rating is not None else None


def stats_team_id(team: StatsTeam) -> Optional[str]:
    return first_non_empty(team.team_id, team.faction_id, team.guid, team.name)


def stats_player_id(player: StatsPlayer) -> Optional[str]:
    return first_non_empty(
        player.player_id, player.user_id, player.id, player.guid, player.nickname
    )


def stats_player_ids(team: StatsTeam) -> Set[str]:
    return {pid for pid in (first_non_empty(p.player_id) for p in team.players) if pid}


def stats_final_score(team: Optional[StatsTeam]) -> Optional[int]:
    if team is None:
        return None
    stats = team.team_stats
    value = stats.get("Final Score")
    if value is None:
        value = stats.get("Score")
    return parse_score(value)


def round_map_name(round_: StatsRound) -> Optional[str]:
    value = round_.round_stats.get("Map")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def player_stat(stats: Dict[str, Any], *keys: str) -> float:
    for key in keys:
        number = parse_number(stats.get(key))
        if number is not None:
            return number
    return 0.0


def faction_score(factions: Dict[str, Any], slot: str) -> Optional[int]:
    entry = factions.get(slot)
    if isinstance(entry, dict):
        return parse_score(entry.get("score"))
    return None


def iter_stats_rounds(stats: Optional[MatchStatistics]) -> Iterable[StatsRound]:
    return stats.rounds if stats is not None else []

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .config import DEFAULT_GAME
from .models import Player
from .payloads import FaceitPlayer, FaceitTeam, member_id, member_nickname, skill_rating, team_roster


@dataclass(frozen=True)
class RosterMember:
    member_id: Optional[str]
    nickname: Optional[str]

    @property
    def lookup_key(self) -> str:
        return self.member_id or self.nickname or ""


def roster_members(team: Optional[FaceitTeam]) -> List[RosterMember]:
    """Roster entries with an id or a nickname; anything else is skipped."""
    if team is None:
        return []
    members: List[RosterMember] = []
    for raw in team_roster(team):
        member = RosterMember(member_id=member_id(raw), nickname=member_nickname(raw))
        if member.member_id or member.nickname:
            members.append(member)
    return members


def player_from_profile(
    member: RosterMember, profile: Optional[FaceitPlayer], game: str = DEFAULT_GAME
) -> Player:
    if profile is None:
        return Player(
            player_id=member.lookup_key,
            nickname=member.nickname or member.member_id or "Unknown",
        )
    return Player(
        player_id=profile.player_id or member.lookup_key,
        nickname=profile.nickname or member.nickname or "Unknown",
        skill_rating=skill_rating(profile, game),
    )

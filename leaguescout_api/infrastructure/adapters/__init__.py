"""Infrastructure adapters."""

from .faceit_league_adapter import FaceitLeagueAdapter

__all__ = [
    "FaceitLeagueAdapter",
]

"""Application ports (interfaces)."""

from leaguescout.manual_vetoes import ManualVetoStore

from .league_data import LeagueDataPort, ProgressCallbackPort

__all__ = [
    "LeagueDataPort",
    "ManualVetoStore",
    "ProgressCallbackPort",
]

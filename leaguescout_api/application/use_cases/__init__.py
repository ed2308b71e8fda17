"""Application use cases."""

from .league_summary import LeagueSummaryResult, LeagueSummaryUseCase

__all__ = [
    "LeagueSummaryResult",
    "LeagueSummaryUseCase",
]

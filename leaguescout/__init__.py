"""League data aggregation and scouting pipeline for FACEIT championships."""

__all__ = [
    "config",
    "errors",
    "payloads",
    "models",
    "faceit_client",
    "cache",
    "reconcile",
    "outcome",
    "veto",
    "aggregate",
    "tendencies",
    "players",
    "manual_vetoes",
    "concurrency",
    "summary",
    "render",
]

from __future__ import annotations

import os
from dataclasses import dataclass


OPEN_DATA_BASE = "https://open.faceit.com/data/v4"
DEMOCRACY_BASE = "https://www.faceit.com/api/democracy/v1"

DEFAULT_GAME = "cs2"
DEFAULT_PAGE_SIZE = 100
PLAYER_HISTORY_LIMIT = 100
TEAM_SEARCH_LIMIT = 10
DEFAULT_MAX_WORKERS = 8

# ESEA S55 NA Intermediate Central - Regular Season
DEFAULT_CHAMPIONSHIP_ID = "4e4b0ed1-7b4a-4bb5-8a67-d51ee1e1f78f"


@dataclass(frozen=True)
class FaceitConfig:
    api_key: str
    timeout_s: float = 20.0
    max_workers: int = DEFAULT_MAX_WORKERS
    championship_id: str = DEFAULT_CHAMPIONSHIP_ID
    game: str = DEFAULT_GAME


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def faceit_config_from_env() -> FaceitConfig:
    return FaceitConfig(
        api_key=os.environ.get("FACEIT_API_KEY", "").strip(),
        timeout_s=_env_float("FACEIT_TIMEOUT_S", 20.0),
        max_workers=max(1, _env_int("LEAGUESCOUT_MAX_WORKERS", DEFAULT_MAX_WORKERS)),
        championship_id=os.environ.get("LEAGUESCOUT_CHAMPIONSHIP_ID", "").strip()
        or DEFAULT_CHAMPIONSHIP_ID,
    )

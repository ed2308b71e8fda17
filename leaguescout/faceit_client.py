from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from .config import (
    DEFAULT_GAME,
    DEFAULT_PAGE_SIZE,
    DEMOCRACY_BASE,
    OPEN_DATA_BASE,
    PLAYER_HISTORY_LIMIT,
    TEAM_SEARCH_LIMIT,
    FaceitConfig,
)
from .errors import FaceitApiError, FaceitNotFound, FeedFetchError
from .payloads import (
    FaceitMatch,
    FaceitPlayer,
    FaceitTeam,
    MatchStatistics,
    PlayerHistoryItem,
    VetoHistory,
)

logger = logging.getLogger(__name__)


def _page_items(data: Any) -> List[Any]:
    if isinstance(data, dict):
        items = data.get("items")
        return items if isinstance(items, list) else []
    if isinstance(data, list):
        return data
    return []


@dataclass
class FaceitClient:
    """Thin client over the FACEIT open data API and the democracy (veto) API.

    No retries: a failed request is final for the caller's query.
    """

    api_key: str
    timeout_s: float = 20.0
    page_size: int = DEFAULT_PAGE_SIZE
    session: requests.Session = field(default_factory=requests.Session)

    def __post_init__(self) -> None:
        self.session.headers.update(
            {
                "Authorization": f"Bearer {self.api_key}",
                "accept": "application/json",
                "User-Agent": "leaguescout/1.0",
            }
        )

    @classmethod
    def from_config(cls, config: FaceitConfig) -> "FaceitClient":
        return cls(api_key=config.api_key, timeout_s=config.timeout_s)

    def _request(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        resp = self.session.get(url, params=params, headers=headers, timeout=self.timeout_s)
        logger.debug("GET %s params=%s -> %s", url, params, resp.status_code)
        return resp

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        resp = self._request(url, params)
        if resp.status_code == 404:
            raise FaceitNotFound(resp.status_code, url)
        if not resp.ok:
            raise FaceitApiError(resp.status_code, url)
        return resp.json()

    # ---- championship feed ---------------------------------------------------

    def list_championship_matches(self, championship_id: str) -> List[FaceitMatch]:
        """Every match of a championship, following offset pagination to the end.

        FACEIT answers 400 instead of an empty page when the offset runs past
        the last page; at a non-zero offset that is the end of the feed.
        """
        url = f"{OPEN_DATA_BASE}/championships/{championship_id}/matches"
        raw_items: List[Any] = []
        offset = 0
        while True:
            params = {"type": "all", "offset": offset, "limit": self.page_size}
            try:
                resp = self._request(url, params)
            except requests.RequestException as exc:
                raise FeedFetchError(championship_id, offset, exc) from exc

            if resp.status_code == 400 and offset > 0:
                logger.warning(
                    "400 at offset %s for championship %s; treating as end of pages",
                    offset,
                    championship_id,
                )
                break
            if not resp.ok:
                raise FeedFetchError(
                    championship_id, offset, FaceitApiError(resp.status_code, url)
                )
            try:
                page = _page_items(resp.json())
            except ValueError as exc:
                raise FeedFetchError(championship_id, offset, exc) from exc

            if not page:
                break
            raw_items.extend(page)
            if len(page) < self.page_size:
                break
            offset += self.page_size

        matches: List[FaceitMatch] = []
        for item in raw_items:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object feed item in %s", championship_id)
                continue
            try:
                matches.append(FaceitMatch.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed feed item %s: %s", item.get("match_id"), exc
                )
        logger.info("Championship %s: %s matches fetched", championship_id, len(matches))
        return matches

    # ---- single-entity lookups -----------------------------------------------

    def get_team(self, team_id: str) -> FaceitTeam:
        return FaceitTeam.model_validate(self._get_json(f"{OPEN_DATA_BASE}/teams/{team_id}"))

    def get_player(self, player_id: str) -> FaceitPlayer:
        return FaceitPlayer.model_validate(
            self._get_json(f"{OPEN_DATA_BASE}/players/{player_id}")
        )

    def get_match(self, match_id: str) -> FaceitMatch:
        return FaceitMatch.model_validate(self._get_json(f"{OPEN_DATA_BASE}/matches/{match_id}"))

    def get_match_stats(self, match_id: str) -> Optional[MatchStatistics]:
        """Round-level statistics; None when they were never recorded."""
        try:
            data = self._get_json(f"{OPEN_DATA_BASE}/matches/{match_id}/stats")
        except FaceitNotFound:
            return None
        return MatchStatistics.model_validate(data or {})

    def get_player_history(
        self, player_id: str, game: str = DEFAULT_GAME, limit: int = PLAYER_HISTORY_LIMIT
    ) -> List[PlayerHistoryItem]:
        data = self._get_json(
            f"{OPEN_DATA_BASE}/players/{player_id}/history",
            {"game": game, "offset": 0, "limit": limit},
        )
        return [
            PlayerHistoryItem.model_validate(item)
            for item in _page_items(data)
            if isinstance(item, dict)
        ]

    def get_veto_history(self, match_id: str) -> Optional[VetoHistory]:
        """Best-effort veto history: None on 404 or an unparseable body."""
        if not match_id:
            return None
        url = f"{DEMOCRACY_BASE}/match/{match_id}/history"
        resp = self._request(
            url, headers={"Authorization": None, "accept": "application/json, text/plain, */*"}
        )
        if resp.status_code == 404:
            return None
        if not resp.ok:
            raise FaceitApiError(resp.status_code, url)
        try:
            return VetoHistory.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Unparseable veto history for %s: %s", match_id, exc)
            return None

    def search_teams(self, nickname: str, game: str = DEFAULT_GAME) -> List[Dict[str, Any]]:
        if not nickname.strip():
            return []
        data = self._get_json(
            f"{OPEN_DATA_BASE}/search/teams",
            {"nickname": nickname, "game": game, "limit": TEAM_SEARCH_LIMIT},
        )
        return [item for item in _page_items(data) if isinstance(item, dict)]

    def get_team_stats(self, team_id: str, game: str = DEFAULT_GAME) -> Optional[Dict[str, Any]]:
        try:
            return self._get_json(f"{OPEN_DATA_BASE}/teams/{team_id}/stats/{game}")
        except FaceitNotFound:
            return None

from typing import Any, Dict, List, Optional

import pytest
import requests

from leaguescout.errors import FaceitApiError, FaceitNotFound, FeedFetchError
from leaguescout.faceit_client import FaceitClient


class _Response:
    def __init__(self, status_code: int, body: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("not json")
        return self._body


class _Session:
    """Replays queued responses and records every GET."""

    def __init__(self, responses: List[_Response]):
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []
        self._responses = list(responses)

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        resp = self._responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def _feed_item(match_id: str) -> Dict[str, Any]:
    return {
        "match_id": match_id,
        "status": "FINISHED",
        "teams": {
            "faction1": {"faction_id": "team-a", "name": "Lakeside"},
            "faction2": {"faction_id": "team-b", "name": "Night Owls"},
        },
    }


def _client(responses: List[Any], page_size: int = 2) -> FaceitClient:
    return FaceitClient(api_key="key", page_size=page_size, session=_Session(responses))


def test_session_gets_bearer_header() -> None:
    client = _client([])
    assert client.session.headers["Authorization"] == "Bearer key"


def test_default_session_is_created() -> None:
    client = FaceitClient(api_key="key")
    assert isinstance(client.session, requests.Session)
    assert client.session.headers["Authorization"] == "Bearer key"


def test_pagination_stops_at_partial_page() -> None:
    client = _client(
        [
            _Response(200, {"items": [_feed_item("m1"), _feed_item("m2")]}),
            _Response(200, {"items": [_feed_item("m3"), _feed_item("m4")]}),
            _Response(200, {"items": [_feed_item("m5")]}),
        ]
    )
    matches = client.list_championship_matches("champ")

    assert [m.match_id for m in matches] == ["m1", "m2", "m3", "m4", "m5"]
    offsets = [c["params"]["offset"] for c in client.session.calls]
    assert offsets == [0, 2, 4]
    assert all(c["params"]["type"] == "all" for c in client.session.calls)


def test_pagination_stops_at_empty_page() -> None:
    client = _client(
        [
            _Response(200, {"items": [_feed_item("m1"), _feed_item("m2")]}),
            _Response(200, {"items": []}),
        ]
    )
    assert len(client.list_championship_matches("champ")) == 2
    assert len(client.session.calls) == 2


def test_400_past_last_page_ends_pagination() -> None:
    client = _client(
        [
            _Response(200, {"items": [_feed_item("m1"), _feed_item("m2")]}),
            _Response(400, {"errors": []}),
        ]
    )
    matches = client.list_championship_matches("champ")
    assert [m.match_id for m in matches] == ["m1", "m2"]


def test_400_at_offset_zero_is_fatal() -> None:
    client = _client([_Response(400, {"errors": []})])
    with pytest.raises(FeedFetchError) as excinfo:
        client.list_championship_matches("champ")
    assert excinfo.value.offset == 0
    assert excinfo.value.championship_id == "champ"


def test_non_400_error_after_first_page_is_fatal() -> None:
    client = _client(
        [
            _Response(200, {"items": [_feed_item("m1"), _feed_item("m2")]}),
            _Response(503),
        ]
    )
    with pytest.raises(FeedFetchError) as excinfo:
        client.list_championship_matches("champ")
    assert excinfo.value.offset == 2


def test_network_error_in_feed_is_fatal() -> None:
    client = _client([requests.ConnectionError("down")])
    with pytest.raises(FeedFetchError):
        client.list_championship_matches("champ")


def test_malformed_feed_items_are_skipped() -> None:
    client = _client([_Response(200, {"items": [_feed_item("m1"), "junk"]})])
    matches = client.list_championship_matches("champ")
    assert [m.match_id for m in matches] == ["m1"]


def test_veto_history_404_is_no_data() -> None:
    client = _client([_Response(404)])
    assert client.get_veto_history("m1") is None


def test_veto_history_unparseable_is_no_data() -> None:
    client = _client([_Response(200, invalid_json=True)])
    assert client.get_veto_history("m1") is None


def test_veto_history_drops_auth_header() -> None:
    client = _client([_Response(200, {"map": {"entities": [], "pick": []}})])
    client.get_veto_history("m1")
    call = client.session.calls[0]
    assert call["url"].endswith("/democracy/v1/match/m1/history")
    assert call["headers"]["Authorization"] is None


def test_veto_history_server_error_raises() -> None:
    client = _client([_Response(500)])
    with pytest.raises(FaceitApiError):
        client.get_veto_history("m1")


def test_match_stats_404_is_none() -> None:
    client = _client([_Response(404)])
    assert client.get_match_stats("m1") is None


def test_team_404_raises_not_found() -> None:
    client = _client([_Response(404)])
    with pytest.raises(FaceitNotFound):
        client.get_team("team-a")


def test_player_history_sends_game_and_limit() -> None:
    client = _client(
        [_Response(200, {"items": [{"match_id": "m1", "competition_id": "champ"}, 7]})]
    )
    history = client.get_player_history("p1")
    assert [h.match_id for h in history] == ["m1"]
    assert client.session.calls[0]["params"] == {"game": "cs2", "offset": 0, "limit": 100}


def test_search_teams_blank_query_skips_request() -> None:
    client = _client([])
    assert client.search_teams("   ") == []
    assert client.session.calls == []

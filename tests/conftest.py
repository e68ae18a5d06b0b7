import json
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import pytest

from blockylist.config import SPOTIFY_API_BASE
from blockylist.spotify import SpotifyCredential


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.content = b"" if payload is None else json.dumps(payload).encode("utf-8")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


@dataclass
class RecordedCall:
    method: str
    path: str
    params: Optional[Dict[str, Any]]
    json: Optional[Dict[str, Any]]


class FakeSpotify:
    """
    Replaces requests.request for the Spotify layer.

    Routes are keyed by (METHOD, path). A route answers with a payload, a
    status code, an exception to raise, or a callable (params, json) -> payload.
    Unknown routes answer 404.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.calls: List[RecordedCall] = []
        self._lock = threading.Lock()

    def add(self, method: str, path: str, payload: Any = None, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status, payload)

    def __call__(self, method, url, headers=None, params=None, json=None, timeout=None):
        path = url[len(SPOTIFY_API_BASE):] if url.startswith(SPOTIFY_API_BASE) else url
        with self._lock:
            self.calls.append(RecordedCall(method.upper(), path, params, json))

        route = self.routes.get((method.upper(), path))
        if route is None:
            return FakeResponse(404, {"error": {"status": 404, "message": "Not found"}})

        status, payload = route
        if isinstance(payload, Exception):
            raise payload
        if callable(payload):
            payload = payload(params, json)
        return FakeResponse(status, payload)

    def calls_to(self, method: str, path: str) -> List[RecordedCall]:
        return [c for c in self.calls if c.method == method.upper() and c.path == path]


def make_track(track_id: str, popularity: Optional[int] = 50, **extra) -> Dict[str, Any]:
    data = {
        "id": track_id,
        "uri": f"spotify:track:{track_id}",
        "name": f"Track {track_id}",
        "popularity": popularity,
    }
    data.update(extra)
    return data


def track_items(tracks: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Library/playlist page shape: items wrap each track."""
    return {"items": [{"track": t} for t in tracks], "total": len(tracks)}


@pytest.fixture
def credential() -> SpotifyCredential:
    return SpotifyCredential(access_token="test-token")


@pytest.fixture
def fake_spotify(monkeypatch) -> FakeSpotify:
    fake = FakeSpotify()
    monkeypatch.setattr("blockylist.spotify.http.requests.request", fake)
    return fake


@pytest.fixture
def blocklists_file(tmp_path, monkeypatch):
    path = tmp_path / "blocklists.json"
    monkeypatch.setattr("blockylist.data.blocklists.BLOCKLISTS_FILE", str(path))
    return path


def route_playlist_creation(fake: FakeSpotify, user_id: str = "user-1", playlist_id: str = "pl-new") -> None:
    fake.add("GET", "/me", {"id": user_id})
    fake.add(
        "POST",
        f"/users/{user_id}/playlists",
        {"id": playlist_id, "external_urls": {"spotify": f"https://open.spotify.com/playlist/{playlist_id}"}},
        status=201,
    )
    fake.add("POST", f"/playlists/{playlist_id}/tracks", {"snapshot_id": "snap"}, status=201)



from typing import Any, Iterable, List, Optional

from blockylist.core import ArtistInfo, CancelToken, TrackEntry

from .auth import SpotifyCredential
from .http import page_limit, spotify_get


def usable_tracks(raw_tracks: Iterable[Any]) -> List[TrackEntry]:
    """
    Normalize raw Spotify track objects, dropping the ones that cannot be added
    to a playlist: missing track (deleted/unavailable), no URI, or a local file.

    Every track list returned by this module goes through here.
    """
    tracks: List[TrackEntry] = []
    for t in raw_tracks:
        if not isinstance(t, dict):
            continue
        uri = t.get("uri")
        if not uri or t.get("is_local"):
            continue
        popularity = t.get("popularity")
        tracks.append(
            TrackEntry(
                uri=uri,
                id=t.get("id"),
                name=t.get("name") or "",
                popularity=popularity if isinstance(popularity, int) else None,
            )
        )
    return tracks


def _tracks_from_items(data: dict) -> List[TrackEntry]:
    # Library and playlist pages wrap each track as {"track": {...}, "added_at": ...}
    items = data.get("items") or []
    return usable_tracks(
        item.get("track") if isinstance(item, dict) else None for item in items
    )


def fetch_playlist_tracks(
    credential: SpotifyCredential,
    playlist_id: str,
    limit: int = 50,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[TrackEntry]:
    data = spotify_get(
        credential,
        f"/playlists/{playlist_id}/tracks",
        params={"limit": page_limit(limit, maximum=100)},
        cancel=cancel,
    )
    return _tracks_from_items(data)


def fetch_liked_tracks(
    credential: SpotifyCredential,
    limit: int = 50,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[TrackEntry]:
    """First page of the user's liked-songs library."""
    data = spotify_get(
        credential,
        "/me/tracks",
        params={"limit": page_limit(limit)},
        cancel=cancel,
    )
    return _tracks_from_items(data)


def fetch_saved_tracks(
    credential: SpotifyCredential,
    limit: int = 50,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[TrackEntry]:
    """
    Saved tracks are the liked-songs library; the recommendation pool uses
    them as its exclusion list.
    """
    return fetch_liked_tracks(credential, limit, cancel=cancel)


def count_liked_tracks(
    credential: SpotifyCredential,
    *,
    cancel: Optional[CancelToken] = None,
) -> int:
    data = spotify_get(credential, "/me/tracks", params={"limit": 1}, cancel=cancel)
    return int(data.get("total") or 0)


def fetch_top_tracks(
    credential: SpotifyCredential,
    limit: int = 50,
    time_range: str = "short_term",
    *,
    cancel: Optional[CancelToken] = None,
) -> List[TrackEntry]:
    data = spotify_get(
        credential,
        "/me/top/tracks",
        params={"limit": page_limit(limit), "time_range": time_range},
        cancel=cancel,
    )
    return usable_tracks(data.get("items") or [])


def fetch_top_artists(
    credential: SpotifyCredential,
    limit: int = 50,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[ArtistInfo]:
    data = spotify_get(
        credential,
        "/me/top/artists",
        params={"limit": page_limit(limit)},
        cancel=cancel,
    )
    return [
        ArtistInfo(id=a["id"], name=a.get("name") or "")
        for a in data.get("items") or []
        if isinstance(a, dict) and a.get("id")
    ]


def fetch_artist_top_tracks(
    credential: SpotifyCredential,
    artist_id: str,
    *,
    market: str = "from_token",
    cancel: Optional[CancelToken] = None,
) -> List[TrackEntry]:
    data = spotify_get(
        credential,
        f"/artists/{artist_id}/top-tracks",
        params={"market": market},
        cancel=cancel,
    )
    return usable_tracks(data.get("tracks") or [])

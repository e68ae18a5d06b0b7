from typing import Any, Dict, List, Optional

from blockylist.core import CancelToken, EpisodeInfo, ShowInfo

from .auth import SpotifyCredential
from .http import page_limit, spotify_get


def _first_image(obj: Dict[str, Any]) -> str:
    images = obj.get("images") or []
    if images and isinstance(images[0], dict):
        return images[0].get("url") or ""
    return ""


def _to_episode(raw: Any) -> Optional[EpisodeInfo]:
    if not isinstance(raw, dict) or not raw.get("id"):
        return None
    show = raw.get("show") or {}
    return EpisodeInfo(
        id=raw["id"],
        uri=raw.get("uri") or f"spotify:episode:{raw['id']}",
        name=raw.get("name") or "",
        show_name=show.get("name"),
        release_date=raw.get("release_date"),
        duration_ms=raw.get("duration_ms"),
        image_url=_first_image(raw),
    )


def _to_show(raw: Any) -> Optional[ShowInfo]:
    if not isinstance(raw, dict) or not raw.get("id"):
        return None
    return ShowInfo(
        id=raw["id"],
        name=raw.get("name") or "",
        image_url=_first_image(raw),
        publisher=raw.get("publisher"),
    )


def fetch_show_latest_episode(
    credential: SpotifyCredential,
    show_id: str,
    *,
    cancel: Optional[CancelToken] = None,
) -> Optional[EpisodeInfo]:
    """
    Return the newest episode of a show, or None when the show has none.

    Spotify lists show episodes newest first, so the first usable item wins.
    """
    data = spotify_get(
        credential,
        f"/shows/{show_id}/episodes",
        params={"limit": 1},
        cancel=cancel,
    )
    for raw in data.get("items") or []:
        episode = _to_episode(raw)
        if episode is not None:
            return episode
    return None


def fetch_followed_shows(
    credential: SpotifyCredential,
    limit: int = 50,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[ShowInfo]:
    data = spotify_get(
        credential, "/me/shows", params={"limit": page_limit(limit)}, cancel=cancel
    )
    shows: List[ShowInfo] = []
    for item in data.get("items") or []:
        show = _to_show(item.get("show") if isinstance(item, dict) else None)
        if show is not None:
            shows.append(show)
    return shows


def search_shows(
    credential: SpotifyCredential,
    query: str,
    limit: int = 20,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[ShowInfo]:
    if not query.strip():
        return []
    data = spotify_get(
        credential,
        "/search",
        params={"q": query, "type": "show", "limit": page_limit(limit)},
        cancel=cancel,
    )
    items = (data.get("shows") or {}).get("items") or []
    return [s for s in (_to_show(raw) for raw in items) if s is not None]


def fetch_saved_episodes(
    credential: SpotifyCredential,
    limit: int = 20,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[EpisodeInfo]:
    """Recently saved episodes, offered when picking a fixed episode."""
    data = spotify_get(
        credential, "/me/episodes", params={"limit": page_limit(limit)}, cancel=cancel
    )
    episodes: List[EpisodeInfo] = []
    for item in data.get("items") or []:
        episode = _to_episode(item.get("episode") if isinstance(item, dict) else None)
        if episode is not None:
            episodes.append(episode)
    return episodes

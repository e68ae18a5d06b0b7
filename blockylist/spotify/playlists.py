from typing import List, Optional

from blockylist.core import BlockylistError, CancelToken, CreatedPlaylist, PlaylistInfo

from .auth import SpotifyCredential
from .http import page_limit, spotify_get, spotify_post

# Spotify accepts at most 100 URIs per add-items request
APPEND_BATCH_SIZE = 100


def get_current_user_id(
    credential: SpotifyCredential,
    *,
    cancel: Optional[CancelToken] = None,
) -> str:
    return spotify_get(credential, "/me", cancel=cancel)["id"]


def fetch_user_playlists(
    credential: SpotifyCredential,
    limit: int = 50,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[PlaylistInfo]:
    data = spotify_get(
        credential, "/me/playlists", params={"limit": page_limit(limit)}, cancel=cancel
    )
    playlists: List[PlaylistInfo] = []
    for p in data.get("items") or []:
        if not isinstance(p, dict) or not p.get("id"):
            continue
        images = p.get("images") or []
        playlists.append(
            PlaylistInfo(
                id=p["id"],
                name=p.get("name") or "",
                track_count=int((p.get("tracks") or {}).get("total") or 0),
                image_url=images[0].get("url", "") if images else "",
            )
        )
    return playlists


def create_playlist(
    credential: SpotifyCredential,
    user_id: str,
    name: str,
    description: str = "",
    public: bool = True,
    *,
    cancel: Optional[CancelToken] = None,
) -> CreatedPlaylist:
    """Create an empty playlist owned by `user_id`."""
    playlist = spotify_post(
        credential,
        f"/users/{user_id}/playlists",
        {"name": name, "description": description, "public": public},
        cancel=cancel,
    )
    return CreatedPlaylist(
        id=playlist["id"],
        url=(playlist.get("external_urls") or {}).get("spotify"),
    )


def append_playlist_items(
    credential: SpotifyCredential,
    playlist_id: str,
    uris: List[str],
    *,
    cancel: Optional[CancelToken] = None,
) -> int:
    """
    Append URIs, in order, to the end of a playlist.

    The remote add is not idempotent: every batch is posted exactly once and
    never retried. Returns the number of URIs appended. If a batch fails, the
    raised error's `appended_count` tells how many URIs earlier batches
    already put in the playlist.
    """
    appended = 0
    try:
        for i in range(0, len(uris), APPEND_BATCH_SIZE):
            batch = uris[i : i + APPEND_BATCH_SIZE]
            spotify_post(
                credential,
                f"/playlists/{playlist_id}/tracks",
                {"uris": batch},
                cancel=cancel,
            )
            appended += len(batch)
    except BlockylistError as e:
        e.appended_count = appended
        raise
    return appended

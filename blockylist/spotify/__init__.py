"""Public façade for the blockylist.spotify package.

This module exposes the Spotify Web API integration used by the engine and the
HTTP layer: the explicit bearer credential, the read endpoints that feed block
resolution, and the playlist create/append writes. Callers should import these
symbols from this façade instead of the internal modules.
"""

from .auth import SpotifyCredential, spotify_headers
from .http import spotify_get, spotify_post, spotify_request
from .playlists import (
    append_playlist_items,
    create_playlist,
    fetch_user_playlists,
    get_current_user_id,
)
from .shows import (
    fetch_followed_shows,
    fetch_saved_episodes,
    fetch_show_latest_episode,
    search_shows,
)
from .sources import (
    LIKED_SONGS_IMAGE_URL,
    LIKED_SONGS_LABEL,
    LIKED_SONGS_SOURCE_ID,
    TrackSource,
    TrackSourceType,
)
from .tracks import (
    count_liked_tracks,
    fetch_artist_top_tracks,
    fetch_liked_tracks,
    fetch_playlist_tracks,
    fetch_saved_tracks,
    fetch_top_artists,
    fetch_top_tracks,
    usable_tracks,
)

__all__ = [
    "SpotifyCredential",
    "spotify_headers",
    "spotify_request",
    "spotify_get",
    "spotify_post",
    "get_current_user_id",
    "fetch_user_playlists",
    "create_playlist",
    "append_playlist_items",
    "fetch_show_latest_episode",
    "fetch_followed_shows",
    "search_shows",
    "fetch_saved_episodes",
    "LIKED_SONGS_SOURCE_ID",
    "LIKED_SONGS_LABEL",
    "LIKED_SONGS_IMAGE_URL",
    "TrackSource",
    "TrackSourceType",
    "usable_tracks",
    "fetch_playlist_tracks",
    "fetch_liked_tracks",
    "fetch_saved_tracks",
    "count_liked_tracks",
    "fetch_top_tracks",
    "fetch_top_artists",
    "fetch_artist_top_tracks",
]

from typing import List, Optional

from blockylist.core import CancelToken, TrackEntry
from blockylist.spotify import (
    SpotifyCredential,
    TrackSource,
    TrackSourceType,
    fetch_liked_tracks,
    fetch_playlist_tracks,
)

# Songs blocks only look at the first page of their source
SOURCE_TRACKS_LIMIT = 50


def fetch_tracks_for_source(
    credential: SpotifyCredential,
    source: TrackSource,
    limit: int = SOURCE_TRACKS_LIMIT,
    *,
    cancel: Optional[CancelToken] = None,
) -> List[TrackEntry]:
    """Fetch the usable tracks of a songs block's source.

    Liked tracks come from the library endpoint, playlists from the playlist
    items endpoint; both return the same filtered TrackEntry list.
    """
    if source.source_type == TrackSourceType.LIKED:
        return fetch_liked_tracks(credential, limit, cancel=cancel)

    if source.source_type == TrackSourceType.PLAYLIST:
        if not source.source_id:
            return []
        return fetch_playlist_tracks(credential, source.source_id, limit, cancel=cancel)

    raise ValueError(f"Unsupported TrackSourceType: {source.source_type!r}")

"""Track sources for songs blocks.

A songs block points either at the user's liked-songs library (through the
LIKED_SONGS_SOURCE_ID sentinel) or at one of their playlists.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Sentinel source id stored in blocks for the liked-songs library
LIKED_SONGS_SOURCE_ID = "liked_songs"
LIKED_SONGS_LABEL = "Liked Songs"
LIKED_SONGS_IMAGE_URL = "https://misc.scdn.co/liked-songs/liked-songs-640.png"


class TrackSourceType(str, Enum):
    LIKED = "liked"
    PLAYLIST = "playlist"


@dataclass
class TrackSource:
    """Where a songs block draws its tracks from.

    For liked tracks, source_type is "liked" and source_id is the sentinel.
    For playlists, source_type is "playlist" and source_id is the playlist id.
    """

    source_type: TrackSourceType
    source_id: Optional[str] = None
    label: Optional[str] = None

    @classmethod
    def from_source_id(cls, source_id: str) -> "TrackSource":
        if source_id == LIKED_SONGS_SOURCE_ID:
            return cls(
                source_type=TrackSourceType.LIKED,
                source_id=LIKED_SONGS_SOURCE_ID,
                label=LIKED_SONGS_LABEL,
            )
        return cls(source_type=TrackSourceType.PLAYLIST, source_id=source_id)

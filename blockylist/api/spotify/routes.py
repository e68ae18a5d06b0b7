from dataclasses import asdict
from typing import Callable, List, TypeVar

from fastapi import APIRouter, Depends, Query

from blockylist.core import RemoteUnavailable, Unauthorized, log_info, log_step
from blockylist.spotify import (
    LIKED_SONGS_IMAGE_URL,
    LIKED_SONGS_LABEL,
    LIKED_SONGS_SOURCE_ID,
    SpotifyCredential,
    count_liked_tracks,
    fetch_followed_shows,
    fetch_saved_episodes,
    fetch_top_tracks,
    fetch_user_playlists,
    search_shows,
)

from ..deps import get_credential, raise_remote_unavailable, raise_unauth
from .schemas import EpisodeOut, ShowOut, TrackOut, TrackSourceList, TrackSourceOut

router = APIRouter()

T = TypeVar("T")


def _call_spotify(fetch: Callable[..., T], *args, **kwargs) -> T:
    try:
        return fetch(*args, **kwargs)
    except Unauthorized as e:
        raise_unauth(e)
    except RemoteUnavailable as e:
        raise_remote_unavailable(e)


@router.get("/sources", response_model=TrackSourceList)
def get_track_sources(
    credential: SpotifyCredential = Depends(get_credential),
) -> List[TrackSourceOut]:
    """
    Sources a songs block can draw from.

    The "Liked Songs" pseudo-source always comes first, followed by the
    user's playlists.
    """
    log_step("Fetching track sources for current user...")
    liked_count = _call_spotify(count_liked_tracks, credential)
    playlists = _call_spotify(fetch_user_playlists, credential)
    log_info(f"Track sources: liked songs ({liked_count}) + {len(playlists)} playlists.")

    sources = [
        TrackSourceOut(
            id=LIKED_SONGS_SOURCE_ID,
            name=LIKED_SONGS_LABEL,
            kind="liked",
            track_count=liked_count,
            image_url=LIKED_SONGS_IMAGE_URL,
        )
    ]
    sources.extend(
        TrackSourceOut(
            id=p.id,
            name=p.name,
            kind="playlist",
            track_count=p.track_count,
            image_url=p.image_url,
        )
        for p in playlists
    )
    return sources


@router.get("/shows", response_model=List[ShowOut])
def get_followed_shows(credential: SpotifyCredential = Depends(get_credential)):
    shows = _call_spotify(fetch_followed_shows, credential)
    return [ShowOut(**asdict(s)) for s in shows]


@router.get("/shows/search", response_model=List[ShowOut])
def get_show_search(
    q: str = Query(default=""),
    credential: SpotifyCredential = Depends(get_credential),
):
    shows = _call_spotify(search_shows, credential, q)
    return [ShowOut(**asdict(s)) for s in shows]


@router.get("/episodes", response_model=List[EpisodeOut])
def get_saved_episodes(credential: SpotifyCredential = Depends(get_credential)):
    episodes = _call_spotify(fetch_saved_episodes, credential)
    return [EpisodeOut(**asdict(e)) for e in episodes]


@router.get("/top-tracks", response_model=List[TrackOut])
def get_top_tracks(
    limit: int = Query(default=50, ge=1, le=50),
    credential: SpotifyCredential = Depends(get_credential),
):
    tracks = _call_spotify(fetch_top_tracks, credential, limit)
    return [TrackOut(**asdict(t)) for t in tracks]

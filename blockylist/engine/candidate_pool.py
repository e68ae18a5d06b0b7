"""Recommendation candidate pool.

A recommended-songs block has no explicit source. Its candidates come from
three signals:

  - artist signal    : 10 random artists out of the user's top 50, all of
                       their top tracks, weight +0.8 per occurrence
  - playlist signal  : 8 random playlists out of the user's first 50, their
                       first 30 tracks, weight +0.3 per occurrence
  - exclusion signal : the user's first 50 saved tracks are removed from the
                       pool, whatever weight they accumulated

Listing fetches and per-artist/per-playlist sub-fetches run on a bounded
thread pool. Results are merged in submission order once every sub-fetch is
done, and the exclusion is applied after all merges. A sub-fetch that fails
with RemoteUnavailable contributes nothing; Unauthorized and RunCancelled
abort the build.
"""

from concurrent.futures import ThreadPoolExecutor
import random
import threading
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from blockylist.config import RECOMMENDER_MAX_WORKERS
from blockylist.core import (
    CancelToken,
    CandidateTrack,
    NoCandidates,
    RemoteUnavailable,
    TrackEntry,
    log_info,
    log_step,
    log_warning,
)
from blockylist.spotify import (
    SpotifyCredential,
    fetch_artist_top_tracks,
    fetch_playlist_tracks,
    fetch_saved_tracks,
    fetch_top_artists,
    fetch_user_playlists,
)

ARTIST_SIGNAL_WEIGHT = 0.8
PLAYLIST_SIGNAL_WEIGHT = 0.3
DEFAULT_POPULARITY = 50

TOP_ARTISTS_LIMIT = 50
ARTISTS_SAMPLED = 10
USER_PLAYLISTS_LIMIT = 50
PLAYLISTS_SAMPLED = 8
PLAYLIST_TRACKS_LIMIT = 30
SAVED_TRACKS_LIMIT = 50

T = TypeVar("T")


class CandidatePool:
    """
    Thread-safe mapping uri -> CandidateTrack.

    merge() rule: weights add up across every contribution; popularity is
    fixed by the first contribution for a URI.
    """

    def __init__(self) -> None:
        self._tracks: Dict[str, CandidateTrack] = {}
        self._lock = threading.Lock()

    def merge(self, uri: str, popularity: int, weight: float) -> CandidateTrack:
        with self._lock:
            existing = self._tracks.get(uri)
            if existing is None:
                existing = CandidateTrack(uri=uri, popularity=popularity, weight=weight)
                self._tracks[uri] = existing
            else:
                existing.weight += weight
            return existing

    def merge_tracks(self, tracks: Iterable[TrackEntry], weight: float) -> int:
        merged = 0
        for t in tracks:
            # Zero/missing popularity both fall back to the default.
            self.merge(t.uri, t.popularity or DEFAULT_POPULARITY, weight)
            merged += 1
        return merged

    def exclude(self, uris: Iterable[str]) -> int:
        removed = 0
        with self._lock:
            for uri in uris:
                if self._tracks.pop(uri, None) is not None:
                    removed += 1
        return removed

    def get(self, uri: str) -> Optional[CandidateTrack]:
        with self._lock:
            return self._tracks.get(uri)

    def candidates(self) -> List[CandidateTrack]:
        """Snapshot of the pool, in first-insertion order."""
        with self._lock:
            return list(self._tracks.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._tracks)


def _soft_fetch(label: str, fetch: Callable[..., List[T]], *args, **kwargs) -> List[T]:
    try:
        return fetch(*args, **kwargs)
    except RemoteUnavailable as e:
        log_warning(f"Recommendation signal skipped: {label} ({e})")
        return []


def _sample(rng: random.Random, items: List[T], k: int) -> List[T]:
    return rng.sample(items, min(k, len(items)))


def build_candidate_pool(
    credential: SpotifyCredential,
    rng: random.Random,
    *,
    cancel: Optional[CancelToken] = None,
    max_workers: int = RECOMMENDER_MAX_WORKERS,
) -> CandidatePool:
    """
    Build the weighted recommendation pool for one recommended-songs block.

    Raises NoCandidates when nothing is left after the exclusion signal.
    """
    log_step("Building recommendation candidate pool...")
    pool = CandidatePool()

    executor = ThreadPoolExecutor(max_workers=max(1, max_workers))
    try:
        artists_future = executor.submit(
            _soft_fetch, "top artists",
            fetch_top_artists, credential, TOP_ARTISTS_LIMIT, cancel=cancel,
        )
        playlists_future = executor.submit(
            _soft_fetch, "user playlists",
            fetch_user_playlists, credential, USER_PLAYLISTS_LIMIT, cancel=cancel,
        )
        saved_future = executor.submit(
            _soft_fetch, "saved tracks",
            fetch_saved_tracks, credential, SAVED_TRACKS_LIMIT, cancel=cancel,
        )

        # Sampling stays on this thread so a seeded rng gives the same picks.
        chosen_artists = _sample(rng, artists_future.result(), ARTISTS_SAMPLED)
        chosen_playlists = _sample(rng, playlists_future.result(), PLAYLISTS_SAMPLED)

        artist_futures = [
            executor.submit(
                _soft_fetch, f"top tracks of artist {a.id}",
                fetch_artist_top_tracks, credential, a.id, cancel=cancel,
            )
            for a in chosen_artists
        ]
        playlist_futures = [
            executor.submit(
                _soft_fetch, f"tracks of playlist {p.id}",
                fetch_playlist_tracks, credential, p.id, PLAYLIST_TRACKS_LIMIT,
                cancel=cancel,
            )
            for p in chosen_playlists
        ]

        artist_results = [f.result() for f in artist_futures]
        playlist_results = [f.result() for f in playlist_futures]
        saved = saved_future.result()
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

    for tracks in artist_results:
        pool.merge_tracks(tracks, ARTIST_SIGNAL_WEIGHT)
    for tracks in playlist_results:
        pool.merge_tracks(tracks, PLAYLIST_SIGNAL_WEIGHT)

    removed = pool.exclude(t.uri for t in saved)

    log_info(
        f"Recommendation pool: {len(pool)} candidates from "
        f"{len(chosen_artists)} artists and {len(chosen_playlists)} playlists "
        f"({removed} saved tracks excluded)."
    )

    if len(pool) == 0:
        raise NoCandidates("No recommendation candidates left after excluding saved tracks.")
    return pool

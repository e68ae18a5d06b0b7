"""Block resolution: turn one block into the ordered URIs it contributes.

resolve_block() never raises for a single block's trouble. Remote failures,
an empty recommendation pool and unexpected bugs are all recorded on the
returned ResolvedBlockResult so the run can carry on with the next block.
Only Unauthorized (the whole run is doomed) and RunCancelled propagate.
"""

from dataclasses import dataclass, field
import random
from typing import Callable, Dict, List, Optional, Type

from blockylist.config import RECOMMENDER_MAX_WORKERS
from blockylist.core import (
    BlockBase,
    CancelToken,
    ErrorKind,
    FixedEpisodeBlock,
    LatestShowEpisodeBlock,
    NoCandidates,
    RecommendedSongsBlock,
    RemoteUnavailable,
    ResolvedBlockResult,
    RunCancelled,
    SongsFromSourceBlock,
    Unauthorized,
    log_error,
    log_info,
    log_warning,
)
from blockylist.spotify import SpotifyCredential, TrackSource, fetch_show_latest_episode

from .candidate_pool import build_candidate_pool
from .selector import select_range_random, select_tiered
from .sources_manager import fetch_tracks_for_source


@dataclass
class ResolutionContext:
    """Everything a block needs besides itself to be resolved."""

    credential: SpotifyCredential
    rng: random.Random = field(default_factory=random.SystemRandom)
    cancel: Optional[CancelToken] = None
    max_workers: int = RECOMMENDER_MAX_WORKERS


def episode_uri(episode_id: str) -> str:
    return f"spotify:episode:{episode_id}"


def _resolve_fixed_episode(block: FixedEpisodeBlock, ctx: ResolutionContext) -> List[str]:
    # The episode is not looked up; a stale id surfaces when appending.
    return [episode_uri(block.episode_id)]


def _resolve_latest_show_episode(
    block: LatestShowEpisodeBlock, ctx: ResolutionContext
) -> List[str]:
    episode = fetch_show_latest_episode(ctx.credential, block.show_id, cancel=ctx.cancel)
    if episode is None:
        log_info(f"Show {block.show_id} has no episodes; block {block.id} left empty.")
        return []
    return [episode.uri]


def _resolve_songs_from_source(
    block: SongsFromSourceBlock, ctx: ResolutionContext
) -> List[str]:
    source = TrackSource.from_source_id(block.source_id)
    tracks = fetch_tracks_for_source(ctx.credential, source, cancel=ctx.cancel)
    return select_range_random((t.uri for t in tracks), block.song_range, ctx.rng)


def _resolve_recommended_songs(
    block: RecommendedSongsBlock, ctx: ResolutionContext
) -> List[str]:
    pool = build_candidate_pool(
        ctx.credential,
        ctx.rng,
        cancel=ctx.cancel,
        max_workers=ctx.max_workers,
    )
    return select_tiered(pool.candidates(), block.song_range, ctx.rng)


_RESOLVERS: Dict[Type[BlockBase], Callable[..., List[str]]] = {
    FixedEpisodeBlock: _resolve_fixed_episode,
    LatestShowEpisodeBlock: _resolve_latest_show_episode,
    SongsFromSourceBlock: _resolve_songs_from_source,
    RecommendedSongsBlock: _resolve_recommended_songs,
}


def resolve_block(block: BlockBase, ctx: ResolutionContext) -> ResolvedBlockResult:
    block_type = getattr(block, "type", None)
    result = ResolvedBlockResult(block_id=block.id, block_type=block_type)

    if not block.is_complete:
        log_info(f"Block {block.id} ({block_type}) is not configured; skipping.")
        result.error_kind = ErrorKind.INCOMPLETE_BLOCK
        return result

    resolver = _RESOLVERS.get(type(block))
    if resolver is None:
        log_warning(f"Block {block.id}: unsupported block type {block_type!r}; skipping.")
        result.ok = False
        result.error_kind = ErrorKind.INTERNAL
        result.message = f"Unsupported block type: {block_type!r}"
        return result

    try:
        result.uris = resolver(block, ctx)
    except (Unauthorized, RunCancelled):
        raise
    except NoCandidates as e:
        log_warning(f"Block {block.id}: {e} Skipping.")
        result.ok = False
        result.error_kind = ErrorKind.NO_CANDIDATES
        result.message = str(e)
    except RemoteUnavailable as e:
        log_warning(f"Block {block.id} ({block_type}): Spotify unavailable, skipping ({e})")
        result.ok = False
        result.error_kind = ErrorKind.REMOTE_UNAVAILABLE
        result.message = str(e)
    except Exception as e:
        log_error(f"Block {block.id} ({block_type}): unexpected error: {e}", exc_info=True)
        result.ok = False
        result.error_kind = ErrorKind.INTERNAL
        result.message = str(e)

    return result


def resolve_blocks(blocks: List[BlockBase], ctx: ResolutionContext) -> List[ResolvedBlockResult]:
    """Resolve blocks in order without touching any playlist (dry run)."""
    results: List[ResolvedBlockResult] = []
    for block in blocks:
        if ctx.cancel is not None:
            ctx.cancel.raise_if_cancelled()
        results.append(resolve_block(block, ctx))
    return results

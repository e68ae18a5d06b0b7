"""Materialization: one blocklist in, one new Spotify playlist out.

Sequence:
    1) GET /me, create the playlist (its id is reused for every append)
    2) for each block, in list order: resolve it, then append its URIs
    3) return a MaterializationResult with one entry per block

Blocks are resolved and appended strictly one after the other, so the
playlist ends up in block order: A's items, then B's, then C's. A block that
fails (or resolves to nothing) is recorded and skipped; the playlist is kept
even if every block failed.
"""

import random
from typing import List, Optional

from blockylist.config import (
    DEFAULT_PLAYLIST_PUBLIC,
    MATERIALIZE_TIMEOUT_SECONDS,
    RECOMMENDER_MAX_WORKERS,
)
from blockylist.core import (
    BlockBase,
    BlockListDocument,
    CancelToken,
    ErrorKind,
    IncompleteBlocklist,
    MaterializationResult,
    RemoteUnavailable,
    ResolvedBlockResult,
    RunCancelled,
    Unauthorized,
    find_incomplete_blocks,
    log_info,
    log_progress,
    log_section,
    log_step,
    log_success,
    log_warning,
)
from blockylist.spotify import (
    SpotifyCredential,
    append_playlist_items,
    create_playlist,
    get_current_user_id,
)

from .resolver import ResolutionContext, resolve_block


def _keep_appended(block_result: ResolvedBlockResult, appended_count: int) -> None:
    """Trim a block's uris to what actually reached the playlist."""
    if appended_count:
        block_result.uris = block_result.uris[:appended_count]
        block_result.appended = True
    else:
        block_result.uris = []


def _append_block(
    credential: SpotifyCredential,
    playlist_id: str,
    block_result: ResolvedBlockResult,
    cancel: Optional[CancelToken],
) -> None:
    total = len(block_result.uris)
    try:
        append_playlist_items(credential, playlist_id, block_result.uris, cancel=cancel)
    except RemoteUnavailable as e:
        _keep_appended(block_result, e.appended_count)
        log_warning(
            f"Block {block_result.block_id}: append failed after "
            f"{e.appended_count}/{total} items ({e})"
        )
        block_result.ok = False
        block_result.error_kind = ErrorKind.REMOTE_UNAVAILABLE
        block_result.message = str(e)
        return
    except (Unauthorized, RunCancelled) as e:
        _keep_appended(block_result, e.appended_count)
        raise
    block_result.appended = True
    log_info(f"Block {block_result.block_id}: appended {total} items.")


def materialize_blocks(
    credential: SpotifyCredential,
    name: str,
    blocks: List[BlockBase],
    *,
    description: str = "",
    public: bool = DEFAULT_PLAYLIST_PUBLIC,
    rng: Optional[random.Random] = None,
    cancel: Optional[CancelToken] = None,
    max_workers: int = RECOMMENDER_MAX_WORKERS,
) -> MaterializationResult:
    """
    Create a playlist named `name` and fill it block by block.

    Raises Unauthorized if the credential is rejected at any point (nothing
    more is attempted), and RunCancelled when `cancel` fires. Once the
    playlist exists, either error's `partial` attribute carries the blocks
    done so far. A block whose append failed part-way keeps only the uris
    that reached the playlist.
    """
    if cancel is None:
        cancel = CancelToken(timeout=MATERIALIZE_TIMEOUT_SECONDS or None)
    ctx = ResolutionContext(
        credential=credential,
        rng=rng if rng is not None else random.SystemRandom(),
        cancel=cancel,
        max_workers=max_workers,
    )

    log_section(f"Materializing '{name}' ({len(blocks)} blocks)")

    user_id = get_current_user_id(credential, cancel=cancel)
    playlist = create_playlist(
        credential, user_id, name, description, public, cancel=cancel
    )
    log_success(f"Created playlist {playlist.id}")

    result = MaterializationResult(playlist_id=playlist.id, playlist_url=playlist.url)

    total = len(blocks)
    try:
        for idx, block in enumerate(blocks, start=1):
            cancel.raise_if_cancelled()
            log_progress(idx, total, prefix="Blocks")
            log_step(f"Block {block.id} ({getattr(block, 'type', '?')})")

            block_result = resolve_block(block, ctx)
            result.per_block.append(block_result)
            if block_result.uris:
                _append_block(credential, playlist.id, block_result, cancel)
    except (RunCancelled, Unauthorized) as e:
        e.partial = result
        log_warning(f"{e} Playlist {playlist.id} kept with {result.summary()}.")
        raise

    log_success(f"Playlist '{name}' {result.summary()}")
    return result


def materialize_blocklist(
    credential: SpotifyCredential,
    document: BlockListDocument,
    **kwargs,
) -> MaterializationResult:
    """
    Materialize a stored blocklist.

    Refuses documents with unconfigured blocks before anything is created
    remotely (IncompleteBlocklist).
    """
    incomplete = find_incomplete_blocks(document.blocks)
    if incomplete:
        raise IncompleteBlocklist([b.id for b in incomplete])
    return materialize_blocks(
        credential,
        document.name,
        document.blocks,
        description=document.description,
        **kwargs,
    )

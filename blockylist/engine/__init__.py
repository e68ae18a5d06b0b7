"""Public façade for the blockylist.engine package.

The engine turns blocks into playlist content: per-block resolution, the
recommendation candidate pool, the two selection policies and the
materializer that creates and fills the playlist.
"""

from .candidate_pool import CandidatePool, build_candidate_pool
from .materializer import materialize_blocklist, materialize_blocks
from .resolver import ResolutionContext, episode_uri, resolve_block, resolve_blocks
from .selector import (
    TierCounts,
    allocate_tiers,
    draw_count,
    rank_candidates,
    select_range_random,
    select_tiered,
    split_tiers,
)
from .sources_manager import fetch_tracks_for_source

__all__ = [
    "CandidatePool",
    "build_candidate_pool",
    "materialize_blocks",
    "materialize_blocklist",
    "ResolutionContext",
    "episode_uri",
    "resolve_block",
    "resolve_blocks",
    "TierCounts",
    "allocate_tiers",
    "draw_count",
    "rank_candidates",
    "select_range_random",
    "select_tiered",
    "split_tiers",
    "fetch_tracks_for_source",
]

"""Public façade for the blockylist.core package.

This module exposes logging helpers, filesystem utilities, error types, the
block models and the run-scoped records shared by the Spotify layer, the
engine and the API. Callers should import these cross-cutting concerns from
this façade instead of the internal submodules.
"""

from .blocks import (
    Block,
    BlockBase,
    BlockListDocument,
    BlockType,
    FixedEpisodeBlock,
    LatestShowEpisodeBlock,
    RecommendedSongsBlock,
    SongRange,
    SongsFromSourceBlock,
    find_incomplete_blocks,
)
from .cancellation import CancelToken
from .errors import (
    BlockylistError,
    ErrorKind,
    IncompleteBlocklist,
    NoCandidates,
    RemoteUnavailable,
    RunCancelled,
    Unauthorized,
)
from .fs_utils import ensure_parent_dir, read_json, write_json
from .logging_config import configure_logging
from .logging_utils import (
    log_error,
    log_info,
    log_progress,
    log_section,
    log_step,
    log_success,
    log_warning,
)
from .models import (
    ArtistInfo,
    CandidateTrack,
    CreatedPlaylist,
    EpisodeInfo,
    MaterializationResult,
    PlaylistInfo,
    ResolvedBlockResult,
    ShowInfo,
    TrackEntry,
)

__all__ = [
    "configure_logging",
    "log_section",
    "log_info",
    "log_step",
    "log_success",
    "log_warning",
    "log_error",
    "log_progress",
    "ensure_parent_dir",
    "write_json",
    "read_json",
    "CancelToken",
    "BlockylistError",
    "ErrorKind",
    "IncompleteBlocklist",
    "NoCandidates",
    "RemoteUnavailable",
    "RunCancelled",
    "Unauthorized",
    "Block",
    "BlockBase",
    "BlockListDocument",
    "BlockType",
    "FixedEpisodeBlock",
    "LatestShowEpisodeBlock",
    "RecommendedSongsBlock",
    "SongRange",
    "SongsFromSourceBlock",
    "find_incomplete_blocks",
    "ArtistInfo",
    "CandidateTrack",
    "CreatedPlaylist",
    "EpisodeInfo",
    "MaterializationResult",
    "PlaylistInfo",
    "ResolvedBlockResult",
    "ShowInfo",
    "TrackEntry",
]

"""Exception types shared by the Spotify layer, the engine and the API.

Only Unauthorized and RunCancelled are allowed to escape a block resolution;
everything else is captured into a per-block result (see ErrorKind).
"""

from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .models import MaterializationResult


class ErrorKind(str, Enum):
    """Why a block produced no (or not all of its) content."""

    REMOTE_UNAVAILABLE = "remote_unavailable"
    NO_CANDIDATES = "no_candidates"
    INCOMPLETE_BLOCK = "incomplete_block"
    INTERNAL = "internal"


class BlockylistError(Exception):
    """Base class for every error raised by this package."""

    # Set by append_playlist_items: URIs already in the playlist when it failed.
    appended_count: int = 0


class RemoteUnavailable(BlockylistError):
    """Spotify answered with a non-2xx status, or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class Unauthorized(BlockylistError):
    """
    The bearer credential is missing, expired or rejected (401/403).

    When raised during a run that already created its playlist, `partial`
    holds that playlist and the blocks done so far.
    """

    def __init__(
        self,
        message: str = "Spotify authorization required.",
        partial: Optional["MaterializationResult"] = None,
    ) -> None:
        super().__init__(message)
        self.partial = partial


class NoCandidates(BlockylistError):
    """The recommendation pool was empty once saved tracks were excluded."""


class RunCancelled(BlockylistError):
    """
    The materialization run was cancelled or hit its deadline.

    `partial` holds what was already done; blocks appended before the
    cancellation stay in the remote playlist.
    """

    def __init__(
        self,
        message: str = "Materialization cancelled.",
        partial: Optional["MaterializationResult"] = None,
    ) -> None:
        super().__init__(message)
        self.partial = partial


class IncompleteBlocklist(BlockylistError):
    """A blocklist was submitted for materialization with unset blocks."""

    def __init__(self, block_ids: List[str]) -> None:
        super().__init__(
            "Blocklist has incomplete blocks: " + ", ".join(block_ids)
        )
        self.block_ids = list(block_ids)

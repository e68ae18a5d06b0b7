from dataclasses import dataclass, field
from typing import List, Optional

from .errors import ErrorKind


@dataclass
class TrackEntry:
    """A URI-addressable track (or playlist episode) returned by Spotify."""

    uri: str
    id: Optional[str] = None
    name: str = ""
    popularity: Optional[int] = None


@dataclass
class EpisodeInfo:
    id: str
    uri: str
    name: str = ""
    show_name: Optional[str] = None
    release_date: Optional[str] = None
    duration_ms: Optional[int] = None
    image_url: str = ""


@dataclass
class ArtistInfo:
    id: str
    name: str = ""


@dataclass
class PlaylistInfo:
    id: str
    name: str
    track_count: int = 0
    image_url: str = ""


@dataclass
class ShowInfo:
    id: str
    name: str
    image_url: str = ""
    publisher: Optional[str] = None


@dataclass
class CreatedPlaylist:
    id: str
    url: Optional[str] = None


@dataclass
class CandidateTrack:
    """
    One entry of a recommendation pool, keyed by `uri`.

    - popularity : 0..100, set by the first signal that saw the track
    - weight     : sum of the weight contributions of every signal that saw it
    """

    uri: str
    popularity: int
    weight: float


@dataclass
class ResolvedBlockResult:
    """
    Outcome of resolving (and appending) one block.

    ok=False means the block contributed nothing because of `error_kind`.
    An incomplete block is ok=True with error_kind INCOMPLETE_BLOCK and no uris.
    """

    block_id: str
    uris: List[str] = field(default_factory=list)
    ok: bool = True
    error_kind: Optional[ErrorKind] = None
    block_type: Optional[str] = None
    appended: bool = False
    message: Optional[str] = None

    @property
    def incomplete(self) -> bool:
        return self.error_kind == ErrorKind.INCOMPLETE_BLOCK


@dataclass
class MaterializationResult:
    playlist_id: str
    playlist_url: Optional[str] = None
    per_block: List[ResolvedBlockResult] = field(default_factory=list)

    @property
    def populated_count(self) -> int:
        return sum(1 for r in self.per_block if r.ok and r.appended)

    @property
    def failed_blocks(self) -> List[ResolvedBlockResult]:
        return [r for r in self.per_block if not r.ok]

    @property
    def track_count(self) -> int:
        return sum(len(r.uris) for r in self.per_block if r.appended)

    def summary(self) -> str:
        return (
            f"created with {self.populated_count}/{len(self.per_block)} "
            f"blocks populated ({self.track_count} items)"
        )

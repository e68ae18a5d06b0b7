"""Block and blocklist models.

A blocklist is an ordered list of blocks plus playlist metadata. Blocks are a
tagged union on `type`:

  - "podcast"           : one fixed episode            (episode_id)
  - "latest-podcast"    : latest episode of a show     (show_id)
  - "songs"             : random songs from a source   (source_id, song_range)
  - "recommended-songs" : recommended songs            (song_range)

Documents written by the original web client use camelCase keys and nested
references ({"podcastEpisode": {"id": ..., "title": ...}}); those are
normalized on load so both layouts validate into the same models.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BlockType(str, Enum):
    FIXED_EPISODE = "podcast"
    LATEST_SHOW_EPISODE = "latest-podcast"
    SONGS_FROM_SOURCE = "songs"
    RECOMMENDED_SONGS = "recommended-songs"


# Nested reference object in the client document -> flat id field
_DOCUMENT_REFERENCES = {
    "podcastEpisode": "episode_id",
    "podcastShow": "show_id",
    "playlist": "source_id",
}

_DOCUMENT_RENAMES = {
    "songRange": "song_range",
    "isSelfDeleting": "is_self_deleting",
    "isDailyCreating": "is_daily_creating",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def _normalize_document_keys(data: Any) -> Any:
    if not isinstance(data, dict):
        return data

    data = dict(data)
    for doc_key, field_name in _DOCUMENT_REFERENCES.items():
        if doc_key not in data:
            continue
        ref = data.pop(doc_key)
        if field_name not in data and isinstance(ref, dict):
            data[field_name] = ref.get("id")
    for doc_key, field_name in _DOCUMENT_RENAMES.items():
        if doc_key in data and field_name not in data:
            data[field_name] = data.pop(doc_key)
    return data


def _new_block_id() -> str:
    return f"block-{uuid4().hex[:12]}"


class SongRange(BaseModel):
    """Inclusive bounds on how many songs a block contributes."""

    min: int = Field(default=4, ge=0)
    max: int = Field(default=7, ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "SongRange":
        if self.min > self.max:
            raise ValueError(
                f"song range min ({self.min}) must not exceed max ({self.max})"
            )
        return self


class BlockBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=_new_block_id)
    title: str = ""
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_document_layout(cls, data: Any) -> Any:
        return _normalize_document_keys(data)

    @property
    def is_complete(self) -> bool:
        return True


class FixedEpisodeBlock(BlockBase):
    type: Literal[BlockType.FIXED_EPISODE.value] = BlockType.FIXED_EPISODE.value
    title: str = "Podcast Episode"
    description: str = "Click to select an episode"
    episode_id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.episode_id)


class LatestShowEpisodeBlock(BlockBase):
    type: Literal[BlockType.LATEST_SHOW_EPISODE.value] = BlockType.LATEST_SHOW_EPISODE.value
    title: str = "Latest From Show"
    description: str = "Click to select a show"
    show_id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.show_id)


class SongsFromSourceBlock(BlockBase):
    type: Literal[BlockType.SONGS_FROM_SOURCE.value] = BlockType.SONGS_FROM_SOURCE.value
    title: str = "Songs From Playlist"
    description: str = "Click to select a playlist"
    source_id: Optional[str] = None
    song_range: SongRange = Field(default_factory=SongRange)

    @property
    def is_complete(self) -> bool:
        return bool(self.source_id)


class RecommendedSongsBlock(BlockBase):
    type: Literal[BlockType.RECOMMENDED_SONGS.value] = BlockType.RECOMMENDED_SONGS.value
    title: str = "New Recommended Songs Block"
    description: str = "Based on your listening history"
    song_range: SongRange = Field(default_factory=SongRange)


Block = Annotated[
    Union[
        FixedEpisodeBlock,
        LatestShowEpisodeBlock,
        SongsFromSourceBlock,
        RecommendedSongsBlock,
    ],
    Field(discriminator="type"),
]


class BlockListDocument(BaseModel):
    """A stored blocklist: playlist metadata plus its ordered blocks.

    The lifecycle flags are kept for the client and never read by the engine.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    description: str = ""
    blocks: List[Block] = Field(default_factory=list)
    is_self_deleting: bool = False
    is_daily_creating: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_document_layout(cls, data: Any) -> Any:
        return _normalize_document_keys(data)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("blocklist name must not be blank")
        return value

    def incomplete_blocks(self) -> List[BlockBase]:
        return find_incomplete_blocks(self.blocks)


def find_incomplete_blocks(blocks: List[BlockBase]) -> List[BlockBase]:
    """Blocks whose required episode/show/source reference is missing."""
    return [b for b in blocks if not b.is_complete]

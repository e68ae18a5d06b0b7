from typing import List, Optional

from pydantic import BaseModel, Field

from blockylist.config import DEFAULT_PLAYLIST_PUBLIC
from blockylist.core import Block, ErrorKind


class BlockListPayload(BaseModel):
    """Body of POST/PUT /blocklists."""

    name: str
    description: str = ""
    blocks: List[Block] = Field(default_factory=list)
    is_self_deleting: bool = False
    is_daily_creating: bool = False


class MaterializeRequest(BaseModel):
    public: bool = DEFAULT_PLAYLIST_PUBLIC
    # Fixed seed for reproducible song picks; random otherwise.
    seed: Optional[int] = None


class BlockResultOut(BaseModel):
    block_id: str
    block_type: Optional[str] = None
    ok: bool
    appended: bool
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    uris: List[str]


class MaterializeResponse(BaseModel):
    status: str
    playlist_id: str
    playlist_url: Optional[str] = None
    populated_blocks: int
    total_blocks: int
    track_count: int
    blocks: List[BlockResultOut]


class PreviewResponse(BaseModel):
    status: str
    blocks: List[BlockResultOut]

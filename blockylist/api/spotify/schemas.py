from typing import List, Optional

from pydantic import BaseModel


class TrackSourceOut(BaseModel):
    """One entry of the songs-block source picker."""

    id: str
    name: str
    kind: str
    track_count: int
    image_url: str = ""


class ShowOut(BaseModel):
    id: str
    name: str
    publisher: Optional[str] = None
    image_url: str = ""


class EpisodeOut(BaseModel):
    id: str
    uri: str
    name: str
    show_name: Optional[str] = None
    release_date: Optional[str] = None
    duration_ms: Optional[int] = None
    image_url: str = ""


class TrackOut(BaseModel):
    id: Optional[str] = None
    uri: str
    name: str
    popularity: Optional[int] = None


TrackSourceList = List[TrackSourceOut]

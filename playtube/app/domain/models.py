# playtube/app/domain/models.py
"""
Domain models for videos and uploaded media.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID


class MediaKind(str, Enum):
    """Kind of file sent to the media store."""
    VIDEO = "video"
    IMAGE = "image"

    @property
    def storage_prefix(self) -> str:
        return "videos" if self is MediaKind.VIDEO else "thumbnails"

    @property
    def content_type_prefix(self) -> str:
        return f"{self.value}/"


@dataclass
class Video:
    """
    A published video and its metadata.
    video_file and thumbnail hold URLs returned by the media store.
    """
    id: UUID
    owner_id: UUID
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float = 0.0
    is_published: bool = True

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.owner_id == user_id


@dataclass
class VideoDetail:
    """Single video view, with the number of users who watched it."""
    video: Video
    views: int = 0


@dataclass
class UploadedMedia:
    """Result of pushing a local file to the media store."""
    object_key: str
    url: str
    content_type: str
    size_bytes: int
    duration: Optional[float] = None  # seconds, videos only


@dataclass
class PageRequest:
    """Page-based pagination translated into offset/limit."""
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

# playtube/app/schemas/videos.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class VideoResponse(BaseModel):
    id: str
    owner: str
    title: str
    description: str
    duration: float = 0.0
    videoFile: str
    thumbnail: str
    isPublished: bool = True
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class VideoSummary(BaseModel):
    id: str
    title: str
    description: str
    thumbnail: str
    duration: float = 0.0


class VideoDetailResponse(BaseModel):
    id: str
    title: str
    description: str
    views: int = Field(default=0, description="Users with this video in their watch history")
    videoFile: str
    thumbnail: str
    duration: float = 0.0


class UpdateVideoDetailsRequest(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)


class DeletedVideo(BaseModel):
    id: str

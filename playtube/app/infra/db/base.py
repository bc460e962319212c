# playtube/app/infra/db/base.py
"""
Abstract base class for video persistence.
This interface allows easy swapping between different database backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional
from uuid import UUID

from playtube.app.domain.models import Video


class VideoRepository(ABC):
    """
    Abstract interface for video records and the user data they are joined with.

    Implementations:
    - SupabaseVideoRepository: Postgres tables exposed through Supabase
    """

    @abstractmethod
    def create(
        self,
        owner_id: UUID,
        title: str,
        description: str,
        duration: float,
        video_file: str,
        thumbnail: str,
    ) -> Video:
        """
        Insert a new video record.

        Args:
            owner_id: User publishing the video
            title: Video title
            description: Video description
            duration: Duration in seconds
            video_file: URL of the uploaded video
            thumbnail: URL of the uploaded thumbnail

        Returns:
            The created Video
        """
        pass

    @abstractmethod
    def get_by_id(self, video_id: UUID) -> Optional[Video]:
        """
        Get a video by its ID.

        Returns:
            The video, or None if not found
        """
        pass

    @abstractmethod
    def update(
        self,
        video_id: UUID,
        changes: dict[str, Any],
    ) -> Optional[Video]:
        """
        Set the given columns on a video.

        Args:
            video_id: The video to update
            changes: Column name to new value

        Returns:
            The updated video, or None if it does not exist
        """
        pass

    @abstractmethod
    def delete(self, video_id: UUID) -> bool:
        """
        Delete a video.

        Returns:
            True if a record was removed
        """
        pass

    @abstractmethod
    def list_by_owner(
        self,
        owner_id: UUID,
        offset: int = 0,
        limit: int = 10,
    ) -> list[Video]:
        """
        Get videos published by a user, newest first.

        Args:
            owner_id: The user ID
            offset: Number of records to skip
            limit: Max records to return

        Returns:
            List of videos
        """
        pass

    @abstractmethod
    def count_viewers(self, video_id: UUID) -> int:
        """
        Count users whose watch history contains the video.
        """
        pass

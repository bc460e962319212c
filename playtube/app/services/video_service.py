# playtube/app/services/video_service.py
"""
Video operations behind the /videos routes.
Each method validates its input, talks to the media store and the
repository, and raises ApiError with the status the client should see.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional
from uuid import UUID

from fastapi import status

from playtube.app.domain.errors import InvalidMediaError, StorageError, VideoRepositoryError
from playtube.app.domain.models import MediaKind, PageRequest, UploadedMedia, Video, VideoDetail
from playtube.app.errors import ApiError
from playtube.app.infra.db.base import VideoRepository
from playtube.app.services.media_service import MediaUploadService

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGE_SIZE = 100


@contextmanager
def _database_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except VideoRepositoryError as error:
        logger.error("Database error during %s: %s", operation, error)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error") from error


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class VideoService:
    def __init__(
        self,
        repository: VideoRepository,
        media: MediaUploadService,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ):
        self._repo = repository
        self._media = media
        self.max_page_size = max_page_size

    def publish_video(
        self,
        owner_id: UUID,
        title: Optional[str],
        description: Optional[str],
        video_path: Optional[Path],
        thumbnail_path: Optional[Path],
    ) -> Video:
        """
        Upload both files and create the video record.

        A failure after the uploads leaves the remote files in place.
        """
        if video_path is None or thumbnail_path is None:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Provide valid image or video.")

        clean_title = _clean(title)
        clean_description = _clean(description)
        if not clean_title or not clean_description:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Title and description are required.")

        try:
            video_media = self._media.upload(video_path, owner_id, MediaKind.VIDEO)
            thumbnail_media = self._media.upload(thumbnail_path, owner_id, MediaKind.IMAGE)
        except InvalidMediaError as error:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Provide valid image or video.") from error
        except StorageError as error:
            logger.error("Media upload failed while publishing: owner=%s, error=%s", owner_id, error)
            raise ApiError(
                status.HTTP_401_UNAUTHORIZED,
                "Something went wrong while uploading media.",
            ) from error

        try:
            created = self._repo.create(
                owner_id=owner_id,
                title=clean_title,
                description=clean_description,
                duration=video_media.duration or 0.0,
                video_file=video_media.url,
                thumbnail=thumbnail_media.url,
            )
            saved = self._repo.get_by_id(created.id)
        except VideoRepositoryError as error:
            logger.error("Failed to save video: owner=%s, error=%s", owner_id, error)
            raise ApiError(status.HTTP_402_PAYMENT_REQUIRED, "Failed to save video in database") from error

        if saved is None:
            raise ApiError(status.HTTP_402_PAYMENT_REQUIRED, "Failed to save video in database")

        logger.info("Video published: id=%s, owner=%s", saved.id, owner_id)
        return saved

    def update_video_details(
        self,
        video_id: UUID,
        user_id: UUID,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Video:
        changes = {
            key: value
            for key, value in (("title", _clean(title)), ("description", _clean(description)))
            if value is not None
        }
        if not changes:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Provide title or description to update.")

        self._get_owned_video(video_id, user_id)
        return self._apply(video_id, changes)

    def update_thumbnail(
        self,
        video_id: UUID,
        user_id: UUID,
        thumbnail_path: Optional[Path],
    ) -> Video:
        if thumbnail_path is None:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Provide valid image.")

        self._get_owned_video(video_id, user_id)
        media = self._upload_replacement(
            thumbnail_path,
            user_id,
            MediaKind.IMAGE,
            invalid_message="Provide valid image.",
            failure_message="Failed to upload thumbnail",
        )
        return self._apply(video_id, {"thumbnail": media.url})

    def update_video_file(
        self,
        video_id: UUID,
        user_id: UUID,
        video_path: Optional[Path],
    ) -> Video:
        if video_path is None:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Please provide a video file")

        self._get_owned_video(video_id, user_id)
        media = self._upload_replacement(
            video_path,
            user_id,
            MediaKind.VIDEO,
            invalid_message="Please provide a video file",
            failure_message="Error in uploading video.",
        )

        changes: dict[str, Any] = {"video_file": media.url}
        if media.duration is not None:
            changes["duration"] = media.duration
        return self._apply(video_id, changes)

    def get_video_detail(self, video_id: UUID) -> VideoDetail:
        with _database_errors("get_video_detail"):
            video = self._repo.get_by_id(video_id)
            if video is None:
                raise ApiError(status.HTTP_404_NOT_FOUND, "Video not found")
            views = self._repo.count_viewers(video_id)
        return VideoDetail(video=video, views=views)

    def delete_video(self, video_id: UUID, user_id: UUID) -> None:
        self._get_owned_video(video_id, user_id)
        with _database_errors("delete_video"):
            deleted = self._repo.delete(video_id)
        if not deleted:
            raise ApiError(status.HTTP_404_NOT_FOUND, "Video not found")
        logger.info("Video deleted: id=%s, user=%s", video_id, user_id)

    def list_videos(self, owner_id: UUID, page: int = 1, limit: int = 10) -> list[Video]:
        if page < 1 or limit < 1:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Page and limit must be positive integers.")

        request = PageRequest(page=page, limit=min(limit, self.max_page_size))
        with _database_errors("list_videos"):
            return self._repo.list_by_owner(owner_id, offset=request.offset, limit=request.limit)

    def toggle_publish_status(self, video_id: UUID, user_id: UUID) -> Video:
        video = self._get_owned_video(video_id, user_id)
        return self._apply(video_id, {"is_published": not video.is_published})

    def _get_owned_video(self, video_id: UUID, user_id: UUID) -> Video:
        with _database_errors("get_by_id"):
            video = self._repo.get_by_id(video_id)
        if video is None:
            raise ApiError(status.HTTP_404_NOT_FOUND, "Video not found")
        if not video.is_owned_by(user_id):
            raise ApiError(status.HTTP_403_FORBIDDEN, "You are not allowed to modify this video")
        return video

    def _apply(self, video_id: UUID, changes: dict[str, Any]) -> Video:
        with _database_errors("update"):
            updated = self._repo.update(video_id, changes)
        if updated is None:
            raise ApiError(status.HTTP_404_NOT_FOUND, "Video not found")
        return updated

    def _upload_replacement(
        self,
        local_path: Path,
        user_id: UUID,
        kind: MediaKind,
        invalid_message: str,
        failure_message: str,
    ) -> UploadedMedia:
        try:
            return self._media.upload(local_path, user_id, kind)
        except InvalidMediaError as error:
            status_code = status.HTTP_401_UNAUTHORIZED if kind is MediaKind.IMAGE else status.HTTP_400_BAD_REQUEST
            raise ApiError(status_code, invalid_message) from error
        except StorageError as error:
            logger.error("Media upload failed: user=%s, kind=%s, error=%s", user_id, kind.value, error)
            raise ApiError(status.HTTP_401_UNAUTHORIZED, failure_message) from error

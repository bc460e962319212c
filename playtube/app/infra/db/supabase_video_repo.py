from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from playtube.app.domain.errors import VideoRepositoryError
from playtube.app.domain.models import Video
from playtube.app.infra.db.base import VideoRepository

logger = logging.getLogger(__name__)

VIDEO_COLUMNS = (
    "id,owner_id,title,description,duration,video_file,thumbnail,"
    "is_published,created_at,updated_at"
)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_float(value: object, default: float = 0.0) -> float:
    try:
        return float(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def _row_to_video(row: dict[str, Any]) -> Video:
    return Video(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["owner_id"])),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        video_file=str(row.get("video_file") or ""),
        thumbnail=str(row.get("thumbnail") or ""),
        duration=_safe_float(row.get("duration")),
        is_published=bool(row.get("is_published", True)),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


class SupabaseVideoRepository(VideoRepository):
    VIDEOS_TABLE = "videos"
    USERS_TABLE = "users"

    def __init__(self, client: Client):
        self._client = client
        logger.debug("SupabaseVideoRepository initialized")

    def _execute(self, operation: str, query: Any) -> Any:
        try:
            return query.execute()
        except (httpx.HTTPError, ConnectionError, TimeoutError) as error:
            logger.error("Network error during %s: %s", operation, error)
            raise VideoRepositoryError(operation, str(error)) from error
        except APIError as error:
            logger.error("Query rejected during %s: code=%s, message=%s", operation, error.code, error.message)
            raise VideoRepositoryError(operation, error.message or str(error)) from error

    def create(
        self,
        owner_id: UUID,
        title: str,
        description: str,
        duration: float,
        video_file: str,
        thumbnail: str,
    ) -> Video:
        now = _now_utc().isoformat()
        row = {
            "id": str(uuid4()),
            "owner_id": str(owner_id),
            "title": title,
            "description": description,
            "duration": duration,
            "video_file": video_file,
            "thumbnail": thumbnail,
            "is_published": True,
            "created_at": now,
            "updated_at": now,
        }

        result = self._execute("create", self._client.table(self.VIDEOS_TABLE).insert(row))
        if not result.data:
            raise VideoRepositoryError("create", "insert returned no rows")

        video = _row_to_video(result.data[0])
        logger.info("Created video: id=%s, owner=%s", video.id, owner_id)
        return video

    def get_by_id(self, video_id: UUID) -> Video | None:
        query = (
            self._client.table(self.VIDEOS_TABLE)
            .select(VIDEO_COLUMNS)
            .eq("id", str(video_id))
            .limit(1)
        )
        result = self._execute("get_by_id", query)
        if not result.data:
            return None
        return _row_to_video(result.data[0])

    def update(self, video_id: UUID, changes: dict[str, Any]) -> Video | None:
        payload = {**changes, "updated_at": _now_utc().isoformat()}
        query = (
            self._client.table(self.VIDEOS_TABLE)
            .update(payload)
            .eq("id", str(video_id))
        )
        result = self._execute("update", query)
        if not result.data:
            return None

        logger.info("Updated video: id=%s, fields=%s", video_id, sorted(changes))
        return _row_to_video(result.data[0])

    def delete(self, video_id: UUID) -> bool:
        query = self._client.table(self.VIDEOS_TABLE).delete().eq("id", str(video_id))
        result = self._execute("delete", query)
        deleted = bool(result.data)
        if deleted:
            logger.info("Deleted video: id=%s", video_id)
        return deleted

    def list_by_owner(
        self,
        owner_id: UUID,
        offset: int = 0,
        limit: int = 10,
    ) -> list[Video]:
        query = (
            self._client.table(self.VIDEOS_TABLE)
            .select(VIDEO_COLUMNS)
            .eq("owner_id", str(owner_id))
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
        )
        result = self._execute("list_by_owner", query)
        return [_row_to_video(row) for row in result.data or []]

    def count_viewers(self, video_id: UUID) -> int:
        query = (
            self._client.table(self.USERS_TABLE)
            .select("id", count="exact")
            .contains("watch_history", [str(video_id)])
            .limit(1)
        )
        result = self._execute("count_viewers", query)
        return getattr(result, "count", 0) or 0

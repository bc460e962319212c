from __future__ import annotations

from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock
from uuid import UUID, uuid4

import httpx
import pytest
from postgrest.exceptions import APIError

from playtube.app.domain.errors import VideoRepositoryError
from playtube.app.domain.models import UploadedMedia
from playtube.app.errors import ApiError
from playtube.app.infra.db.supabase_video_repo import SupabaseVideoRepository, _row_to_video
from playtube.app.services.video_service import VideoService


def _row(**overrides) -> dict:
    row = {
        "id": str(uuid4()),
        "owner_id": str(uuid4()),
        "title": "Intro",
        "description": "First upload",
        "duration": "61.5",
        "video_file": "https://media.example.com/videos/intro.mp4",
        "thumbnail": "https://media.example.com/thumbnails/intro.jpg",
        "is_published": True,
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def _result(data, count=None) -> MagicMock:
    return MagicMock(data=data, count=count)


class TestRowToVideo:
    def test_converts_types(self) -> None:
        row = _row()

        video = _row_to_video(row)

        assert video.id == UUID(row["id"])
        assert video.owner_id == UUID(row["owner_id"])
        assert video.duration == 61.5
        assert isinstance(video.created_at, datetime)
        assert video.created_at.tzinfo is not None

    def test_tolerates_missing_optional_columns(self) -> None:
        video = _row_to_video({"id": str(uuid4()), "owner_id": str(uuid4())})

        assert video.title == ""
        assert video.duration == 0.0
        assert video.is_published is True
        assert video.created_at is None


class TestCreate:
    def test_inserts_row_and_returns_video(self) -> None:
        client = MagicMock()
        inserted = _row(title="Trip")
        client.table.return_value.insert.return_value.execute.return_value = _result([inserted])
        repo = SupabaseVideoRepository(client=client)
        owner_id = UUID(inserted["owner_id"])

        video = repo.create(owner_id, "Trip", "Road trip", 61.5, inserted["video_file"], inserted["thumbnail"])

        client.table.assert_called_with("videos")
        payload = client.table.return_value.insert.call_args[0][0]
        assert payload["owner_id"] == str(owner_id)
        assert payload["title"] == "Trip"
        assert payload["is_published"] is True
        assert payload["created_at"] == payload["updated_at"]
        assert video.title == "Trip"

    def test_empty_insert_result_raises(self) -> None:
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.return_value = _result([])
        repo = SupabaseVideoRepository(client=client)

        with pytest.raises(VideoRepositoryError) as exc_info:
            repo.create(uuid4(), "t", "d", 1.0, "v", "t")

        assert exc_info.value.operation == "create"

    def test_network_error_is_wrapped(self) -> None:
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.side_effect = httpx.ConnectError("refused")
        repo = SupabaseVideoRepository(client=client)

        with pytest.raises(VideoRepositoryError) as exc_info:
            repo.create(uuid4(), "t", "d", 1.0, "v", "t")

        assert "refused" in exc_info.value.reason

    def test_rejected_query_is_wrapped(self) -> None:
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"message": "insert or update violates foreign key constraint", "code": "23503"}
        )
        repo = SupabaseVideoRepository(client=client)

        with pytest.raises(VideoRepositoryError) as exc_info:
            repo.create(uuid4(), "t", "d", 1.0, "v", "t")

        assert exc_info.value.operation == "create"
        assert "foreign key" in exc_info.value.reason

    def test_rejected_insert_fails_publish_with_402(self, tmp_path: Path) -> None:
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"message": "insert or update violates foreign key constraint", "code": "23503"}
        )
        media = MagicMock()
        media.upload.return_value = UploadedMedia(
            object_key="users/u/videos/clip.mp4",
            url="https://media.example.com/clip.mp4",
            content_type="video/mp4",
            size_bytes=10,
            duration=3.0,
        )
        service = VideoService(SupabaseVideoRepository(client=client), media)

        with pytest.raises(ApiError) as exc_info:
            service.publish_video(uuid4(), "Trip", "Road trip", tmp_path / "clip.mp4", tmp_path / "cover.png")

        assert exc_info.value.status_code == 402
        assert exc_info.value.message == "Failed to save video in database"

    def test_rejected_update_becomes_database_error(self) -> None:
        client = MagicMock()
        client.table.return_value.update.return_value.eq.return_value.execute.side_effect = APIError(
            {"message": "permission denied for table videos", "code": "42501"}
        )
        repo = SupabaseVideoRepository(client=client)

        with pytest.raises(VideoRepositoryError):
            repo.update(uuid4(), {"title": "x"})


class TestGetById:
    def test_returns_none_when_missing(self) -> None:
        client = MagicMock()
        client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = _result([])
        repo = SupabaseVideoRepository(client=client)

        assert repo.get_by_id(uuid4()) is None

    def test_filters_by_id(self) -> None:
        client = MagicMock()
        row = _row()
        query = client.table.return_value.select.return_value
        query.eq.return_value.limit.return_value.execute.return_value = _result([row])
        repo = SupabaseVideoRepository(client=client)

        video = repo.get_by_id(UUID(row["id"]))

        query.eq.assert_called_once_with("id", row["id"])
        assert video is not None
        assert str(video.id) == row["id"]


class TestUpdate:
    def test_sets_changes_and_updated_at(self) -> None:
        client = MagicMock()
        row = _row(title="Renamed")
        update = client.table.return_value.update
        update.return_value.eq.return_value.execute.return_value = _result([row])
        repo = SupabaseVideoRepository(client=client)

        video = repo.update(UUID(row["id"]), {"title": "Renamed"})

        payload = update.call_args[0][0]
        assert payload["title"] == "Renamed"
        assert "updated_at" in payload
        assert video is not None and video.title == "Renamed"

    def test_returns_none_when_nothing_matched(self) -> None:
        client = MagicMock()
        client.table.return_value.update.return_value.eq.return_value.execute.return_value = _result([])
        repo = SupabaseVideoRepository(client=client)

        assert repo.update(uuid4(), {"title": "x"}) is None


class TestDelete:
    def test_true_when_row_removed(self) -> None:
        client = MagicMock()
        client.table.return_value.delete.return_value.eq.return_value.execute.return_value = _result([_row()])
        repo = SupabaseVideoRepository(client=client)

        assert repo.delete(uuid4()) is True

    def test_false_when_nothing_removed(self) -> None:
        client = MagicMock()
        client.table.return_value.delete.return_value.eq.return_value.execute.return_value = _result([])
        repo = SupabaseVideoRepository(client=client)

        assert repo.delete(uuid4()) is False


class TestListByOwner:
    def test_uses_range_from_offset_and_limit(self) -> None:
        client = MagicMock()
        ordered = client.table.return_value.select.return_value.eq.return_value.order.return_value
        ordered.range.return_value.execute.return_value = _result([_row(), _row()])
        repo = SupabaseVideoRepository(client=client)

        videos = repo.list_by_owner(uuid4(), offset=20, limit=10)

        ordered.range.assert_called_once_with(20, 29)
        client.table.return_value.select.return_value.eq.return_value.order.assert_called_once_with(
            "created_at", desc=True
        )
        assert len(videos) == 2


class TestCountViewers:
    def test_counts_users_with_video_in_history(self) -> None:
        client = MagicMock()
        select = client.table.return_value.select
        select.return_value.contains.return_value.limit.return_value.execute.return_value = _result([], count=4)
        repo = SupabaseVideoRepository(client=client)
        video_id = uuid4()

        views = repo.count_viewers(video_id)

        client.table.assert_called_with("users")
        select.assert_called_once_with("id", count="exact")
        select.return_value.contains.assert_called_once_with("watch_history", [str(video_id)])
        assert views == 4

    def test_missing_count_is_zero(self) -> None:
        client = MagicMock()
        client.table.return_value.select.return_value.contains.return_value.limit.return_value.execute.return_value = (
            _result([], count=None)
        )
        repo = SupabaseVideoRepository(client=client)

        assert repo.count_viewers(uuid4()) == 0

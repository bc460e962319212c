from __future__ import annotations

from playtube.app.domain.errors import (
    VideoError,
    StorageError,
    MediaUploadError,
    InvalidMediaError,
    VideoRepositoryError,
)


class TestVideoError:
    def test_base_exception(self) -> None:
        error = VideoError("Base error")
        assert str(error) == "Base error"
        assert isinstance(error, Exception)


class TestMediaUploadError:
    def test_includes_path_and_reason(self) -> None:
        error = MediaUploadError("/tmp/clip.mp4", "Bucket unreachable")
        assert "/tmp/clip.mp4" in str(error)
        assert "Bucket unreachable" in str(error)
        assert error.local_path == "/tmp/clip.mp4"
        assert error.reason == "Bucket unreachable"

    def test_default_reason(self) -> None:
        error = MediaUploadError("/tmp/clip.mp4")
        assert error.reason == "Upload failed"


class TestInvalidMediaError:
    def test_default_message(self) -> None:
        assert str(InvalidMediaError()) == "Invalid or unsupported media file"

    def test_custom_message(self) -> None:
        assert str(InvalidMediaError("Expected video file")) == "Expected video file"


class TestVideoRepositoryError:
    def test_includes_operation_and_reason(self) -> None:
        error = VideoRepositoryError("create", "Connection refused")
        assert "create" in str(error)
        assert "Connection refused" in str(error)
        assert error.operation == "create"
        assert error.reason == "Connection refused"


class TestExceptionHierarchy:
    def test_all_domain_errors_inherit_from_video_error(self) -> None:
        assert issubclass(StorageError, VideoError)
        assert issubclass(MediaUploadError, StorageError)
        assert issubclass(InvalidMediaError, VideoError)
        assert issubclass(VideoRepositoryError, VideoError)

    def test_invalid_media_is_not_a_storage_error(self) -> None:
        assert not issubclass(InvalidMediaError, StorageError)

from __future__ import annotations

import asyncio
from io import BytesIO
from pathlib import Path

from fastapi import UploadFile
from starlette.datastructures import Headers

from playtube.app.infra.storage.local_staging import discard_staged_file, stage_upload


def _upload(content: bytes, filename: str = "clip.mp4", content_type: str = "video/mp4") -> UploadFile:
    return UploadFile(
        file=BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def _stage(upload: UploadFile | None, temp_dir: Path, prefix: str = "video/", max_bytes: int = 1024) -> Path | None:
    return asyncio.run(stage_upload(upload, temp_dir, prefix, max_bytes))


class TestStageUpload:
    def test_writes_file_into_temp_dir(self, tmp_path: Path) -> None:
        temp_dir = tmp_path / "temp"

        staged = _stage(_upload(b"frames"), temp_dir)

        assert staged is not None
        assert staged.parent == temp_dir
        assert staged.suffix == ".mp4"
        assert staged.read_bytes() == b"frames"

    def test_missing_part_returns_none(self, tmp_path: Path) -> None:
        assert _stage(None, tmp_path) is None

    def test_empty_filename_returns_none(self, tmp_path: Path) -> None:
        assert _stage(_upload(b"frames", filename=""), tmp_path) is None

    def test_wrong_content_type_returns_none(self, tmp_path: Path) -> None:
        staged = _stage(_upload(b"text", filename="notes.txt", content_type="text/plain"), tmp_path)

        assert staged is None
        assert list(tmp_path.iterdir()) == []

    def test_empty_file_returns_none(self, tmp_path: Path) -> None:
        staged = _stage(_upload(b""), tmp_path)

        assert staged is None
        assert list(tmp_path.iterdir()) == []

    def test_oversized_file_is_rejected_and_removed(self, tmp_path: Path) -> None:
        staged = _stage(_upload(b"x" * 2048), tmp_path, max_bytes=1024)

        assert staged is None
        assert list(tmp_path.iterdir()) == []

    def test_image_prefix(self, tmp_path: Path) -> None:
        staged = _stage(_upload(b"png", filename="Cover.PNG", content_type="image/png"), tmp_path, prefix="image/")

        assert staged is not None
        assert staged.suffix == ".png"


class TestDiscardStagedFile:
    def test_removes_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"x")

        discard_staged_file(path)

        assert not path.exists()

    def test_ignores_none_and_missing(self, tmp_path: Path) -> None:
        discard_staged_file(None)
        discard_staged_file(tmp_path / "never-written.mp4")

# playtube/app/infra/storage/local_staging.py
"""
Local staging of multipart uploads before they are pushed to the media store.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from uuid import uuid4

from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE_BYTES = 1024 * 1024


async def stage_upload(
    upload: Optional[UploadFile],
    temp_dir: Path,
    expected_prefix: str,
    max_bytes: int,
) -> Optional[Path]:
    """
    Write an uploaded part to temp_dir.

    Returns None when the part is absent, empty, has an unexpected
    content type or exceeds max_bytes. Nothing is left on disk in that case.
    """
    if upload is None or not upload.filename:
        return None

    content_type = upload.content_type or ""
    if not content_type.startswith(expected_prefix):
        logger.warning(
            "Rejected upload %s: content_type=%s, expected=%s*",
            upload.filename,
            content_type,
            expected_prefix,
        )
        return None

    temp_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename).suffix.lower()
    target = temp_dir / f"{uuid4().hex}{suffix}"

    written = 0
    with target.open("wb") as handle:
        while True:
            chunk = await upload.read(CHUNK_SIZE_BYTES)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                break
            handle.write(chunk)

    if written == 0 or written > max_bytes:
        logger.warning("Rejected upload %s: size=%d, max=%d", upload.filename, written, max_bytes)
        discard_staged_file(target)
        return None

    logger.debug("Staged upload %s -> %s (%d bytes)", upload.filename, target, written)
    return target


def discard_staged_file(path: Optional[Path]) -> None:
    if path is None:
        return

    if not path.exists():
        return

    try:
        path.unlink()
        logger.debug("Cleaned up staged file: %s", path)
    except OSError as os_error:
        logger.warning(
            "Failed to cleanup staged file %s: %s",
            path,
            os_error,
        )

# playtube/app/services/media_service.py
"""
Pushes staged files to the media store.
"""
from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Callable, Optional
from uuid import UUID

from playtube.app.domain.errors import InvalidMediaError, MediaUploadError, StorageError
from playtube.app.domain.models import MediaKind, UploadedMedia
from playtube.app.infra.media.probe import probe_duration
from playtube.app.infra.storage.base import StorageProvider
from playtube.app.infra.storage.local_staging import discard_staged_file

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

DurationProbe = Callable[[Path], Optional[float]]


def _guess_content_type(local_path: Path) -> str:
    content_type, _ = mimetypes.guess_type(local_path.name)
    return content_type or DEFAULT_CONTENT_TYPE


class MediaUploadService:
    """
    Uploads a staged file for a user and reports where it went.

    The staged file is removed once the upload has been attempted,
    whether it succeeded or not.
    """

    def __init__(
        self,
        storage: StorageProvider,
        duration_probe: DurationProbe = probe_duration,
    ):
        self._storage = storage
        self._duration_probe = duration_probe

    def upload(
        self,
        local_path: Optional[Path],
        owner_id: UUID,
        kind: MediaKind,
    ) -> UploadedMedia:
        """
        Upload a staged file to the media store.

        Args:
            local_path: Staged file on disk
            owner_id: User the media belongs to
            kind: VIDEO or IMAGE, selects the key prefix and duration probing

        Returns:
            UploadedMedia with the public URL

        Raises:
            MediaUploadError: File missing or the store rejected it
            InvalidMediaError: File type does not match kind
        """
        if local_path is None or not local_path.is_file():
            raise MediaUploadError(str(local_path), "File not found")

        try:
            content_type = _guess_content_type(local_path)
            if content_type != DEFAULT_CONTENT_TYPE and not content_type.startswith(kind.content_type_prefix):
                raise InvalidMediaError(f"Expected {kind.value} file, got {content_type}")

            size_bytes = local_path.stat().st_size
            duration = self._duration_probe(local_path) if kind is MediaKind.VIDEO else None
            object_key = self._storage.generate_object_key(
                user_id=str(owner_id),
                filename=local_path.name,
                prefix=kind.storage_prefix,
            )

            try:
                url = self._storage.upload_file(local_path, object_key, content_type)
            except StorageError as e:
                raise MediaUploadError(str(local_path), str(e)) from e
        finally:
            discard_staged_file(local_path)

        logger.info(
            "Uploaded %s: owner=%s, key=%s, size=%d, duration=%s",
            kind.value,
            owner_id,
            object_key,
            size_bytes,
            duration,
        )

        return UploadedMedia(
            object_key=object_key,
            url=url,
            content_type=content_type,
            size_bytes=size_bytes,
            duration=duration,
        )

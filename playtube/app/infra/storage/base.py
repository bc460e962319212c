# playtube/app/infra/storage/base.py
"""
Abstract base class for media storage providers.
This interface allows swapping the hosting backend (R2, S3, GCS, etc.)
without touching the video service.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4


class StorageProvider(ABC):
    """
    Abstract interface for the remote media store.

    Implementations:
    - R2StorageProvider: Cloudflare R2 (S3-compatible)
    """

    @abstractmethod
    def upload_file(
        self,
        local_path: Path,
        object_key: str,
        content_type: str,
    ) -> str:
        """
        Upload a local file to the store.

        Args:
            local_path: File on disk to upload
            object_key: The key/path where the object will be stored
            content_type: MIME type of the content (e.g., "video/mp4")

        Returns:
            The public URL of the stored object
        """
        pass

    def generate_object_key(
        self,
        user_id: str,
        filename: str,
        prefix: str = "videos",
    ) -> str:
        """
        Generate a standardized object key for storing media.

        Format: users/{user_id}/{prefix}/{YYYY}/{MM}/{uuid}_{filename}
        """
        now = datetime.now(timezone.utc)
        safe_filename = re.sub(r"[^a-zA-Z0-9._-]", "_", filename)
        unique_id = uuid4().hex[:8]

        return f"users/{user_id}/{prefix}/{now:%Y}/{now:%m}/{unique_id}_{safe_filename}"

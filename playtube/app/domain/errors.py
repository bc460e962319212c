from __future__ import annotations


class VideoError(Exception):
    pass


class StorageError(VideoError):
    pass


class MediaUploadError(StorageError):
    def __init__(self, local_path: str, reason: str = "Upload failed"):
        super().__init__(f"Failed to upload {local_path}: {reason}")
        self.local_path = local_path
        self.reason = reason


class InvalidMediaError(VideoError):
    def __init__(self, message: str = "Invalid or unsupported media file"):
        super().__init__(message)


class VideoRepositoryError(VideoError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Video repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason

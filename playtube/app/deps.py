# playtube/app/deps.py (singletons exposed as FastAPI dependencies)

from __future__ import annotations

import logging
from functools import partial
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, create_client

from playtube.app.config import settings
from playtube.app.domain.errors import StorageError
from playtube.app.errors import ApiError
from playtube.app.infra.db.base import VideoRepository
from playtube.app.infra.db.supabase_video_repo import SupabaseVideoRepository
from playtube.app.infra.media.probe import probe_duration
from playtube.app.infra.storage.base import StorageProvider
from playtube.app.infra.storage.r2_provider import R2StorageProvider
from playtube.app.services.media_service import MediaUploadService
from playtube.app.services.video_service import VideoService

logger = logging.getLogger(__name__)

_client: Client | None = None
_storage: StorageProvider | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


auth_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None

    @property
    def uuid(self) -> UUID:
        return UUID(self.id)


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    """
    Resolve Authorization: Bearer <access_token> against Supabase auth
    and return the minimal user data the API needs.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    token = cred.credentials
    try:
        res = supa.auth.get_user(token)
        user = res.user if res else None
        if not user:
            raise HTTPException(status_code=401, detail="Invalid token")

        name = None
        meta = getattr(user, "user_metadata", None) or {}
        if isinstance(meta, dict):
            name = meta.get("name") or meta.get("fullName")

        return CurrentUser(id=str(user.id), email=user.email, name=name)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid/expired token")


def get_video_repository(supa: Client = Depends(get_supabase)) -> VideoRepository:
    return SupabaseVideoRepository(client=supa)


def get_storage() -> StorageProvider:
    global _storage
    if _storage is None:
        try:
            _storage = R2StorageProvider(
                account_id=settings.R2_ACCOUNT_ID or None,
                access_key_id=settings.R2_ACCESS_KEY_ID or None,
                secret_access_key=settings.R2_SECRET_ACCESS_KEY or None,
                bucket_name=settings.R2_BUCKET_NAME or None,
                public_url=settings.R2_PUBLIC_URL or None,
            )
        except StorageError as e:
            logger.error("Failed to initialize storage: %s", e)
            raise ApiError(status.HTTP_503_SERVICE_UNAVAILABLE, "Storage service unavailable")
    return _storage


def get_media_service(storage: StorageProvider = Depends(get_storage)) -> MediaUploadService:
    return MediaUploadService(
        storage,
        duration_probe=partial(probe_duration, timeout_seconds=settings.FFPROBE_TIMEOUT_SECONDS),
    )


def get_video_service(
    repository: VideoRepository = Depends(get_video_repository),
    media: MediaUploadService = Depends(get_media_service),
) -> VideoService:
    return VideoService(repository, media, max_page_size=settings.MAX_PAGE_SIZE)

# playtube/app/routers/videos.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from starlette.concurrency import run_in_threadpool

from playtube.app.config import settings
from playtube.app.deps import CurrentUser, get_current_user, get_video_service
from playtube.app.domain.models import Video, VideoDetail
from playtube.app.infra.storage.local_staging import discard_staged_file, stage_upload
from playtube.app.schemas.response import ApiResponse
from playtube.app.schemas.videos import (
    DeletedVideo,
    UpdateVideoDetailsRequest,
    VideoDetailResponse,
    VideoResponse,
    VideoSummary,
)
from playtube.app.services.video_service import VideoService

log = logging.getLogger(__name__)
router = APIRouter(prefix="/videos", tags=["videos"])


def _video_to_response(video: Video) -> VideoResponse:
    return VideoResponse(
        id=str(video.id),
        owner=str(video.owner_id),
        title=video.title,
        description=video.description,
        duration=video.duration,
        videoFile=video.video_file,
        thumbnail=video.thumbnail,
        isPublished=video.is_published,
        createdAt=video.created_at,
        updatedAt=video.updated_at,
    )


def _video_to_summary(video: Video) -> VideoSummary:
    return VideoSummary(
        id=str(video.id),
        title=video.title,
        description=video.description,
        thumbnail=video.thumbnail,
        duration=video.duration,
    )


def _detail_to_response(detail: VideoDetail) -> VideoDetailResponse:
    video = detail.video
    return VideoDetailResponse(
        id=str(video.id),
        title=video.title,
        description=video.description,
        views=detail.views,
        videoFile=video.video_file,
        thumbnail=video.thumbnail,
        duration=video.duration,
    )


def _temp_dir() -> Path:
    return Path(settings.TEMP_UPLOAD_DIR)


async def _stage_video(upload: Optional[UploadFile]) -> Optional[Path]:
    return await stage_upload(upload, _temp_dir(), "video/", settings.MAX_VIDEO_SIZE_BYTES)


async def _stage_image(upload: Optional[UploadFile]) -> Optional[Path]:
    return await stage_upload(upload, _temp_dir(), "image/", settings.MAX_THUMBNAIL_SIZE_BYTES)


@router.post("/", response_model=ApiResponse[VideoResponse])
async def publish_video(
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    video_file: Optional[UploadFile] = File(default=None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(default=None),
    user: CurrentUser = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
) -> ApiResponse[VideoResponse]:
    video_path: Optional[Path] = None
    thumbnail_path: Optional[Path] = None
    try:
        video_path = await _stage_video(video_file)
        thumbnail_path = await _stage_image(thumbnail)
        video = await run_in_threadpool(
            service.publish_video,
            user.uuid,
            title,
            description,
            video_path,
            thumbnail_path,
        )
    finally:
        discard_staged_file(video_path)
        discard_staged_file(thumbnail_path)

    return ApiResponse[VideoResponse](
        statusCode=200,
        data=_video_to_response(video),
        message="Video has been uploaded successfully.",
    )


@router.get("/", response_model=ApiResponse[list[VideoSummary]])
async def list_videos(
    page: int = Query(default=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE),
    user_id: Optional[UUID] = Query(default=None, alias="userId"),
    user: CurrentUser = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
) -> ApiResponse[list[VideoSummary]]:
    owner_id = user_id or user.uuid
    videos = await run_in_threadpool(service.list_videos, owner_id, page, limit)
    return ApiResponse[list[VideoSummary]](
        statusCode=200,
        data=[_video_to_summary(video) for video in videos],
        message="All videos fetched successfully.",
    )


@router.get("/{video_id}", response_model=ApiResponse[VideoDetailResponse])
async def get_video_detail(
    video_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
) -> ApiResponse[VideoDetailResponse]:
    detail = await run_in_threadpool(service.get_video_detail, video_id)
    return ApiResponse[VideoDetailResponse](
        statusCode=200,
        data=_detail_to_response(detail),
        message="Video Detail fetched successfully.",
    )


@router.patch("/{video_id}", response_model=ApiResponse[VideoResponse])
async def update_video_details(
    video_id: UUID,
    payload: UpdateVideoDetailsRequest,
    user: CurrentUser = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
) -> ApiResponse[VideoResponse]:
    video = await run_in_threadpool(
        service.update_video_details,
        video_id,
        user.uuid,
        payload.title,
        payload.description,
    )
    return ApiResponse[VideoResponse](
        statusCode=200,
        data=_video_to_response(video),
        message="Video details have been updated",
    )


@router.delete("/{video_id}", response_model=ApiResponse[DeletedVideo])
async def delete_video(
    video_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
) -> ApiResponse[DeletedVideo]:
    await run_in_threadpool(service.delete_video, video_id, user.uuid)
    return ApiResponse[DeletedVideo](
        statusCode=200,
        data=DeletedVideo(id=str(video_id)),
        message="Video deleted.",
    )


@router.patch("/thumbnail/{video_id}", response_model=ApiResponse[VideoResponse])
async def update_thumbnail(
    video_id: UUID,
    thumbnail: Optional[UploadFile] = File(default=None),
    user: CurrentUser = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
) -> ApiResponse[VideoResponse]:
    thumbnail_path: Optional[Path] = None
    try:
        thumbnail_path = await _stage_image(thumbnail)
        video = await run_in_threadpool(service.update_thumbnail, video_id, user.uuid, thumbnail_path)
    finally:
        discard_staged_file(thumbnail_path)

    return ApiResponse[VideoResponse](
        statusCode=200,
        data=_video_to_response(video),
        message="Thumbnail uploaded successfully",
    )


@router.patch("/video/{video_id}", response_model=ApiResponse[VideoResponse])
async def update_video_file(
    video_id: UUID,
    video_file: Optional[UploadFile] = File(default=None, alias="videoFile"),
    user: CurrentUser = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
) -> ApiResponse[VideoResponse]:
    video_path: Optional[Path] = None
    try:
        video_path = await _stage_video(video_file)
        video = await run_in_threadpool(service.update_video_file, video_id, user.uuid, video_path)
    finally:
        discard_staged_file(video_path)

    log.info("Video file replaced: id=%s, user=%s", video_id, user.id)
    return ApiResponse[VideoResponse](
        statusCode=200,
        data=_video_to_response(video),
        message="Video updated successfully.",
    )


@router.patch("/toggle/publish/{video_id}", response_model=ApiResponse[VideoResponse])
async def toggle_publish_status(
    video_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
) -> ApiResponse[VideoResponse]:
    video = await run_in_threadpool(service.toggle_publish_status, video_id, user.uuid)
    return ApiResponse[VideoResponse](
        statusCode=200,
        data=_video_to_response(video),
        message="Video published status toggled successfully.",
    )

from __future__ import annotations
from fastapi import APIRouter, Depends
from playtube.app.deps import get_current_user, CurrentUser
from playtube.app.schemas.response import ApiResponse

router = APIRouter(prefix="/auth", tags=["auth"])

@router.get("/me", response_model=ApiResponse[CurrentUser])
async def me(user: CurrentUser = Depends(get_current_user)):
    return ApiResponse[CurrentUser](data=user, message="Current user fetched successfully.")

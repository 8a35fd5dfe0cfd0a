from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.schemas import (
    Envelope,
    PostVersionCreate,
    PostVersionData,
    PostVersionListData,
    PostVersionUpdate,
    SuccessResponse,
)
from app.services import version_service

router = APIRouter(prefix="/api/v1/posts/{post_id}/versions", tags=["versions"])


@router.get("", response_model=Envelope[PostVersionListData])
async def list_post_versions(
    post_id: str,
    preferred_only: bool = Query(
        False,
        alias="preferredOnly",
        description="Only return versions marked as preferred.",
    ),
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    data = await version_service.list_post_versions(db, user, post_id, preferred_only)
    return {"data": data}


@router.post("", status_code=201, response_model=Envelope[PostVersionData])
async def create_post_version(
    post_id: str,
    data: PostVersionCreate,
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    version = await version_service.create_post_version(db, user, post_id, data)
    return {"data": {"version": version}}


@router.patch("/{version_id}", response_model=Envelope[PostVersionData])
async def update_post_version(
    post_id: str,
    version_id: str,
    data: PostVersionUpdate,
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    version = await version_service.update_post_version(db, user, post_id, version_id, data)
    return {"data": {"version": version}}


@router.delete("/{version_id}", response_model=SuccessResponse)
async def delete_post_version(
    post_id: str,
    version_id: str,
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await version_service.delete_post_version(db, user, post_id, version_id)
    return SuccessResponse()

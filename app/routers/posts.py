from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.schemas import Envelope, PostCreate, PostData, PostListData, PostUpdate
from app.services import post_service

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.get("", response_model=Envelope[PostListData])
async def list_posts(
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"data": await post_service.list_posts(db, user)}


@router.post("", status_code=201, response_model=Envelope[PostData])
async def create_post(
    data: PostCreate,
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.create_post(db, user, data)
    return {"data": {"post": post}}


@router.patch("/{post_id}", response_model=Envelope[PostData])
async def update_post(
    post_id: str,
    data: PostUpdate,
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.update_post(db, user, post_id, data)
    return {"data": {"post": post}}

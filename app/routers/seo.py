from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.schemas import Envelope, SeoMetaData, SeoMetaUpsert
from app.services import seo_service

router = APIRouter(prefix="/api/v1/posts/{post_id}/seo", tags=["seo"])


@router.get("", response_model=Envelope[SeoMetaData])
async def get_seo_meta(
    post_id: str,
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"data": {"seo": await seo_service.get_seo_meta(db, user, post_id)}}


@router.put("", response_model=Envelope[SeoMetaData])
async def upsert_seo_meta(
    post_id: str,
    data: SeoMetaUpsert,
    user: CurrentUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"data": {"seo": await seo_service.upsert_seo_meta(db, user, post_id, data)}}

"""
Post version service: drafts of a post's content.

Every operation goes through the ownership chain (version -> post ->
user). Versions carry only a creation timestamp; updates never touch it.
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import CurrentUser
from app.errors import NotFoundError
from app.models import BlogPostVersion
from app.schemas import PostVersionCreate, PostVersionUpdate
from app.services.ownership import (
    VERSION_NOT_FOUND,
    get_owned_post,
    get_owned_version,
    require_user,
)

logger = logging.getLogger(__name__)


def _version_to_dict(version: BlogPostVersion) -> dict:
    return {
        "id": version.id,
        "post_id": version.post_id,
        "version_label": version.version_label,
        "is_preferred": version.is_preferred,
        "outline": version.outline,
        "content": version.content,
        "reading_time_minutes": version.reading_time_minutes,
        "tone": version.tone,
        "created_at": version.created_at,
    }


async def create_post_version(
    db: AsyncSession, user: CurrentUser | None, post_id: str, data: PostVersionCreate
) -> dict:
    user = require_user(user)
    await get_owned_post(db, post_id, user.id)

    version = BlogPostVersion(
        id=str(uuid.uuid4()),
        post_id=post_id,
        version_label=data.version_label,
        is_preferred=data.is_preferred,
        outline=data.outline,
        content=data.content,
        reading_time_minutes=data.reading_time_minutes,
        tone=data.tone,
        created_at=datetime.now(timezone.utc),
    )
    db.add(version)
    await db.flush()

    logger.info("Created version %s for post %s", version.id, post_id)
    return _version_to_dict(version)


async def update_post_version(
    db: AsyncSession,
    user: CurrentUser | None,
    post_id: str,
    version_id: str,
    data: PostVersionUpdate,
) -> dict:
    user = require_user(user)
    version = await get_owned_version(db, version_id, post_id, user.id)

    present = data.model_fields_set
    if "version_label" in present:
        version.version_label = data.version_label
    if "is_preferred" in present:
        version.is_preferred = data.is_preferred
    if "outline" in present:
        version.outline = data.outline
    if "content" in present:
        version.content = data.content
    if "reading_time_minutes" in present:
        version.reading_time_minutes = data.reading_time_minutes
    if "tone" in present:
        version.tone = data.tone

    await db.flush()

    logger.info("Updated version %s (%s)", version.id, ", ".join(sorted(present)))
    return _version_to_dict(version)


async def delete_post_version(
    db: AsyncSession, user: CurrentUser | None, post_id: str, version_id: str
) -> None:
    """
    Delete one version of the caller's post.

    The DELETE's row count is checked as well as the ownership lookup: a
    concurrent delete between the two still yields NOT_FOUND rather than a
    silent success.
    """
    user = require_user(user)
    await get_owned_version(db, version_id, post_id, user.id)

    result = await db.execute(delete(BlogPostVersion).where(BlogPostVersion.id == version_id))
    if result.rowcount == 0:
        raise NotFoundError(VERSION_NOT_FOUND)

    logger.info("Deleted version %s of post %s", version_id, post_id)


async def list_post_versions(
    db: AsyncSession, user: CurrentUser | None, post_id: str, preferred_only: bool = False
) -> dict:
    user = require_user(user)
    await get_owned_post(db, post_id, user.id)

    q = select(BlogPostVersion).where(BlogPostVersion.post_id == post_id)
    if preferred_only:
        q = q.where(BlogPostVersion.is_preferred.is_(True))
    q = q.order_by(BlogPostVersion.created_at.asc())

    versions = (await db.execute(q)).scalars().all()
    return {"items": [_version_to_dict(v) for v in versions], "total": len(versions)}

"""
Post service: create, partially update and list the caller's blog posts.

Design notes
------------
- Timestamps are assigned here rather than by the database so that a new
  post's ``created_at`` and ``updated_at`` are the same instant.
- Updates are sparse: each field is checked for presence in the payload
  individually and only present fields are written. ``updated_at`` is
  refreshed on every update.
- Service functions flush but do not commit; the transaction boundary is
  owned by the ``get_db`` dependency in the router layer.
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import CurrentUser
from app.models import BlogPost
from app.schemas import PostCreate, PostUpdate
from app.services.ownership import get_owned_post, require_user

logger = logging.getLogger(__name__)


def _post_to_dict(post: BlogPost) -> dict:
    return {
        "id": post.id,
        "user_id": post.user_id,
        "title": post.title,
        "slug": post.slug,
        "topic": post.topic,
        "language": post.language,
        "status": post.status,
        "target_audience": post.target_audience,
        "main_keyword": post.main_keyword,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
    }


async def create_post(db: AsyncSession, user: CurrentUser | None, data: PostCreate) -> dict:
    user = require_user(user)
    now = datetime.now(timezone.utc)

    post = BlogPost(
        id=str(uuid.uuid4()),
        user_id=user.id,
        title=data.title,
        slug=data.slug,
        topic=data.topic,
        language=data.language,
        status=data.status,
        target_audience=data.target_audience,
        main_keyword=data.main_keyword,
        created_at=now,
        updated_at=now,
    )
    db.add(post)
    await db.flush()

    logger.info("Created post %s for user %s", post.id, user.id)
    return _post_to_dict(post)


async def update_post(
    db: AsyncSession, user: CurrentUser | None, post_id: str, data: PostUpdate
) -> dict:
    """
    Apply the fields present in *data* to the caller's post.

    Raises NotFoundError (before any write) when the post does not exist
    or belongs to another user.
    """
    user = require_user(user)
    post = await get_owned_post(db, post_id, user.id)

    present = data.model_fields_set
    if "title" in present:
        post.title = data.title
    if "slug" in present:
        post.slug = data.slug
    if "topic" in present:
        post.topic = data.topic
    if "language" in present:
        post.language = data.language
    if "status" in present:
        post.status = data.status
    if "target_audience" in present:
        post.target_audience = data.target_audience
    if "main_keyword" in present:
        post.main_keyword = data.main_keyword
    post.updated_at = datetime.now(timezone.utc)

    await db.flush()

    logger.info("Updated post %s (%s)", post.id, ", ".join(sorted(present)))
    return _post_to_dict(post)


async def list_posts(db: AsyncSession, user: CurrentUser | None) -> dict:
    """Return every post owned by the caller, newest first, with a count."""
    user = require_user(user)

    q = (
        select(BlogPost)
        .where(BlogPost.user_id == user.id)
        .order_by(BlogPost.created_at.desc())
    )
    posts = (await db.execute(q)).scalars().all()
    return {"items": [_post_to_dict(p) for p in posts], "total": len(posts)}

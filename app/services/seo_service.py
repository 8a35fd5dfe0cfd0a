"""
SEO metadata service: one metadata record per post.

``upsert_seo_meta`` reads first and updates when a record exists. When it
does not, the insert is issued as ``INSERT ... ON CONFLICT (post_id) DO
NOTHING`` against the unique ``post_id`` column: if a concurrent request
inserted the record between our read and our write, nothing is inserted
and the incoming fields are merged into the winner's row instead. Two
racing upserts therefore always converge on a single row.
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import CurrentUser
from app.models import BlogSeoMeta
from app.schemas import SeoMetaUpsert
from app.services.ownership import get_owned_post, require_user

logger = logging.getLogger(__name__)


def _seo_to_dict(meta: BlogSeoMeta) -> dict:
    return {
        "id": meta.id,
        "post_id": meta.post_id,
        "meta_title": meta.meta_title,
        "meta_description": meta.meta_description,
        "keywords": meta.keywords,
        "og_title": meta.og_title,
        "og_description": meta.og_description,
        "created_at": meta.created_at,
    }


async def _find_seo_meta(db: AsyncSession, post_id: str) -> BlogSeoMeta | None:
    q = select(BlogSeoMeta).where(BlogSeoMeta.post_id == post_id).limit(1)
    return (await db.execute(q)).scalar_one_or_none()


def _apply_seo_fields(meta: BlogSeoMeta, data: SeoMetaUpsert) -> None:
    present = data.model_fields_set
    if "meta_title" in present:
        meta.meta_title = data.meta_title
    if "meta_description" in present:
        meta.meta_description = data.meta_description
    if "keywords" in present:
        meta.keywords = data.keywords
    if "og_title" in present:
        meta.og_title = data.og_title
    if "og_description" in present:
        meta.og_description = data.og_description


async def _insert_seo_meta(db: AsyncSession, post_id: str, data: SeoMetaUpsert) -> BlogSeoMeta | None:
    """
    Insert a fresh record for *post_id*.

    Returns None when another record for the post already exists.
    """
    # PostgreSQL in deployment, SQLite under test
    dialect = db.get_bind().dialect.name
    insert_fn = sqlite_insert if dialect == "sqlite" else pg_insert
    values = {
        "id": str(uuid.uuid4()),
        "post_id": post_id,
        "meta_title": data.meta_title,
        "meta_description": data.meta_description,
        "keywords": data.keywords,
        "og_title": data.og_title,
        "og_description": data.og_description,
        "created_at": datetime.now(timezone.utc),
    }
    stmt = (
        insert_fn(BlogSeoMeta)
        .values([values])
        .on_conflict_do_nothing(index_elements=["post_id"])
        .returning(BlogSeoMeta)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def upsert_seo_meta(
    db: AsyncSession, user: CurrentUser | None, post_id: str, data: SeoMetaUpsert
) -> dict:
    user = require_user(user)
    await get_owned_post(db, post_id, user.id)

    meta = await _find_seo_meta(db, post_id)
    if meta is None:
        meta = await _insert_seo_meta(db, post_id, data)
        if meta is not None:
            logger.info("Created SEO metadata %s for post %s", meta.id, post_id)
            return _seo_to_dict(meta)

        # Lost the race to a concurrent upsert: merge into its row.
        logger.info("SEO metadata for post %s created concurrently, merging", post_id)
        meta = await _find_seo_meta(db, post_id)

    _apply_seo_fields(meta, data)
    await db.flush()

    logger.info("Updated SEO metadata %s for post %s", meta.id, post_id)
    return _seo_to_dict(meta)


async def get_seo_meta(db: AsyncSession, user: CurrentUser | None, post_id: str) -> dict | None:
    """Return the post's SEO metadata, or None when none was saved yet."""
    user = require_user(user)
    await get_owned_post(db, post_id, user.id)

    meta = await _find_seo_meta(db, post_id)
    return _seo_to_dict(meta) if meta is not None else None

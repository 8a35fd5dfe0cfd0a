"""
Authorization gate shared by every service.

Lookups filter on the owner as well as the id, so a resource that exists
but belongs to someone else produces exactly the same NOT_FOUND as one
that does not exist at all.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import CurrentUser
from app.errors import NotFoundError, UnauthorizedError
from app.models import BlogPost, BlogPostVersion

POST_NOT_FOUND = "Blog post not found."
VERSION_NOT_FOUND = "Post version not found."


def require_user(user: CurrentUser | None) -> CurrentUser:
    if user is None:
        raise UnauthorizedError()
    return user


async def get_owned_post(db: AsyncSession, post_id: str, user_id: str) -> BlogPost:
    q = select(BlogPost).where(BlogPost.id == post_id, BlogPost.user_id == user_id)
    post = (await db.execute(q)).scalar_one_or_none()
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)
    return post


async def get_owned_version(
    db: AsyncSession, version_id: str, post_id: str, user_id: str
) -> BlogPostVersion:
    """
    Return the version only if its post belongs to *user_id*.

    The post check runs first; when it fails the version is never queried.
    """
    await get_owned_post(db, post_id, user_id)

    q = select(BlogPostVersion).where(
        BlogPostVersion.id == version_id, BlogPostVersion.post_id == post_id
    )
    version = (await db.execute(q)).scalar_one_or_none()
    if version is None:
        raise NotFoundError(VERSION_NOT_FOUND)
    return version

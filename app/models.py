from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from app.database import Base


# ---------------------------------------------------------------------------
# Column types
# ---------------------------------------------------------------------------
class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime that always loads as UTC.

    SQLite keeps no offset for ``DateTime(timezone=True)``; values are
    normalised to UTC on write so a naive value read back can be tagged
    as UTC without shifting it.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# BlogPost
# ---------------------------------------------------------------------------
class BlogPost(Base):
    __tablename__ = "blog_posts"

    __table_args__ = (
        # A user's drafts, newest first; also serves owner-only lookups
        Index("ix_blog_posts_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    # Identity issued by the external auth provider; not a local FK.
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    topic: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    language: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    target_audience: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    main_keyword: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Both set by the service layer so they share one instant on insert.
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # lazy="raise": services query children explicitly
    versions: Mapped[List["BlogPostVersion"]] = relationship(
        "BlogPostVersion", back_populates="post", lazy="raise"
    )
    seo_meta: Mapped[Optional["BlogSeoMeta"]] = relationship(
        "BlogSeoMeta", back_populates="post", lazy="raise", uselist=False
    )


# ---------------------------------------------------------------------------
# BlogPostVersion
# ---------------------------------------------------------------------------
class BlogPostVersion(Base):
    __tablename__ = "blog_post_versions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version_label: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_preferred: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    outline: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    reading_time_minutes: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    tone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    post: Mapped["BlogPost"] = relationship("BlogPost", back_populates="versions", lazy="raise")


# ---------------------------------------------------------------------------
# BlogSeoMeta
# ---------------------------------------------------------------------------
class BlogSeoMeta(Base):
    __tablename__ = "blog_seo_meta"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    # unique=True backs the one-record-per-post upsert (ON CONFLICT target).
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    meta_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    keywords: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    og_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    og_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    post: Mapped["BlogPost"] = relationship("BlogPost", back_populates="seo_meta", lazy="raise")

"""
InkPost Backend: Post and Image SQLAlchemy Models
==================================================

What:  ORM models for the `posts` and `images` tables.
Who:   Used by BlogService for CRUD and by Alembic for schema management.

Table Design:
    - posts.author_id references users.id; the author must exist at insert
    - posts.published defaults to true
    - images is one-to-one with posts (unique post_id) and its storage key is
      unique, so a reused key aborts the whole create transaction
    - created_at / updated_at are filled in Python so the values are on the
      object right after flush (no lazy refresh under asyncio)

Query Patterns:
    - Page of posts: SELECT ... LIMIT 10 OFFSET (page-1)*10, storage order
    - Single post:   SELECT ... WHERE id = :uuid (primary key)
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import expression

from inkpost.database import Base
from inkpost.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """
    A blog entry written by one User.

    Lifecycle:
        1. Created by POST /api/v1/blog (optionally with its Image)
        2. Title/content changed by PUT /api/v1/blog/{id}
        3. Removed by DELETE /api/v1/blog/{id}; the Image goes with it
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=expression.true(),
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    author: Mapped[User] = relationship(back_populates="posts")

    image: Mapped[Optional["Image"]] = relationship(
        back_populates="post",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title[:30]}', author_id={self.author_id})>"


class Image(Base):
    """Hosted image attached to exactly one Post."""

    __tablename__ = "images"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Public URL returned by the media host",
    )

    key: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Media host public id",
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    post: Mapped[Post] = relationship(back_populates="image")

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, key='{self.key}', post_id={self.post_id})>"

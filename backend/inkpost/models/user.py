"""
InkPost Backend: User SQLAlchemy Model
=======================================

What:  ORM model for the `users` table.
Who:   Written by UserService.signup, read by signin and the auth check,
       joined by BlogService for author names.

Table Design:
    - UUID primary key generated in Python (works on PostgreSQL and SQLite)
    - email is unique; the unique index is what rejects duplicate signups
    - password_hash holds a salted passlib hash, never the plaintext password
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpost.database import Base

if TYPE_CHECKING:
    from inkpost.models.post import Post


class User(Base):
    """
    A registered author.

    Lifecycle:
        Created on signup. Never updated or deleted by the API.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        comment="Login identifier, unique across users",
    )

    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name shown as the author of posts",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Salted password hash (passlib format)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    posts: Mapped[List["Post"]] = relationship(back_populates="author")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"

"""
InkPost Backend: Blog Service (Post CRUD)
==========================================

What:  Create, update, list, fetch and delete blog posts.
How:   Async SQLAlchemy queries on the request's session. Author and image
       are eager-loaded with selectinload, since lazy loads are not allowed
       under asyncio. Commit/rollback is left to get_db_session, so every
       call is one transaction.
Who:   Called by the /api/v1/blog routes with the authenticated user id.

Rules enforced here:
    - a post's author must exist when the post is created
    - a post and its image are written in the same flush (all or nothing)
    - only the author may update or delete a post
    - update keeps existing title/content for omitted fields
    - list pages are 10 posts, in storage order; an empty page is a 404

Error mapping:
    missing post / empty page → NotFoundError (404)
    not the author            → PermissionDeniedError (403)
    SQLAlchemy failure        → DatabaseError (500, generic message)
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkpost.exceptions import DatabaseError, NotFoundError, PermissionDeniedError
from inkpost.models import Image, Post, User
from inkpost.schemas.blog import (
    AuthorSummary,
    BlogItem,
    BlogListResponse,
    BlogResponse,
    CreateBlogInput,
    DeleteBlogResponse,
    ImageSummary,
    UpdateBlogInput,
    UpdateBlogResponse,
    UpdatedBlog,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = 10


def _to_item(post: Post) -> BlogItem:
    image: Optional[ImageSummary] = None
    if post.image is not None:
        image = ImageSummary(url=post.image.url, key=post.image.key)
    return BlogItem(
        id=post.id,
        title=post.title,
        content=post.content,
        published=post.published,
        author_id=post.author_id,
        author=AuthorSummary(name=post.author.name if post.author else None),
        image=image,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


class BlogService:
    """Stateless post operations; one instance is shared by all requests."""

    async def load_post(self, db: AsyncSession, post_id: UUID) -> Post:
        """Fetch a post with author and image loaded, or raise NotFoundError."""
        try:
            result = await db.execute(
                select(Post)
                .options(selectinload(Post.author), selectinload(Post.image))
                .where(Post.id == post_id)
            )
            post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e))
            raise DatabaseError(
                message="Some error occurred while fetching the blog",
                context={"post_id": str(post_id)},
            )

        if post is None:
            raise NotFoundError(resource="blog", message="Blog not found")
        return post

    @staticmethod
    def _check_author(post: Post, user_id: UUID) -> None:
        if post.author_id != user_id:
            logger.warning("User %s denied access to post %s", user_id, post.id)
            raise PermissionDeniedError(
                message="Only the author can modify this blog post",
                context={"post_id": str(post.id), "user_id": str(user_id)},
            )

    async def create_post(
        self, db: AsyncSession, author_id: UUID, data: CreateBlogInput
    ) -> UUID:
        """
        Insert a post (and its image, when one is supplied).

        Both rows go out in a single flush inside the request transaction; if
        either insert fails, get_db_session rolls the whole thing back.

        Returns:
            The new post id.
        """
        try:
            author = await db.get(User, author_id)
        except SQLAlchemyError as e:
            logger.error("Database error loading author %s: %s", author_id, str(e))
            raise DatabaseError(context={"author_id": str(author_id)})
        if author is None:
            raise NotFoundError(resource="author", resource_id=str(author_id))

        post = Post(
            title=data.title,
            content=data.content,
            published=True if data.published is None else data.published,
            author_id=author_id,
        )
        if data.image is not None:
            post.image = Image(url=data.image, key=data.image_id)
        db.add(post)

        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning("Post insert rejected by a constraint: %s", str(e.orig))
            raise DatabaseError(
                message="Failed to create blog post",
                context={"error_type": "IntegrityError"},
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create blog post",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Post %s created by %s%s",
            post.id,
            author_id,
            " with image" if data.image is not None else "",
        )
        return post.id

    async def update_post(
        self,
        db: AsyncSession,
        post: Post,
        user_id: UUID,
        data: UpdateBlogInput,
    ) -> UpdateBlogResponse:
        """
        Apply a partial title/content update made by the post's author.

        `post` comes from load_post, so a missing id has already answered 404
        before the body was validated.
        """
        self._check_author(post, user_id)

        if data.title is not None:
            post.title = data.title
        if data.content is not None:
            post.content = data.content

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating post %s: %s", post.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update blog post",
                context={"post_id": str(post.id)},
            )

        return UpdateBlogResponse(
            blog=UpdatedBlog(
                id=post.id,
                title=post.title,
                content=post.content,
                published_date=post.created_at.isoformat(),
                author_name=post.author.name,
            )
        )

    async def list_posts(self, db: AsyncSession, page: int = 1) -> BlogListResponse:
        """
        One page of posts with author name and image.

        Offset pagination: page N covers rows (N-1)*10 .. N*10-1 in storage
        order. No ORDER BY is applied.

        Raises:
            NotFoundError: The page is empty.
        """
        offset = (page - 1) * PAGE_SIZE
        try:
            result = await db.execute(
                select(Post)
                .options(selectinload(Post.author), selectinload(Post.image))
                .offset(offset)
                .limit(PAGE_SIZE)
            )
            posts = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Some error occurred while fetching the blogs",
                context={"page": page, "error_type": type(e).__name__},
            )

        if not posts:
            raise NotFoundError(resource="blog", message="No blogs found")

        return BlogListResponse(blogs=[_to_item(post) for post in posts])

    async def get_post(self, db: AsyncSession, post_id: UUID) -> BlogResponse:
        post = await self.load_post(db, post_id)
        return BlogResponse(blog=_to_item(post))

    async def delete_post(
        self, db: AsyncSession, post_id: UUID, user_id: UUID
    ) -> DeleteBlogResponse:
        """Delete a post (and its image) owned by the caller."""
        post = await self.load_post(db, post_id)
        self._check_author(post, user_id)

        try:
            await db.delete(post)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete blog. Please try again later.",
                context={"post_id": str(post_id)},
            )

        logger.info("Post %s deleted by %s", post_id, user_id)
        return DeleteBlogResponse()


# ── Singleton Instance ────────────────────────────────────────────────────
blog_service = BlogService()

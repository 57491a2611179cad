"""
InkPost Backend: Blog Service Unit Tests
=========================================

What:  BlogService rules checked against a mocked AsyncSession.
How:   Uses mock DB sessions (no real DB); query results are MagicMocks.

What we test:
    ✅ Missing post raises NotFoundError
    ✅ Only the author passes the ownership check
    ✅ Partial update keeps omitted fields
    ✅ Create for an unknown author raises NotFoundError and adds nothing
    ✅ Constraint failure on create becomes a generic DatabaseError
    ✅ List offsets by page and raises NotFoundError on an empty page
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from inkpost.exceptions import DatabaseError, NotFoundError, PermissionDeniedError
from inkpost.schemas.blog import CreateBlogInput, UpdateBlogInput
from inkpost.services.blog_service import PAGE_SIZE, BlogService


def _mock_post(author_id=None, title="Old", content="Body"):
    post = MagicMock()
    post.id = uuid4()
    post.title = title
    post.content = content
    post.published = True
    post.author_id = author_id or uuid4()
    post.author.name = "Ann"
    post.image = None
    post.created_at = datetime(2026, 1, 15, tzinfo=timezone.utc)
    post.updated_at = datetime(2026, 1, 15, tzinfo=timezone.utc)
    return post


def _returning_one(mock_db_session, post):
    result = MagicMock()
    result.scalar_one_or_none.return_value = post
    mock_db_session.execute.return_value = result


def _returning_many(mock_db_session, posts):
    result = MagicMock()
    result.scalars.return_value.all.return_value = posts
    mock_db_session.execute.return_value = result


class TestBlogServiceGet:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_get_found(self, mock_db_session):
        post = _mock_post()
        _returning_one(mock_db_session, post)

        result = await self.service.get_post(mock_db_session, post.id)

        assert result.blog.id == post.id
        assert result.blog.author.name == "Ann"

    @pytest.mark.asyncio
    async def test_get_not_found(self, mock_db_session):
        _returning_one(mock_db_session, None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_post(mock_db_session, uuid4())

        assert exc_info.value.message == "Blog not found"


class TestBlogServiceUpdate:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_title_only_keeps_content(self, mock_db_session):
        owner = uuid4()
        post = _mock_post(author_id=owner, title="Old", content="Body")

        result = await self.service.update_post(
            mock_db_session, post, owner, UpdateBlogInput(title="New")
        )

        assert result.blog.title == "New"
        assert result.blog.content == "Body"
        assert result.blog.author_name == "Ann"
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_author_is_denied_before_any_write(self, mock_db_session):
        post = _mock_post(title="Old")
        with pytest.raises(PermissionDeniedError):
            await self.service.update_post(
                mock_db_session, post, uuid4(), UpdateBlogInput(title="New")
            )

        assert post.title == "Old"
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_by_non_author_is_denied(self, mock_db_session):
        post = _mock_post()
        _returning_one(mock_db_session, post)

        with pytest.raises(PermissionDeniedError):
            await self.service.delete_post(mock_db_session, post.id, uuid4())

        mock_db_session.delete.assert_not_awaited()


class TestBlogServiceCreate:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_unknown_author(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.create_post(
                mock_db_session, uuid4(), CreateBlogInput(title="t", content="c")
            )

        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_constraint_failure_is_generic_database_error(self, mock_db_session):
        mock_db_session.get.return_value = MagicMock()
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT INTO images ...", {}, Exception("UNIQUE constraint failed: images.key")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_post(
                mock_db_session,
                uuid4(),
                CreateBlogInput(title="t", content="c", image="https://img/a.png", image_id="k"),
            )

        assert exc_info.value.message == "Failed to create blog post"
        assert "images.key" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_post_and_image_added_together(self, mock_db_session):
        mock_db_session.get.return_value = MagicMock()

        await self.service.create_post(
            mock_db_session,
            uuid4(),
            CreateBlogInput(title="t", content="c", image="https://img/a.png", image_id="k"),
        )

        (post,), _ = mock_db_session.add.call_args
        assert post.published is True
        assert post.image.key == "k"
        assert post.image.url == "https://img/a.png"


class TestBlogServiceList:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_empty_page_raises_not_found(self, mock_db_session):
        _returning_many(mock_db_session, [])

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.list_posts(mock_db_session, page=4)

        assert exc_info.value.message == "No blogs found"

    @pytest.mark.asyncio
    async def test_page_offset(self, mock_db_session):
        _returning_many(mock_db_session, [_mock_post() for _ in range(3)])

        result = await self.service.list_posts(mock_db_session, page=3)

        assert len(result.blogs) == 3
        (stmt,), _ = mock_db_session.execute.call_args
        compiled = stmt.compile(compile_kwargs={"literal_binds": True})
        assert f"LIMIT {PAGE_SIZE}" in str(compiled)
        assert f"OFFSET {2 * PAGE_SIZE}" in str(compiled)

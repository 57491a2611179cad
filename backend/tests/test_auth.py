"""
InkPost Backend: Bearer Authentication Tests
=============================================

What:  Protected routes reject requests without a valid token before any
       handler work happens.

What we test:
    ✅ Missing header, wrong scheme, foreign secret → 401
    ✅ A rejected create leaves the posts table untouched
    ✅ A token whose id is not a UUID → 401
    ✅ A valid token reaches the handler
"""

from uuid import uuid4

import jwt
import pytest
from sqlalchemy import func, select

from inkpost.config import settings
from inkpost.models import Post
from inkpost.services.token_service import issue_token


async def _post_count(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(Post))).scalar_one()


class TestRequireUser:

    @pytest.mark.asyncio
    async def test_missing_header_is_401(self, client):
        response = await client.get("/api/v1/blog/bulk")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"
        assert response.json()["message"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_401(self, client):
        response = await client.get(
            "/api/v1/blog/bulk", headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_foreign_secret_create_is_401_and_writes_nothing(
        self, client, session_factory, make_user, bearer
    ):
        """A token signed elsewhere must not create a post, even for a real user id."""
        good = await make_user()
        user_id = jwt.decode(good, settings.jwt_secret, algorithms=["HS256"])["id"]
        forged = issue_token({"id": user_id}, "attacker-secret-of-reasonable-length")

        response = await client.post(
            "/api/v1/blog",
            json={"title": "t", "content": "c"},
            headers=bearer(forged),
        )

        assert response.status_code == 401
        assert await _post_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_non_uuid_id_is_401(self, client, bearer):
        token = issue_token({"id": "not-a-uuid"}, settings.jwt_secret)
        response = await client.get("/api/v1/blog/bulk", headers=bearer(token))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_valid_token_reaches_handler(self, client, bearer):
        """Handler runs: the empty table answers 404, not 401."""
        token = issue_token({"id": str(uuid4())}, settings.jwt_secret)
        response = await client.get("/api/v1/blog/bulk", headers=bearer(token))
        assert response.status_code == 404
        assert response.json()["message"] == "No blogs found"

"""
InkPost Backend: Application Wiring Tests
==========================================

What we test:
    ✅ /health reports the database and needs no token
    ✅ Every response carries X-Request-ID; a client-supplied id is echoed
    ✅ Error bodies share one envelope with the request id
    ✅ The rate limiter answers 429 with Retry-After once the window is full
    ✅ 429 answers carry the request id, so RequestID wraps the rate limiter
    ✅ Production config check flags default secrets and missing credentials
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from inkpost.config import DEFAULT_JWT_SECRET, Settings, settings
from inkpost.middleware.rate_limit import RateLimitMiddleware
from inkpost.middleware.request_id import RequestIDMiddleware


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_ok(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["uptime_seconds"] >= 0


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, client):
        response = await client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_id_is_echoed_in_header_and_error_body(self, client):
        response = await client.get("/api/v1/blog/bulk", headers={"X-Request-ID": "trace-42"})

        assert response.status_code == 401
        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["request_id"] == "trace-42"


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_429_after_limit(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 2)

        app = FastAPI()
        app.add_middleware(RateLimitMiddleware)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            first = await ac.get("/ping")
            second = await ac.get("/ping")
            third = await ac.get("/ping")

        assert first.status_code == second.status_code == 200
        assert third.status_code == 429
        assert int(third.headers["Retry-After"]) > 0
        assert third.json()["error"] == "rate_limit_exceeded"

    @pytest.mark.asyncio
    async def test_429_carries_request_id(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 1)

        app = FastAPI()
        app.add_middleware(RateLimitMiddleware)
        app.add_middleware(RequestIDMiddleware)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            await ac.get("/ping")
            limited = await ac.get("/ping", headers={"X-Request-ID": "trace-429"})

        assert limited.status_code == 429
        assert limited.headers["X-Request-ID"] == "trace-429"
        assert limited.json()["request_id"] == "trace-429"

    def test_main_app_has_request_id_outside_rate_limit(self):
        from inkpost.main import app

        order = [m.cls for m in app.user_middleware]
        assert order.index(RequestIDMiddleware) < order.index(RateLimitMiddleware)


class TestProductionConfig:

    def test_defaults_are_flagged(self):
        config = Settings(
            jwt_secret=DEFAULT_JWT_SECRET,
            cloudinary_cloud_name="",
            cloudinary_api_key="",
            cloudinary_api_secret="",
        )
        with pytest.raises(ValueError) as exc_info:
            config.validate_required_for_production()

        assert "JWT_SECRET" in str(exc_info.value)
        assert "CLOUDINARY_CLOUD_NAME" in str(exc_info.value)

    def test_complete_config_passes(self):
        config = Settings(
            jwt_secret="a-real-secret-value-for-production-use",
            cloudinary_cloud_name="demo",
            cloudinary_api_key="key",
            cloudinary_api_secret="secret",
        )
        config.validate_required_for_production()

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValueError):
            Settings(log_level="LOUD")

"""Unit tests for middleware."""

import pytest
import structlog
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from api.middleware.request_context import RequestContextMiddleware


def _create_app_with_middleware() -> FastAPI:
    """Create a minimal FastAPI app with the request context middleware."""
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/test")
    async def _():
        return {"ok": True}

    @app.get("/context")
    async def _context(request: Request):
        bound = structlog.contextvars.get_contextvars()
        return {
            "state_id": request.state.request_id,
            "bound_id": bound.get("request_id"),
            "path": bound.get("path"),
        }

    return app


async def _get(path: str, **kwargs):
    app = _create_app_with_middleware()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path, **kwargs)


class TestRequestContextMiddleware:
    @pytest.mark.asyncio
    async def test_generates_request_id_when_not_provided(self):
        response = await _get("/test")

        assert len(response.headers["x-request-id"]) > 0

    @pytest.mark.asyncio
    async def test_propagates_existing_request_id(self):
        response = await _get("/test", headers={"X-Request-ID": "custom-req-123"})

        assert response.headers["x-request-id"] == "custom-req-123"

    @pytest.mark.asyncio
    async def test_generated_ids_differ_between_requests(self):
        app = _create_app_with_middleware()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            r1 = await c.get("/test")
            r2 = await c.get("/test")

        assert r1.headers["x-request-id"] != r2.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_binds_request_id_to_state_and_log_context(self):
        response = await _get("/context", headers={"X-Request-ID": "ctx-1"})

        body = response.json()
        assert body["state_id"] == "ctx-1"
        assert body["bound_id"] == "ctx-1"
        assert body["path"] == "/context"

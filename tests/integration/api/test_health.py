"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient

from api.routes.health import VERSION


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_returns_correct_structure(self, client: AsyncClient) -> None:
        data = (await client.get("/health")).json()

        assert data["status"] == "healthy"
        assert data["version"] == VERSION
        assert "timestamp" in data
        assert "environment" in data

    @pytest.mark.asyncio
    async def test_health_echoes_request_id(self, client: AsyncClient) -> None:
        response = await client.get("/health", headers={"X-Request-ID": "health-1"})

        assert response.headers["x-request-id"] == "health-1"

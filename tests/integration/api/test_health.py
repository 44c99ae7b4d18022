"""Tests for the health endpoints."""

import pytest
from httpx import AsyncClient

from staffdesk import __version__


pytestmark = pytest.mark.integration


async def test_liveness(client: AsyncClient):
    response = await client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "alive"}
    assert "X-Request-ID" in response.headers


async def test_readiness_checks_database(client: AsyncClient):
    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "checks": {"database": "ok"}}


async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/health/live", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


async def test_info_reports_version(client: AsyncClient):
    response = await client.get("/info")

    assert response.json()["version"] == __version__

from unittest.mock import AsyncMock, MagicMock, patch

import pytest


@pytest.mark.asyncio
async def test_health_and_live(client):
    health = await client.get("/health")
    live = await client.get("/live")

    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert live.json()["status"] == "alive"
    assert health.headers["X-Correlation-ID"].startswith("cid_")


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "cid_test"})

    assert response.headers["X-Correlation-ID"] == "cid_test"


@pytest.mark.asyncio
@pytest.mark.parametrize("connected,status_code", [(True, 200), (False, 503)])
async def test_ready_reflects_database(client, connected, status_code):
    manager = MagicMock()
    manager.check_connection = AsyncMock(return_value=connected)
    with patch("memberdesk.infrastructure.api.app.get_db_manager", return_value=manager):
        response = await client.get("/ready")

    assert response.status_code == status_code


@pytest.mark.asyncio
async def test_api_root(client):
    response = await client.get("/api/v1")

    assert response.json()["api_version"] == "v1"

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    """Test basic health check."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"


@pytest.mark.asyncio
async def test_health_ready(client: AsyncClient):
    """Test readiness check reads the rule collection."""
    response = await client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data == {"status": "ready", "rule_count": 0}

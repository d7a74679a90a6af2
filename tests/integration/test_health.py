from unittest.mock import AsyncMock

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from expense_tracker.db.session import get_db
from expense_tracker.main import app


async def test_health(client: AsyncClient):
    """Test basic health check."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    # Every response carries a request id from the logging middleware
    assert response.headers["X-Request-ID"]


async def test_health_ready(client: AsyncClient):
    """Test readiness check with database connection."""
    response = await client.get("/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "database": "connected"}


async def test_health_ready_database_down(client: AsyncClient):
    """A failing database reports 503 without exposing the driver error."""
    broken = AsyncMock()
    broken.execute.side_effect = OperationalError(
        "SELECT 1", {}, Exception("could not connect to db-host:5432 as admin")
    )

    async def override_get_db():
        yield broken

    app.dependency_overrides[get_db] = override_get_db

    response = await client.get("/health/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "not ready", "database": "disconnected"}
    assert "db-host" not in response.text

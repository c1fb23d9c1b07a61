############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# test_error_envelope.py: Integration tests for server error rendering
#
############################################################

"""Integration tests for 500 responses rendered through the error envelope."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from backend.app.core.errors import InternalError


@pytest_asyncio.fixture
async def failing_client():
    from backend.app.main import create_app

    app = create_app()

    async def database_down():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    app.add_api_route("/_test/database-down", database_down)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestDatabaseErrors:
    async def test_rendered_as_internal_error(self, failing_client):
        response = await failing_client.get("/_test/database-down")
        assert response.status_code == InternalError.status_code
        assert response.json() == {"error": {"message": "Database error", "type": "server_error"}}

    async def test_driver_detail_not_leaked(self, failing_client):
        response = await failing_client.get("/_test/database-down")
        assert "connection refused" not in response.text

import pytest


@pytest.mark.asyncio
class TestHealth:
    async def test_service_health(self, test_client):
        response = test_client.get("/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_database_health(self, test_client):
        response = test_client.get("/health/db")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "service": "database",
            "dialect": "sqlite",
        }

    async def test_root(self, test_client):
        assert test_client.get("/").json() == {"message": "VidShare API"}

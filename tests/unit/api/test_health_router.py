"""Unit tests for the health check endpoints."""

from unittest.mock import patch

from fastapi import status


class TestHealthRouter:
    def test_liveness(self, memory_client):
        response = memory_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "healthy"}

    def test_readiness_with_database(self, memory_client):
        response = memory_client.get("/health/ready")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "status": "ready",
            "checks": {"database": {"status": "healthy", "type": "sqlite"}},
        }

    def test_readiness_without_database(self, memory_client, database_service):
        with patch.object(database_service, "health_check", return_value=False):
            response = memory_client.get("/health/ready")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        body = response.json()
        assert body["status"] == "not_ready"
        assert body["checks"]["database"]["status"] == "unhealthy"

"""
Tests for the health check endpoint.
"""

from django.db import DatabaseError
from rest_framework import status


class TestHealthCheck:
    def test_healthy(self, db, client):
        response = client.get("/health/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "cache": "connected",
        }

    def test_database_down_is_503(self, db, client, mocker):
        connection = mocker.patch("core.views.connection")
        connection.cursor.side_effect = DatabaseError("connection refused")

        response = client.get("/health/")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"

    def test_no_authentication_required(self, db, client):
        client.logout()

        assert client.get("/health/").status_code == status.HTTP_200_OK

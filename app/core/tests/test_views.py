"""Tests for infrastructure endpoints: health check and API schema."""

import pytest
from rest_framework import status

from core.openapi import group_auth_endpoints

HEALTH_URL = "/health/"
SCHEMA_URL = "/schema/"


@pytest.mark.django_db
class TestHealthCheck:
    def test_healthy(self, client):
        response = client.get(HEALTH_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "cache": "connected",
        }

    def test_database_down_returns_503(self, client, mocker):
        from django.db import DatabaseError

        mocker.patch(
            "core.views.connection.cursor", side_effect=DatabaseError("down")
        )

        response = client.get(HEALTH_URL)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["database"] == "disconnected"


@pytest.mark.django_db
class TestSchema:
    def test_schema_renders(self, client):
        response = client.get(SCHEMA_URL)

        assert response.status_code == status.HTTP_200_OK


class TestGroupAuthEndpoints:
    def test_token_endpoints_tagged_and_summarized(self):
        result = {
            "paths": {
                "/api/v1/auth/token/refresh/": {
                    "post": {"operationId": "auth_token_refresh_create", "tags": ["auth"]},
                },
            }
        }

        processed = group_auth_endpoints(result, None, None, True)

        operation = processed["paths"]["/api/v1/auth/token/refresh/"]["post"]
        assert operation["tags"] == ["Auth"]
        assert operation["summary"] == "Refresh access token"
        assert any(tag["name"] == "Chat - Messages" for tag in processed["tags"])

"""Integration tests for health checks, error envelopes and middleware."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from pydantic import SecretStr

from vidtube.domain.exceptions import ConfigurationError
from vidtube.infrastructure.api import app as app_module
from vidtube.infrastructure.persistence.database import get_db_manager
from vidtube.infrastructure.persistence.repositories import RefreshTokenRepository


@pytest.mark.asyncio
@pytest.mark.parametrize("path, status", [("/health", "healthy"), ("/live", "alive")])
async def test_health_endpoints(client, path, status):
    res = await client.get(path)

    assert res.status_code == 200
    assert res.json()["status"] == status
    assert res.json()["service"] == "VidTube"


@pytest.mark.asyncio
async def test_readiness_checks_database(client):
    res = await client.get("/ready")
    await get_db_manager().disconnect()

    assert res.status_code == 200
    assert res.json()["database"] == "connected"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/api/v1/users/does-not-exist")

    assert res.status_code == 404
    assert res.json() == {
        "statusCode": 404,
        "message": "Not Found",
        "success": False,
        "errors": [],
    }


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    res = await client.get("/health", headers={"X-Correlation-ID": "cid_test"})
    assert res.headers["x-correlation-id"] == "cid_test"


@pytest.mark.asyncio
async def test_correlation_id_is_generated(client):
    res = await client.get("/health")
    assert res.headers["x-correlation-id"].startswith("cid_")


@pytest.mark.asyncio
async def test_unexpected_error_keeps_correlation_and_cors_headers(
    client, make_user, monkeypatch
):
    await make_user()
    monkeypatch.setattr(
        RefreshTokenRepository,
        "set",
        AsyncMock(side_effect=RuntimeError("database is unavailable")),
    )

    res = await client.post(
        "/api/v1/users/login",
        json={"username": "alice", "password": "Secret1"},
        headers={"X-Correlation-ID": "cid_failure", "Origin": "http://localhost:3000"},
    )

    assert res.status_code == 500
    assert res.json()["message"] == "An unexpected error occurred"
    assert res.headers["x-correlation-id"] == "cid_failure"
    assert res.headers["access-control-allow-origin"] == "http://localhost:3000"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "update, message",
    [
        ({"access_token_secret": None}, "access token secret is not configured"),
        ({"refresh_token_secret": None}, "refresh token secret is not configured"),
        (
            {"refresh_token_secret": SecretStr("test-access-secret")},
            "Access and refresh token secrets must differ",
        ),
    ],
)
async def test_startup_refuses_unusable_token_secrets(settings, monkeypatch, update, message):
    monkeypatch.setattr(app_module, "get_settings", lambda: settings.model_copy(update=update))

    with pytest.raises(ConfigurationError, match=message):
        async with app_module.lifespan(FastAPI()):
            pass

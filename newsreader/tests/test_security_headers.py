"""Tests for security headers, request IDs, and the health check."""

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.fixture
def storage_ok(mocker):
    return mocker.patch(
        "newsreader.main.check_storage_connectivity", return_value=True
    )


@pytest.mark.asyncio
async def test_security_headers_present(mock_settings, storage_ok):
    """Every response includes security headers."""
    from newsreader.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/api/newsreader/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


@pytest.mark.asyncio
async def test_request_id_echoed(mock_settings, storage_ok):
    from newsreader.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get(
            "/api/newsreader/health", headers={"X-Request-ID": "req-123"}
        )

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_health_ok(mock_settings, storage_ok):
    from newsreader.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/api/newsreader/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["checks"] == {"config": "ok", "storage": "ok"}


@pytest.mark.asyncio
async def test_health_degraded_when_storage_down(mock_settings, mocker):
    mocker.patch("newsreader.main.check_storage_connectivity", return_value=False)
    from newsreader.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/api/newsreader/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["checks"]["storage"] == "fail"


@pytest.mark.asyncio
async def test_request_id_generated_when_absent(mock_settings, storage_ok):
    from newsreader.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        first = await client.get("/api/newsreader/health")
        second = await client.get("/api/newsreader/health")

    assert len(first.headers["X-Request-ID"]) == 36
    assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_health_reports_environment(mock_settings, storage_ok):
    mock_settings.environment = "staging"
    from newsreader.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/api/newsreader/health")

    assert response.json()["environment"] == "staging"


def test_app_flags_come_from_environment(monkeypatch):
    from newsreader.config import Settings
    from newsreader.main import app, settings

    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("ENVIRONMENT", "production")

    loaded = Settings()
    assert loaded.debug is True
    assert loaded.environment == "production"
    assert app.debug is settings.debug

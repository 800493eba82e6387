"""Shared fixtures for newsreader tests."""

import pytest


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from newsreader.config import get_settings

    get_settings.cache_clear()

    # 2. Article store container singleton
    import newsreader.services.article_store as store_mod

    store_mod._container_client = None

    # 3. HTTP client singleton
    import newsreader.services.http_client as http_mod

    http_mod._client = None

    # 4. Health check cache
    import newsreader.main as main_mod

    main_mod._health_cache = None


@pytest.fixture
def mock_settings(monkeypatch):
    """Provide a Settings object with safe test defaults."""
    from newsreader.config import Settings, get_settings

    test_settings = Settings(
        azure_storage_account="teststorage",
        azure_storage_container="test-articles",
        managed_identity_client_id="test-client-id",
        admin_api_key="test-admin-key",
        feed_request_timeout=5.0,
    )

    get_settings.cache_clear()
    monkeypatch.setattr("newsreader.config.get_settings", lambda: test_settings)

    # Patch get_settings in every module that imports it directly
    # (from newsreader.config import get_settings creates a local binding that
    # the newsreader.config monkeypatch above does not affect)
    for mod_path in [
        "newsreader.services.article_store",
        "newsreader.services.ingestion.rss",
        "newsreader.routers.admin",
        "newsreader.main",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


@pytest.fixture
def container(monkeypatch):
    """Replace the Azure container client with a MagicMock."""
    from unittest.mock import MagicMock

    mock_container = MagicMock()
    monkeypatch.setattr(
        "newsreader.services.article_store._get_container_client",
        lambda: mock_container,
    )
    return mock_container

"""
Tests for quotum/core/context.py and quotum/utils/logging_config.py

Run with: pytest tests/test_context.py -v
"""

import logging
from unittest.mock import Mock

import pytest
from cryptography.fernet import Fernet

from quotum.core.api.base import AuthExpiredError
from quotum.core.context import CoreContext
from quotum.core.settings_store import API_BASE_URL, PAGINATION_ELLIPSIS_DISTANCE, SettingsStore
from quotum.utils.logging_config import LoggerCategory, LoggingManager


@pytest.fixture
def settings(tmp_path):
    store = SettingsStore(tmp_path / "data.db", encryption_key=Fernet.generate_key())
    store.connect()
    return store


@pytest.fixture
def session():
    session = Mock()
    session.headers = {}
    return session


class TestCoreContext:
    def test_wires_client_from_settings(self, settings, session, stager):
        # ARRANGE
        settings.set_config(API_BASE_URL, "https://dash.example.com/dashboard")
        settings.set_config(PAGINATION_ELLIPSIS_DISTANCE, 3)
        settings.set_api_token("stored-token")

        # ACT
        core = CoreContext(settings=settings, session=session, stager=stager)

        # ASSERT
        assert core.client.base_url == "https://dash.example.com/dashboard"
        assert core.client._auth_headers() == {"Authorization": "Bearer stored-token"}
        assert core.stager is stager
        assert core.posts._ellipsis_distance == 3
        assert core.coin_feed._ellipsis_distance == 3
        assert core.preview_text_length == 120
        core.close()

    def test_unauthorized_clears_stored_token(self, settings, session, stager):
        settings.set_api_token("expired")
        core = CoreContext(settings=settings, session=session, stager=stager)
        response = Mock(status_code=401, ok=False, content=b"")
        response.json.side_effect = ValueError("empty")
        session.request.return_value = response

        with pytest.raises(AuthExpiredError):
            core.posts.load()

        assert settings.api_token is None
        core.close()

    def test_close_releases_resources(self, settings, session, stager):
        core = CoreContext(settings=settings, session=session, stager=stager)
        core.close()
        session.close.assert_called_once_with()
        assert settings.conn is None


class TestLoggingManager:
    def test_defaults_without_settings(self, tmp_path):
        manager = LoggingManager(log_dir=tmp_path)
        assert manager.get_category_level(LoggerCategory.UI) == logging.WARNING
        assert manager.get_category_level(LoggerCategory.API) == logging.INFO

    def test_levels_persist_in_settings(self, tmp_path, settings):
        manager = LoggingManager(log_dir=tmp_path, settings=settings)

        manager.set_category_level(LoggerCategory.API, logging.DEBUG)

        assert settings.get_config("log_level_api") == "DEBUG"
        assert logging.getLogger("quotum.core.api.dashboard").level == logging.DEBUG
        reloaded = LoggingManager(log_dir=tmp_path, settings=settings)
        assert reloaded.get_category_level(LoggerCategory.API) == logging.DEBUG
        logging.getLogger("quotum.core.api.dashboard").setLevel(logging.NOTSET)

    def test_invalid_stored_level_falls_back(self, tmp_path, settings):
        settings.set_config("log_level_core", "LOUD")
        manager = LoggingManager(log_dir=tmp_path, settings=settings)
        assert manager.get_category_level(LoggerCategory.CORE) == logging.INFO

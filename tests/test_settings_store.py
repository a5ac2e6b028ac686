"""
Tests for quotum/core/settings_store.py

Run with: pytest tests/test_settings_store.py -v
"""

from unittest.mock import patch

import pytest
from cryptography.fernet import Fernet

from quotum.core.api.base import DEFAULT_BASE_URL
from quotum.core.settings_store import (
    PAGINATION_ELLIPSIS_DISTANCE,
    PREVIEW_LENGTH,
    SettingsStore,
)


@pytest.fixture
def store(tmp_path):
    """Settings store on a throwaway database, no keyring access"""
    store = SettingsStore(tmp_path / "data.db", encryption_key=Fernet.generate_key())
    yield store
    store.close()


class TestConfig:
    def test_defaults(self, store):
        assert store.api_base_url == DEFAULT_BASE_URL
        assert store.api_token is None
        assert store.preview_text_length == 120
        assert store.ellipsis_distance == 2

    def test_plain_values_round_trip(self, store):
        store.set_config("theme", "dark")
        assert store.get_config("theme") == "dark"

    def test_token_is_encrypted_at_rest(self, store):
        # ACT
        store.set_api_token("secret-token")

        # ASSERT
        row = store.conn.execute("SELECT value, is_encrypted FROM config WHERE key = 'api_token'").fetchone()
        assert row["is_encrypted"] == 1
        assert row["value"] != "secret-token"
        assert store.api_token == "secret-token"

    def test_clear_token(self, store):
        store.set_api_token("secret-token")
        store.clear_api_token()
        assert store.api_token is None

    def test_token_unreadable_with_other_key(self, tmp_path):
        first = SettingsStore(tmp_path / "data.db", encryption_key=Fernet.generate_key())
        first.set_api_token("secret-token")
        first.close()

        second = SettingsStore(tmp_path / "data.db", encryption_key=Fernet.generate_key())
        assert second.api_token is None
        second.close()

    @pytest.mark.parametrize("raw,expected", [("80", 80), ("abc", 120), ("0", 120)])
    def test_preview_length(self, store, raw, expected):
        store.set_config(PREVIEW_LENGTH, raw)
        assert store.preview_text_length == expected

    def test_ellipsis_distance_must_exceed_radius(self, store):
        store.set_config(PAGINATION_ELLIPSIS_DISTANCE, 1)
        assert store.ellipsis_distance == 2
        store.set_config(PAGINATION_ELLIPSIS_DISTANCE, 3)
        assert store.ellipsis_distance == 3


class TestEncryptionKey:
    def test_key_is_read_from_keyring(self, tmp_path):
        key = Fernet.generate_key()
        with patch("quotum.core.settings_store.keyring") as mock_keyring:
            mock_keyring.get_password.return_value = key.decode()
            store = SettingsStore(tmp_path / "data.db")
        assert store._encryption_key == key
        mock_keyring.set_password.assert_not_called()

    def test_missing_key_is_created_and_stored(self, tmp_path):
        with patch("quotum.core.settings_store.keyring") as mock_keyring:
            mock_keyring.get_password.return_value = None
            store = SettingsStore(tmp_path / "data.db")
        mock_keyring.set_password.assert_called_once()
        assert mock_keyring.set_password.call_args.args[2] == store._encryption_key.decode()


"""
Persistent configuration for Quotum Admin.

SQLite-backed key/value store. Secrets (the API token) are encrypted with a
Fernet key kept in the OS credential store.
"""
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

import keyring
from cryptography.fernet import Fernet, InvalidToken

from quotum.core.api.base import DEFAULT_BASE_URL
from quotum.core.grouping import PREVIEW_TEXT_LENGTH
from quotum.core.pagination import ELLIPSIS_DISTANCE, WINDOW_RADIUS

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "QuotumAdmin"
KEYRING_KEY_NAME = "encryption_key"

# Config keys
API_BASE_URL = "api_base_url"
API_TOKEN = "api_token"
PREVIEW_LENGTH = "preview_text_length"
PAGINATION_ELLIPSIS_DISTANCE = "pagination_ellipsis_distance"


def default_data_dir() -> Path:
    return Path.home() / ".quotum-admin"


class SettingsStore:
    """Manages the SQLite config table"""

    def __init__(self, db_path: Optional[Path] = None, encryption_key: Optional[bytes] = None):
        """
        Initialize settings store

        Args:
            db_path: Path to SQLite database file. Defaults to ~/.quotum-admin/data.db
            encryption_key: Fernet key. Read from (or created in) the keyring when omitted.
        """
        if db_path is None:
            db_path = default_data_dir() / "data.db"

        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None
        self._encryption_key = encryption_key or self._get_or_create_encryption_key()

    def _get_or_create_encryption_key(self) -> bytes:
        """
        Retrieve or create the encryption key from the OS credential store

        Returns:
            Fernet encryption key
        """
        try:
            key_str = keyring.get_password(KEYRING_SERVICE, KEYRING_KEY_NAME)
            if key_str:
                return key_str.encode()
        except Exception as e:
            logger.warning(f"Could not retrieve encryption key: {e}")

        key = Fernet.generate_key()
        try:
            keyring.set_password(KEYRING_SERVICE, KEYRING_KEY_NAME, key.decode())
        except Exception as e:
            logger.error(f"Could not store encryption key: {e}")

        return key

    def _encrypt_value(self, value: str) -> str:
        f = Fernet(self._encryption_key)
        return f.encrypt(value.encode()).decode()

    def _decrypt_value(self, encrypted_value: str) -> Optional[str]:
        f = Fernet(self._encryption_key)
        try:
            return f.decrypt(encrypted_value.encode()).decode()
        except InvalidToken:
            # Key rotated or keyring reset: the stored secret is unreadable
            logger.warning("Could not decrypt stored value; ignoring it")
            return None

    def connect(self):
        """Establish database connection"""
        # Workers read the API token off the GUI thread
        self.conn = sqlite3.connect(self.db_path, timeout=30.0, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._initialize_schema()

    def _ensure_connected(self) -> sqlite3.Connection:
        if self.conn is None:
            self.connect()
        return self.conn

    def _initialize_schema(self):
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS config (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                is_encrypted INTEGER DEFAULT 0,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()

    def get_config(self, key: str, default: Any = None) -> Any:
        """
        Retrieve configuration value

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        cursor = self._ensure_connected().cursor()
        cursor.execute("SELECT value, is_encrypted FROM config WHERE key = ?", (key,))

        row = cursor.fetchone()
        if row:
            value = row['value']
            if row['is_encrypted']:
                value = self._decrypt_value(value)
                if value is None:
                    return default
            return value
        return default

    def set_config(self, key: str, value: Any, encrypt: bool = False):
        """
        Set configuration value

        Args:
            key: Configuration key
            value: Configuration value
            encrypt: Whether to encrypt the value
        """
        str_value = str(value)
        if encrypt:
            str_value = self._encrypt_value(str_value)

        conn = self._ensure_connected()
        conn.execute("""
            INSERT OR REPLACE INTO config (key, value, is_encrypted, updated_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
        """, (key, str_value, 1 if encrypt else 0))
        conn.commit()

    def delete_config(self, key: str):
        conn = self._ensure_connected()
        conn.execute("DELETE FROM config WHERE key = ?", (key,))
        conn.commit()

    def _get_int(self, key: str, default: int, minimum: int) -> int:
        raw = self.get_config(key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning(f"Invalid integer for {key}: {raw!r}; using {default}")
            return default
        if value < minimum:
            logger.warning(f"{key}={value} below minimum {minimum}; using {default}")
            return default
        return value

    # ---------------------------------------------------------
    # Typed accessors
    # ---------------------------------------------------------

    @property
    def api_base_url(self) -> str:
        return self.get_config(API_BASE_URL, DEFAULT_BASE_URL)

    @property
    def api_token(self) -> Optional[str]:
        return self.get_config(API_TOKEN)

    def set_api_token(self, token: str):
        self.set_config(API_TOKEN, token, encrypt=True)

    def clear_api_token(self):
        self.delete_config(API_TOKEN)
        logger.info("Stored API token cleared")

    @property
    def preview_text_length(self) -> int:
        return self._get_int(PREVIEW_LENGTH, PREVIEW_TEXT_LENGTH, minimum=1)

    @property
    def ellipsis_distance(self) -> int:
        return self._get_int(PAGINATION_ELLIPSIS_DISTANCE, ELLIPSIS_DISTANCE, minimum=WINDOW_RADIUS + 1)

    def close(self):
        """Close database connection"""
        if self.conn:
            self.conn.close()
            self.conn = None

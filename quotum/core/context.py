from __future__ import annotations

import logging
from typing import Optional

import requests

from quotum.core.api import DashboardClient
from quotum.core.coin_feed import CoinFeedManager
from quotum.core.posts_manager import PostsManager
from quotum.core.preview_staging import PreviewStager, get_preview_stager
from quotum.core.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class CoreContext:
    """
    Shared Core dependencies (settings + client + managers).

    Use a single instance for app lifetime.
    """

    def __init__(
        self,
        *,
        settings: Optional[SettingsStore] = None,
        session: Optional[requests.Session] = None,
        stager: Optional[PreviewStager] = None,
    ):
        self.settings = settings or SettingsStore()

        # Connect early so the client can read its base url and token
        if self.settings.conn is None:
            self.settings.connect()

        self.client = DashboardClient(
            self.settings.api_base_url,
            session=session,
            token_provider=lambda: self.settings.api_token,
            on_unauthorized=self.settings.clear_api_token,
        )
        logger.info(f"Dashboard client created for {self.client.base_url}")

        self.stager = stager or get_preview_stager()
        self.posts = PostsManager(
            self.client,
            self.client,
            ellipsis_distance=self.settings.ellipsis_distance,
        )
        self.coin_feed = CoinFeedManager(self.client, ellipsis_distance=self.settings.ellipsis_distance)

    @property
    def preview_text_length(self) -> int:
        return self.settings.preview_text_length

    def close(self):
        self.client.close()
        self.settings.close()
        logger.info("Core context closed")

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from quotum.core.api.base import BaseAPIClient, MultipartFiles
from quotum.core.content_editor import build_submission, content_json
from quotum.core.dto.content import ContentBlock

logger = logging.getLogger(__name__)


class DashboardClient(BaseAPIClient):
    """
    Posts and coins endpoints of the research dashboard.

    Implements PostsProvider, PostReader and PostsPersistence.
    """

    # ---------------------------------------------------------
    # Reads
    # ---------------------------------------------------------

    def get_posts(self, *, page: int = 1) -> Dict[str, Any]:
        data = self._request("GET", "/posts", params={"page": page})
        return data if isinstance(data, dict) else {}

    def get_coins(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/coins")
        # Some deployments wrap collections in {"data": [...]}
        if isinstance(data, dict):
            data = data.get("data")
        return data if isinstance(data, list) else []

    def get_post(self, post_id: str) -> Dict[str, Any]:
        data = self._request("GET", f"/posts/{post_id}")
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        return data if isinstance(data, dict) else {}

    def get_coin_posts(self, coin_key: str, *, page: int = 1) -> Dict[str, Any]:
        """Published posts of one coin, as served to the public platform."""
        data = self._request("GET", f"/platform/coins/{coin_key}/posts", params={"page": page})
        return data if isinstance(data, dict) else {}

    # ---------------------------------------------------------
    # Writes
    # ---------------------------------------------------------

    def create_post(
        self,
        *,
        title: str,
        coin_id: Optional[str],
        status: str,
        blocks: Sequence[ContentBlock],
    ) -> Any:
        data, files = self._multipart(title, coin_id, status, blocks)
        logger.info(f"Creating post '{title}' with {len(files)} image upload(s)")
        return self._request("POST", "/posts", data=data, files=files)

    def update_post(
        self,
        post_id: str,
        *,
        title: str,
        coin_id: Optional[str],
        status: str,
        blocks: Sequence[ContentBlock],
    ) -> Any:
        data, files = self._multipart(title, coin_id, status, blocks)
        # Multipart bodies cannot be PUT; the backend reads the method override
        data["_method"] = "PUT"
        logger.info(f"Updating post {post_id} with {len(files)} image upload(s)")
        return self._request("POST", f"/posts/{post_id}", data=data, files=files)

    def update_status(self, post_id: str, status: str) -> Any:
        return self._request("PATCH", f"/posts/{post_id}/status", json={"status": status})

    def delete_post(self, post_id: str) -> Any:
        return self._request("DELETE", f"/posts/{post_id}")

    @staticmethod
    def _multipart(
        title: str,
        coin_id: Optional[str],
        status: str,
        blocks: Sequence[ContentBlock],
    ) -> tuple[Dict[str, Any], MultipartFiles]:
        content, images = build_submission(blocks)
        data: Dict[str, Any] = {
            "title": title,
            "coin_id": coin_id or "",
            "status": status,
            "content": content_json(content),
        }
        files: MultipartFiles = [
            (f"images[{i}]", (image.name, image.data, image.mime or "application/octet-stream"))
            for i, image in enumerate(images)
        ]
        return data, files

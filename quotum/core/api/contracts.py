from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from quotum.core.dto.content import ContentBlock


class PostsProvider(Protocol):
    """Supplies posts and coins. The core never fetches on its own."""

    # Paginated envelope: {data, current_page, last_page, per_page, total}
    def get_posts(self, *, page: int = 1) -> Dict[str, Any]:
        ...

    def get_coins(self) -> List[Dict[str, Any]]:
        ...


class PostReader(Protocol):
    """Read-only access for the post viewer and the public coin feed."""

    def get_post(self, post_id: str) -> Dict[str, Any]:
        ...

    # Envelope with at least {data, total, per_page}
    def get_coin_posts(self, coin_key: str, *, page: int = 1) -> Dict[str, Any]:
        ...


class PostsPersistence(Protocol):
    """Receives edit/delete/status intents and owns the canonical records."""

    def create_post(
        self,
        *,
        title: str,
        coin_id: Optional[str],
        status: str,
        blocks: Sequence[ContentBlock],
    ) -> Any:
        ...

    def update_post(
        self,
        post_id: str,
        *,
        title: str,
        coin_id: Optional[str],
        status: str,
        blocks: Sequence[ContentBlock],
    ) -> Any:
        ...

    def update_status(self, post_id: str, status: str) -> Any:
        ...

    def delete_post(self, post_id: str) -> Any:
        ...

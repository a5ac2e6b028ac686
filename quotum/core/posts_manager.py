from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import List, Optional

from quotum.core.api.contracts import PostsPersistence, PostsProvider
from quotum.core.dto.pagination import PaginationDescriptor
from quotum.core.dto.post import (
    CoinDTO,
    PostDraft,
    PostDTO,
    PostsPageDTO,
    PostStatus,
    coins_from_raw,
    posts_page_from_raw,
)
from quotum.core.grouping import GroupedPosts, group_by_date
from quotum.core.pagination import ELLIPSIS_DISTANCE, WindowPlan, compute_window

logger = logging.getLogger(__name__)


class PostsManager:
    """
    Domain manager for the admin post feed.

    Guarantees:
    - Holds the current page, its pagination descriptor and the coin list
    - Only requests pages inside 1..last_page
    - Returns DTOs only
    - Zero UI logic

    Collaborator failures (APIError) propagate to the caller untouched.
    """

    def __init__(
        self,
        provider: PostsProvider,
        persistence: PostsPersistence,
        *,
        ellipsis_distance: int = ELLIPSIS_DISTANCE,
        tz: Optional[tzinfo] = None,
    ):
        self._provider = provider
        self._persistence = persistence
        self._ellipsis_distance = ellipsis_distance
        self._tz = tz
        self._page = PostsPageDTO()
        self._coins: List[CoinDTO] = []

    # ---------------------------------------------------------
    # State
    # ---------------------------------------------------------

    @property
    def posts(self) -> List[PostDTO]:
        return list(self._page.posts)

    @property
    def coins(self) -> List[CoinDTO]:
        return list(self._coins)

    @property
    def pagination(self) -> PaginationDescriptor:
        return self._page.pagination

    def grouped(self) -> GroupedPosts:
        """Posts bucketed by calendar day in the viewer's timezone."""
        tz = self._tz or datetime.now().astimezone().tzinfo
        return group_by_date(self._page.posts, tz=tz)

    def window(self) -> WindowPlan:
        return compute_window(self._page.pagination, ellipsis_distance=self._ellipsis_distance)

    # ---------------------------------------------------------
    # Fetch
    # ---------------------------------------------------------

    def load(self, page: int = 1) -> PostsPageDTO:
        """Fetch one page of posts together with the coin list."""
        raw_posts = self._provider.get_posts(page=page)
        raw_coins = self._provider.get_coins()

        self._page = posts_page_from_raw(raw_posts)
        self._coins = coins_from_raw(raw_coins)
        logger.info(
            f"Loaded page {self._page.pagination.current_page}/{self._page.pagination.last_page}: "
            f"{len(self._page.posts)} post(s), {len(self._coins)} coin(s)"
        )
        return self._page

    def reload(self) -> PostsPageDTO:
        return self.load(self._page.pagination.current_page)

    def change_page(self, target: int) -> Optional[PostsPageDTO]:
        """Load ``target`` if it is a valid page; out-of-range targets are ignored."""
        last_page = self._page.pagination.last_page
        if not isinstance(target, int) or not 1 <= target <= last_page:
            logger.debug(f"Ignoring page change to {target!r} (valid: 1..{last_page})")
            return None
        return self.load(target)

    # ---------------------------------------------------------
    # Intents
    # ---------------------------------------------------------

    def delete_post(self, post_id: str) -> PostsPageDTO:
        logger.info(f"Deleting post {post_id}")
        self._persistence.delete_post(post_id)
        return self.reload()

    def update_status(self, post_id: str, status: PostStatus | str) -> PostsPageDTO:
        status = PostStatus.parse(status)
        logger.info(f"Changing status of post {post_id} to {status.value}")
        self._persistence.update_status(post_id, status.value)
        return self.reload()

    def save(self, draft: PostDraft, editing_id: Optional[str] = None) -> PostsPageDTO:
        """Create a post, or update ``editing_id`` when given, then refresh the page."""
        kwargs = dict(
            title=draft.title,
            coin_id=draft.coin_id,
            status=PostStatus.parse(draft.status).value,
            blocks=draft.content,
        )
        if editing_id is None:
            self._persistence.create_post(**kwargs)
        else:
            self._persistence.update_post(editing_id, **kwargs)
        return self.reload()

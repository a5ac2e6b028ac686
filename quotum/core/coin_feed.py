from __future__ import annotations

import logging
from typing import List, Optional

from quotum.core.api.contracts import PostReader
from quotum.core.dto.pagination import PaginationDescriptor
from quotum.core.dto.post import PostDTO, PostsPageDTO, post_detail_from_raw, posts_page_from_raw
from quotum.core.pagination import ELLIPSIS_DISTANCE, WindowPlan, compute_window

logger = logging.getLogger(__name__)


class CoinFeedManager:
    """
    Read-only feed of one coin's published posts, plus single-post lookups.

    Pages past the known last page are never requested. Reader failures
    (APIError) propagate to the caller.
    """

    def __init__(self, reader: PostReader, *, ellipsis_distance: int = ELLIPSIS_DISTANCE):
        self._reader = reader
        self._ellipsis_distance = ellipsis_distance
        self._coin_key: Optional[str] = None
        self._page = PostsPageDTO()

    @property
    def coin_key(self) -> Optional[str]:
        return self._coin_key

    @property
    def posts(self) -> List[PostDTO]:
        return list(self._page.posts)

    @property
    def pagination(self) -> PaginationDescriptor:
        return self._page.pagination

    def window(self) -> WindowPlan:
        return compute_window(self._page.pagination, ellipsis_distance=self._ellipsis_distance)

    def load(self, coin_key: str, page: int = 1) -> PostsPageDTO:
        raw = self._reader.get_coin_posts(coin_key, page=page)
        page_dto = posts_page_from_raw(raw)
        # The platform envelope carries no current_page
        if page_dto.pagination.current_page != page and 1 <= page <= page_dto.pagination.last_page:
            pagination = page_dto.pagination
            page_dto = PostsPageDTO(
                posts=page_dto.posts,
                pagination=PaginationDescriptor(
                    current_page=page,
                    last_page=pagination.last_page,
                    per_page=pagination.per_page,
                    total=pagination.total,
                ),
            )
        self._coin_key = coin_key
        self._page = page_dto
        logger.info(
            f"Loaded coin '{coin_key}' page {page_dto.pagination.current_page}/"
            f"{page_dto.pagination.last_page}: {len(page_dto.posts)} post(s)"
        )
        return page_dto

    def change_page(self, target: int) -> Optional[PostsPageDTO]:
        """Load ``target`` of the current coin; out-of-range targets are ignored."""
        last_page = self._page.pagination.last_page
        if self._coin_key is None or not isinstance(target, int) or not 1 <= target <= last_page:
            logger.debug(f"Ignoring coin feed page change to {target!r} (valid: 1..{last_page})")
            return None
        return self.load(self._coin_key, target)

    def get_post(self, post_id: str) -> Optional[PostDTO]:
        """Fetch one post; None when the response holds no usable record."""
        post = post_detail_from_raw(self._reader.get_post(post_id))
        if post is None:
            logger.info(f"Post {post_id} not found")
        return post

"""
Background worker threads for the post windows.

Each worker runs one PostsManager or CoinFeedManager call off the GUI
thread and reports the result back through its signals. Tokens let the window drop
results from workers it no longer waits for.
"""
from PyQt6.QtCore import QThread, pyqtSignal
from typing import Optional
import logging

from quotum.core.api.base import APIError
from quotum.core.dto.post import PostDraft

logger = logging.getLogger(__name__)


class PostAction:
    LOAD = "load"
    CHANGE_PAGE = "change_page"
    DELETE = "delete"
    STATUS = "status"
    CREATE = "create"
    UPDATE = "update"
    COIN_POSTS = "coin_posts"
    COIN_PAGE = "coin_page"
    DETAIL = "detail"


class _PostsWorkerBase(QThread):
    """
    Signals:
        loaded(token, action, result): PostsPageDTO after the call, PostDTO for a
            detail fetch (None if nothing changed or the post was not found)
        failed(token, action, server_message): Emitted on failure; the message is the
            server-provided error text, or empty
    """
    loaded = pyqtSignal(int, str, object)
    failed = pyqtSignal(int, str, str)

    action = PostAction.LOAD

    def __init__(self, *, token: int, posts_manager):
        super().__init__()
        self._token = token
        self._posts_manager = posts_manager
        self._cancelled = False

    @property
    def token(self) -> int:
        """Get the worker's token for identifying responses."""
        return self._token

    def cancel(self) -> None:
        """Cancel the worker. Safe to call multiple times."""
        self._cancelled = True

    def _call(self):
        raise NotImplementedError

    def run(self) -> None:
        try:
            page = self._call()
            if self._cancelled:
                return
            self.loaded.emit(self._token, self.action, page)
        except APIError as e:
            logger.error(f"Post {self.action} failed: {e}")
            if not self._cancelled:
                self.failed.emit(self._token, self.action, e.server_message or "")
        except Exception as e:
            logger.exception(f"Unexpected error during post {self.action}: {e}")
            if not self._cancelled:
                self.failed.emit(self._token, self.action, "")


class PostsLoadWorker(_PostsWorkerBase):
    """Loads a page of posts (and the coin list), or switches to another page."""

    def __init__(self, *, token: int, posts_manager, page: int = 1, change_page: bool = False):
        super().__init__(token=token, posts_manager=posts_manager)
        self._page = page
        self._change_page = change_page
        self.action = PostAction.CHANGE_PAGE if change_page else PostAction.LOAD

    def _call(self):
        if self._change_page:
            return self._posts_manager.change_page(self._page)
        return self._posts_manager.load(self._page)


class PostActionWorker(_PostsWorkerBase):
    """Runs one mutation (delete, status change, create, update) and refreshes the page."""

    def __init__(
        self,
        *,
        token: int,
        posts_manager,
        action: str,
        post_id: Optional[str] = None,
        status: Optional[str] = None,
        draft: Optional[PostDraft] = None,
    ):
        super().__init__(token=token, posts_manager=posts_manager)
        self.action = action
        self._post_id = post_id
        self._status = status
        self._draft = draft

    def _call(self):
        if self.action == PostAction.DELETE:
            return self._posts_manager.delete_post(self._post_id)
        if self.action == PostAction.STATUS:
            return self._posts_manager.update_status(self._post_id, self._status)
        if self.action == PostAction.CREATE:
            return self._posts_manager.save(self._draft)
        if self.action == PostAction.UPDATE:
            return self._posts_manager.save(self._draft, editing_id=self._post_id)
        raise ValueError(f"unknown post action: {self.action}")


class CoinPostsWorker(_PostsWorkerBase):
    """Loads one page of a coin's public feed through a CoinFeedManager."""

    def __init__(self, *, token: int, coin_feed, coin_key: Optional[str] = None,
                 page: int = 1, change_page: bool = False):
        super().__init__(token=token, posts_manager=coin_feed)
        self._coin_key = coin_key
        self._page = page
        self._change_page = change_page
        self.action = PostAction.COIN_PAGE if change_page else PostAction.COIN_POSTS

    def _call(self):
        if self._change_page:
            return self._posts_manager.change_page(self._page)
        return self._posts_manager.load(self._coin_key, self._page)


class PostDetailWorker(_PostsWorkerBase):
    """Fetches a single post; emits None when the post does not exist."""

    action = PostAction.DETAIL

    def __init__(self, *, token: int, coin_feed, post_id: str):
        super().__init__(token=token, posts_manager=coin_feed)
        self._post_id = post_id

    def _call(self):
        return self._posts_manager.get_post(self._post_id)

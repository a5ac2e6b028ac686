"""
Post management window.

Header with "Create New Post", an error banner, the create/edit form, the
date-grouped post list and the admin pagination. Every call to the
PostsManager runs on a worker; while one is in flight new intents are
ignored.
"""
from PyQt6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
                             QPushButton, QScrollArea, QFrame, QMessageBox, QInputDialog,
                             QLineEdit)
from PyQt6.QtCore import Qt
import logging
from typing import Callable, Optional
import qtawesome as qta

from quotum.core.dto.post import PostDraft, PostDTO
from quotum.core.grouping import PREVIEW_TEXT_LENGTH
from quotum.core.preview_staging import PreviewStager
from quotum.ui.common.pagination_widgets import AdminPagination
from quotum.ui.common.theme import Colors, Fonts, Spacing, Styles
from quotum.ui.editor.post_form import PostForm
from quotum.ui.posts.post_workers import PostAction, PostActionWorker, PostsLoadWorker
from quotum.ui.posts.posts_list import PostsList

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Post Management"
DELETE_CONFIRMATION = "Are you sure you want to delete this post?"

ERROR_MESSAGES = {
    PostAction.LOAD: "Failed to load data. Please try again.",
    PostAction.CHANGE_PAGE: "Failed to load data. Please try again.",
    PostAction.DELETE: "Failed to delete post. Please try again.",
    PostAction.STATUS: "Failed to update status.",
    PostAction.CREATE: "Failed to create post.",
    PostAction.UPDATE: "Failed to update post.",
}

# Save failures prefer the server's own explanation
SERVER_MESSAGE_ACTIONS = {PostAction.CREATE, PostAction.UPDATE}


class PostManagementWindow(QMainWindow):
    def __init__(
        self,
        posts_manager,
        *,
        stager: Optional[PreviewStager] = None,
        preview_text_length: int = PREVIEW_TEXT_LENGTH,
        image_loader=None,
        token_setter: Optional[Callable[[str], None]] = None,
        coin_feed=None,
        parent=None,
    ):
        super().__init__(parent)
        self._posts_manager = posts_manager
        self._token_setter = token_setter
        self._coin_feed = coin_feed
        self._image_loader = image_loader
        self.feed_window = None
        self._worker = None
        self._worker_token = 0

        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1100, 860)
        self._setup_ui(stager, preview_text_length, image_loader)

    def _setup_ui(self, stager, preview_text_length, image_loader):
        central = QWidget()
        central.setStyleSheet(f"background-color: {Colors.BG_PRIMARY};")
        self.setCentralWidget(central)

        root = QVBoxLayout(central)
        root.setContentsMargins(Spacing.XL, Spacing.XL, Spacing.XL, Spacing.LG)
        root.setSpacing(Spacing.LG)

        # Header
        header = QHBoxLayout()
        title = QLabel(WINDOW_TITLE)
        title.setStyleSheet(Styles.label(size=Fonts.SIZE_TITLE, weight=Fonts.WEIGHT_BOLD))
        header.addWidget(title)
        header.addStretch()

        if self._token_setter is not None:
            self.token_btn = QPushButton()
            self.token_btn.setIcon(qta.icon('fa5s.key', color=Colors.ICON_DEFAULT))
            self.token_btn.setToolTip("Set API token")
            self.token_btn.setStyleSheet(Styles.button_icon())
            self.token_btn.clicked.connect(self._prompt_token)
            header.addWidget(self.token_btn)

        if self._coin_feed is not None:
            self.feed_btn = QPushButton(" Research Feed")
            self.feed_btn.setIcon(qta.icon('fa5s.book-open', color=Colors.TEXT_BODY))
            self.feed_btn.setStyleSheet(Styles.button_secondary())
            self.feed_btn.setCursor(Qt.CursorShape.PointingHandCursor)
            self.feed_btn.clicked.connect(self.show_coin_feed)
            header.addWidget(self.feed_btn)

        self.create_btn = QPushButton(" Create New Post")
        self.create_btn.setIcon(qta.icon('fa5s.plus', color=Colors.TEXT_WHITE))
        self.create_btn.setStyleSheet(Styles.button_primary())
        self.create_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.create_btn.clicked.connect(self.show_create_form)
        header.addWidget(self.create_btn)
        root.addLayout(header)

        self.error_banner = QLabel("")
        self.error_banner.setObjectName("errorBanner")
        self.error_banner.setStyleSheet(Styles.ERROR_BANNER)
        self.error_banner.setWordWrap(True)
        self.error_banner.setVisible(False)
        root.addWidget(self.error_banner)

        self.loading_label = QLabel("Loading...")
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.loading_label.setStyleSheet(Styles.label(color=Colors.TEXT_SECONDARY))
        self.loading_label.setVisible(False)
        root.addWidget(self.loading_label)

        # Form and list share one scroll area
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        content = QWidget()
        content_layout = QVBoxLayout(content)
        content_layout.setContentsMargins(0, 0, Spacing.SM, 0)
        content_layout.setSpacing(Spacing.XL)

        self.form = PostForm(stager=stager, image_loader=image_loader)
        self.form.setVisible(False)
        self.form.submitted.connect(self._on_form_submitted)
        self.form.cancelled.connect(self.hide_form)
        content_layout.addWidget(self.form)

        self.posts_list = PostsList(preview_text_length=preview_text_length, image_loader=image_loader)
        self.posts_list.edit_requested.connect(self._on_edit_requested)
        self.posts_list.delete_requested.connect(self._on_delete_requested)
        self.posts_list.status_change_requested.connect(self._on_status_change_requested)
        content_layout.addWidget(self.posts_list)
        content_layout.addStretch()

        scroll.setWidget(content)
        root.addWidget(scroll, 1)

        self.pagination = AdminPagination()
        self.pagination.page_changed.connect(self._on_page_changed)
        root.addWidget(self.pagination)

    # ---------------------------------------------------------
    # Public API
    # ---------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self._worker is not None

    def load(self, page: int = 1):
        self._start(PostsLoadWorker(token=self._next_token(), posts_manager=self._posts_manager, page=page))

    def show_create_form(self):
        self.form.start_create()
        self._set_form_visible(True)

    def hide_form(self):
        self.form.reset()
        self._set_form_visible(False)

    def show_coin_feed(self):
        """Open the read-only per-coin feed, starting on the first coin."""
        coins = self._posts_manager.coins
        if self.feed_window is None:
            from quotum.ui.viewer.coin_posts import CoinPostsWindow
            self.feed_window = CoinPostsWindow(self._coin_feed, coins, image_loader=self._image_loader)
        else:
            self.feed_window.set_coins(coins)
        self.feed_window.show()
        self.feed_window.raise_()
        if coins and self._coin_feed.coin_key is None:
            self.feed_window.load_coin(coins[0].feed_key)

    def render(self):
        """Re-render list, pagination and coin choices from the manager state."""
        coins = self._posts_manager.coins
        self.posts_list.set_posts(self._posts_manager.grouped(), coins)
        self.pagination.set_plan(self._posts_manager.window())
        self.form.set_coins(coins)

    def show_error(self, message: Optional[str]):
        self.error_banner.setText(message or "")
        self.error_banner.setVisible(bool(message))

    def confirm_delete(self) -> bool:
        answer = QMessageBox.question(
            self, "Delete post", DELETE_CONFIRMATION,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return answer == QMessageBox.StandardButton.Yes

    # ---------------------------------------------------------
    # Intents
    # ---------------------------------------------------------

    def _on_page_changed(self, page: int):
        self._start(PostsLoadWorker(token=self._next_token(), posts_manager=self._posts_manager,
                                    page=page, change_page=True))

    def _on_edit_requested(self, post: PostDTO):
        self.form.start_edit(post)
        self._set_form_visible(True)

    def _on_delete_requested(self, post_id: str):
        if self.is_busy or not self.confirm_delete():
            return
        self._start(PostActionWorker(token=self._next_token(), posts_manager=self._posts_manager,
                                     action=PostAction.DELETE, post_id=post_id))

    def _on_status_change_requested(self, post_id: str, status: str):
        self._start(PostActionWorker(token=self._next_token(), posts_manager=self._posts_manager,
                                     action=PostAction.STATUS, post_id=post_id, status=status))

    def _on_form_submitted(self, draft: PostDraft):
        editing_id = self.form.editing_id
        action = PostAction.CREATE if editing_id is None else PostAction.UPDATE
        self._start(PostActionWorker(token=self._next_token(), posts_manager=self._posts_manager,
                                     action=action, post_id=editing_id, draft=draft))

    def _prompt_token(self):
        token, ok = QInputDialog.getText(self, "API token", "Bearer token:", QLineEdit.EchoMode.Password)
        if ok and token.strip():
            self._token_setter(token.strip())
            logger.info("API token updated")
            self.load(self._posts_manager.pagination.current_page)

    # ---------------------------------------------------------
    # Worker plumbing
    # ---------------------------------------------------------

    def _next_token(self) -> int:
        self._worker_token += 1
        return self._worker_token

    def _start(self, worker) -> bool:
        if self.is_busy:
            logger.debug(f"Ignoring {worker.action}: another request is in flight")
            return False
        self._worker = worker
        worker.loaded.connect(self._on_worker_loaded)
        worker.failed.connect(self._on_worker_failed)
        worker.finished.connect(worker.deleteLater)
        self._set_busy(True)
        worker.start()
        return True

    def _finish(self, token: int) -> bool:
        if self._worker is None or token != self._worker.token:
            return False
        self._worker = None
        self._set_busy(False)
        return True

    def _on_worker_loaded(self, token: int, action: str, page):
        if not self._finish(token):
            return
        if page is None:
            return
        self.show_error(None)
        if action in (PostAction.CREATE, PostAction.UPDATE):
            self.hide_form()
        self.render()

    def _on_worker_failed(self, token: int, action: str, server_message: str):
        if not self._finish(token):
            return
        message = ERROR_MESSAGES.get(action, ERROR_MESSAGES[PostAction.LOAD])
        if action in SERVER_MESSAGE_ACTIONS and server_message:
            message = server_message
        self.show_error(message)
        if action == PostAction.STATUS:
            # Put the card's selector back to the stored status
            self.render()

    def _set_busy(self, busy: bool):
        self.loading_label.setVisible(busy and not self.form.isVisibleTo(self))
        self.posts_list.setEnabled(not busy)
        self.pagination.setEnabled(not busy)
        self.form.submit_btn.setEnabled(not busy)

    def _set_form_visible(self, visible: bool):
        self.form.setVisible(visible)
        self.create_btn.setVisible(not visible)

    def closeEvent(self, event):
        if self._worker is not None:
            self._worker.cancel()
            self._worker.wait(3000)
            self._worker = None
        # Release staged previews of an unsaved form
        self.form.reset()
        if self.feed_window is not None:
            self.feed_window.close()
        super().closeEvent(event)

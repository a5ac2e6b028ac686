"""
Public research feed for one coin.

A coin selector, the coin's published posts as teaser cards with a
"Read more" link, and the default-styled pagination. "Read more" swaps the
list for the PostDetailView; Back returns to the same page of the feed.
All CoinFeedManager calls run on workers, one at a time.
"""
from PyQt6.QtWidgets import (QMainWindow, QWidget, QFrame, QVBoxLayout, QHBoxLayout, QLabel,
                             QPushButton, QComboBox, QScrollArea, QStackedWidget)
from PyQt6.QtCore import Qt, pyqtSignal
import logging
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from quotum.core.dto.post import CoinDTO, PostDTO
from quotum.core.grouping import date_key_for, format_date_heading, teaser_text
from quotum.ui.common.pagination_widgets import DefaultPagination
from quotum.ui.common.theme import Colors, Fonts, Spacing, Styles
from quotum.ui.posts.post_workers import CoinPostsWorker, PostAction, PostDetailWorker
from quotum.ui.viewer.post_detail import PostDetailView

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Research Feed"
FEED_ERROR = "Failed to load posts"
EMPTY_FEED_TEXT = "No posts for this coin yet."
READ_MORE_TEXT = "Read more"


class FeedPostCard(QFrame):
    """
    Teaser card: title, first text snippet, date and a "Read more" link.

    Signals:
        read_more(post_id): Emitted when "Read more" is clicked
    """

    read_more = pyqtSignal(str)

    def __init__(self, post: PostDTO, *, tz: Optional[tzinfo] = None, parent=None):
        super().__init__(parent)
        self.post = post
        self.setObjectName("postCard")
        self.setStyleSheet(Styles.CARD)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(Spacing.XL, Spacing.XL, Spacing.XL, Spacing.XL)
        layout.setSpacing(Spacing.SM)

        self.title_label = QLabel(post.title)
        self.title_label.setWordWrap(True)
        self.title_label.setStyleSheet(Styles.label(size=Fonts.SIZE_XL, weight=Fonts.WEIGHT_SEMIBOLD))
        layout.addWidget(self.title_label)

        self.teaser_label = QLabel(teaser_text(post.content))
        self.teaser_label.setWordWrap(True)
        self.teaser_label.setStyleSheet(Styles.label(color=Colors.TEXT_BODY, size=Fonts.SIZE_MD))
        layout.addWidget(self.teaser_label)

        footer = QHBoxLayout()
        key = date_key_for(post.created_at, tz)
        self.date_label = QLabel(format_date_heading(key) if key else "")
        self.date_label.setStyleSheet(Styles.label(color=Colors.TEXT_SECONDARY, size=Fonts.SIZE_SM))
        footer.addWidget(self.date_label)
        footer.addStretch()

        self.read_more_btn = QPushButton(READ_MORE_TEXT)
        self.read_more_btn.setFlat(True)
        self.read_more_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.read_more_btn.setStyleSheet(
            f"QPushButton {{ color: {Colors.ACCENT_FOCUS}; border: none; background: transparent; }}"
            f"QPushButton:hover {{ color: {Colors.TEXT_PRIMARY}; }}"
        )
        self.read_more_btn.clicked.connect(lambda: self.read_more.emit(self.post.id))
        footer.addWidget(self.read_more_btn)
        layout.addLayout(footer)


class CoinPostsWindow(QMainWindow):
    LIST_PAGE = 0
    DETAIL_PAGE = 1

    def __init__(
        self,
        coin_feed,
        coins: Sequence[CoinDTO] = (),
        *,
        image_loader=None,
        tz: Optional[tzinfo] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._coin_feed = coin_feed
        self._tz = tz or datetime.now().astimezone().tzinfo
        self._worker = None
        self._worker_token = 0
        self.cards: List[FeedPostCard] = []

        self.setWindowTitle(WINDOW_TITLE)
        self.resize(900, 820)
        self._setup_ui(image_loader)
        self.set_coins(coins)

    def _setup_ui(self, image_loader):
        central = QWidget()
        central.setStyleSheet(f"background-color: {Colors.BG_PRIMARY};")
        self.setCentralWidget(central)

        root = QVBoxLayout(central)
        root.setContentsMargins(Spacing.XL, Spacing.XL, Spacing.XL, Spacing.LG)
        root.setSpacing(Spacing.LG)

        header = QHBoxLayout()
        title = QLabel("Latest Posts")
        title.setStyleSheet(Styles.label(size=Fonts.SIZE_TITLE, weight=Fonts.WEIGHT_BOLD))
        header.addWidget(title)
        header.addStretch()
        self.coin_combo = QComboBox()
        self.coin_combo.setStyleSheet(Styles.INPUT)
        self.coin_combo.setMinimumWidth(220)
        self.coin_combo.activated.connect(self._on_coin_selected)
        header.addWidget(self.coin_combo)
        root.addLayout(header)

        self.error_banner = QLabel("")
        self.error_banner.setObjectName("errorBanner")
        self.error_banner.setStyleSheet(Styles.ERROR_BANNER)
        self.error_banner.setWordWrap(True)
        self.error_banner.setVisible(False)
        root.addWidget(self.error_banner)

        self.stack = QStackedWidget()
        root.addWidget(self.stack, 1)

        # Feed page
        feed_page = QWidget()
        feed_layout = QVBoxLayout(feed_page)
        feed_layout.setContentsMargins(0, 0, 0, 0)
        feed_layout.setSpacing(Spacing.LG)

        self.loading_label = QLabel("Loading...")
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.loading_label.setStyleSheet(Styles.label(color=Colors.TEXT_SECONDARY))
        self.loading_label.setVisible(False)
        feed_layout.addWidget(self.loading_label)

        self.empty_label = QLabel(EMPTY_FEED_TEXT)
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setStyleSheet(Styles.label(color=Colors.TEXT_SECONDARY, size=Fonts.SIZE_XL))
        self.empty_label.setVisible(False)
        feed_layout.addWidget(self.empty_label)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        cards_host = QWidget()
        self._cards_layout = QVBoxLayout(cards_host)
        self._cards_layout.setContentsMargins(0, 0, Spacing.SM, 0)
        self._cards_layout.setSpacing(Spacing.XL)
        self._cards_layout.addStretch()
        scroll.setWidget(cards_host)
        feed_layout.addWidget(scroll, 1)

        self.pagination = DefaultPagination()
        self.pagination.page_changed.connect(self._on_page_changed)
        feed_layout.addWidget(self.pagination)
        self.stack.addWidget(feed_page)

        # Detail page
        self.detail_view = PostDetailView(image_loader=image_loader, tz=self._tz)
        self.detail_view.back_clicked.connect(self.show_feed)
        self.stack.addWidget(self.detail_view)

    # ---------------------------------------------------------
    # Public API
    # ---------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self._worker is not None

    def set_coins(self, coins: Sequence[CoinDTO]):
        current = self.coin_combo.currentData()
        self.coin_combo.clear()
        for coin in coins:
            self.coin_combo.addItem(coin.display_name, coin.feed_key)
        if current is not None:
            self.coin_combo.setCurrentIndex(max(self.coin_combo.findData(current), 0))

    def load_coin(self, coin_key: str, page: int = 1):
        index = self.coin_combo.findData(coin_key)
        if index >= 0:
            self.coin_combo.setCurrentIndex(index)
        self.show_feed()
        self._start(CoinPostsWorker(token=self._next_token(), coin_feed=self._coin_feed,
                                    coin_key=coin_key, page=page))

    def open_post(self, post_id: str):
        if self.is_busy:
            return
        self.show_error(None)
        self.detail_view.show_loading()
        self.stack.setCurrentIndex(self.DETAIL_PAGE)
        self._start(PostDetailWorker(token=self._next_token(), coin_feed=self._coin_feed, post_id=post_id))

    def show_feed(self):
        self.stack.setCurrentIndex(self.LIST_PAGE)

    def render(self):
        """Re-render the cards and pagination from the feed state."""
        self.setUpdatesEnabled(False)
        try:
            self._clear_cards()
            posts = self._coin_feed.posts
            for position, post in enumerate(posts):
                card = FeedPostCard(post, tz=self._tz)
                card.read_more.connect(self.open_post)
                self._cards_layout.insertWidget(position, card)
                self.cards.append(card)
            self.empty_label.setVisible(not posts)
            self.pagination.set_plan(self._coin_feed.window())
        finally:
            self.setUpdatesEnabled(True)

    def show_error(self, message: Optional[str]):
        self.error_banner.setText(message or "")
        self.error_banner.setVisible(bool(message))

    # ---------------------------------------------------------
    # Intents
    # ---------------------------------------------------------

    def _on_coin_selected(self, index: int):
        coin_key = self.coin_combo.itemData(index)
        if coin_key:
            self.load_coin(coin_key)

    def _on_page_changed(self, page: int):
        self._start(CoinPostsWorker(token=self._next_token(), coin_feed=self._coin_feed,
                                    page=page, change_page=True))

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

    def _on_worker_loaded(self, token: int, action: str, result):
        if not self._finish(token):
            return
        if action == PostAction.DETAIL:
            self.detail_view.set_post(result)
            return
        if result is None:
            return
        self.show_error(None)
        self.render()

    def _on_worker_failed(self, token: int, action: str, server_message: str):
        if not self._finish(token):
            return
        if action == PostAction.DETAIL:
            self.detail_view.show_error(server_message or None)
            return
        self.show_error(FEED_ERROR)

    def _set_busy(self, busy: bool):
        self.loading_label.setVisible(busy and self.stack.currentIndex() == self.LIST_PAGE)
        self.coin_combo.setEnabled(not busy)
        self.pagination.setEnabled(not busy)

    def _clear_cards(self):
        for card in self.cards:
            self._cards_layout.removeWidget(card)
            card.deleteLater()
        self.cards.clear()

    def closeEvent(self, event):
        if self._worker is not None:
            self._worker.cancel()
            self._worker.wait(3000)
            self._worker = None
        super().closeEvent(event)

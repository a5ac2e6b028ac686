"""
PostCard widget for one post in the admin feed.

Shows the first persisted image as a thumbnail, the title, a text preview,
the status selector, the coin name and a relative creation time. The card
never changes anything itself; it emits edit, delete and status intents.
"""
from PyQt6.QtWidgets import QFrame, QHBoxLayout, QVBoxLayout, QLabel, QPushButton, QComboBox
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QPixmap
import logging
from datetime import datetime
from typing import Optional, Sequence
import qtawesome as qta

from quotum.core.dto.post import CoinDTO, PostDTO, PostStatus, resolve_coin_name
from quotum.core.grouping import PREVIEW_TEXT_LENGTH, extract_preview, format_relative_time
from quotum.ui.common.theme import Colors, Fonts, Spacing, Styles
from quotum.ui.common.utils import elide, fix_image_url
from quotum.ui.images.image_utils import scale_and_crop_pixmap

logger = logging.getLogger(__name__)

POST_TITLE_MAX_CHARS = 80  # Max chars for post title display


class PostCard(QFrame):
    """
    Card for a single post.

    Signals:
        edit_requested(post): Edit pressed
        delete_requested(post_id): Delete pressed
        status_change_requested(post_id, status): Status selector changed
    """

    edit_requested = pyqtSignal(object)
    delete_requested = pyqtSignal(str)
    status_change_requested = pyqtSignal(str, str)

    def __init__(
        self,
        post: PostDTO,
        coins: Sequence[CoinDTO] = (),
        *,
        preview_text_length: int = PREVIEW_TEXT_LENGTH,
        image_loader=None,
        now: Optional[datetime] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.post = post
        self.setObjectName("postCard")
        self._image_loader = image_loader
        self._preview = extract_preview(post.content, max_length=preview_text_length)
        self._image_url = fix_image_url(self._preview.image_url)
        self._coin_name = resolve_coin_name(post.coin_id, coins)
        self._now = now

        self._setup_ui()
        if self._image_url:
            self._load_thumbnail()

    def _setup_ui(self):
        self.setStyleSheet(Styles.CARD)
        row = QHBoxLayout(self)
        row.setContentsMargins(Spacing.LG, Spacing.LG, Spacing.LG, Spacing.LG)
        row.setSpacing(Spacing.LG)

        # Thumbnail (only for posts with a persisted image)
        self.thumbnail: Optional[QLabel] = None
        if self._image_url:
            self.thumbnail = QLabel()
            self.thumbnail.setFixedSize(Spacing.THUMBNAIL, Spacing.THUMBNAIL)
            self.thumbnail.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self.thumbnail.setStyleSheet(
                f"background-color: {Colors.BG_PRIMARY}; border-radius: {Spacing.RADIUS_LG}px;"
            )
            row.addWidget(self.thumbnail, 0, Qt.AlignmentFlag.AlignTop)

        body = QVBoxLayout()
        body.setSpacing(Spacing.SM)
        row.addLayout(body, 1)

        # Title row with actions
        header = QHBoxLayout()
        self.title_label = QLabel(elide(self.post.title, POST_TITLE_MAX_CHARS))
        self.title_label.setToolTip(self.post.title)
        self.title_label.setStyleSheet(Styles.label(size=Fonts.SIZE_XL, weight=Fonts.WEIGHT_SEMIBOLD))
        header.addWidget(self.title_label, 1)

        self.edit_btn = QPushButton()
        self.edit_btn.setIcon(qta.icon('fa5s.pencil-alt', color=Colors.ICON_DEFAULT,
                                       color_active=Colors.ACCENT_FOCUS))
        self.edit_btn.setToolTip("Edit post")
        self.edit_btn.setStyleSheet(Styles.button_icon())
        self.edit_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.edit_btn.clicked.connect(lambda: self.edit_requested.emit(self.post))
        header.addWidget(self.edit_btn)

        self.delete_btn = QPushButton()
        self.delete_btn.setIcon(qta.icon('fa5s.times', color=Colors.ICON_DEFAULT,
                                         color_active=Colors.ACCENT_ERROR))
        self.delete_btn.setToolTip("Delete post")
        self.delete_btn.setStyleSheet(Styles.button_icon())
        self.delete_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.delete_btn.clicked.connect(lambda: self.delete_requested.emit(self.post.id))
        header.addWidget(self.delete_btn)
        body.addLayout(header)

        self.preview_label = QLabel(self._preview.text)
        self.preview_label.setWordWrap(True)
        self.preview_label.setStyleSheet(Styles.label(color=Colors.TEXT_SECONDARY, size=Fonts.SIZE_MD))
        body.addWidget(self.preview_label)

        # Footer: status, coin, relative time
        footer = QHBoxLayout()
        footer.setSpacing(Spacing.MD)

        self.status_combo = QComboBox()
        for status in PostStatus:
            self.status_combo.addItem(status.label, status.value)
        self.status_combo.setCurrentIndex(max(self.status_combo.findData(self.post.status.value), 0))
        self.status_combo.setStyleSheet(Styles.status_pill(self.post.status is PostStatus.PUBLISHED))
        self.status_combo.currentIndexChanged.connect(self._on_status_changed)
        footer.addWidget(self.status_combo)

        self.coin_label: Optional[QLabel] = None
        if self._coin_name:
            self.coin_label = QLabel(self._coin_name)
            self.coin_label.setStyleSheet(Styles.label(color=Colors.TEXT_MUTED, size=Fonts.SIZE_SM))
            footer.addWidget(self.coin_label)

        footer.addStretch()
        self.time_label = QLabel(format_relative_time(self.post.created_at, self._now))
        self.time_label.setStyleSheet(Styles.label(color=Colors.TEXT_MUTED, size=Fonts.SIZE_SM))
        footer.addWidget(self.time_label)
        body.addLayout(footer)

    def _on_status_changed(self, _index: int):
        value = self.status_combo.currentData()
        if value == self.post.status.value:
            return
        self.status_combo.setStyleSheet(Styles.status_pill(value == PostStatus.PUBLISHED.value))
        self.status_change_requested.emit(self.post.id, value)

    # ---------------------------------------------------------
    # Thumbnail
    # ---------------------------------------------------------

    def _load_thumbnail(self):
        loader = self._image_loader
        if loader is None:
            from quotum.ui.images.image_loader import get_image_loader
            loader = self._image_loader = get_image_loader()
        loader.image_loaded.connect(self._on_image_loaded)
        loader.load_failed.connect(self._on_image_failed)
        loader.load_image(self._image_url)

    def _on_image_loaded(self, url: str, pixmap: QPixmap):
        if url != self._image_url or self.thumbnail is None:
            return
        self.thumbnail.setPixmap(scale_and_crop_pixmap(pixmap, (Spacing.THUMBNAIL, Spacing.THUMBNAIL)))

    def _on_image_failed(self, url: str, error: str):
        if url != self._image_url or self.thumbnail is None:
            return
        logger.debug(f"Thumbnail failed for post {self.post.id}: {error}")
        icon = qta.icon('fa5s.exclamation-triangle', color=Colors.TEXT_MUTED)
        self.thumbnail.setPixmap(icon.pixmap(Spacing.ICON_MD, Spacing.ICON_MD))

    @property
    def coin_name(self) -> Optional[str]:
        return self._coin_name

    @property
    def preview_text(self) -> str:
        return self._preview.text

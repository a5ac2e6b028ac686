"""
Chronological post list: one PostGroup per calendar day, newest first.
"""
from PyQt6.QtWidgets import QWidget, QFrame, QVBoxLayout, QHBoxLayout, QLabel
from PyQt6.QtCore import Qt, pyqtSignal
import logging
from datetime import datetime
from typing import List, Optional, Sequence
import qtawesome as qta

from quotum.core.dto.post import CoinDTO
from quotum.core.grouping import PREVIEW_TEXT_LENGTH, DateBucket, GroupedPosts
from quotum.ui.common.theme import Colors, Fonts, Spacing, Styles
from quotum.ui.posts.post_card import PostCard

logger = logging.getLogger(__name__)

EMPTY_TITLE = "No posts yet"
EMPTY_SUBTITLE = "Start creating your first post"


class PostGroup(QWidget):
    """Date heading followed by the cards of that day."""

    def __init__(self, bucket: DateBucket, coins: Sequence[CoinDTO], *,
                 preview_text_length: int = PREVIEW_TEXT_LENGTH, image_loader=None,
                 now: Optional[datetime] = None, parent=None):
        super().__init__(parent)
        self.bucket = bucket
        self.cards: List[PostCard] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, Spacing.XL)
        layout.setSpacing(Spacing.MD)

        header = QHBoxLayout()
        icon = QLabel()
        icon.setPixmap(qta.icon('fa5s.calendar-alt', color=Colors.TEXT_SECONDARY).pixmap(Spacing.ICON_MD, Spacing.ICON_MD))
        header.addWidget(icon)
        self.heading_label = QLabel(bucket.heading)
        self.heading_label.setStyleSheet(Styles.label(color=Colors.TEXT_BODY, size=Fonts.SIZE_XL,
                                                      weight=Fonts.WEIGHT_SEMIBOLD))
        header.addWidget(self.heading_label)
        header.addStretch()
        layout.addLayout(header)

        for post in bucket.posts:
            card = PostCard(post, coins, preview_text_length=preview_text_length,
                            image_loader=image_loader, now=now)
            layout.addWidget(card)
            self.cards.append(card)


class _EmptyState(QFrame):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("emptyState")
        self.setStyleSheet(Styles.PANEL)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(Spacing.XL, Spacing.XL * 2, Spacing.XL, Spacing.XL * 2)
        layout.setSpacing(Spacing.SM)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.title_label = QLabel(EMPTY_TITLE)
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.title_label.setStyleSheet(Styles.label(color=Colors.TEXT_SECONDARY, size=Fonts.SIZE_XL))
        layout.addWidget(self.title_label)

        self.subtitle_label = QLabel(EMPTY_SUBTITLE)
        self.subtitle_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.subtitle_label.setStyleSheet(Styles.label(color=Colors.TEXT_MUTED, size=Fonts.SIZE_MD))
        layout.addWidget(self.subtitle_label)


class PostsList(QWidget):
    """
    Renders grouped posts, or the empty-state panel when nothing groups.

    Card intents are re-emitted unchanged.
    """

    edit_requested = pyqtSignal(object)
    delete_requested = pyqtSignal(str)
    status_change_requested = pyqtSignal(str, str)

    def __init__(self, *, preview_text_length: int = PREVIEW_TEXT_LENGTH, image_loader=None, parent=None):
        super().__init__(parent)
        self._preview_text_length = preview_text_length
        self._image_loader = image_loader
        self.groups: List[PostGroup] = []

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(0)

        self.empty_state = _EmptyState()
        self._layout.addWidget(self.empty_state)
        self._layout.addStretch()

    def set_posts(self, grouped: GroupedPosts, coins: Sequence[CoinDTO], now: Optional[datetime] = None):
        self.setUpdatesEnabled(False)
        try:
            self._clear_groups()
            self.empty_state.setVisible(grouped.is_empty)
            for position, bucket in enumerate(grouped):
                group = PostGroup(bucket, coins, preview_text_length=self._preview_text_length,
                                  image_loader=self._image_loader, now=now)
                for card in group.cards:
                    card.edit_requested.connect(self.edit_requested)
                    card.delete_requested.connect(self.delete_requested)
                    card.status_change_requested.connect(self.status_change_requested)
                # Groups go above the trailing stretch
                self._layout.insertWidget(position + 1, group)
                self.groups.append(group)
        finally:
            self.setUpdatesEnabled(True)
        logger.debug(f"Rendered {len(self.groups)} date group(s)")

    def cards(self) -> List[PostCard]:
        return [card for group in self.groups for card in group.cards]

    def _clear_groups(self):
        for group in self.groups:
            self._layout.removeWidget(group)
            group.deleteLater()
        self.groups.clear()

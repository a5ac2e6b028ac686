"""
Read-only detail view of a single post.

Renders the title, every content block in order and a "Posted on ... in
<coin>" footer. Text blocks become paragraphs; image blocks show only when
they carry a remote url. The view also owns its loading, error and
not-found states so the window only forwards worker results.
"""
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QPixmap
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QScrollArea, QFrame
from datetime import tzinfo
from typing import Dict, List, Optional
import logging
import qtawesome as qta

from quotum.core.dto.content import ImageBlock, TextBlock, unknown_block
from quotum.core.dto.post import PostDTO
from quotum.core.grouping import date_key_for, format_date_heading
from quotum.ui.common.theme import Colors, Fonts, Spacing, Styles
from quotum.ui.common.utils import fix_image_url
from quotum.ui.images.image_utils import scale_pixmap_to_fit

logger = logging.getLogger(__name__)

LOADING_TEXT = "Loading..."
NOT_FOUND_TEXT = "Post not found"
DETAIL_ERROR = "Failed to load post details."


def posted_on_text(post: PostDTO, tz: Optional[tzinfo] = None) -> str:
    """
    Footer line of the detail view.

    Examples:
        >>> posted_on_text(PostDTO(id="1", title="T", created_at=datetime(2024, 1, 2, 12), coin_name="Bitcoin"))
        'Posted on January 2, 2024 in Bitcoin'
    """
    key = date_key_for(post.created_at, tz)
    text = f"Posted on {format_date_heading(key) if key else 'an unknown date'}"
    if post.coin_name:
        text += f" in {post.coin_name}"
    return text


class PostDetailView(QWidget):
    """
    Single post, read-only.

    Signals:
        back_clicked(): Emitted when the back button is clicked
    """

    back_clicked = pyqtSignal()

    def __init__(self, parent=None, *, image_loader=None, tz: Optional[tzinfo] = None):
        super().__init__(parent)
        self.post: Optional[PostDTO] = None
        self._image_loader = image_loader
        self._loader_connected = False
        self._tz = tz
        # fixed url -> labels waiting for that image
        self._image_labels: Dict[str, List[QLabel]] = {}
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(Spacing.MD)

        header = QHBoxLayout()
        self.back_btn = QPushButton(" Back")
        self.back_btn.setIcon(qta.icon('fa5s.arrow-left', color=Colors.TEXT_BODY))
        self.back_btn.setStyleSheet(Styles.button_secondary())
        self.back_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.back_btn.clicked.connect(self.back_clicked.emit)
        header.addWidget(self.back_btn)
        header.addStretch()
        layout.addLayout(header)

        self.status_label = QLabel("")
        self.status_label.setObjectName("errorBanner")
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.status_label.setWordWrap(True)
        self.status_label.setVisible(False)
        layout.addWidget(self.status_label)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        content = QWidget()
        self.content_layout = QVBoxLayout(content)
        self.content_layout.setContentsMargins(Spacing.XL, Spacing.XL, Spacing.XL, Spacing.XL)
        self.content_layout.setSpacing(Spacing.LG)

        scroll.setWidget(content)
        layout.addWidget(scroll, 1)

        self.title_label: Optional[QLabel] = None
        self.footer_label: Optional[QLabel] = None
        self.block_widgets: List[QLabel] = []

    # ---------------------------------------------------------
    # States
    # ---------------------------------------------------------

    def show_loading(self):
        self._clear()
        self._show_status(LOADING_TEXT, Styles.label(color=Colors.TEXT_SECONDARY))

    def show_error(self, message: Optional[str] = None):
        self._clear()
        self._show_status(message or DETAIL_ERROR, Styles.ERROR_BANNER)

    def set_post(self, post: Optional[PostDTO]):
        """Display ``post``; None shows the not-found state."""
        self._clear()
        if post is None:
            self._show_status(NOT_FOUND_TEXT, Styles.label(color=Colors.TEXT_SECONDARY, size=Fonts.SIZE_XL))
            return
        self.post = post
        self.status_label.setVisible(False)

        # Batch updates to prevent flicker while the blocks are built
        self.setUpdatesEnabled(False)
        try:
            self.title_label = QLabel(post.title)
            self.title_label.setWordWrap(True)
            self.title_label.setStyleSheet(Styles.label(size=Fonts.SIZE_TITLE, weight=Fonts.WEIGHT_BOLD))
            self.content_layout.addWidget(self.title_label)

            for block in post.content:
                widget = self._block_widget(block)
                if widget is not None:
                    self.block_widgets.append(widget)
                    self.content_layout.addWidget(widget)

            self.footer_label = QLabel(posted_on_text(post, self._tz))
            self.footer_label.setStyleSheet(Styles.label(color=Colors.TEXT_MUTED, size=Fonts.SIZE_SM))
            self.content_layout.addWidget(self.footer_label)
            self.content_layout.addStretch()
        finally:
            self.setUpdatesEnabled(True)

    # ---------------------------------------------------------
    # Blocks
    # ---------------------------------------------------------

    def _block_widget(self, block) -> Optional[QLabel]:
        if isinstance(block, TextBlock):
            label = QLabel(block.content)
            label.setWordWrap(True)
            label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            label.setStyleSheet(Styles.label(color=Colors.TEXT_BODY, size=Fonts.SIZE_LG))
            return label
        if isinstance(block, ImageBlock):
            if not block.url:
                return None
            return self._image_widget(fix_image_url(block.url))
        raise unknown_block(block)

    def _image_widget(self, url: str) -> QLabel:
        label = QLabel()
        label.setObjectName("detailImage")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setMinimumHeight(Spacing.THUMBNAIL)
        label.setToolTip(url)
        self._image_labels.setdefault(url, []).append(label)

        loader = self._ensure_loader()
        loader.load_image(url)
        return label

    def _ensure_loader(self):
        if self._image_loader is None:
            from quotum.ui.images.image_loader import get_image_loader
            self._image_loader = get_image_loader()
        if not self._loader_connected:
            self._image_loader.image_loaded.connect(self._on_image_loaded)
            self._image_loader.load_failed.connect(self._on_image_failed)
            self._loader_connected = True
        return self._image_loader

    def _on_image_loaded(self, url: str, pixmap: QPixmap):
        labels = self._image_labels.get(url)
        if not labels:
            return
        if pixmap.width() > Spacing.DETAIL_IMAGE_MAX_WIDTH:
            pixmap = scale_pixmap_to_fit(pixmap, (Spacing.DETAIL_IMAGE_MAX_WIDTH, pixmap.height()))
        for label in labels:
            label.setPixmap(pixmap)

    def _on_image_failed(self, url: str, error: str):
        labels = self._image_labels.get(url)
        if not labels:
            return
        logger.debug(f"Detail image failed: {url}: {error}")
        icon = qta.icon('fa5s.exclamation-triangle', color=Colors.TEXT_MUTED)
        for label in labels:
            label.setPixmap(icon.pixmap(Spacing.ICON_MD, Spacing.ICON_MD))

    # ---------------------------------------------------------
    # Internals
    # ---------------------------------------------------------

    def _show_status(self, text: str, style: str):
        self.status_label.setText(text)
        self.status_label.setStyleSheet(style)
        self.status_label.setVisible(True)

    def _clear(self):
        self.post = None
        self.title_label = None
        self.footer_label = None
        self.block_widgets = []
        self._image_labels.clear()
        while self.content_layout.count():
            item = self.content_layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

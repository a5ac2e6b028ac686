"""
Create/edit form for a post.

Holds one ContentEditor session: the block list shown here is always the
editor's blocks, and every intent from a block widget goes through it.
Cancelling or resetting the form discards the session, which releases all
staged previews.
"""
from PyQt6.QtWidgets import (QFrame, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
                             QComboBox, QPushButton, QWidget)
from PyQt6.QtCore import Qt, pyqtSignal
import logging
from typing import List, Optional, Sequence
import qtawesome as qta

from quotum.core.content_editor import ContentEditor
from quotum.core.dto.content import BlockType, ImageFile
from quotum.core.dto.post import CoinDTO, PostDraft, PostDTO, PostStatus, coin_choices
from quotum.core.preview_staging import PreviewStager
from quotum.ui.common.theme import Colors, Fonts, Spacing, Styles
from quotum.ui.editor.content_block_widget import ImageBlockWidget, TextBlockWidget, create_block_widget

logger = logging.getLogger(__name__)

COIN_PLACEHOLDER = "Select a coin"


class PostForm(QFrame):
    """
    Signals:
        submitted(draft): PostDraft of a valid form
        cancelled(): Cancel pressed; the session has already been discarded
    """

    submitted = pyqtSignal(object)
    cancelled = pyqtSignal()

    def __init__(self, coins: Sequence[CoinDTO] = (), *, stager: Optional[PreviewStager] = None,
                 image_loader=None, parent=None):
        super().__init__(parent)
        self.setObjectName("formPanel")
        self.editor = ContentEditor(stager=stager)
        self._image_loader = image_loader
        self._editing: Optional[PostDTO] = None
        self._block_widgets: List[QWidget] = []

        self._setup_ui()
        self.set_coins(coins)

    def _setup_ui(self):
        self.setStyleSheet(Styles.PANEL + Styles.INPUT)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(Spacing.XL, Spacing.XL, Spacing.XL, Spacing.XL)
        layout.setSpacing(Spacing.LG)

        self.heading = QLabel("Create New Post")
        self.heading.setStyleSheet(Styles.label(size=Fonts.SIZE_XL, weight=Fonts.WEIGHT_SEMIBOLD))
        layout.addWidget(self.heading)

        layout.addWidget(self._field_label("Title"))
        self.title_input = QLineEdit()
        layout.addWidget(self.title_input)

        layout.addWidget(self._field_label("Related Coin"))
        self.coin_combo = QComboBox()
        layout.addWidget(self.coin_combo)

        # Content blocks header
        blocks_header = QHBoxLayout()
        blocks_header.addWidget(self._field_label("Content Blocks"))
        blocks_header.addStretch()

        self.add_text_btn = QPushButton(" Add Text")
        self.add_text_btn.setIcon(qta.icon('fa5s.font', color=Colors.TEXT_BODY))
        self.add_text_btn.setStyleSheet(Styles.button_secondary())
        self.add_text_btn.clicked.connect(lambda: self.add_block(BlockType.TEXT))
        blocks_header.addWidget(self.add_text_btn)

        self.add_image_btn = QPushButton(" Add Image")
        self.add_image_btn.setIcon(qta.icon('fa5s.image', color=Colors.TEXT_BODY))
        self.add_image_btn.setStyleSheet(Styles.button_secondary())
        self.add_image_btn.clicked.connect(lambda: self.add_block(BlockType.IMAGE))
        blocks_header.addWidget(self.add_image_btn)
        layout.addLayout(blocks_header)

        self._blocks_layout = QVBoxLayout()
        self._blocks_layout.setSpacing(Spacing.LG)
        layout.addLayout(self._blocks_layout)

        layout.addWidget(self._field_label("Status"))
        self.status_combo = QComboBox()
        for status in PostStatus:
            self.status_combo.addItem(status.label, status.value)
        layout.addWidget(self.status_combo)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet(Styles.label(color=Colors.ACCENT_ERROR, size=Fonts.SIZE_SM))
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        actions = QHBoxLayout()
        actions.addStretch()
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setStyleSheet(Styles.button_secondary())
        self.cancel_btn.clicked.connect(self._on_cancel)
        actions.addWidget(self.cancel_btn)

        self.submit_btn = QPushButton("Create Post")
        self.submit_btn.setStyleSheet(Styles.button_primary())
        self.submit_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.submit_btn.clicked.connect(self._on_submit)
        actions.addWidget(self.submit_btn)
        layout.addLayout(actions)

    @staticmethod
    def _field_label(text: str) -> QLabel:
        label = QLabel(text)
        label.setStyleSheet(Styles.label(color=Colors.TEXT_BODY, size=Fonts.SIZE_MD,
                                         weight=Fonts.WEIGHT_MEDIUM))
        return label

    # ---------------------------------------------------------
    # Public API
    # ---------------------------------------------------------

    @property
    def editing_post(self) -> Optional[PostDTO]:
        return self._editing

    @property
    def editing_id(self) -> Optional[str]:
        return self._editing.id if self._editing else None

    @property
    def block_widgets(self) -> List[QWidget]:
        return list(self._block_widgets)

    def set_coins(self, coins: Sequence[CoinDTO]):
        selected = self.coin_combo.currentData()
        self.coin_combo.clear()
        self.coin_combo.addItem(COIN_PLACEHOLDER, None)
        for coin_id, label in coin_choices(coins):
            self.coin_combo.addItem(label, coin_id)
        self._select_coin(selected)

    def start_create(self):
        self.reset()

    def start_edit(self, post: PostDTO):
        """Load ``post`` into the form; any unsaved session is discarded."""
        self.editor.load(post.content)
        self._editing = post
        self.title_input.setText(post.title)
        self._select_coin(post.coin_id)
        self._select_status(post.status)
        self.heading.setText("Edit Post")
        self.submit_btn.setText("Save Changes")
        self._show_error(None)
        self._rebuild_blocks()
        logger.debug(f"Editing post {post.id} ({len(self.editor)} block(s))")

    def reset(self):
        self.editor.discard()
        self._editing = None
        self.title_input.clear()
        self._select_coin(None)
        self._select_status(PostStatus.DRAFT)
        self.heading.setText("Create New Post")
        self.submit_btn.setText("Create Post")
        self._show_error(None)
        self._rebuild_blocks()

    def draft(self) -> PostDraft:
        return PostDraft(
            title=self.title_input.text().strip(),
            coin_id=self.coin_combo.currentData(),
            status=PostStatus.parse(self.status_combo.currentData()),
            content=self.editor.blocks,
        )

    def validation_error(self) -> Optional[str]:
        draft = self.draft()
        if not draft.title:
            return "Title is required."
        if draft.coin_id is None:
            return "Please select a coin."
        return None

    def add_block(self, block_type: BlockType):
        self.editor.add(block_type)
        self._rebuild_blocks()

    # ---------------------------------------------------------
    # Internals
    # ---------------------------------------------------------

    def _select_coin(self, coin_id: Optional[str]):
        index = self.coin_combo.findData(coin_id) if coin_id is not None else 0
        self.coin_combo.setCurrentIndex(max(index, 0))

    def _select_status(self, status: PostStatus):
        self.status_combo.setCurrentIndex(max(self.status_combo.findData(status.value), 0))

    def _show_error(self, message: Optional[str]):
        self.error_label.setText(message or "")
        self.error_label.setVisible(bool(message))

    def _rebuild_blocks(self):
        for widget in self._block_widgets:
            self._blocks_layout.removeWidget(widget)
            widget.deleteLater()
        self._block_widgets.clear()

        for index, block in enumerate(self.editor.blocks):
            widget = create_block_widget(index, block, self.editor.stager, self._image_loader)
            widget.delete_requested.connect(self._on_delete_block)
            if isinstance(widget, TextBlockWidget):
                widget.text_changed.connect(self._on_text_changed)
            elif isinstance(widget, ImageBlockWidget):
                widget.image_selected.connect(self._on_image_selected)
            self._blocks_layout.addWidget(widget)
            self._block_widgets.append(widget)

    def _on_text_changed(self, index: int, text: str):
        self.editor.edit_text(index, text)

    def _on_image_selected(self, index: int, file: ImageFile):
        self.editor.select_image(index, file)
        self._rebuild_blocks()

    def _on_delete_block(self, index: int):
        self.editor.delete(index)
        self._rebuild_blocks()

    def _on_submit(self):
        error = self.validation_error()
        if error:
            self._show_error(error)
            return
        self._show_error(None)
        self.submitted.emit(self.draft())

    def _on_cancel(self):
        self.reset()
        self.cancelled.emit()

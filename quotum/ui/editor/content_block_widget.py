"""
Editor widgets for single content blocks.

TextBlockWidget edits a text block in a multi-line box (line breaks are
kept as typed). ImageBlockWidget shows the staged preview or the persisted
image and accepts a new image from a file dialog, the clipboard or a drop.

Widgets never mutate blocks; they report intents by block index and the
post form applies them through its ContentEditor.
"""
from PyQt6.QtWidgets import (QFrame, QHBoxLayout, QVBoxLayout, QLabel,
                             QPushButton, QPlainTextEdit, QFileDialog, QApplication)
from PyQt6.QtCore import Qt, pyqtSignal, QBuffer, QIODevice
from PyQt6.QtGui import QKeySequence, QShortcut, QPixmap
import logging
from pathlib import Path
from typing import Optional
import qtawesome as qta

from quotum.core.dto.content import ContentBlock, ImageBlock, ImageFile, ImageState, TextBlock, unknown_block
from quotum.core.preview_staging import PreviewStager
from quotum.ui.common.theme import Colors, Fonts, Spacing, Styles
from quotum.ui.common.utils import fix_image_url
from quotum.ui.images.image_utils import pixmap_from_bytes, scale_and_crop_pixmap

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.webp *.bmp)"
IMAGE_SUFFIXES = {'.png', '.jpg', '.jpeg', '.gif', '.webp', '.bmp'}
DROP_ZONE_TEXT = "Click to upload or paste image"


def clipboard_image_file() -> Optional[ImageFile]:
    """Image currently on the clipboard as PNG bytes, or a copied image file."""
    mime = QApplication.clipboard().mimeData()
    if mime is None:
        return None

    if mime.hasImage():
        image = QApplication.clipboard().image()
        if not image.isNull():
            buffer = QBuffer()
            buffer.open(QIODevice.OpenModeFlag.WriteOnly)
            image.save(buffer, "PNG")
            return ImageFile.from_clipboard(bytes(buffer.data()), "png")

    if mime.hasUrls():
        for url in mime.urls():
            path = Path(url.toLocalFile()) if url.isLocalFile() else None
            if path is not None and path.suffix.lower() in IMAGE_SUFFIXES and path.is_file():
                return ImageFile.from_path(path)
    return None


class _BlockWidgetBase(QFrame):
    """Row with the block editor on the left and a delete button on the right."""

    delete_requested = pyqtSignal(int)  # block index

    def __init__(self, index: int, parent=None):
        super().__init__(parent)
        self.index = index
        self._row = QHBoxLayout(self)
        self._row.setContentsMargins(0, 0, 0, 0)
        self._row.setSpacing(Spacing.LG)

    def _add_delete_button(self):
        self.delete_btn = QPushButton()
        self.delete_btn.setIcon(qta.icon('fa5s.times', color=Colors.ICON_DEFAULT,
                                         color_active=Colors.ACCENT_ERROR))
        self.delete_btn.setToolTip("Remove block")
        self.delete_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.delete_btn.setStyleSheet(Styles.button_icon())
        self.delete_btn.clicked.connect(lambda: self.delete_requested.emit(self.index))
        self._row.addWidget(self.delete_btn, 0, Qt.AlignmentFlag.AlignTop)


class TextBlockWidget(_BlockWidgetBase):
    text_changed = pyqtSignal(int, str)  # block index, full text

    def __init__(self, index: int, block: TextBlock, parent=None):
        super().__init__(index, parent)
        self.editor = QPlainTextEdit()
        self.editor.setPlainText(block.content)
        self.editor.setMinimumHeight(Spacing.TEXT_BLOCK_MIN_HEIGHT)
        self.editor.setStyleSheet(Styles.INPUT)
        self.editor.textChanged.connect(
            lambda: self.text_changed.emit(self.index, self.editor.toPlainText())
        )
        self._row.addWidget(self.editor, 1)
        self._add_delete_button()


class _DropZone(QFrame):
    """Dashed placeholder of an empty image block."""

    clicked = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("imageDropZone")
        self.setStyleSheet(Styles.DROP_ZONE)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(Spacing.MD, Spacing.MD, Spacing.MD, Spacing.MD)
        layout.setSpacing(Spacing.SM)

        icon = QLabel()
        icon.setPixmap(qta.icon('fa5s.image', color=Colors.TEXT_SECONDARY).pixmap(Spacing.ICON_SM, Spacing.ICON_SM))
        layout.addWidget(icon)

        self.label = QLabel(DROP_ZONE_TEXT)
        self.label.setStyleSheet(Styles.label(color=Colors.TEXT_SECONDARY, size=Fonts.SIZE_MD))
        layout.addWidget(self.label, 1)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit()
        super().mousePressEvent(event)


class _Thumbnail(QLabel):
    clicked = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFixedSize(Spacing.IMAGE_BLOCK_PREVIEW, Spacing.IMAGE_BLOCK_PREVIEW)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setToolTip("Click to replace image")
        self.setStyleSheet(f"""
            QLabel {{
                background-color: {Colors.BG_PRIMARY};
                border: 1px solid {Colors.BORDER_DEFAULT};
                border-radius: {Spacing.RADIUS_LG}px;
            }}
        """)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit()
        super().mousePressEvent(event)


class ImageBlockWidget(_BlockWidgetBase):
    """
    Image block row.

    Empty blocks show the drop zone. Staged blocks paint the bytes behind
    their preview reference; persisted blocks load the remote url. Clicking
    the thumbnail picks a replacement.
    """

    image_selected = pyqtSignal(int, object)  # block index, ImageFile

    def __init__(self, index: int, block: ImageBlock, stager: PreviewStager,
                 image_loader=None, parent=None):
        super().__init__(index, parent)
        self._block = block
        self._stager = stager
        self._image_loader = image_loader
        self._requested_url: Optional[str] = None

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAcceptDrops(True)

        self._content = QVBoxLayout()
        self._content.setContentsMargins(0, 0, 0, 0)
        self._row.addLayout(self._content, 1)

        if block.state is ImageState.EMPTY:
            self.drop_zone = _DropZone()
            self.drop_zone.clicked.connect(self._choose_file)
            self._content.addWidget(self.drop_zone)
            self.thumbnail = None
        else:
            self.drop_zone = None
            self.thumbnail = _Thumbnail()
            self.thumbnail.clicked.connect(self._choose_file)
            self._content.addWidget(self.thumbnail, 0, Qt.AlignmentFlag.AlignLeft)
            self._render_thumbnail()

        self._add_delete_button()

        paste = QShortcut(QKeySequence.StandardKey.Paste, self)
        paste.setContext(Qt.ShortcutContext.WidgetWithChildrenShortcut)
        paste.activated.connect(self.paste_from_clipboard)

    @property
    def block(self) -> ImageBlock:
        return self._block

    def _render_thumbnail(self):
        source = self._block.display_source
        if self._stager.is_local(source):
            pixmap = pixmap_from_bytes(self._stager.resolve(source))
            if pixmap is None:
                logger.warning(f"Staged preview could not be decoded: {source}")
                self._show_broken()
                return
            self._set_pixmap(pixmap)
            return

        loader = self._image_loader
        if loader is None:
            from quotum.ui.images.image_loader import get_image_loader
            loader = self._image_loader = get_image_loader()

        self._requested_url = source
        loader.image_loaded.connect(self._on_image_loaded)
        loader.load_failed.connect(self._on_image_failed)
        loader.load_image(fix_image_url(source))

    def _set_pixmap(self, pixmap: QPixmap):
        size = (Spacing.IMAGE_BLOCK_PREVIEW, Spacing.IMAGE_BLOCK_PREVIEW)
        self.thumbnail.setPixmap(scale_and_crop_pixmap(pixmap, size))

    def _show_broken(self):
        icon = qta.icon('fa5s.exclamation-triangle', color=Colors.TEXT_MUTED)
        self.thumbnail.setPixmap(icon.pixmap(Spacing.ICON_MD, Spacing.ICON_MD))

    def _on_image_loaded(self, url: str, pixmap: QPixmap):
        if self.thumbnail is not None and url == fix_image_url(self._requested_url):
            self._set_pixmap(pixmap)

    def _on_image_failed(self, url: str, error: str):
        if self.thumbnail is not None and url == fix_image_url(self._requested_url):
            self._show_broken()

    # ---------------------------------------------------------
    # Image sources
    # ---------------------------------------------------------

    def _choose_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select image", "", IMAGE_FILE_FILTER)
        if not path:
            return
        try:
            file = ImageFile.from_path(path)
        except OSError as e:
            logger.error(f"Could not read image {path}: {e}")
            return
        self.select_file(file)

    def paste_from_clipboard(self) -> bool:
        """Stage the clipboard image, if there is one. Returns True when used."""
        file = clipboard_image_file()
        if file is None:
            logger.debug("Paste ignored: clipboard holds no image")
            return False
        self.select_file(file)
        return True

    def select_file(self, file: ImageFile):
        self.image_selected.emit(self.index, file)

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls() or event.mimeData().hasImage():
            event.acceptProposedAction()
        else:
            super().dragEnterEvent(event)

    def dropEvent(self, event):
        for url in event.mimeData().urls():
            if url.isLocalFile() and Path(url.toLocalFile()).suffix.lower() in IMAGE_SUFFIXES:
                try:
                    self.select_file(ImageFile.from_path(url.toLocalFile()))
                except OSError as e:
                    logger.error(f"Could not read dropped image: {e}")
                    return
                event.acceptProposedAction()
                return
        super().dropEvent(event)


def create_block_widget(index: int, block: ContentBlock, stager: PreviewStager,
                        image_loader=None, parent=None) -> _BlockWidgetBase:
    if isinstance(block, TextBlock):
        return TextBlockWidget(index, block, parent)
    if isinstance(block, ImageBlock):
        return ImageBlockWidget(index, block, stager, image_loader, parent)
    raise unknown_block(block)

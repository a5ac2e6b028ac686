"""
Image/Pixmap Utility Functions

Centralized QPixmap helpers shared by the post card and the image blocks.
"""
from __future__ import annotations

from typing import Optional, Tuple

from PyQt6.QtCore import Qt, QSize
from PyQt6.QtGui import QPixmap


def _as_size(target_size: QSize | Tuple[int, int]) -> QSize:
    if isinstance(target_size, tuple):
        return QSize(target_size[0], target_size[1])
    return target_size


def pixmap_from_bytes(data: Optional[bytes]) -> Optional[QPixmap]:
    """Decode image bytes into a pixmap. Returns None when Qt cannot read them."""
    if not data:
        return None
    pixmap = QPixmap()
    if not pixmap.loadFromData(data):
        return None
    return pixmap


def scale_pixmap_to_fit(
    pixmap: QPixmap,
    target_size: QSize | Tuple[int, int],
    smooth: bool = True,
) -> QPixmap:
    """
    Scale pixmap to fit within target size (maintains aspect ratio).

    Example:
        >>> pix = QPixmap("image.jpg")  # 800x600
        >>> scale_pixmap_to_fit(pix, (200, 200)).size()  # QSize(200, 150)
    """
    transform = (
        Qt.TransformationMode.SmoothTransformation
        if smooth
        else Qt.TransformationMode.FastTransformation
    )
    return pixmap.scaled(_as_size(target_size), Qt.AspectRatioMode.KeepAspectRatio, transform)


def scale_and_crop_pixmap(
    pixmap: QPixmap,
    target_size: QSize | Tuple[int, int],
    smooth: bool = True,
) -> QPixmap:
    """
    Scale pixmap to fill target size, then center-crop to exact dimensions.

    This is the thumbnail pattern: the result is exactly ``target_size``
    unless the source is smaller.
    """
    target_size = _as_size(target_size)
    transform = (
        Qt.TransformationMode.SmoothTransformation
        if smooth
        else Qt.TransformationMode.FastTransformation
    )
    scaled = pixmap.scaled(target_size, Qt.AspectRatioMode.KeepAspectRatioByExpanding, transform)

    if scaled.width() <= target_size.width() and scaled.height() <= target_size.height():
        return scaled

    sx = (scaled.width() - target_size.width()) // 2
    sy = (scaled.height() - target_size.height()) // 2
    return scaled.copy(sx, sy, target_size.width(), target_size.height())

"""
Remote image loader (UI adapter).

Fetches image bytes on a QThread with requests and hands decoded pixmaps
back on the GUI thread. Decoded pixmaps are cached per url for the
lifetime of the loader.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Set

import requests
from PyQt6.QtCore import QObject, QThread, pyqtSignal
from PyQt6.QtGui import QPixmap

from quotum.ui.common.utils import fix_image_url
from quotum.ui.images.image_utils import pixmap_from_bytes

logger = logging.getLogger(__name__)

IMAGE_FETCH_TIMEOUT = 20
MAX_CACHED_PIXMAPS = 256


class ImageFetchWorker(QThread):
    """
    Background download of one image.

    Signals:
        fetched(url, data): Emitted with the raw bytes on success
        failed(url, error): Emitted on failure
    """
    fetched = pyqtSignal(str, bytes)
    failed = pyqtSignal(str, str)

    def __init__(self, url: str, session: requests.Session, timeout: int = IMAGE_FETCH_TIMEOUT):
        super().__init__()
        self._url = url
        self._session = session
        self._timeout = timeout

    @property
    def url(self) -> str:
        return self._url

    def run(self) -> None:
        try:
            response = self._session.get(self._url, timeout=self._timeout)
            response.raise_for_status()
            self.fetched.emit(self._url, response.content)
        except requests.RequestException as e:
            logger.warning(f"Image fetch failed for {self._url}: {e}")
            self.failed.emit(self._url, str(e))


class ImageLoader(QObject):
    """Loads remote images for post thumbnails and persisted image blocks."""

    image_loaded = pyqtSignal(str, QPixmap)  # url as requested, pixmap
    load_failed = pyqtSignal(str, str)  # url as requested, error_msg

    def __init__(self, parent: Optional[QObject] = None, *, session: Optional[requests.Session] = None):
        super().__init__(parent)
        self._session = session or requests.Session()
        self._cache: Dict[str, QPixmap] = {}
        self._workers: Set[ImageFetchWorker] = set()
        # fixed url -> urls as originally requested
        self._pending: Dict[str, Set[str]] = {}

    def load_image(self, url: Optional[str]):
        if not url:
            self.load_failed.emit(url or "", "Invalid URL")
            return

        fixed = fix_image_url(url)
        cached = self._cache.get(fixed)
        if cached is not None:
            self.image_loaded.emit(url, cached)
            return

        waiting = self._pending.get(fixed)
        if waiting is not None:
            waiting.add(url)
            return
        self._pending[fixed] = {url}

        logger.debug(f"Image load requested: {fixed}")
        worker = ImageFetchWorker(fixed, self._session)
        worker.fetched.connect(self._on_fetched)
        worker.failed.connect(self._on_failed)
        worker.finished.connect(lambda w=worker: self._workers.discard(w))
        self._workers.add(worker)
        worker.start()

    def cached(self, url: Optional[str]) -> Optional[QPixmap]:
        if not url:
            return None
        return self._cache.get(fix_image_url(url))

    def _on_fetched(self, fixed: str, data: bytes):
        pixmap = pixmap_from_bytes(data)
        if pixmap is None:
            self._on_failed(fixed, "Unsupported image data")
            return
        if len(self._cache) >= MAX_CACHED_PIXMAPS:
            self._cache.pop(next(iter(self._cache)))
        self._cache[fixed] = pixmap
        for url in self._pending.pop(fixed, {fixed}):
            self.image_loaded.emit(url, pixmap)

    def _on_failed(self, fixed: str, error: str):
        for url in self._pending.pop(fixed, {fixed}):
            self.load_failed.emit(url, error)

    def shutdown(self):
        """Wait for in-flight downloads and close the session."""
        for worker in list(self._workers):
            worker.wait(2000)
        self._workers.clear()
        self._session.close()


_image_loader: Optional[ImageLoader] = None


def get_image_loader() -> ImageLoader:
    """Get the application-wide image loader."""
    global _image_loader
    if _image_loader is None:
        _image_loader = ImageLoader()
    return _image_loader

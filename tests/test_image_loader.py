"""
Tests for quotum/ui/images - pixmap helpers and the remote image loader

Fetch workers run synchronously (start() patched to run()).

Run with: pytest tests/test_image_loader.py -v
"""

from unittest.mock import Mock

import pytest
import requests
from PyQt6.QtGui import QPixmap

from quotum.ui.images import image_loader as loader_module
from quotum.ui.images.image_loader import ImageLoader
from quotum.ui.images.image_utils import pixmap_from_bytes, scale_and_crop_pixmap, scale_pixmap_to_fit


@pytest.fixture
def session(png_bytes):
    session = Mock()
    session.get.return_value = Mock(content=png_bytes)
    return session


@pytest.fixture
def loader(qapp, session, monkeypatch):
    monkeypatch.setattr(loader_module.ImageFetchWorker, "start", lambda self: self.run())
    return ImageLoader(session=session)


def _events(loader):
    events = []
    loader.image_loaded.connect(lambda url, pixmap: events.append(("loaded", url)))
    loader.load_failed.connect(lambda url, error: events.append(("failed", url)))
    return events


class TestPixmapHelpers:
    def test_decode(self, png_bytes):
        pixmap = pixmap_from_bytes(png_bytes)
        assert pixmap is not None
        assert (pixmap.width(), pixmap.height()) == (8, 8)

    @pytest.mark.parametrize("data", [None, b"", b"definitely not an image"])
    def test_undecodable(self, qapp, data):
        assert pixmap_from_bytes(data) is None

    def test_scale_and_crop_is_exact(self, qapp):
        pixmap = QPixmap(400, 200)
        result = scale_and_crop_pixmap(pixmap, (100, 100))
        assert (result.width(), result.height()) == (100, 100)

    def test_scale_to_fit_keeps_ratio(self, qapp):
        pixmap = QPixmap(400, 200)
        result = scale_pixmap_to_fit(pixmap, (100, 100))
        assert (result.width(), result.height()) == (100, 50)


class TestImageLoader:
    def test_fetch_decode_and_cache(self, loader, session):
        events = _events(loader)

        loader.load_image("https://cdn.example.com//a.png")
        loader.load_image("https://cdn.example.com/a.png")

        session.get.assert_called_once_with("https://cdn.example.com/a.png", timeout=20)
        # Each caller hears back under the url it asked for
        assert events == [
            ("loaded", "https://cdn.example.com//a.png"),
            ("loaded", "https://cdn.example.com/a.png"),
        ]
        assert loader.cached("https://cdn.example.com//a.png") is not None

    def test_http_error_reports_failure(self, loader, session):
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")
        events = _events(loader)

        loader.load_image("https://cdn.example.com/missing.png")

        assert events == [("failed", "https://cdn.example.com/missing.png")]
        assert loader.cached("https://cdn.example.com/missing.png") is None

    def test_bad_bytes_report_failure(self, loader, session):
        session.get.return_value = Mock(content=b"html error page")
        events = _events(loader)

        loader.load_image("https://cdn.example.com/b.png")

        assert events == [("failed", "https://cdn.example.com/b.png")]

    def test_empty_url(self, loader, session):
        events = _events(loader)
        loader.load_image(None)
        assert events == [("failed", "")]
        session.get.assert_not_called()

    def test_shutdown_closes_session(self, loader, session):
        loader.shutdown()
        session.close.assert_called_once_with()

"""Shared pytest fixtures and configuration

Widget tests run on Qt's offscreen platform; the variable must be set
before PyQt6 is first imported.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from quotum.core.dto.content import ImageBlock, ImageFile, TextBlock
from quotum.core.dto.post import CoinDTO, PostDTO, PostStatus
from quotum.core.preview_staging import InMemoryPreviewStager

# ==================== Core Data ====================


@pytest.fixture
def stager():
    """Fresh in-memory preview stager per test"""
    return InMemoryPreviewStager()


@pytest.fixture
def image_file():
    return ImageFile(name="chart.png", data=b"\x89PNG fake bytes", mime="image/png")


@pytest.fixture
def other_image_file():
    return ImageFile(name="chart-v2.png", data=b"\x89PNG other bytes", mime="image/png")


@pytest.fixture
def sample_coins():
    return [
        CoinDTO(id="1", name="Bitcoin", symbol="btc"),
        CoinDTO(id="2", name="Ethereum", symbol="eth"),
    ]


@pytest.fixture
def sample_posts():
    """Three posts over two days, newest first as the API returns them"""
    return [
        PostDTO(
            id="30",
            title="ETH staking flows",
            content=(TextBlock("Staking deposits keep rising."),),
            status=PostStatus.PUBLISHED,
            coin_id="2",
            created_at=datetime(2024, 1, 2, 0, 1, tzinfo=timezone.utc),
        ),
        PostDTO(
            id="20",
            title="BTC weekly close",
            content=(
                ImageBlock(url="https://cdn.example.com//posts/btc.png"),
                TextBlock("Weekly close above resistance."),
            ),
            status=PostStatus.DRAFT,
            coin_id="1",
            created_at=datetime(2024, 1, 1, 23, 0, tzinfo=timezone.utc),
        ),
        PostDTO(
            id="10",
            title="Orphaned coin",
            content=(),
            status=PostStatus.DRAFT,
            coin_id="999",
            created_at=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def raw_posts_page():
    """Paginated envelope as returned by GET /posts"""
    return {
        "data": [
            {
                "id": 7,
                "title": "Altcoin season?",
                "status": "published",
                "coin_id": 2,
                "created_at": "2024-03-05T10:15:00.000000Z",
                "content": [
                    {"type": "text", "content": "Rotation is starting."},
                    {"type": "image", "url": "https://cdn.example.com/a.png"},
                ],
            },
            {
                "id": 6,
                "title": "No timestamp",
                "status": "draft",
                "coin_id": None,
                "created_at": None,
                "content": "not a list",
            },
        ],
        "current_page": 2,
        "last_page": 5,
        "per_page": 10,
        "total": 42,
    }


# ==================== Mock Collaborators ====================


@pytest.fixture
def mock_provider(raw_posts_page):
    provider = Mock()
    provider.get_posts.return_value = raw_posts_page
    provider.get_coins.return_value = [
        {"id": 1, "name": "Bitcoin", "symbol": "btc"},
        {"id": 2, "name": "Ethereum", "symbol": "eth"},
    ]
    return provider


@pytest.fixture
def mock_persistence():
    return Mock()


@pytest.fixture
def mock_image_loader():
    """Stand-in for ImageLoader; widgets only connect to it and request urls"""
    return Mock()


# ==================== Qt ====================


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for the whole test session"""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def png_bytes(qapp):
    """A real 8x8 PNG Qt can decode"""
    from PyQt6.QtCore import QBuffer, QIODevice
    from PyQt6.QtGui import QColor, QImage

    image = QImage(8, 8, QImage.Format.Format_ARGB32)
    image.fill(QColor("#2563eb"))
    buffer = QBuffer()
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buffer, "PNG")
    return bytes(buffer.data())

"""
Tests for quotum/ui/posts - PostCard and PostsList

The image loader is a Mock; thumbnails are driven by calling the slots.

Run with: pytest tests/test_post_widgets.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest
from PyQt6.QtGui import QPixmap

from quotum.core.dto.content import TextBlock
from quotum.core.dto.post import PostDTO, PostStatus
from quotum.core.grouping import group_by_date
from quotum.ui.posts.post_card import PostCard
from quotum.ui.posts.posts_list import EMPTY_SUBTITLE, EMPTY_TITLE, PostsList

NOW = datetime(2024, 1, 2, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def card_factory(qapp, sample_coins, mock_image_loader):
    created = []

    def make(post, **kwargs):
        kwargs.setdefault("preview_text_length", 120)
        card = PostCard(post, sample_coins, image_loader=mock_image_loader, now=NOW, **kwargs)
        created.append(card)
        return card

    yield make
    for card in created:
        card.deleteLater()


class TestPostCard:
    def test_renders_post_fields(self, card_factory, sample_posts):
        # ARRANGE
        post = sample_posts[0]

        # ACT
        card = card_factory(post)

        # ASSERT
        assert card.title_label.text() == "ETH staking flows"
        assert card.preview_text == "Staking deposits keep rising."
        assert card.coin_label.text() == "Ethereum"
        assert card.status_combo.currentData() == "published"
        assert card.time_label.text() == "about 3 hours ago"
        assert card.thumbnail is None

    def test_unknown_coin_renders_no_label(self, card_factory, sample_posts):
        card = card_factory(sample_posts[2])
        assert card.coin_name is None
        assert card.coin_label is None
        assert card.preview_label.text() == ""

    def test_preview_respects_length(self, card_factory):
        post = PostDTO(id="1", title="Long", content=(TextBlock("z" * 50),))
        card = card_factory(post, preview_text_length=10)
        assert card.preview_text == "z" * 10 + "..."

    def test_thumbnail_requested_with_fixed_url(self, card_factory, sample_posts, mock_image_loader):
        card = card_factory(sample_posts[1])

        assert card.thumbnail is not None
        mock_image_loader.load_image.assert_called_once_with("https://cdn.example.com/posts/btc.png")

    def test_thumbnail_ignores_other_urls(self, card_factory, sample_posts, qapp):
        card = card_factory(sample_posts[1])
        pixmap = QPixmap(10, 10)

        card._on_image_loaded("https://cdn.example.com/other.png", pixmap)
        assert card.thumbnail.pixmap().isNull()

        card._on_image_loaded("https://cdn.example.com/posts/btc.png", pixmap)
        assert not card.thumbnail.pixmap().isNull()

    def test_edit_and_delete_intents(self, card_factory, sample_posts):
        card = card_factory(sample_posts[1])
        edits, deletes = [], []
        card.edit_requested.connect(edits.append)
        card.delete_requested.connect(deletes.append)

        card.edit_btn.click()
        card.delete_btn.click()

        assert edits == [sample_posts[1]]
        assert deletes == ["20"]

    def test_status_change_intent(self, card_factory, sample_posts):
        card = card_factory(sample_posts[1])
        changes = []
        card.status_change_requested.connect(lambda post_id, status: changes.append((post_id, status)))

        card.status_combo.setCurrentIndex(card.status_combo.findData("published"))

        assert changes == [("20", "published")]

    def test_reselecting_current_status_emits_nothing(self, card_factory):
        post = PostDTO(id="5", title="Draft", status=PostStatus.DRAFT)
        card = card_factory(post)
        changes = []
        card.status_change_requested.connect(lambda *args: changes.append(args))

        card.status_combo.setCurrentIndex(card.status_combo.findData("draft"))

        assert changes == []


class TestPostsList:
    @pytest.fixture
    def posts_list(self, qapp, mock_image_loader):
        widget = PostsList(preview_text_length=120, image_loader=mock_image_loader)
        yield widget
        widget.deleteLater()

    def test_empty_state(self, posts_list, sample_coins):
        posts_list.set_posts(group_by_date([]), sample_coins)

        assert not posts_list.empty_state.isHidden()
        assert posts_list.empty_state.title_label.text() == EMPTY_TITLE
        assert posts_list.empty_state.subtitle_label.text() == EMPTY_SUBTITLE
        assert posts_list.groups == []

    def test_groups_by_day(self, posts_list, sample_posts, sample_coins):
        # ACT
        posts_list.set_posts(group_by_date(sample_posts), sample_coins, now=NOW)

        # ASSERT
        assert posts_list.empty_state.isHidden()
        assert [g.heading_label.text() for g in posts_list.groups] == ["January 2, 2024", "January 1, 2024"]
        assert [c.post.id for c in posts_list.cards()] == ["30", "20", "10"]

    def test_rerender_replaces_groups(self, posts_list, sample_posts, sample_coins):
        posts_list.set_posts(group_by_date(sample_posts), sample_coins)
        posts_list.set_posts(group_by_date(sample_posts[:1]), sample_coins)
        assert len(posts_list.groups) == 1

    def test_card_intents_are_forwarded(self, posts_list, sample_posts, sample_coins):
        posts_list.set_posts(group_by_date(sample_posts), sample_coins)
        deletes = []
        posts_list.delete_requested.connect(deletes.append)

        posts_list.cards()[2].delete_btn.click()

        assert deletes == ["10"]

"""
Tests for quotum/ui/editor - PostForm and content block widgets

Run with: pytest tests/test_post_form.py -v
"""

import pytest

from quotum.core.dto.content import BlockType, ImageBlock, ImageFile, ImageState, TextBlock
from quotum.core.dto.post import PostStatus
from quotum.ui.editor.content_block_widget import (
    DROP_ZONE_TEXT,
    ImageBlockWidget,
    TextBlockWidget,
    create_block_widget,
)
from quotum.ui.editor.post_form import PostForm


@pytest.fixture
def form(qapp, sample_coins, stager, mock_image_loader):
    widget = PostForm(sample_coins, stager=stager, image_loader=mock_image_loader)
    yield widget
    widget.deleteLater()


@pytest.fixture
def png_file(png_bytes):
    return ImageFile(name="chart.png", data=png_bytes, mime="image/png")


class TestBlockWidgets:
    def test_factory_dispatch(self, qapp, stager, mock_image_loader):
        text = create_block_widget(0, TextBlock("hi"), stager, mock_image_loader)
        image = create_block_widget(1, ImageBlock(), stager, mock_image_loader)
        assert isinstance(text, TextBlockWidget)
        assert isinstance(image, ImageBlockWidget)
        with pytest.raises(TypeError):
            create_block_widget(2, "nope", stager)

    def test_empty_image_shows_drop_zone(self, qapp, stager, mock_image_loader):
        widget = ImageBlockWidget(0, ImageBlock(), stager, mock_image_loader)
        assert widget.thumbnail is None
        assert widget.drop_zone.label.text() == DROP_ZONE_TEXT
        mock_image_loader.load_image.assert_not_called()

    def test_staged_image_paints_local_bytes(self, qapp, stager, png_file, mock_image_loader):
        ref = stager.stage(png_file)
        block = ImageBlock(file=png_file, preview_url=ref)

        widget = ImageBlockWidget(0, block, stager, mock_image_loader)

        assert widget.drop_zone is None
        assert not widget.thumbnail.pixmap().isNull()
        mock_image_loader.load_image.assert_not_called()

    def test_persisted_image_goes_through_loader(self, qapp, stager, mock_image_loader):
        ImageBlockWidget(0, ImageBlock(url="https://cdn.example.com//a.png"), stager, mock_image_loader)
        mock_image_loader.load_image.assert_called_once_with("https://cdn.example.com/a.png")

    def test_staged_preview_shadows_persisted_url(self, qapp, stager, png_file, mock_image_loader):
        ref = stager.stage(png_file)
        block = ImageBlock(url="https://cdn.example.com/old.png", file=png_file, preview_url=ref)

        widget = ImageBlockWidget(0, block, stager, mock_image_loader)

        assert not widget.thumbnail.pixmap().isNull()
        mock_image_loader.load_image.assert_not_called()

    def test_select_file_emits_index(self, qapp, stager, image_file, mock_image_loader):
        widget = ImageBlockWidget(3, ImageBlock(), stager, mock_image_loader)
        received = []
        widget.image_selected.connect(lambda index, file: received.append((index, file)))

        widget.select_file(image_file)

        assert received == [(3, image_file)]


class TestPostFormBlocks:
    def test_add_blocks(self, form):
        form.add_text_btn.click()
        form.add_image_btn.click()

        assert form.editor.blocks == (TextBlock(""), ImageBlock())
        assert [type(w) for w in form.block_widgets] == [TextBlockWidget, ImageBlockWidget]

    def test_typing_updates_editor(self, form):
        form.add_block(BlockType.TEXT)

        form.block_widgets[0].editor.setPlainText("line one\nline two")

        assert form.editor.blocks[0].content == "line one\nline two"

    def test_selecting_image_stages_preview(self, form, stager, png_file):
        # ARRANGE
        form.add_block(BlockType.IMAGE)

        # ACT
        form.block_widgets[0].select_file(png_file)

        # ASSERT
        block = form.editor.blocks[0]
        assert block.state is ImageState.STAGED
        assert stager.live_count == 1
        assert form.block_widgets[0].thumbnail is not None

    def test_delete_block_releases_preview(self, form, stager, png_file):
        form.add_block(BlockType.TEXT)
        form.add_block(BlockType.IMAGE)
        form.block_widgets[1].select_file(png_file)

        form.block_widgets[1].delete_btn.click()

        assert stager.live_count == 0
        assert form.editor.blocks == (TextBlock(""),)

    def test_cancel_discards_session(self, form, stager, png_file):
        form.add_block(BlockType.IMAGE)
        form.block_widgets[0].select_file(png_file)
        form.title_input.setText("Unsaved")
        cancelled = []
        form.cancelled.connect(lambda: cancelled.append(True))

        form.cancel_btn.click()

        assert cancelled == [True]
        assert stager.live_count == 0
        assert form.editor.blocks == ()
        assert form.title_input.text() == ""


class TestPostFormSubmit:
    def test_title_required(self, form):
        submitted = []
        form.submitted.connect(submitted.append)

        form.submit_btn.click()

        assert submitted == []
        assert form.error_label.text() == "Title is required."
        assert not form.error_label.isHidden()

    def test_coin_required(self, form):
        form.title_input.setText("Weekly outlook")
        assert form.validation_error() == "Please select a coin."

    def test_submit_emits_draft(self, form):
        # ARRANGE
        form.title_input.setText("  Weekly outlook  ")
        form.coin_combo.setCurrentIndex(form.coin_combo.findData("2"))
        form.status_combo.setCurrentIndex(form.status_combo.findData("published"))
        form.add_block(BlockType.TEXT)
        form.block_widgets[0].editor.setPlainText("Body")
        submitted = []
        form.submitted.connect(submitted.append)

        # ACT
        form.submit_btn.click()

        # ASSERT
        assert len(submitted) == 1
        draft = submitted[0]
        assert draft.title == "Weekly outlook"
        assert draft.coin_id == "2"
        assert draft.status is PostStatus.PUBLISHED
        assert draft.content == (TextBlock("Body"),)
        assert form.error_label.isHidden()


class TestPostFormEdit:
    def test_start_edit_populates_fields(self, form, sample_posts):
        post = sample_posts[1]

        form.start_edit(post)

        assert form.editing_id == "20"
        assert form.heading.text() == "Edit Post"
        assert form.submit_btn.text() == "Save Changes"
        assert form.title_input.text() == "BTC weekly close"
        assert form.coin_combo.currentData() == "1"
        assert form.status_combo.currentData() == "draft"
        assert form.editor.blocks == post.content
        assert len(form.block_widgets) == 2

    def test_unknown_coin_falls_back_to_placeholder(self, form, sample_posts):
        form.start_edit(sample_posts[2])
        assert form.coin_combo.currentData() is None

    def test_reset_returns_to_create_mode(self, form, sample_posts):
        form.start_edit(sample_posts[0])
        form.reset()
        assert form.editing_id is None
        assert form.heading.text() == "Create New Post"
        assert form.submit_btn.text() == "Create Post"

    def test_set_coins_keeps_selection(self, form, sample_coins):
        form.coin_combo.setCurrentIndex(form.coin_combo.findData("2"))
        form.set_coins(sample_coins)
        assert form.coin_combo.currentData() == "2"

"""
Editing operations over a post's ordered content blocks.

The module-level functions are value-in/value-out: they take a block tuple
and return a new one. The only side effect is on the preview stager, which
owns the local preview references of staged image blocks.

ContentEditor wraps those functions into an edit session for the post form.
"""
from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from quotum.core.dto.content import (
    BlockType,
    Blocks,
    ContentBlock,
    ImageBlock,
    ImageFile,
    ImageState,
    TextBlock,
    unknown_block,
)
from quotum.core.preview_staging import PreviewStager, get_preview_stager

logger = logging.getLogger(__name__)


class BlockContractError(IndexError):
    """Raised when an edit targets a missing block or the wrong block variant."""

    def __init__(self, index: int, message: Optional[str] = None):
        self.index = index
        super().__init__(message or f"no editable block at index {index}")


def _block_at(blocks: Sequence[ContentBlock], index: int) -> ContentBlock:
    # Negative indices are caller bugs here, not "from the end"
    if not isinstance(index, int) or index < 0 or index >= len(blocks):
        raise BlockContractError(index, f"block index {index} out of range (0..{len(blocks) - 1})")
    return blocks[index]


def _replace_at(blocks: Sequence[ContentBlock], index: int, block: ContentBlock) -> Blocks:
    updated = list(blocks)
    updated[index] = block
    return tuple(updated)


def add_block(blocks: Sequence[ContentBlock], block_type: BlockType | str) -> Blocks:
    """Append an empty block of the given type."""
    kind = BlockType(block_type)
    if kind is BlockType.TEXT:
        block: ContentBlock = TextBlock(content="")
    else:
        block = ImageBlock()
    return tuple(blocks) + (block,)


def edit_text(blocks: Sequence[ContentBlock], index: int, new_content: str) -> Blocks:
    block = _block_at(blocks, index)
    if not isinstance(block, TextBlock):
        raise BlockContractError(index, f"block {index} is not a text block")
    return _replace_at(blocks, index, dataclasses.replace(block, content=new_content))


def select_image(
    blocks: Sequence[ContentBlock],
    index: int,
    file: ImageFile,
    stager: PreviewStager,
) -> Blocks:
    """
    Stage ``file`` on the image block at ``index``.

    A fresh preview reference replaces the previous one, which is released.
    The remote ``url`` is left untouched.
    """
    block = _block_at(blocks, index)
    if not isinstance(block, ImageBlock):
        raise BlockContractError(index, f"block {index} is not an image block")

    previous = block.preview_url
    preview_url = stager.stage(file)
    updated = _replace_at(
        blocks, index, dataclasses.replace(block, file=file, preview_url=preview_url)
    )
    stager.release(previous)
    logger.debug(f"Staged image on block {index}: {file.name}")
    return updated


def delete_block(
    blocks: Sequence[ContentBlock],
    index: int,
    stager: PreviewStager,
) -> Blocks:
    """Remove the block at ``index``, releasing its preview reference if staged."""
    block = _block_at(blocks, index)
    if isinstance(block, ImageBlock) and block.preview_url:
        stager.release(block.preview_url)
    return tuple(blocks[:index]) + tuple(blocks[index + 1:])


def release_previews(blocks: Sequence[ContentBlock], stager: PreviewStager) -> None:
    for block in blocks:
        if isinstance(block, ImageBlock) and block.preview_url:
            stager.release(block.preview_url)


# ---------------------------------------------------------
# Submission
# ---------------------------------------------------------

def build_submission(blocks: Sequence[ContentBlock]) -> Tuple[List[Dict[str, Any]], List[ImageFile]]:
    """
    Split blocks into the JSON content list and the files to upload.

    Staged images are referenced by their position in the returned file
    list (``{"type": "image", "index": n}``, uploaded as ``images[n]``).
    Persisted images keep their url; empty image blocks are dropped.
    """
    content: List[Dict[str, Any]] = []
    files: List[ImageFile] = []
    for block in blocks:
        if isinstance(block, TextBlock):
            content.append({"type": BlockType.TEXT.value, "content": block.content})
        elif isinstance(block, ImageBlock):
            state = block.state
            if state is ImageState.STAGED:
                content.append({"type": BlockType.IMAGE.value, "index": len(files)})
                files.append(block.file)
            elif state is ImageState.PERSISTED:
                content.append({"type": BlockType.IMAGE.value, "url": block.url})
        else:
            raise unknown_block(block)
    return content, files


def content_json(content: List[Dict[str, Any]]) -> str:
    return json.dumps(content, ensure_ascii=False)


# ---------------------------------------------------------
# Edit session
# ---------------------------------------------------------

class ContentEditor:
    """
    Edit session over one post's blocks.

    Owns every preview reference it stages. ``discard()`` (or ``load()`` of
    another post) releases them.
    """

    def __init__(self, blocks: Sequence[ContentBlock] = (), stager: Optional[PreviewStager] = None):
        self._stager = stager or get_preview_stager()
        self._blocks: Blocks = tuple(blocks)

    @property
    def blocks(self) -> Blocks:
        return self._blocks

    @property
    def stager(self) -> PreviewStager:
        return self._stager

    def __len__(self) -> int:
        return len(self._blocks)

    def load(self, blocks: Sequence[ContentBlock]) -> None:
        self.discard()
        self._blocks = tuple(blocks)

    def add(self, block_type: BlockType | str) -> int:
        self._blocks = add_block(self._blocks, block_type)
        return len(self._blocks) - 1

    def edit_text(self, index: int, new_content: str) -> None:
        self._blocks = edit_text(self._blocks, index, new_content)

    def select_image(self, index: int, file: ImageFile) -> None:
        self._blocks = select_image(self._blocks, index, file, self._stager)

    def delete(self, index: int) -> None:
        self._blocks = delete_block(self._blocks, index, self._stager)

    def submission(self) -> Tuple[List[Dict[str, Any]], List[ImageFile]]:
        return build_submission(self._blocks)

    def discard(self) -> None:
        release_previews(self._blocks, self._stager)
        self._blocks = ()

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class BlockType(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class ImageState(str, Enum):
    EMPTY = "empty"        # awaiting upload
    STAGED = "staged"      # local file chosen, not yet uploaded
    PERSISTED = "persisted"  # remote url, no local file


@dataclass(frozen=True)
class ImageFile:
    """Binary handle for a locally chosen image (file dialog or clipboard)."""
    name: str
    data: bytes = field(repr=False)
    mime: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path | str) -> "ImageFile":
        p = Path(path)
        mime, _ = mimetypes.guess_type(p.name)
        return cls(name=p.name, data=p.read_bytes(), mime=mime)

    @classmethod
    def from_clipboard(cls, data: bytes, fmt: str = "png") -> "ImageFile":
        return cls(name=f"pasted.{fmt}", data=data, mime=f"image/{fmt}")

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class TextBlock:
    content: str = ""
    type: BlockType = field(default=BlockType.TEXT, init=False)


@dataclass(frozen=True)
class ImageBlock:
    url: Optional[str] = None
    file: Optional[ImageFile] = None
    preview_url: Optional[str] = None
    type: BlockType = field(default=BlockType.IMAGE, init=False)

    def __post_init__(self):
        if self.file is not None and not self.preview_url:
            raise ValueError("image block holds a file without a preview reference")

    @property
    def state(self) -> ImageState:
        if self.file is not None:
            return ImageState.STAGED
        if self.url:
            return ImageState.PERSISTED
        return ImageState.EMPTY

    @property
    def display_source(self) -> Optional[str]:
        """Reference to render: the local preview wins over the remote url."""
        return self.preview_url or self.url or None


ContentBlock = Union[TextBlock, ImageBlock]
Blocks = Tuple[ContentBlock, ...]


def unknown_block(block: object) -> TypeError:
    """Error for a value that is neither block variant."""
    return TypeError(f"unsupported content block: {type(block).__name__}")


# ---------------------------------------------------------
# Wire format
# ---------------------------------------------------------

def block_from_raw(raw: Any) -> Optional[ContentBlock]:
    """
    Parse one raw block dict. Returns None for anything unusable.

    Examples:
        >>> block_from_raw({"type": "text", "content": "hi"})
        TextBlock(content='hi', type=<BlockType.TEXT: 'text'>)
        >>> block_from_raw({"type": "video"}) is None
        True
    """
    if not isinstance(raw, dict):
        return None
    kind = raw.get("type")
    if kind == BlockType.TEXT.value:
        content = raw.get("content")
        return TextBlock(content=content if isinstance(content, str) else "")
    if kind == BlockType.IMAGE.value:
        url = raw.get("url")
        return ImageBlock(url=url if isinstance(url, str) and url else None)
    logger.debug(f"Skipping unknown content block type: {kind!r}")
    return None


def blocks_from_raw(content: Any) -> Blocks:
    """Parse a raw content list. A non-sequence value means no blocks."""
    if not isinstance(content, (list, tuple)):
        return ()
    blocks: List[ContentBlock] = []
    for raw in content:
        block = block_from_raw(raw)
        if block is not None:
            blocks.append(block)
    return tuple(blocks)

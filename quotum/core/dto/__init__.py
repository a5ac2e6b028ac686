from quotum.core.dto.content import (
    BlockType,
    Blocks,
    ContentBlock,
    ImageBlock,
    ImageFile,
    ImageState,
    TextBlock,
    block_from_raw,
    blocks_from_raw,
)
from quotum.core.dto.pagination import PaginationDescriptor
from quotum.core.dto.post import (
    CoinDTO,
    PostDraft,
    PostDTO,
    PostsPageDTO,
    PostStatus,
    coins_from_raw,
    parse_timestamp,
    post_detail_from_raw,
    posts_from_raw,
    posts_page_from_raw,
    resolve_coin_name,
)

__all__ = [
    # Content blocks
    "BlockType",
    "Blocks",
    "ContentBlock",
    "ImageBlock",
    "ImageFile",
    "ImageState",
    "TextBlock",
    "block_from_raw",
    "blocks_from_raw",

    # Posts
    "CoinDTO",
    "PostDraft",
    "PostDTO",
    "PostsPageDTO",
    "PostStatus",
    "coins_from_raw",
    "parse_timestamp",
    "post_detail_from_raw",
    "posts_from_raw",
    "posts_page_from_raw",
    "resolve_coin_name",

    # Pagination
    "PaginationDescriptor",
]

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from quotum.core.dto.content import Blocks, blocks_from_raw
from quotum.core.dto.pagination import PaginationDescriptor

logger = logging.getLogger(__name__)


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"

    @classmethod
    def parse(cls, value: Any) -> "PostStatus":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.DRAFT

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class CoinDTO:
    id: str
    name: str
    symbol: str = ""
    coingecko_id: str = ""

    @property
    def display_name(self) -> str:
        if self.symbol:
            return f"{self.name} ({self.symbol.upper()})"
        return self.name

    @property
    def feed_key(self) -> str:
        """Identifier of the coin in the public platform routes."""
        return self.coingecko_id or self.id


@dataclass(frozen=True)
class PostDTO:
    id: str
    title: str
    content: Blocks = ()
    status: PostStatus = PostStatus.DRAFT
    coin_id: Optional[str] = None
    created_at: Optional[datetime] = None
    coin_name: Optional[str] = None  # embedded coin record, when the API sends one


@dataclass(frozen=True)
class PostDraft:
    """Form state submitted for create/update."""
    title: str = ""
    coin_id: Optional[str] = None
    status: PostStatus = PostStatus.DRAFT
    content: Blocks = ()


@dataclass(frozen=True)
class PostsPageDTO:
    posts: List[PostDTO] = field(default_factory=list)
    pagination: PaginationDescriptor = field(default_factory=PaginationDescriptor)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an API timestamp into a datetime. Returns None when unusable.

    Accepts datetime objects, ISO-8601 strings (a trailing ``Z`` is read as
    UTC) and epoch seconds or milliseconds.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        ts = float(value)
        if ts > 10**12:
            ts = ts / 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        if cleaned.isdigit():
            return parse_timestamp(int(cleaned))
        if cleaned.endswith(("Z", "z")):
            cleaned = cleaned[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(cleaned)
        except ValueError:
            pass
        # Laravel-style fractional seconds may carry more digits than fromisoformat allows
        head, sep, tail = cleaned.partition(".")
        if sep:
            digits = "".join(ch for ch in tail if ch.isdigit())
            offset = tail[len(digits):]
            try:
                return datetime.fromisoformat(f"{head}.{digits[:6].ljust(6, '0')}{offset}")
            except ValueError:
                return None
    return None


def _as_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def coin_from_raw(raw: Dict[str, Any]) -> Optional[CoinDTO]:
    if not isinstance(raw, dict) or raw.get("id") is None:
        return None
    return CoinDTO(
        id=str(raw["id"]),
        name=str(raw.get("name") or ""),
        symbol=str(raw.get("symbol") or ""),
        coingecko_id=str(raw.get("coingecko_id") or ""),
    )


def coins_from_raw(items: Any) -> List[CoinDTO]:
    if not isinstance(items, list):
        return []
    coins = []
    for raw in items:
        coin = coin_from_raw(raw)
        if coin is not None:
            coins.append(coin)
    return coins


def post_from_raw(raw: Dict[str, Any]) -> Optional[PostDTO]:
    if not isinstance(raw, dict) or raw.get("id") is None:
        logger.debug(f"Skipping post record without id: {raw!r}")
        return None
    coin = raw.get("coin") if isinstance(raw.get("coin"), dict) else {}
    return PostDTO(
        id=str(raw["id"]),
        title=str(raw.get("title") or ""),
        content=blocks_from_raw(raw.get("content")),
        status=PostStatus.parse(raw.get("status")),
        coin_id=_as_id(raw.get("coin_id")) or _as_id(coin.get("id")),
        created_at=parse_timestamp(raw.get("created_at")),
        coin_name=coin.get("name") if isinstance(coin.get("name"), str) else None,
    )


def post_detail_from_raw(data: Any) -> Optional[PostDTO]:
    """Single-post response; the record may be wrapped in ``{"data": {...}}``."""
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    return post_from_raw(data)


def posts_from_raw(items: Any) -> List[PostDTO]:
    if not isinstance(items, list):
        return []
    posts = []
    for raw in items:
        post = post_from_raw(raw)
        if post is not None:
            posts.append(post)
    return posts


def posts_page_from_raw(data: Dict[str, Any]) -> PostsPageDTO:
    data = data if isinstance(data, dict) else {}
    return PostsPageDTO(
        posts=posts_from_raw(data.get("data")),
        pagination=PaginationDescriptor.from_raw(data),
    )


def resolve_coin_name(coin_id: Optional[str], coins: Sequence[CoinDTO]) -> Optional[str]:
    """Coin name for ``coin_id``, or None when it resolves to no known coin."""
    if coin_id is None:
        return None
    for coin in coins or ():
        if coin is not None and coin.id == str(coin_id):
            return coin.name
    return None


def coin_choices(coins: Sequence[CoinDTO]) -> Tuple[Tuple[str, str], ...]:
    """(coin_id, label) pairs for the form selector."""
    return tuple((coin.id, coin.display_name) for coin in coins)

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Iterable, List, Optional, Tuple

from quotum.core.dto.content import ImageBlock, TextBlock
from quotum.core.dto.post import PostDTO, parse_timestamp

logger = logging.getLogger(__name__)

PREVIEW_TEXT_LENGTH = 120
TEASER_TEXT_LENGTH = 200
TRUNCATION_MARKER = "..."
DATE_KEY_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class DateBucket:
    date_key: str
    posts: Tuple[PostDTO, ...]

    @property
    def heading(self) -> str:
        return format_date_heading(self.date_key)


@dataclass(frozen=True)
class GroupedPosts:
    buckets: Tuple[DateBucket, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Explicit empty-state signal: nothing left to render."""
        return not self.buckets

    def __iter__(self):
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)


@dataclass(frozen=True)
class PostPreview:
    image_url: Optional[str] = None
    text: str = ""


def date_key_for(created_at: Any, tz: Optional[tzinfo] = None) -> Optional[str]:
    """
    Calendar-day key (YYYY-MM-DD) for a timestamp, or None if unusable.

    The day is taken in the timestamp's own offset unless ``tz`` is given,
    in which case aware timestamps are converted first.
    """
    ts = parse_timestamp(created_at)
    if ts is None:
        return None
    if tz is not None and ts.tzinfo is not None:
        ts = ts.astimezone(tz)
    return ts.strftime(DATE_KEY_FORMAT)


def group_by_date(posts: Iterable[PostDTO], *, tz: Optional[tzinfo] = None) -> GroupedPosts:
    """
    Bucket posts by calendar day, most recent day first.

    Posts without a usable ``created_at`` are left out. Within a bucket the
    input order is kept.
    """
    groups: "OrderedDict[str, List[PostDTO]]" = OrderedDict()
    skipped = 0
    for post in posts or ():
        key = date_key_for(getattr(post, "created_at", None), tz)
        if key is None:
            skipped += 1
            continue
        groups.setdefault(key, []).append(post)

    if skipped:
        logger.debug(f"Skipped {skipped} post(s) without a usable created_at")

    # YYYY-MM-DD sorts lexicographically in date order
    buckets = tuple(
        DateBucket(date_key=key, posts=tuple(groups[key]))
        for key in sorted(groups, reverse=True)
    )
    return GroupedPosts(buckets=buckets)


def truncate_preview(text: str, max_length: int = PREVIEW_TEXT_LENGTH) -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_MARKER


def extract_preview(content: Any, *, max_length: int = PREVIEW_TEXT_LENGTH) -> PostPreview:
    """
    First persisted image url and first text snippet of a post.

    Staged (local) images never count. A non-sequence ``content`` has no
    blocks.
    """
    if not isinstance(content, (list, tuple)):
        return PostPreview()

    image_url: Optional[str] = None
    text: Optional[str] = None
    for block in content:
        if image_url is None and isinstance(block, ImageBlock) and block.url:
            image_url = block.url
        elif text is None and isinstance(block, TextBlock):
            text = block.content
        if image_url is not None and text is not None:
            break

    return PostPreview(
        image_url=image_url,
        text=truncate_preview(text or "", max_length),
    )


def teaser_text(content: Any, max_length: int = TEASER_TEXT_LENGTH) -> str:
    """
    Feed teaser: the first text block cut to ``max_length``, always followed
    by the truncation marker. Posts without a text block have no teaser.
    """
    if not isinstance(content, (list, tuple)):
        return ""
    for block in content:
        if isinstance(block, TextBlock):
            return block.content[:max_length] + TRUNCATION_MARKER
    return ""


def format_date_heading(date_key: str) -> str:
    """
    Human heading for a bucket key.

    Examples:
        >>> format_date_heading("2024-01-02")
        'January 2, 2024'
    """
    try:
        day = datetime.strptime(date_key, DATE_KEY_FORMAT).date()
    except (TypeError, ValueError):
        return date_key or ""
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def format_relative_time(created_at: Any, now: Optional[datetime] = None) -> str:
    """
    "5 minutes ago" style label for a post timestamp.

    Returns an empty string when the timestamp is unusable.
    """
    ts = parse_timestamp(created_at)
    if ts is None:
        return ""
    if now is None:
        now = datetime.now(ts.tzinfo)
    elif (now.tzinfo is None) != (ts.tzinfo is None):
        # Mixed naive/aware values: compare wall clocks
        now = now.replace(tzinfo=None)
        ts = ts.replace(tzinfo=None)

    seconds = (now - ts).total_seconds()
    future = seconds < 0
    seconds = abs(seconds)

    if seconds < 45:
        phrase = "less than a minute"
    elif seconds < 90:
        phrase = "1 minute"
    elif seconds < 45 * 60:
        phrase = f"{round(seconds / 60)} minutes"
    elif seconds < 90 * 60:
        phrase = "about 1 hour"
    elif seconds < 24 * 3600:
        phrase = f"about {round(seconds / 3600)} hours"
    elif seconds < 42 * 3600:
        phrase = "1 day"
    elif seconds < 30 * 86400:
        phrase = f"{round(seconds / 86400)} days"
    elif seconds < 45 * 86400:
        phrase = "about 1 month"
    elif seconds < 365 * 86400:
        phrase = f"{round(seconds / (30 * 86400))} months"
    else:
        years = seconds / (365 * 86400)
        phrase = "about 1 year" if years < 1.5 else f"about {round(years)} years"

    return f"in {phrase}" if future else f"{phrase} ago"

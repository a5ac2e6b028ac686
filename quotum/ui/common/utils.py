"""
UI Utility Functions

Small string helpers shared by the post widgets.
"""
from __future__ import annotations

import re
from typing import Optional

_SCHEME_SLASHES = re.compile(r"(https?://)/+")
_DUPLICATE_SLASHES = re.compile(r"([^:]/)/+")


def fix_image_url(url: Optional[str]) -> Optional[str]:
    """
    Collapse duplicated slashes in a remote image url.

    The storage backend sometimes joins paths with an extra slash.

    Examples:
        >>> fix_image_url("https:///cdn.example.com//posts///a.png")
        'https://cdn.example.com/posts/a.png'
        >>> fix_image_url(None) is None
        True
    """
    if not url:
        return url
    url = _SCHEME_SLASHES.sub(r"\1", url)
    return _DUPLICATE_SLASHES.sub(r"\1", url)


def elide(text: str, max_length: int, ellipsis: str = "...") -> str:
    """
    Shorten text to ``max_length`` characters including the ellipsis.

    Examples:
        >>> elide("Hello world", 8)
        'Hello...'
        >>> elide("Short", 10)
        'Short'
    """
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - len(ellipsis))] + ellipsis

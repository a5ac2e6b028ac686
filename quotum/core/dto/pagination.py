from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

DEFAULT_PER_PAGE = 10


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class PaginationDescriptor:
    current_page: int = 1
    last_page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    total: int = 0

    def __post_init__(self):
        if self.per_page < 1:
            raise ValueError(f"per_page must be >= 1, got {self.per_page}")
        if self.total < 0:
            raise ValueError(f"total must be >= 0, got {self.total}")
        if not 1 <= self.current_page <= self.last_page:
            raise ValueError(
                f"current_page {self.current_page} outside 1..{self.last_page}"
            )

    @property
    def is_paginated(self) -> bool:
        return self.last_page > 1

    @classmethod
    def from_raw(cls, data: Optional[Dict[str, Any]]) -> "PaginationDescriptor":
        """
        Build from a paginated API envelope; missing keys fall back to page 1 of 1.

        Envelopes without ``last_page`` derive it from ``total`` and ``per_page``.
        """
        data = data or {}
        per_page = max(1, _as_int(data.get("per_page"), DEFAULT_PER_PAGE))
        total = max(0, _as_int(data.get("total"), 0))
        if data.get("last_page") is None:
            last_page = max(1, -(-total // per_page))
        else:
            last_page = max(1, _as_int(data.get("last_page"), 1))
        current_page = min(max(1, _as_int(data.get("current_page"), 1)), last_page)
        return cls(
            current_page=current_page,
            last_page=last_page,
            per_page=per_page,
            total=total,
        )

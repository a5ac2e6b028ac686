"""
Page window computation shared by every pagination control.

compute_window() is a pure projection from a PaginationDescriptor to the
entries a control renders (page numbers and ellipsis markers) plus the
"Showing X to Y of Z results" range. Controls only differ in styling.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from quotum.core.dto.pagination import PaginationDescriptor

# Pages on each side of the current page that are always numbered
WINDOW_RADIUS = 1
# Distance from the current page at which a skipped page becomes "..."
ELLIPSIS_DISTANCE = 2


class _Ellipsis:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ELLIPSIS"


ELLIPSIS = _Ellipsis()


@dataclass(frozen=True)
class PageEntry:
    number: int
    is_current: bool = False


WindowEntry = Union[PageEntry, _Ellipsis]


@dataclass(frozen=True)
class WindowPlan:
    entries: Tuple[WindowEntry, ...] = ()
    current_page: int = 1
    last_page: int = 1
    start: Optional[int] = None
    end: Optional[int] = None
    total: int = 0

    @property
    def visible(self) -> bool:
        return bool(self.entries)

    @property
    def has_previous(self) -> bool:
        return self.visible and self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.visible and self.current_page < self.last_page

    @property
    def previous_page(self) -> Optional[int]:
        return self.current_page - 1 if self.has_previous else None

    @property
    def next_page(self) -> Optional[int]:
        return self.current_page + 1 if self.has_next else None

    def page_numbers(self) -> Tuple[int, ...]:
        return tuple(e.number for e in self.entries if isinstance(e, PageEntry))


EMPTY_PLAN = WindowPlan()


def compute_window(
    desc: PaginationDescriptor,
    *,
    radius: int = WINDOW_RADIUS,
    ellipsis_distance: int = ELLIPSIS_DISTANCE,
) -> WindowPlan:
    """
    Compute the render plan for a pagination control.

    Page 1, the last page and pages within ``radius`` of the current page
    are numbered. A page exactly ``ellipsis_distance`` away that is not
    numbered shows as ELLIPSIS; anything further is omitted.

    Examples:
        >>> plan = compute_window(PaginationDescriptor(5, 10, 10, 100))
        >>> [getattr(e, "number", "...") for e in plan.entries]
        [1, '...', 4, 5, 6, '...', 10]
    """
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    if ellipsis_distance <= radius:
        raise ValueError("ellipsis_distance must be greater than radius")

    if not desc.is_paginated:
        return EMPTY_PLAN

    current, last = desc.current_page, desc.last_page

    # Only pages that can possibly render need checking
    candidates = {1, last}
    candidates.update(range(max(1, current - ellipsis_distance), min(last, current + ellipsis_distance) + 1))

    entries = []
    for page in sorted(candidates):
        distance = abs(page - current)
        if page == 1 or page == last or distance <= radius:
            entries.append(PageEntry(number=page, is_current=page == current))
        elif distance == ellipsis_distance:
            entries.append(ELLIPSIS)

    return WindowPlan(
        entries=tuple(entries),
        current_page=current,
        last_page=last,
        start=(current - 1) * desc.per_page + 1,
        end=min(current * desc.per_page, desc.total),
        total=desc.total,
    )


def summary_text(plan: WindowPlan) -> str:
    if not plan.visible:
        return ""
    return f"Showing {plan.start} to {plan.end} of {plan.total} results"

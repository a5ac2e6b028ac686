"""
Tests for quotum/ui/common/pagination_widgets.py

Run with: pytest tests/test_pagination_widgets.py -v
"""

import pytest

from quotum.core.dto.pagination import PaginationDescriptor
from quotum.core.pagination import compute_window
from quotum.ui.common.pagination_widgets import AdminPagination, DefaultPagination


@pytest.fixture(params=[AdminPagination, DefaultPagination])
def pagination(request, qapp):
    widget = request.param()
    yield widget
    widget.deleteLater()


def _render(widget, **fields):
    widget.set_plan(compute_window(PaginationDescriptor(**fields)))


def _emitted(widget):
    received = []
    widget.page_changed.connect(received.append)
    return received


class TestRendering:
    def test_hidden_until_paginated(self, pagination):
        assert pagination.isHidden()

        _render(pagination, current_page=1, last_page=1, total=4)

        assert pagination.isHidden()
        assert pagination.summary_label.text() == ""

    def test_window_buttons_and_summary(self, pagination):
        # ACT
        _render(pagination, current_page=5, last_page=10, per_page=10, total=95)

        # ASSERT
        assert not pagination.isHidden()
        assert sorted(pagination._page_buttons) == [1, 4, 5, 6, 10]
        assert pagination.page_button(2) is None
        assert pagination.summary_label.text() == "Showing 41 to 50 of 95 results"
        assert pagination.prev_btn.isEnabled()
        assert pagination.next_btn.isEnabled()

    def test_step_buttons_disabled_at_edges(self, pagination):
        _render(pagination, current_page=1, last_page=3, total=30)
        assert not pagination.prev_btn.isEnabled()
        assert pagination.next_btn.isEnabled()

        _render(pagination, current_page=3, last_page=3, total=30)
        assert pagination.prev_btn.isEnabled()
        assert not pagination.next_btn.isEnabled()

    def test_rerender_replaces_buttons(self, pagination):
        _render(pagination, current_page=5, last_page=10, total=100)
        _render(pagination, current_page=1, last_page=2, total=20)
        assert sorted(pagination._page_buttons) == [1, 2]

    def test_collapses_back_to_hidden(self, pagination):
        _render(pagination, current_page=1, last_page=4, total=40)
        _render(pagination, current_page=1, last_page=1, total=2)
        assert pagination.isHidden()


class TestNavigation:
    def test_page_button_emits_target(self, pagination):
        _render(pagination, current_page=5, last_page=10, total=100)
        received = _emitted(pagination)

        pagination.page_button(10).click()

        assert received == [10]

    def test_step_buttons_emit_neighbours(self, pagination):
        _render(pagination, current_page=5, last_page=10, total=100)
        received = _emitted(pagination)

        pagination.prev_btn.click()
        pagination.next_btn.click()

        assert received == [4, 6]

    def test_disabled_previous_emits_nothing(self, pagination):
        _render(pagination, current_page=1, last_page=3, total=30)
        received = _emitted(pagination)

        pagination.prev_btn.click()
        pagination._go_to_page(0)
        pagination._go_to_page(4)

        assert received == []


class TestTuning:
    def test_wider_ellipsis_distance(self, pagination):
        plan = compute_window(PaginationDescriptor(current_page=6, last_page=12, total=120), ellipsis_distance=3)

        pagination.set_plan(plan)

        assert pagination.plan is plan
        assert sorted(pagination._page_buttons) == [1, 5, 6, 7, 12]
        assert not pagination.isHidden()

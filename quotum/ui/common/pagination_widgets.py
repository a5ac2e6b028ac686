"""
Numbered pagination controls.

Both controls render a compute_window() plan supplied by a feed manager:
Previous, page numbers with "..." markers, Next, and a "Showing X to Y of
Z results" summary. AdminPagination uses the dark admin palette, DefaultPagination
the light one. With a single page the control hides itself.
"""
from PyQt6.QtWidgets import QWidget, QHBoxLayout, QPushButton, QLabel
from PyQt6.QtCore import pyqtSignal, Qt
import logging
from typing import Dict, Optional
import qtawesome as qta

from quotum.core.pagination import EMPTY_PLAN, PageEntry, WindowPlan, summary_text
from quotum.ui.common.theme import Colors, Fonts, LightColors, Spacing

logger = logging.getLogger(__name__)


class _WindowPaginationBase(QWidget):
    """
    Shared rendering of a WindowPlan.

    Subclasses only pick a palette.
    """

    page_changed = pyqtSignal(int)  # 1-indexed target page

    PALETTE = Colors
    OBJECT_NAME = "pagination"

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName(self.OBJECT_NAME)
        self._plan: WindowPlan = EMPTY_PLAN
        self._page_buttons: Dict[int, QPushButton] = {}
        self._setup_ui()
        self.setVisible(False)

    def _setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(Spacing.LG, Spacing.MD, Spacing.LG, Spacing.MD)
        layout.setSpacing(Spacing.SM)

        self.summary_label = QLabel("")
        self.summary_label.setStyleSheet(
            f"color: {self.PALETTE.TEXT_PRIMARY}; font-size: {Fonts.SIZE_MD}px;"
        )
        layout.addWidget(self.summary_label)
        layout.addStretch()

        self.prev_btn = self._make_step_button('fa5s.chevron-left', "Previous page")
        self.prev_btn.clicked.connect(lambda: self._go_to_page(self._plan.previous_page))
        layout.addWidget(self.prev_btn)

        self._pages_container = QWidget()
        self._pages_layout = QHBoxLayout(self._pages_container)
        self._pages_layout.setContentsMargins(0, 0, 0, 0)
        self._pages_layout.setSpacing(0)
        layout.addWidget(self._pages_container)

        self.next_btn = self._make_step_button('fa5s.chevron-right', "Next page")
        self.next_btn.clicked.connect(lambda: self._go_to_page(self._plan.next_page))
        layout.addWidget(self.next_btn)

        self.setStyleSheet(f"""
            QWidget#{self.OBJECT_NAME} {{
                background-color: {self.PALETTE.BG_PRIMARY};
                border-top: 1px solid {self.PALETTE.BORDER_DEFAULT};
                border-radius: {Spacing.RADIUS_LG}px;
            }}
        """)

    def _make_step_button(self, icon_name: str, tooltip: str) -> QPushButton:
        btn = QPushButton()
        btn.setIcon(qta.icon(icon_name, color=self.PALETTE.TEXT_PRIMARY,
                             color_disabled=self.PALETTE.STATE_DISABLED_TEXT))
        btn.setFixedSize(Spacing.BUTTON_HEIGHT, Spacing.BUTTON_HEIGHT)
        btn.setToolTip(tooltip)
        btn.setCursor(Qt.CursorShape.PointingHandCursor)
        btn.setStyleSheet(self._button_style(current=False))
        return btn

    def _button_style(self, current: bool) -> str:
        p = self.PALETTE
        if current:
            return f"""
                QPushButton {{
                    background-color: {p.ACCENT_PRIMARY};
                    color: {p.TEXT_WHITE};
                    border: none;
                    font-size: {Fonts.SIZE_MD}px;
                    font-weight: {Fonts.WEIGHT_MEDIUM};
                    padding: 6px 14px;
                }}
            """
        return f"""
            QPushButton {{
                background-color: {p.BG_PRIMARY};
                color: {p.TEXT_PRIMARY};
                border: 1px solid {p.BORDER_DEFAULT};
                font-size: {Fonts.SIZE_MD}px;
                font-weight: {Fonts.WEIGHT_MEDIUM};
                padding: 6px 14px;
            }}
            QPushButton:hover {{ background-color: {p.BG_HOVER}; }}
            QPushButton:disabled {{
                background-color: {p.STATE_DISABLED_BG};
                color: {p.STATE_DISABLED_TEXT};
            }}
        """

    # ---------------------------------------------------------
    # Public API
    # ---------------------------------------------------------

    @property
    def plan(self) -> WindowPlan:
        return self._plan

    def page_button(self, page: int) -> Optional[QPushButton]:
        return self._page_buttons.get(page)

    def set_plan(self, plan: WindowPlan):
        """Render ``plan``. A plan without entries hides the whole control."""
        self._plan = plan
        self._rebuild_pages()
        self.summary_label.setText(summary_text(self._plan))
        self._update_buttons()
        self.setVisible(self._plan.visible)

    # ---------------------------------------------------------
    # Internals
    # ---------------------------------------------------------

    def _clear_pages(self):
        while self._pages_layout.count():
            item = self._pages_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._page_buttons.clear()

    def _rebuild_pages(self):
        self._clear_pages()
        for entry in self._plan.entries:
            if isinstance(entry, PageEntry):
                btn = QPushButton(str(entry.number))
                btn.setCursor(Qt.CursorShape.PointingHandCursor)
                btn.setStyleSheet(self._button_style(current=entry.is_current))
                btn.clicked.connect(lambda _checked=False, n=entry.number: self._go_to_page(n))
                self._pages_layout.addWidget(btn)
                self._page_buttons[entry.number] = btn
            else:
                marker = QLabel("...")
                marker.setStyleSheet(
                    f"color: {self.PALETTE.TEXT_PRIMARY}; font-size: {Fonts.SIZE_MD}px; padding: 6px 14px;"
                )
                self._pages_layout.addWidget(marker)

    def _update_buttons(self):
        self.prev_btn.setEnabled(self._plan.has_previous)
        self.next_btn.setEnabled(self._plan.has_next)

    def _go_to_page(self, page: Optional[int]):
        # Disabled steps resolve to None; nothing is emitted for them
        if page is None or not 1 <= page <= self._plan.last_page:
            return
        logger.debug(f"Pagination requested page {page}")
        self.page_changed.emit(page)


class AdminPagination(_WindowPaginationBase):
    """Dark pagination used on the admin post feed."""

    PALETTE = Colors
    OBJECT_NAME = "adminPagination"


class DefaultPagination(_WindowPaginationBase):
    """Light pagination for the default-styled screens."""

    PALETTE = LightColors
    OBJECT_NAME = "defaultPagination"

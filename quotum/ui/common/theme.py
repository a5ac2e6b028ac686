"""
Centralized theme configuration for the application.

Single source of truth for the colors, fonts, spacing and stylesheet
snippets used by the widgets. The admin screens use the dark palette
(Colors); the default pagination control uses LightColors.

Usage:
    from quotum.ui.common.theme import Colors, Fonts, Spacing, Styles

    label.setStyleSheet(f"color: {Colors.TEXT_PRIMARY};")
    icon = qta.icon('fa5s.pencil-alt', color=Colors.ACCENT_PRIMARY)
"""
from typing import Optional


class Colors:
    """
    Dark admin palette.

      Backgrounds: #111111 (primary), #1a1a1a (secondary), #222222 (cards)
      Borders:     #333333
      Text:        #f3f4f6 (primary), #9ca3af (secondary), #6b7280 (muted)
      Accent:      #2563eb (primary action, current page)
    """

    ACCENT_PRIMARY = "#2563eb"
    ACCENT_PRIMARY_HOVER = "#1d4ed8"
    ACCENT_ERROR = "#f87171"
    ACCENT_FOCUS = "#3b82f6"

    TEXT_PRIMARY = "#f3f4f6"
    TEXT_BODY = "#d1d5db"
    TEXT_SECONDARY = "#9ca3af"
    TEXT_MUTED = "#6b7280"
    TEXT_WHITE = "#ffffff"

    BG_PRIMARY = "#111111"
    BG_SECONDARY = "#1a1a1a"
    BG_TERTIARY = "#222222"
    BG_HOVER = "#333333"
    BG_HOVER_STRONG = "#444444"

    BORDER_DEFAULT = "#333333"

    # Post status pills
    STATUS_PUBLISHED_BG = "#14532d"
    STATUS_PUBLISHED_TEXT = "#bbf7d0"
    STATUS_DRAFT_BG = "#713f12"
    STATUS_DRAFT_TEXT = "#fef08a"

    ERROR_BG = "#2a1212"
    ERROR_BORDER = "#ef4444"
    ERROR_TEXT = "#fca5a5"

    ICON_DEFAULT = TEXT_SECONDARY
    STATE_DISABLED_BG = BG_HOVER
    STATE_DISABLED_TEXT = TEXT_SECONDARY


class LightColors:
    """Light palette used by the default-styled pagination."""

    ACCENT_PRIMARY = Colors.ACCENT_PRIMARY
    TEXT_PRIMARY = "#374151"
    TEXT_SECONDARY = "#6b7280"
    TEXT_WHITE = "#ffffff"
    BG_PRIMARY = "#ffffff"
    BG_HOVER = "#f9fafb"
    BORDER_DEFAULT = "#e5e7eb"
    STATE_DISABLED_BG = "#f3f4f6"
    STATE_DISABLED_TEXT = "#9ca3af"


class Fonts:
    """Font sizes and weights."""

    FAMILY = '"Inter", "Segoe UI", sans-serif'

    SIZE_XS = 11
    SIZE_SM = 12
    SIZE_MD = 13
    SIZE_LG = 14
    SIZE_XL = 16
    SIZE_TITLE = 22

    WEIGHT_NORMAL = 400
    WEIGHT_MEDIUM = 500
    WEIGHT_SEMIBOLD = 600
    WEIGHT_BOLD = 700


class Spacing:
    """Spacing and sizing constants."""

    XS = 4
    SM = 8
    MD = 12
    LG = 16
    XL = 24

    RADIUS_SM = 4
    RADIUS_MD = 6
    RADIUS_LG = 8
    RADIUS_ROUND = 9999

    ICON_SM = 16
    ICON_MD = 20
    ICON_XL = 48

    BUTTON_HEIGHT = 32
    THUMBNAIL = 96
    IMAGE_BLOCK_PREVIEW = 96
    DETAIL_IMAGE_MAX_WIDTH = 720
    IMAGE_BLOCK_STAGED_HEIGHT = 160
    TEXT_BLOCK_MIN_HEIGHT = 96


class Styles:
    """Pre-built stylesheet snippets for dynamic styling."""

    CARD = f"""
        QFrame#postCard {{
            background-color: {Colors.BG_TERTIARY};
            border: 1px solid {Colors.BORDER_DEFAULT};
            border-radius: {Spacing.RADIUS_LG}px;
        }}
    """

    PANEL = f"""
        QFrame#formPanel, QFrame#emptyState {{
            background-color: {Colors.BG_TERTIARY};
            border: 1px solid {Colors.BORDER_DEFAULT};
            border-radius: {Spacing.RADIUS_LG}px;
        }}
    """

    INPUT = f"""
        QLineEdit, QPlainTextEdit, QComboBox {{
            background-color: {Colors.BG_PRIMARY};
            border: 1px solid {Colors.BORDER_DEFAULT};
            border-radius: {Spacing.RADIUS_LG}px;
            color: {Colors.TEXT_BODY};
            padding: 6px 10px;
        }}
        QLineEdit:focus, QPlainTextEdit:focus, QComboBox:focus {{
            border-color: {Colors.ACCENT_FOCUS};
        }}
    """

    ERROR_BANNER = f"""
        QLabel#errorBanner {{
            background-color: {Colors.ERROR_BG};
            border: 1px solid {Colors.ERROR_BORDER};
            border-radius: {Spacing.RADIUS_LG}px;
            color: {Colors.ERROR_TEXT};
            padding: {Spacing.MD}px;
        }}
    """

    DROP_ZONE = f"""
        QFrame#imageDropZone {{
            background-color: {Colors.BG_PRIMARY};
            border: 2px dashed {Colors.BORDER_DEFAULT};
            border-radius: {Spacing.RADIUS_LG}px;
        }}
    """

    @staticmethod
    def label(
        color: str = Colors.TEXT_PRIMARY,
        size: int = Fonts.SIZE_MD,
        weight: int = Fonts.WEIGHT_NORMAL,
        padding: Optional[int] = None,
        bg: Optional[str] = None,
    ) -> str:
        """Generate label stylesheet with size validation."""
        # Font size must stay > 0 to avoid Qt warnings
        safe_size = max(1, size) if size else Fonts.SIZE_MD
        style = f"color: {color}; font-size: {safe_size}px; font-weight: {weight};"
        if padding is not None:
            style += f" padding: {padding}px;"
        if bg is not None:
            style += f" background-color: {bg}; border-radius: {Spacing.RADIUS_MD}px;"
        return f"QLabel {{ {style} }}"

    @staticmethod
    def button_primary() -> str:
        return f"""
            QPushButton {{
                background-color: {Colors.ACCENT_PRIMARY};
                border: none;
                border-radius: {Spacing.RADIUS_LG}px;
                color: {Colors.TEXT_WHITE};
                padding: 8px 16px;
            }}
            QPushButton:hover {{ background-color: {Colors.ACCENT_PRIMARY_HOVER}; }}
        """

    @staticmethod
    def button_secondary() -> str:
        return f"""
            QPushButton {{
                background-color: {Colors.BG_HOVER};
                border: none;
                border-radius: {Spacing.RADIUS_LG}px;
                color: {Colors.TEXT_BODY};
                padding: 8px 12px;
            }}
            QPushButton:hover {{ background-color: {Colors.BG_HOVER_STRONG}; }}
        """

    @staticmethod
    def button_icon() -> str:
        return f"""
            QPushButton {{
                background-color: transparent;
                border: none;
                border-radius: {Spacing.RADIUS_LG}px;
                padding: 4px;
            }}
            QPushButton:hover {{ background-color: {Colors.BG_HOVER}; }}
        """

    @staticmethod
    def status_pill(published: bool) -> str:
        bg = Colors.STATUS_PUBLISHED_BG if published else Colors.STATUS_DRAFT_BG
        fg = Colors.STATUS_PUBLISHED_TEXT if published else Colors.STATUS_DRAFT_TEXT
        return f"""
            QComboBox {{
                background-color: {bg};
                color: {fg};
                border: none;
                border-radius: 10px;
                font-size: {Fonts.SIZE_XS}px;
                font-weight: {Fonts.WEIGHT_MEDIUM};
                padding: 2px 10px;
            }}
        """

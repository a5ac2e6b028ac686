"""
Main application entry point for Quotum Admin
"""
import os
import sys

# Disable Qt's automatic DPI scaling for consistent pixel sizes across displays
os.environ["QT_SCALE_FACTOR"] = "1"

import logging
import asyncio
from PyQt6.QtWidgets import QApplication, QSplashScreen
from PyQt6.QtCore import Qt, QtMsgType, qInstallMessageHandler
from PyQt6.QtGui import QPixmap, QPainter, QColor, QFont, QPalette, QIcon
import qasync

from quotum import __version__
from quotum.ui.common.theme import Colors
from quotum.utils.file_utils import get_resource_path


def create_splash_screen(app: QApplication) -> QSplashScreen:
    """Create a splash screen for app startup."""
    width, height = 400, 250
    pixmap = QPixmap(width, height)
    pixmap.fill(QColor(Colors.BG_SECONDARY))

    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)

    # Accent line at top
    painter.fillRect(0, 0, width, 4, QColor(Colors.ACCENT_PRIMARY))

    painter.setPen(QColor(Colors.TEXT_PRIMARY))
    painter.setFont(QFont("Segoe UI", 24, QFont.Weight.Bold))
    painter.drawText(0, 80, width, 40, Qt.AlignmentFlag.AlignCenter, "Quotum Admin")

    painter.setPen(QColor(Colors.TEXT_SECONDARY))
    painter.setFont(QFont("Segoe UI", 12))
    painter.drawText(0, 120, width, 30, Qt.AlignmentFlag.AlignCenter, f"v{app.applicationVersion()}")

    painter.setPen(QColor(Colors.TEXT_MUTED))
    painter.setFont(QFont("Segoe UI", 10))
    painter.drawText(0, height - 50, width, 30, Qt.AlignmentFlag.AlignCenter, "Loading...")

    painter.end()

    splash = QSplashScreen(pixmap)
    splash.setWindowFlags(Qt.WindowType.SplashScreen | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint)
    return splash


def qt_message_handler(mode, context, message):
    """Custom Qt message handler to filter out known harmless warnings."""
    if "QFont::setPointSize: Point size <= 0" in message:
        return

    # Qt6 is stricter about stylesheets but the styles still apply
    if "Could not parse application stylesheet" in message:
        return

    if mode == QtMsgType.QtDebugMsg:
        logging.debug(f"Qt: {message}")
    elif mode == QtMsgType.QtInfoMsg:
        logging.info(f"Qt: {message}")
    elif mode == QtMsgType.QtWarningMsg:
        logging.warning(f"Qt: {message}")
    elif mode == QtMsgType.QtCriticalMsg:
        logging.error(f"Qt: {message}")
    elif mode == QtMsgType.QtFatalMsg:
        logging.critical(f"Qt: {message}")


def setup_logging(settings=None):
    """Configure application logging"""
    from quotum.utils.logging_config import setup_logging as setup_categorized_logging

    logging_manager = setup_categorized_logging(settings)
    qInstallMessageHandler(qt_message_handler)

    logger = logging.getLogger(__name__)
    logger.info("=" * 50)
    logger.info("Quotum Admin Starting")
    logger.info("=" * 50)

    return logging_manager


def apply_dark_palette(app: QApplication):
    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, QColor(Colors.BG_PRIMARY))
    palette.setColor(QPalette.ColorRole.WindowText, QColor(Colors.TEXT_PRIMARY))
    palette.setColor(QPalette.ColorRole.Base, QColor(Colors.BG_PRIMARY))
    palette.setColor(QPalette.ColorRole.AlternateBase, QColor(Colors.BG_SECONDARY))
    palette.setColor(QPalette.ColorRole.ToolTipBase, QColor(Colors.BG_TERTIARY))
    palette.setColor(QPalette.ColorRole.ToolTipText, QColor(Colors.TEXT_PRIMARY))
    palette.setColor(QPalette.ColorRole.Text, QColor(Colors.TEXT_BODY))
    palette.setColor(QPalette.ColorRole.Button, QColor(Colors.BG_HOVER))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor(Colors.TEXT_BODY))
    palette.setColor(QPalette.ColorRole.Link, QColor(Colors.ACCENT_FOCUS))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(Colors.ACCENT_PRIMARY))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor(Colors.TEXT_WHITE))
    app.setPalette(palette)


async def async_main(splash: QSplashScreen = None):
    """Async main function with Qt event loop integration"""
    logger = logging.getLogger(__name__)

    try:
        from quotum.core.context import CoreContext
        from quotum.ui.posts.post_management import PostManagementWindow
        from quotum.utils.file_utils import apply_windows_dark_mode
        from quotum.utils.logging_config import get_logging_manager

        app = QApplication.instance()
        apply_dark_palette(app)

        icon_path = get_resource_path('resources', 'icon.ico')
        if icon_path.exists():
            app.setWindowIcon(QIcon(str(icon_path)))
            logger.info(f"Application icon loaded: {icon_path}")

        if splash:
            splash.showMessage("Initializing...", Qt.AlignmentFlag.AlignBottom | Qt.AlignmentFlag.AlignHCenter, QColor(Colors.TEXT_MUTED))

        logger.info("Initializing core context...")
        core = CoreContext()

        # Per-category log levels live in the settings store
        get_logging_manager(core.settings).setup_logging()

        if splash:
            splash.showMessage("Creating UI...", Qt.AlignmentFlag.AlignBottom | Qt.AlignmentFlag.AlignHCenter, QColor(Colors.TEXT_MUTED))

        logger.info("Creating post management window...")
        main_window = PostManagementWindow(
            core.posts,
            stager=core.stager,
            preview_text_length=core.preview_text_length,
            token_setter=core.settings.set_api_token,
            coin_feed=core.coin_feed,
        )
        apply_windows_dark_mode(main_window)

        if splash:
            splash.finish(main_window)

        main_window.show()
        main_window.load()

        logger.info("Application started successfully")

        # Keep reference to prevent garbage collection
        app._main_window = main_window
        app._core_context = core

    except Exception as e:
        logger.exception(f"Fatal error during startup: {e}")
        sys.exit(1)


def main():
    """Main application entry point"""
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        app = QApplication(sys.argv)
        app.setApplicationName("Quotum Admin")
        app.setApplicationVersion(__version__)
        app.setOrganizationName("Quotum")

        splash = create_splash_screen(app)
        splash.show()
        app.processEvents()

        loop = qasync.QEventLoop(app)
        asyncio.set_event_loop(loop)

        logger.info("Starting application with asyncio event loop integration")

        with loop:
            loop.run_until_complete(async_main(splash))
            loop.run_forever()

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)
    finally:
        logger.info("Shutting down...")
        if 'app' in locals():
            if hasattr(app, '_core_context'):
                app._core_context.close()
            from quotum.ui.images.image_loader import get_image_loader
            get_image_loader().shutdown()
        logger.info("Application closed")


if __name__ == "__main__":
    main()

"""
Centralized logging configuration with categorized loggers.

This module provides:
- Named categories for different subsystems
- Per-category log level control
- Persistent levels via the settings store
"""
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Dict, Optional


class LoggerCategory:
    """Named categories for application loggers"""
    CORE = "core"          # Managers, grouping, pagination, context
    API = "api"            # Dashboard HTTP client
    EDITOR = "editor"      # Content blocks and preview staging
    UI = "ui"              # Widgets and windows
    SETTINGS = "settings"  # Settings store


DEFAULT_LOG_LEVELS = {
    LoggerCategory.CORE: logging.INFO,
    LoggerCategory.API: logging.INFO,
    LoggerCategory.EDITOR: logging.INFO,
    LoggerCategory.UI: logging.WARNING,  # Reduce UI noise
    LoggerCategory.SETTINGS: logging.INFO,
}


MODULE_TO_CATEGORY = {
    # Core
    'quotum.core': LoggerCategory.CORE,
    'quotum.core.context': LoggerCategory.CORE,
    'quotum.core.posts_manager': LoggerCategory.CORE,
    'quotum.core.grouping': LoggerCategory.CORE,
    'quotum.core.pagination': LoggerCategory.CORE,
    'quotum.core.dto': LoggerCategory.CORE,

    # API
    'quotum.core.api': LoggerCategory.API,
    'quotum.core.api.base': LoggerCategory.API,
    'quotum.core.api.dashboard': LoggerCategory.API,

    # Editor
    'quotum.core.content_editor': LoggerCategory.EDITOR,
    'quotum.core.preview_staging': LoggerCategory.EDITOR,
    'quotum.ui.editor': LoggerCategory.EDITOR,

    # UI
    'quotum.ui': LoggerCategory.UI,
    'quotum.ui.common': LoggerCategory.UI,
    'quotum.ui.posts': LoggerCategory.UI,

    # Settings
    'quotum.core.settings_store': LoggerCategory.SETTINGS,
}


class LoggingManager:
    """Manages application-wide logging configuration"""

    def __init__(self, log_dir: Optional[Path] = None, settings=None):
        """
        Initialize logging manager.

        Args:
            log_dir: Directory for log files
            settings: SettingsStore for persistent levels
        """
        self.log_dir = log_dir or (Path.home() / ".quotum-admin" / "logs")
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.settings = settings
        self._category_levels: Dict[str, int] = {}
        self._load_levels()

    def _load_levels(self):
        """Load log levels from the settings store"""
        if not self.settings:
            self._category_levels = DEFAULT_LOG_LEVELS.copy()
            return

        for category, default_level in DEFAULT_LOG_LEVELS.items():
            config_key = f'log_level_{category}'
            level_name = self.settings.get_config(config_key, logging.getLevelName(default_level))
            level = logging.getLevelName(str(level_name).upper())
            if isinstance(level, int):
                self._category_levels[category] = level
            else:
                self._category_levels[category] = default_level

    def get_category_level(self, category: str) -> int:
        return self._category_levels.get(category, logging.INFO)

    def set_category_level(self, category: str, level: int):
        """Set log level for a category"""
        self._category_levels[category] = level
        if self.settings:
            self.settings.set_config(f'log_level_{category}', logging.getLevelName(level))

        self._apply_category_level(category, level)

    def _apply_category_level(self, category: str, level: int):
        """Apply level to all loggers in a category"""
        for module_name, cat in MODULE_TO_CATEGORY.items():
            if cat == category:
                logging.getLogger(module_name).setLevel(level)

    def setup_logging(self, root_level: int = logging.INFO):
        """
        Setup application logging with categories.

        Args:
            root_level: Root logger level (default: INFO)
        """
        log_file = self.log_dir / "quotum_admin.log"

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        root_logger.setLevel(root_level)

        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)

        root_logger.addHandler(file_handler)
        root_logger.addHandler(stream_handler)

        for category, level in self._category_levels.items():
            self._apply_category_level(category, level)

        # Silence noisy third-party loggers
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)
        logging.getLogger('asyncio').setLevel(logging.WARNING)

    def get_all_levels(self) -> Dict[str, int]:
        return self._category_levels.copy()


# Global instance
_logging_manager: Optional[LoggingManager] = None


def get_logging_manager(settings=None) -> LoggingManager:
    """Get or create the global logging manager"""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager(settings=settings)
    elif settings is not None and _logging_manager.settings is None:
        # Logging starts before the settings store exists; pick up stored levels now
        _logging_manager.settings = settings
        _logging_manager._load_levels()
    return _logging_manager


def setup_logging(settings=None):
    """Setup application logging (convenience function)"""
    manager = get_logging_manager(settings)
    manager.setup_logging()
    return manager

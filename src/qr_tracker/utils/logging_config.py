"""
Centralized logging configuration for QR Tracker.
Provides component-specific loggers with separate log files.
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import get_config

LOGGER_PREFIX = "qr_tracker"

DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class ComponentLogger:
    """Manages component-specific logging with separate files."""

    _loggers: Dict[str, logging.Logger] = {}
    _initialized = False
    _log_dir: Optional[Path] = None
    _to_file = True
    _debug = False

    # Component definitions with their log levels
    COMPONENTS = {
        'api': {'level': logging.INFO, 'file': 'api.log'},
        'registry': {'level': logging.INFO, 'file': 'registry.log'},
        'scan': {'level': logging.INFO, 'file': 'scan.log'},
        'render': {'level': logging.INFO, 'file': 'render.log'},
        'main': {'level': logging.INFO, 'file': 'main.log'},
        'error': {'level': logging.ERROR, 'file': 'errors.log'},  # Centralized error log
    }

    # Module path segment -> component
    MODULE_COMPONENTS = {
        'api': 'api',
        'main': 'api',
        'repositories': 'registry',
        'registry': 'registry',
        'scan_workflow': 'scan',
        'geolocation': 'scan',
        'decoder': 'scan',
        'qr_render': 'render',
        'export': 'render',
        'launcher': 'main',
    }

    @classmethod
    def initialize(cls, log_dir: Optional[str] = None, debug: Optional[bool] = None) -> None:
        """
        Initialize the logging system with component-specific loggers.

        Args:
            log_dir: Directory for log files. Defaults to config.app.log_dir
            debug: Enable debug logging for all components. Defaults to config.server.debug
        """
        if cls._initialized:
            return

        config = get_config()
        cls._debug = config.server.debug if debug is None else debug
        cls._to_file = config.app.log_to_file

        detailed_formatter = logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
        simple_formatter = logging.Formatter(SIMPLE_FORMAT, datefmt='%H:%M:%S')

        root_level = logging.DEBUG if cls._debug else logging.INFO

        session_dir = datetime.now().strftime("%Y%m%d_%H%M%S")
        if cls._to_file:
            # Session-specific subdirectory
            cls._log_dir = Path(log_dir or config.app.log_dir) / session_dir
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        for component_name, component_config in cls.COMPONENTS.items():
            logger = logging.getLogger(f"{LOGGER_PREFIX}.{component_name}")
            logger.handlers.clear()
            logger.propagate = False

            level = logging.DEBUG if cls._debug else component_config['level']
            logger.setLevel(level)

            if cls._to_file:
                file_handler = logging.handlers.RotatingFileHandler(
                    cls._log_dir / component_config['file'],
                    maxBytes=10 * 1024 * 1024,  # 10MB
                    backupCount=5,
                    encoding='utf-8'
                )
                file_handler.setLevel(level)
                file_handler.setFormatter(detailed_formatter)
                logger.addHandler(file_handler)

            # Console handler: errors only when writing files, everything otherwise
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(logging.ERROR if cls._to_file else level)
            console_handler.setFormatter(simple_formatter)
            logger.addHandler(console_handler)

            cls._loggers[component_name] = logger

        # Mark as initialized before logging to avoid recursion
        cls._initialized = True

        main_logger = cls._loggers['main']
        main_logger.info("=" * 80)
        main_logger.info("QR Tracker Logging System Initialized")
        main_logger.info(f"Session: {session_dir}")
        main_logger.info(f"Log directory: {cls._log_dir if cls._to_file else '(console only)'}")
        main_logger.info(f"Debug mode: {cls._debug}")
        main_logger.info("=" * 80)

    @classmethod
    def resolve_component(cls, component: str) -> str:
        """Map a module path like 'qr_tracker.services.scan_workflow' to a component name."""
        if not component.startswith(f"{LOGGER_PREFIX}."):
            return component

        parts = component.split('.')[1:]
        for part in reversed(parts):
            if part in cls.MODULE_COMPONENTS:
                return cls.MODULE_COMPONENTS[part]
        return 'main'

    @classmethod
    def get_logger(cls, component: str) -> logging.Logger:
        """
        Get a logger for a specific component.

        Args:
            component: Component name (api, registry, scan, render, main)
                      or a module path like 'qr_tracker.services.registry'

        Returns:
            Logger instance for the component
        """
        if not cls._initialized:
            cls.initialize()

        component = cls.resolve_component(component)
        if component not in cls._loggers:
            cls._create_component_logger(component)
        return cls._loggers[component]

    @classmethod
    def _create_component_logger(cls, component: str) -> None:
        """Create a component logger on-demand."""
        logger = logging.getLogger(f"{LOGGER_PREFIX}.{component}")
        logger.handlers.clear()
        logger.propagate = False

        level = logging.DEBUG if cls._debug else logging.INFO
        logger.setLevel(level)

        if cls._to_file and cls._log_dir is not None:
            file_handler = logging.handlers.RotatingFileHandler(
                cls._log_dir / f'{component}.log',
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            logger.addHandler(file_handler)
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt='%H:%M:%S'))
            logger.addHandler(console_handler)

        cls._loggers[component] = logger

    @classmethod
    def log_exception(cls, component: str, exc: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an exception with context to both component and error logs.

        Args:
            component: Component where the exception occurred
            exc: The exception to log
            context: Additional context information
        """
        component_logger = cls.get_logger(component)
        error_logger = cls.get_logger('error')

        context_str = ""
        if context:
            context_str = " | Context: " + ", ".join(f"{k}={v}" for k, v in context.items())

        component_logger.error(
            f"Exception in {component}: {type(exc).__name__}: {exc}{context_str}", exc_info=exc
        )
        error_logger.error(f"[{component}] {type(exc).__name__}: {exc}{context_str}", exc_info=exc)

    @classmethod
    def get_log_directory(cls) -> Optional[Path]:
        """Get the current log directory path."""
        return cls._log_dir

    @classmethod
    def reset(cls) -> None:
        """Close handlers and forget all loggers so the next call re-initializes."""
        for logger in cls._loggers.values():
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()
        cls._loggers = {}
        cls._initialized = False
        cls._log_dir = None


# Convenience functions
def get_logger(component: str) -> logging.Logger:
    """Get a logger for a specific component."""
    return ComponentLogger.get_logger(component)


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a module using its __name__.
    This automatically maps module paths to appropriate components.

    Example:
        logger = get_module_logger(__name__)  # Works from any module
    """
    return ComponentLogger.get_logger(module_name)


def initialize_logging(log_dir: Optional[str] = None, debug: Optional[bool] = None) -> None:
    """Initialize the logging system."""
    ComponentLogger.initialize(log_dir=log_dir, debug=debug)


def log_exception(component: str, exc: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception with context."""
    ComponentLogger.log_exception(component, exc, context)


def get_log_directory() -> Optional[Path]:
    """Get the current log directory path."""
    return ComponentLogger.get_log_directory()

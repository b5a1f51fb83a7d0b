"""
Simple structured logging for tidyconf.
"""

import os
import time
from contextlib import contextmanager
from typing import Optional

from loguru import logger as loguru_logger


class AsyncLogger:
    """
    Component logger with plain format.

    Format: timestamp | level | component | message
    Context is passed as keyword arguments and lands in the record extras.
    """

    # Single file handler shared between all instances
    _handler_id = None

    def __init__(self, component: str, debug_mode: Optional[bool] = None):
        self.component = component
        self.debug_mode = _get_debug_mode() if debug_mode is None else debug_mode
        self._setup_file_handler()

    def _setup_file_handler(self):
        """
        Add the rotating file sink when TIDYCONF_LOG_FILE is set.

        Features:
        - Non-blocking (enqueue)
        - Rotation at 10MB, zip compression
        - Singleton: only one handler per process
        """
        log_file = os.getenv("TIDYCONF_LOG_FILE")
        if log_file and AsyncLogger._handler_id is None:
            AsyncLogger._handler_id = loguru_logger.add(
                log_file,
                format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[component]} | {message}",
                rotation="10 MB",
                compression="zip",
                enqueue=True,
            )

    def log(self, level: str, message: str, **context):
        """Log a message bound to this component."""
        loguru_logger.bind(component=self.component).log(level, message, **context)

    def debug(self, message: str, **context):
        """Log DEBUG level."""
        self.log("DEBUG", message, **context)

    def info(self, message: str, **context):
        """Log INFO level."""
        self.log("INFO", message, **context)

    def warning(self, message: str, **context):
        """Log WARNING level."""
        self.log("WARNING", message, **context)

    def error(self, message: str, **context):
        """Log ERROR level, with the current stack trace in debug mode."""
        if self.debug_mode:
            import traceback

            context["stack_trace"] = traceback.format_exc()

        self.log("ERROR", message, **context)


class PerformanceLogger:
    """
    Logger specialized for timing operations.

    Records the duration of each measured block.
    """

    def __init__(self):
        self.logger = AsyncLogger("performance")

    @contextmanager
    def measure(self, operation: str, **context):
        """
        Context manager to time an operation.

        Usage:
        ```
        with perf_logger.measure("prune", location="config.yml"):
            prune_redundant(tree, paths)
        ```
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start
            self.logger.debug(
                "Operation completed", operation=operation, duration_ms=duration * 1000, **context
            )


def _get_debug_mode() -> bool:
    """Read debug mode from the environment."""
    return os.getenv("TIDYCONF_DEBUG", "false").lower() == "true"


def logging_requested() -> bool:
    """True when the environment asks for log output (log file or debug mode)."""
    return bool(os.getenv("TIDYCONF_LOG_FILE")) or _get_debug_mode()


def enable_logging() -> None:
    """Turn on tidyconf records, which are disabled on import."""
    loguru_logger.enable("tidyconf")


# Global configured logger
logger = AsyncLogger("tidyconf")
perf_logger = PerformanceLogger()

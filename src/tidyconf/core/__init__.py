"""
tidyconf core module.

Exports errors and logging shared by every other module.
"""

# Exceptions and errors
from tidyconf.core.exceptions import (
    TidyconfError,
    ConfigurationError,
    MalformedPathError,
    DuplicateBindingError,
    StructuralConflictError,
    TypeCoercionError,
    StorageError,
    UnsupportedFormatError,
    ErrorKind,
    ErrorReport,
    from_exception,
)

# Logging
from tidyconf.core.logging import (
    AsyncLogger,
    PerformanceLogger,
    logger,  # Pre-configured global logger
    perf_logger,
    enable_logging,
    logging_requested,
)

__all__ = [
    # Exceptions
    "TidyconfError",
    "ConfigurationError",
    "MalformedPathError",
    "DuplicateBindingError",
    "StructuralConflictError",
    "TypeCoercionError",
    "StorageError",
    "UnsupportedFormatError",
    # Reports
    "ErrorKind",
    "ErrorReport",
    "from_exception",
    # Logging
    "AsyncLogger",
    "PerformanceLogger",
    "logger",
    "perf_logger",
    "enable_logging",
    "logging_requested",
]

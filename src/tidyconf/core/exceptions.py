"""
Unified exception hierarchy for tidyconf.
SINGLE SOURCE of exceptions and error reports for the whole library.
"""

import secrets
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional, List

from pydantic import BaseModel, Field


# ============================================================================
# PART 1: PYTHON EXCEPTIONS (for raise/catch)
# ============================================================================


class TidyconfError(Exception):
    """
    Base error of tidyconf.

    Features:
    1. Structured serialization
    2. Rich context
    3. Resolution suggestions
    4. Unique ID for tracking
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        self.id: str = secrets.token_hex(16)
        self.timestamp: datetime = datetime.now(timezone.utc)
        self.message: str = message
        self.code: str = code or self.__class__.__name__
        self.context: Dict[str, Any] = context or {}
        self.cause: Optional[Exception] = cause
        self.suggestions: List[str] = []
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a plain dictionary.

        Returns:
            {
                "error_id": "hex32chars",
                "code": "DuplicateBindingError",
                "message": "Path 'server.port' is already declared",
                "timestamp": "2024-01-20T10:30:00Z",
                "context": {...}
            }
        """
        result: Dict[str, Any] = {
            "error_id": self.id,
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "context": self.context,
        }

        if self.cause:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}

        if self.suggestions:
            result["suggestions"] = self.suggestions

        return result

    def add_suggestion(self, suggestion: str) -> None:
        """
        Add a resolution hint to the error.

        Suggestions accumulate, duplicates are ignored.

        Example:
            error = StorageError("Cannot parse config.yml")
            error.add_suggestion("Check the YAML indentation")
        """
        if not suggestion or not isinstance(suggestion, str):
            return

        if suggestion not in self.suggestions:
            self.suggestions.append(suggestion)


class ConfigurationError(TidyconfError):
    """Error in how configuration properties were declared."""

    pass


class MalformedPathError(ConfigurationError):
    """
    Dotted path that cannot be split into segments.

    Raised for empty strings, leading/trailing separators and
    consecutive separators ("a..b").
    """

    pass


class DuplicateBindingError(ConfigurationError):
    """Same path declared twice on one config object."""

    pass


class StructuralConflictError(TidyconfError):
    """
    An intermediate segment holds a scalar or a list where a mapping is required.

    Context:
    - path: the path being written
    - segment: the offending intermediate segment
    - found: type name of the value found there
    """

    pass


class TypeCoercionError(TidyconfError):
    """Stored value cannot be read as the kind of the declared default.

    Never escapes ConfigValue.read(): the accessor falls back to the default.
    """

    pass


class StorageError(TidyconfError):
    """
    Backing store failure (I/O error, malformed document).

    Tracking:
    - location of the file
    - operation ("load" or "dump")
    """

    pass


class UnsupportedFormatError(StorageError):
    """No store is registered for the file suffix."""

    pass


# ============================================================================
# PART 2: ERROR REPORTS (machine-readable output)
# ============================================================================


class ErrorKind(str, Enum):
    """Kinds of error a report can carry."""

    MALFORMED_PATH = "malformed_path"
    DUPLICATE_BINDING = "duplicate_binding"
    CONFIGURATION = "configuration_error"
    STRUCTURAL_CONFLICT = "structural_conflict"
    TYPE_COERCION = "type_coercion"
    STORAGE = "storage_error"
    INTERNAL = "internal_error"


class ErrorReport(BaseModel):
    """
    Structured error report.
    Printed by the CLI when --json is requested.
    """

    error_kind: ErrorKind = Field(..., description="Kind of error")
    message: str = Field(..., description="Main error message")
    error_id: Optional[str] = Field(default=None, description="Unique ID for tracking")
    code: Optional[str] = Field(default=None, description="Exception class name")
    context: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional error context"
    )
    suggestions: Optional[List[str]] = Field(
        default=None, description="Hints to resolve the error"
    )


# ============================================================================
# PART 3: HELPERS
# ============================================================================


def from_exception(exc: TidyconfError) -> ErrorReport:
    """
    Convert a TidyconfError into an ErrorReport.

    Args:
        exc: Exception to convert

    Returns:
        ErrorReport ready to serialize
    """
    kind_map = {
        "MalformedPathError": ErrorKind.MALFORMED_PATH,
        "DuplicateBindingError": ErrorKind.DUPLICATE_BINDING,
        "ConfigurationError": ErrorKind.CONFIGURATION,
        "StructuralConflictError": ErrorKind.STRUCTURAL_CONFLICT,
        "TypeCoercionError": ErrorKind.TYPE_COERCION,
        "StorageError": ErrorKind.STORAGE,
        "UnsupportedFormatError": ErrorKind.STORAGE,
    }

    return ErrorReport(
        error_kind=kind_map.get(exc.code, ErrorKind.INTERNAL),
        message=exc.message,
        error_id=exc.id,
        code=exc.code,
        context=exc.context or None,
        suggestions=exc.suggestions or None,
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    # Python exceptions
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
    # Helpers
    "from_exception",
]

"""
tidyconf - declared configuration properties over YAML/JSON documents.

Declare the keys a program uses, read them with typed fallbacks, and
remove the keys older releases left behind.
"""

from loguru import logger as _loguru_logger

from tidyconf._version import __version__, __version_info__

# Library: silent until the host application (or the CLI) enables it
_loguru_logger.disable("tidyconf")

__author__ = "tidyconf contributors"
__license__ = "MIT"

# Core components
from tidyconf.core import (
    logger,
    enable_logging,
    TidyconfError,
    ConfigurationError,
    MalformedPathError,
    DuplicateBindingError,
    StructuralConflictError,
    TypeCoercionError,
    StorageError,
    UnsupportedFormatError,
)

# Document model
from tidyconf.document import ConfigPath, DocumentTree, MISSING

# Declarations and config objects
from tidyconf.bindings import Binding, BindingRegistry, ConfigValue
from tidyconf.config import BaseConfig

# Pruning
from tidyconf.pruning import prune_redundant, find_redundant

# Stores
from tidyconf.storage import ConfigStore, YamlStore, JsonStore, MemoryStore, store_for_path

__all__ = [
    # Version info
    "__version__",
    "__version_info__",
    "__author__",
    "__license__",
    # Core
    "logger",
    "enable_logging",
    # Exceptions
    "TidyconfError",
    "ConfigurationError",
    "MalformedPathError",
    "DuplicateBindingError",
    "StructuralConflictError",
    "TypeCoercionError",
    "StorageError",
    "UnsupportedFormatError",
    # Document
    "ConfigPath",
    "DocumentTree",
    "MISSING",
    # Bindings
    "Binding",
    "BindingRegistry",
    "ConfigValue",
    "BaseConfig",
    # Pruning
    "prune_redundant",
    "find_redundant",
    # Stores
    "ConfigStore",
    "YamlStore",
    "JsonStore",
    "MemoryStore",
    "store_for_path",
]

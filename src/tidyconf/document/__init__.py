"""
Document model: dotted paths and the mutable tree they address.
"""

from tidyconf.document.path import ConfigPath, SEPARATOR
from tidyconf.document.tree import DocumentTree, MISSING, copy_node, node_kind

__all__ = [
    "ConfigPath",
    "SEPARATOR",
    "DocumentTree",
    "MISSING",
    "copy_node",
    "node_kind",
]

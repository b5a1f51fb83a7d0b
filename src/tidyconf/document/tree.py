"""
In-memory document tree.

Node kinds map onto plain Python values:
- Mapping: dict with str keys (insertion ordered)
- Sequence: list (opaque, never addressed by path)
- Scalar: anything else (str, int, float, bool, None)

The root is always a dict. Every value entering the tree is copied, so
no node is ever shared between two parents.
"""

from typing import Any, Dict, Iterator, Mapping, Union

from tidyconf.core.exceptions import StructuralConflictError
from tidyconf.document.path import ConfigPath


class _Missing:
    """Marker for an absent node. Distinct from None, which YAML uses for null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

PathLike = Union[str, ConfigPath]


def copy_node(value: Any) -> Any:
    """
    Deep copy a value into its node representation.

    Mapping keys become strings, tuples become lists.
    """
    if isinstance(value, Mapping):
        return {str(key): copy_node(child) for key, child in value.items()}
    if isinstance(value, (list, tuple)):
        return [copy_node(item) for item in value]
    return value


def node_kind(value: Any) -> str:
    """Return "mapping", "sequence" or "scalar"."""
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, (list, tuple)):
        return "sequence"
    return "scalar"


class DocumentTree:
    """
    Mutable hierarchical key-value document.

    Usage:
    ```
    tree = DocumentTree({"server": {"port": 8080}})
    tree.get("server.port")        # 8080
    tree.set("server.host", "::")  # creates/overwrites
    tree.remove("server")          # True
    ```
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._root: Dict[str, Any] = {}
        if data:
            self.replace(data)

    @property
    def root(self) -> Dict[str, Any]:
        """The live root mapping. Mutations through it bypass copying."""
        return self._root

    @staticmethod
    def is_empty_mapping(node: Any) -> bool:
        return isinstance(node, dict) and not node

    def get(self, path: PathLike) -> Any:
        """
        Return the node at path, or MISSING.

        Walking into a scalar or a list before the last segment yields MISSING.
        """
        current: Any = self._root
        for segment in ConfigPath.of(path).segments:
            if not isinstance(current, dict) or segment not in current:
                return MISSING
            current = current[segment]
        return current

    def contains(self, path: PathLike) -> bool:
        return self.get(path) is not MISSING

    def set(self, path: PathLike, value: Any) -> None:
        """
        Insert or overwrite the value at path.

        Intermediate mappings are created as needed.

        Raises:
            StructuralConflictError: an intermediate segment holds a non-mapping
        """
        config_path = ConfigPath.of(path)
        current = self._root
        for index, segment in enumerate(config_path.segments[:-1]):
            if segment not in current:
                current[segment] = {}
            elif not isinstance(current[segment], dict):
                found = current[segment]
                raise StructuralConflictError(
                    f"Cannot set '{config_path}': "
                    f"'{'.'.join(config_path.segments[: index + 1])}' is not a section",
                    context={
                        "path": str(config_path),
                        "segment": segment,
                        "found": type(found).__name__,
                    },
                )
            current = current[segment]

        current[config_path.name] = copy_node(value)

    def remove(self, path: PathLike) -> bool:
        """Delete the node at path. Returns whether something was removed."""
        config_path = ConfigPath.of(path)
        parent: Any = self._root
        for segment in config_path.segments[:-1]:
            if not isinstance(parent, dict) or segment not in parent:
                return False
            parent = parent[segment]

        if isinstance(parent, dict) and config_path.name in parent:
            del parent[config_path.name]
            return True
        return False

    def replace(self, data: Mapping[str, Any]) -> None:
        """Swap the whole content for a copy of data."""
        if not isinstance(data, Mapping):
            raise StructuralConflictError(
                "Document root must be a mapping",
                context={"found": type(data).__name__},
            )
        self._root = copy_node(data)

    def clear(self) -> None:
        self._root = {}

    def to_dict(self) -> Dict[str, Any]:
        """Deep copy of the content, in key order."""
        return copy_node(self._root)

    def iter_leaf_paths(self) -> Iterator[ConfigPath]:
        """
        Yield the path of every leaf.

        Leaves are scalars, lists and empty mappings. Keys that cannot
        form a path segment (empty or dotted) are skipped.
        """

        def walk(node: Dict[str, Any], prefix: tuple) -> Iterator[ConfigPath]:
            for key, child in node.items():
                if not key or "." in key:
                    continue
                segments = prefix + (key,)
                if isinstance(child, dict) and child:
                    yield from walk(child, segments)
                else:
                    yield ConfigPath(segments)

        yield from walk(self._root, ())

    def __len__(self) -> int:
        return len(self._root)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DocumentTree):
            return self._root == other._root
        return NotImplemented

    def __repr__(self) -> str:
        return f"DocumentTree({self._root!r})"

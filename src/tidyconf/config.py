"""
Config objects with declared properties.

Usage:
```
class ServerConfig(BaseConfig):
    def __init__(self, path):
        super().__init__(path)
        self.host = self.declare("server.host", "127.0.0.1")
        self.port = self.declare("server.port", 25565)
        self.motd = self.declare("messages", {"welcome": "Hello"})

config = ServerConfig("config.yml")
config.port.read()          # 25565 unless the file says otherwise
config.prune_redundant()    # drop keys from older releases
config.save()
```
"""

from pathlib import Path
from typing import Any, List, Optional, Tuple, TypeVar, Union

from tidyconf.bindings import Binding, BindingRegistry, ConfigValue
from tidyconf.core.exceptions import StructuralConflictError
from tidyconf.core.logging import AsyncLogger, perf_logger
from tidyconf.document.path import ConfigPath
from tidyconf.document.tree import MISSING, DocumentTree
from tidyconf.pruning import find_redundant, prune_redundant
from tidyconf.storage import ConfigStore, store_for_path

logger = AsyncLogger("config")

T = TypeVar("T")


class BaseConfig:
    """
    A document loaded from a store plus the properties declared on it.

    The document is loaded once on construction. Bindings reference paths,
    not nodes, so they stay valid across reload().
    """

    def __init__(self, source: Union[str, Path, ConfigStore]) -> None:
        if isinstance(source, (str, Path)):
            self.store: ConfigStore = store_for_path(source)
        else:
            self.store = source
        self.registry = BindingRegistry()
        self.document = DocumentTree()
        self.reload()

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def declare(
        self,
        path: Union[str, ConfigPath],
        default: T,
        preserve_subtree: Optional[bool] = None,
    ) -> ConfigValue[T]:
        """
        Declare a configuration property.

        Args:
            path: Dotted path, e.g. "section.key"
            default: Value returned when the document has no usable value.
                Its shape (scalar, mapping, list) is the property's kind.
            preserve_subtree: Whether entries below path belong to this
                property. Defaults to True for mapping and list defaults.

        Raises:
            MalformedPathError: path cannot be parsed
            DuplicateBindingError: path already declared on this object
        """
        binding = self.registry.declare(ConfigPath.of(path), default, preserve_subtree)
        return ConfigValue(self, binding)

    def bindings(self) -> Tuple[Binding, ...]:
        return tuple(self.registry)

    def declared_paths(self) -> Tuple[ConfigPath, ...]:
        return self.registry.declared_paths()

    # ------------------------------------------------------------------
    # Raw document access
    # ------------------------------------------------------------------

    def get(self, path: Union[str, ConfigPath], default: Any = None) -> Any:
        """Raw value at path, or default when absent."""
        value = self.document.get(path)
        return default if value is MISSING else value

    def set(self, path: Union[str, ConfigPath], value: Any) -> None:
        self.document.set(path, value)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reload(self) -> None:
        """
        Replace the document content with what the store holds.

        Store errors propagate unchanged.
        """
        with perf_logger.measure("reload", location=self.store.location):
            self.document.replace(self.store.load())
        logger.debug("Config loaded", location=self.store.location, keys=len(self.document))

    def save(self) -> None:
        """Write the document to the store, in its current key order."""
        with perf_logger.measure("save", location=self.store.location):
            self.store.dump(self.document.to_dict())
        logger.debug("Config saved", location=self.store.location)

    def write_defaults(self, overwrite: bool = False) -> List[ConfigPath]:
        """
        Write each binding's default into the document.

        Args:
            overwrite: Also replace values already present

        Returns:
            Paths that were written. Paths blocked by a scalar or list on the
            way are skipped and logged.
        """
        written: List[ConfigPath] = []
        for binding in self.registry:
            if not overwrite and self.document.contains(binding.path):
                continue
            try:
                self.document.set(binding.path, binding.default)
            except StructuralConflictError as e:
                logger.warning("Cannot write default", path=str(binding.path), reason=e.message)
                continue
            written.append(binding.path)
        return written

    def redundant_paths(self) -> List[str]:
        """Keys prune_redundant() would remove, without touching the document."""
        return find_redundant(self.document.root, self.declared_paths())

    def prune_redundant(self) -> List[str]:
        """
        Remove every key that no declared property uses.

        Only keys on the way to a declared path and the subtrees at declared
        paths survive. Sections left empty are removed; the root is kept.

        Declare every property before calling this: a key whose property is
        declared later is deleted like any legacy key. Calling it twice in a
        row is a no-op the second time.

        Returns:
            Dotted paths of the removed entries
        """
        with perf_logger.measure("prune", location=self.store.location):
            removed = prune_redundant(self.document.root, self.declared_paths())

        if removed:
            logger.info(
                "Pruned redundant keys",
                location=self.store.location,
                removed=len(removed),
                preserved_subtrees=[str(p) for p in self.registry.preserved_paths()],
            )
        return removed

    def __enter__(self) -> "BaseConfig":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.save()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(store={self.store!r}, "
            f"bindings={len(self.registry)})"
        )

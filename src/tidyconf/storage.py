"""
Backing stores for configuration documents.

A store knows one location and one format. It loads a plain dict and
dumps a plain dict back, preserving key order. File handles are held
only for the duration of a single load or dump.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

import yaml

from tidyconf.core.exceptions import StorageError, UnsupportedFormatError
from tidyconf.core.logging import AsyncLogger
from tidyconf.document.tree import copy_node

logger = AsyncLogger("storage")


@runtime_checkable
class ConfigStore(Protocol):
    """Loader/serializer pair bound to one location."""

    @property
    def location(self) -> str: ...

    def exists(self) -> bool: ...

    def load(self) -> Dict[str, Any]: ...

    def dump(self, data: Dict[str, Any]) -> None: ...


class FileStore:
    """
    Base class for file-backed stores.

    Subclasses implement _parse and _render. A missing file loads as an
    empty document; parent directories are created on dump.
    """

    format_name = "file"

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    @property
    def location(self) -> str:
        return str(self.path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Dict[str, Any]:
        """
        Read and parse the file.

        Raises:
            StorageError: unreadable file, syntax error, or a root that is not a mapping
        """
        if not self.path.exists():
            logger.info("Config file not found, starting empty", file=self.location)
            return {}

        try:
            with open(self.path, encoding=self.encoding) as f:
                data = self._parse(f.read())
        except OSError as e:
            raise self._error("load", f"Cannot read {self.location}: {e}", e)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            error = self._error("load", f"Malformed {self.format_name} in {self.location}", e)
            error.add_suggestion(f"Check the {self.format_name} syntax of the file")
            raise error

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise self._error(
                "load",
                f"Document root of {self.location} must be a mapping, "
                f"found {type(data).__name__}",
            )

        logger.debug("Config file loaded", file=self.location, keys=len(data))
        return data

    def dump(self, data: Dict[str, Any]) -> None:
        """
        Serialize data and write it to the file.

        Raises:
            StorageError: the file cannot be written
        """
        try:
            text = self._render(data)
        except (TypeError, ValueError, yaml.YAMLError) as e:
            error = self._error(
                "dump", f"Cannot serialize document as {self.format_name}: {e}", e
            )
            error.add_suggestion("Store only strings, numbers, booleans, null, lists and mappings")
            raise error

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding=self.encoding) as f:
                f.write(text)
        except OSError as e:
            raise self._error("dump", f"Cannot write {self.location}: {e}", e)

        logger.debug("Config file written", file=self.location)

    def _error(self, operation: str, message: str, cause: Optional[Exception] = None) -> StorageError:
        logger.error(
            "Config store operation failed", file=self.location, operation=operation, error=message
        )
        return StorageError(
            message,
            context={"location": self.location, "operation": operation},
            cause=cause,
        )

    def _parse(self, text: str) -> Any:
        raise NotImplementedError

    def _render(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.location}')"


class StringKeyLoader(yaml.SafeLoader):
    """
    SafeLoader that keeps mapping keys exactly as written.

    Plain YAML 1.1 would turn `on:` into True and `1:` into 1; a key is a
    path segment here, so it stays the source text.
    """

    def construct_mapping(self, node, deep=False):
        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found a non-scalar key",
                    key_node.start_mark,
                )
            mapping[key_node.value] = self.construct_object(value_node, deep=deep)
        return mapping


class YamlStore(FileStore):
    """YAML file, key order kept as loaded/inserted."""

    format_name = "YAML"

    def _parse(self, text: str) -> Any:
        return yaml.load(text, Loader=StringKeyLoader)

    def _render(self, data: Dict[str, Any]) -> str:
        if not data:
            return ""
        return yaml.safe_dump(
            data, default_flow_style=False, allow_unicode=True, sort_keys=False
        )


class JsonStore(FileStore):
    """JSON file, two-space indent."""

    format_name = "JSON"

    def _parse(self, text: str) -> Any:
        if not text.strip():
            return None
        return json.loads(text)

    def _render(self, data: Dict[str, Any]) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class MemoryStore:
    """In-process store. Holds a private copy of the last dumped document."""

    def __init__(self, data: Optional[Dict[str, Any]] = None, name: str = "memory") -> None:
        self._data: Optional[Dict[str, Any]] = copy_node(data) if data is not None else None
        self._name = name

    @property
    def location(self) -> str:
        return f"<{self._name}>"

    @property
    def data(self) -> Optional[Dict[str, Any]]:
        return copy_node(self._data) if self._data is not None else None

    def exists(self) -> bool:
        return self._data is not None

    def load(self) -> Dict[str, Any]:
        return copy_node(self._data) if self._data is not None else {}

    def dump(self, data: Dict[str, Any]) -> None:
        self._data = copy_node(data)


STORE_BY_SUFFIX = {
    ".yml": YamlStore,
    ".yaml": YamlStore,
    ".json": JsonStore,
}


def store_for_path(path: Union[str, Path]) -> FileStore:
    """
    Pick a store from the file suffix.

    Raises:
        UnsupportedFormatError: suffix is not .yml, .yaml or .json
    """
    file_path = Path(path)
    store_class = STORE_BY_SUFFIX.get(file_path.suffix.lower())
    if store_class is None:
        error = UnsupportedFormatError(
            f"Unsupported config format: '{file_path.suffix}'",
            context={"location": str(file_path)},
        )
        error.add_suggestion(f"Use one of: {', '.join(sorted(STORE_BY_SUFFIX))}")
        raise error
    return store_class(file_path)

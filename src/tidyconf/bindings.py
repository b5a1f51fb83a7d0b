"""
Declared configuration properties.

A Binding ties a dotted path to a default value. The BindingRegistry keeps
every binding of one config object in declaration order, and ConfigValue is
the accessor handed back to application code.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Dict, Generic, Iterator, Optional, Tuple, TypeVar

from pydantic import ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from tidyconf.core.exceptions import ConfigurationError, DuplicateBindingError, TypeCoercionError
from tidyconf.core.logging import AsyncLogger
from tidyconf.document.path import ConfigPath
from tidyconf.document.tree import MISSING, copy_node, node_kind

if TYPE_CHECKING:
    from tidyconf.config import BaseConfig

logger = AsyncLogger("bindings")

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter_for(target: type) -> TypeAdapter:
    """Cached lax-mode validator for a scalar type."""
    if target is str:
        return TypeAdapter(str, config=ConfigDict(coerce_numbers_to_str=True))
    return TypeAdapter(target)


@dataclass(frozen=True)
class Binding:
    """
    One declared property: path, default and the kind inferred from the default.

    preserve_subtree defaults to True for mapping and sequence defaults.
    It documents that entries below the path are owned by the property,
    not declared one by one.
    """

    path: ConfigPath
    default: Any
    kind: str = field(init=False)
    preserve_subtree: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", node_kind(self.default))

    @classmethod
    def create(
        cls, path: ConfigPath, default: Any, preserve_subtree: Optional[bool] = None
    ) -> "Binding":
        if preserve_subtree is None:
            preserve_subtree = node_kind(default) != "scalar"
        binding = cls(path=path, default=copy_node(default), preserve_subtree=preserve_subtree)

        if binding.kind == "scalar" and binding.default is not None:
            try:
                _adapter_for(type(binding.default))
            except PydanticSchemaGenerationError as e:
                raise ConfigurationError(
                    f"Unsupported default type for '{path}': {type(default).__name__}",
                    context={"path": str(path)},
                    cause=e,
                )
        return binding

    def coerce(self, value: Any) -> Any:
        """
        Interpret a stored node as the kind of the default.

        Raises:
            TypeCoercionError: the node cannot be read as that kind
        """
        if self.default is None:
            return copy_node(value)

        if self.kind != "scalar":
            if node_kind(value) != self.kind:
                raise TypeCoercionError(
                    f"Expected a {self.kind} at '{self.path}', found {type(value).__name__}",
                    context={"path": str(self.path), "expected": self.kind},
                )
            return copy_node(value)

        if node_kind(value) != "scalar":
            raise TypeCoercionError(
                f"Expected a scalar at '{self.path}', found {node_kind(value)}",
                context={"path": str(self.path), "expected": type(self.default).__name__},
            )

        try:
            return _adapter_for(type(self.default)).validate_python(value)
        except ValidationError as e:
            raise TypeCoercionError(
                f"Cannot read '{self.path}' as {type(self.default).__name__}",
                context={"path": str(self.path), "value": value},
                cause=e,
            )


class BindingRegistry:
    """
    Append-only, insertion-ordered set of bindings.

    Owned by exactly one config object. Paths are unique.
    """

    def __init__(self) -> None:
        self._bindings: Dict[ConfigPath, Binding] = {}

    def declare(
        self, path: ConfigPath, default: Any, preserve_subtree: Optional[bool] = None
    ) -> Binding:
        """
        Register a binding.

        Raises:
            DuplicateBindingError: path already declared
        """
        if path in self._bindings:
            error = DuplicateBindingError(
                f"Path '{path}' is already declared", context={"path": str(path)}
            )
            error.add_suggestion("Declare each configuration path once per config object")
            raise error

        binding = Binding.create(path, default, preserve_subtree)
        self._bindings[path] = binding
        logger.debug("Binding declared", path=str(path), kind=binding.kind)
        return binding

    def get(self, path: ConfigPath) -> Optional[Binding]:
        return self._bindings.get(path)

    def declared_paths(self) -> Tuple[ConfigPath, ...]:
        """Snapshot of every declared path, in declaration order."""
        return tuple(self._bindings)

    def preserved_paths(self) -> Tuple[ConfigPath, ...]:
        """Declared paths whose whole subtree belongs to the binding."""
        return tuple(b.path for b in self._bindings.values() if b.preserve_subtree)

    def __contains__(self, path: object) -> bool:
        return path in self._bindings

    def __iter__(self) -> Iterator[Binding]:
        return iter(list(self._bindings.values()))

    def __len__(self) -> int:
        return len(self._bindings)


class ConfigValue(Generic[T]):
    """
    Typed accessor returned by BaseConfig.declare().

    Reads go through the live document on every call, so a reload is
    picked up without re-declaring.
    """

    def __init__(self, config: "BaseConfig", binding: Binding) -> None:
        self._config = config
        self._binding = binding

    @property
    def path(self) -> ConfigPath:
        return self._binding.path

    @property
    def default(self) -> T:
        return copy_node(self._binding.default)

    @property
    def binding(self) -> Binding:
        return self._binding

    def read(self) -> T:
        """Stored value coerced to the default's type, or the default."""
        stored = self._config.document.get(self.path)
        if stored is MISSING:
            return self.default

        try:
            return self._binding.coerce(stored)
        except TypeCoercionError as e:
            logger.warning(
                "Stored value not usable, falling back to default",
                path=str(self.path),
                reason=e.message,
            )
            return self.default

    def write(self, value: T) -> None:
        """Store value in the document immediately."""
        self._config.document.set(self.path, value)

    def reset(self) -> None:
        """Write the default back into the document."""
        self.write(self.default)

    def is_set(self) -> bool:
        """True when the document holds a node at this path."""
        return self._config.document.contains(self.path)

    def __repr__(self) -> str:
        return f"ConfigValue(path='{self.path}', default={self._binding.default!r})"

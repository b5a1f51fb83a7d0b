"""
Dotted paths into a configuration document.

"server.http.port" -> ("server", "http", "port")
"""

from dataclasses import dataclass
from typing import Tuple, Union

from tidyconf.core.exceptions import MalformedPathError

SEPARATOR = "."


@dataclass(frozen=True)
class ConfigPath:
    """
    Immutable address of a node in the document tree.

    Two paths are equal when their segments are equal. Segments are
    non-empty and never contain the separator.
    """

    segments: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise MalformedPathError("Path must have at least one segment")
        for segment in self.segments:
            if not isinstance(segment, str) or not segment or SEPARATOR in segment:
                raise MalformedPathError(
                    f"Invalid path segment: {segment!r}",
                    context={"segments": list(self.segments)},
                )

    @classmethod
    def parse(cls, text: str) -> "ConfigPath":
        """
        Split a dotted address into a path.

        Raises:
            MalformedPathError: empty text, leading/trailing or doubled separators
        """
        if not isinstance(text, str) or not text:
            raise MalformedPathError("Path must be a non-empty string", context={"path": text})

        segments = tuple(text.split(SEPARATOR))
        if any(not segment for segment in segments):
            error = MalformedPathError(f"Malformed path: '{text}'", context={"path": text})
            error.add_suggestion("Remove leading, trailing or consecutive dots")
            raise error

        return cls(segments)

    @classmethod
    def of(cls, value: Union[str, "ConfigPath"]) -> "ConfigPath":
        """Accept either a dotted string or an existing path."""
        if isinstance(value, ConfigPath):
            return value
        return cls.parse(value)

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def name(self) -> str:
        """Last segment."""
        return self.segments[-1]

    @property
    def parent(self) -> "ConfigPath | None":
        """Path one level up, None for a top-level key."""
        if len(self.segments) == 1:
            return None
        return ConfigPath(self.segments[:-1])

    def child(self, segment: str) -> "ConfigPath":
        return ConfigPath(self.segments + (segment,))

    def is_ancestor_of(self, other: "ConfigPath") -> bool:
        """True if this path is a strict prefix of other."""
        return (
            len(self.segments) < len(other.segments)
            and other.segments[: len(self.segments)] == self.segments
        )

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)

    def __repr__(self) -> str:
        return f"ConfigPath('{self}')"

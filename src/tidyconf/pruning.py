"""
Redundant key removal.

Deletes every key of a document that is neither declared, nor on the
way to a declared path, nor inside the subtree of a declared path.
Sections left empty by those deletions are removed too, all the way up.
The root mapping is never removed.

Example:
    declared: active, section.active_in_section, map

    active: value                  ->  kept (declared)
    legacy: old-value              ->  removed
    section:                       ->  kept (ancestor)
      active_in_section: value     ->  kept (declared)
      legacy_in_section: old-value ->  removed
    legacy_section:                ->  removed, with everything below
      key: value
    map:                           ->  kept verbatim (declared subtree)
      entry1: value1
"""

from typing import Any, Dict, FrozenSet, Iterable, List, Set, Tuple

from tidyconf.core.logging import AsyncLogger
from tidyconf.document.path import ConfigPath, SEPARATOR
from tidyconf.document.tree import copy_node

logger = AsyncLogger("pruning")

Segments = Tuple[str, ...]


class _PathIndex:
    """Declared paths and all of their strict ancestors, as segment tuples."""

    def __init__(self, declared_paths: Iterable[ConfigPath]) -> None:
        self.declared: FrozenSet[Segments] = frozenset(p.segments for p in declared_paths)
        ancestors: Set[Segments] = set()
        for segments in self.declared:
            for end in range(1, len(segments)):
                ancestors.add(segments[:end])
        self.ancestors: FrozenSet[Segments] = frozenset(ancestors)


def _dotted(segments: Segments) -> str:
    return SEPARATOR.join(str(segment) for segment in segments)


def _prune_mapping(
    node: Dict[Any, Any], prefix: Segments, index: _PathIndex, removed: List[str]
) -> bool:
    """
    Prune one mapping in place.

    Returns True when deletions left the mapping empty, so the caller
    should delete it from its own parent.
    """
    if prefix in index.declared:
        return False

    deleted = False
    for key in list(node):
        child_prefix = prefix + (key,)
        if child_prefix in index.declared:
            continue

        child = node[key]
        if child_prefix in index.ancestors and isinstance(child, dict):
            if _prune_mapping(child, child_prefix, index, removed):
                del node[key]
                removed.append(_dotted(child_prefix))
                deleted = True
            continue

        # Undeclared key, or a scalar/list where a section was expected
        del node[key]
        removed.append(_dotted(child_prefix))
        deleted = True

    return deleted and not node


def prune_redundant(root: Dict[str, Any], declared_paths: Iterable[ConfigPath]) -> List[str]:
    """
    Remove undeclared keys from root, in place.

    Args:
        root: Root mapping of the document
        declared_paths: Every path the program uses

    Returns:
        Dotted paths of the removed entries, innermost first. Sections
        removed because they became empty are included.
    """
    index = _PathIndex(declared_paths)
    removed: List[str] = []
    _prune_mapping(root, (), index, removed)

    for dotted in removed:
        logger.debug("Removed redundant key", path=dotted)

    return removed


def find_redundant(root: Dict[str, Any], declared_paths: Iterable[ConfigPath]) -> List[str]:
    """Dry run of prune_redundant: report what would be removed, leave root untouched."""
    return prune_redundant(copy_node(root), declared_paths)

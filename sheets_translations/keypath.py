"""Conversion between dot-delimited translation keys and nested translation trees."""

from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from .errors import StructuralConflict

DELIMITER = "."


def unflatten(flat_map: Mapping[str, Any], delimiter: str = DELIMITER) -> Dict[str, Any]:
    """Expand a flat translation map into a nested translation tree.

    Every segment of a key but the last becomes one level of nesting and the
    last segment holds the value.

    Args:
        flat_map: Mapping of dot-delimited keys to values
        delimiter: Key segment separator

    Returns:
        Nested dictionary

    Raises:
        StructuralConflict: If one key is a prefix of another (``a`` and ``a.b``)
    """
    tree: Dict[str, Any] = {}

    for key, value in flat_map.items():
        segments = key.split(delimiter)
        node = tree

        for depth, segment in enumerate(segments[:-1]):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                ancestor = delimiter.join(segments[:depth + 1])
                raise StructuralConflict(
                    ancestor,
                    f"Translation key '{key}' needs '{ancestor}' to be a group, "
                    f"but '{ancestor}' already holds a value"
                )
            node = child

        leaf = segments[-1]
        if isinstance(node.get(leaf), dict):
            raise StructuralConflict(
                key,
                f"Translation key '{key}' holds a value, "
                f"but other keys are nested under '{key}'"
            )
        node[leaf] = value

    return tree


def iter_leaves(
    tree: Mapping[str, Any],
    prefix: Optional[str] = None,
    delimiter: str = DELIMITER,
) -> Iterator[Tuple[str, Any]]:
    """Walk a nested tree depth-first, yielding ``(path, value)`` for every leaf."""
    for key, value in tree.items():
        path = str(key) if prefix is None else f"{prefix}{delimiter}{key}"
        if isinstance(value, Mapping):
            yield from iter_leaves(value, path, delimiter)
        else:
            yield path, value


def flatten(tree: Mapping[str, Any], delimiter: str = DELIMITER) -> Dict[str, Any]:
    """Collapse a nested translation tree into a flat translation map.

    Non-mapping values (strings, numbers, lists) are leaves. Key order follows
    the depth-first walk of the tree.

    Raises:
        StructuralConflict: If two leaves collapse to the same path, e.g. a
            quoted ``'a.b'`` key next to ``a: {b: ...}``
    """
    flat_map: Dict[str, Any] = {}
    for path, value in iter_leaves(tree, delimiter=delimiter):
        if path in flat_map:
            raise StructuralConflict(path, f"Translation key '{path}' appears more than once")
        flat_map[path] = value
    return flat_map

"""Helpers for working with parsed node trees.

A node is a plain ``str`` (text), a ``dict`` (element) or a ``list``
(sequence of same-named siblings).
"""

from typing import Any, Dict, List, Optional

from pixl_xml.shared import Node


def is_element(node: Node) -> bool:
    return isinstance(node, dict)


def is_sequence(node: Node) -> bool:
    return isinstance(node, list)


def first_key(mapping: Dict[str, Any]) -> Optional[str]:
    """Return the first key of a mapping, or None when it is empty."""
    return next(iter(mapping), None)


def num_keys(mapping: Dict[str, Any]) -> int:
    return len(mapping)


def always_array(obj: Any, key: Optional[str] = None) -> Optional[List[Any]]:
    """Normalise a value that may or may not have been coalesced into a list.

    Without ``key``, return ``obj`` itself if it is a list, otherwise a
    one-element list holding it. With ``key``, replace ``obj[key]`` in place
    by a list (a missing key becomes ``[None]``) and return None.

    Examples:
        >>> always_array("1")
        ['1']
        >>> tree = {"x": "1"}
        >>> always_array(tree, "x")
        >>> tree
        {'x': ['1']}
    """
    if key is None:
        return obj if isinstance(obj, list) else [obj]
    if not isinstance(obj.get(key), list):
        obj[key] = [obj.get(key)]
    return None


def attach_child(
    branch: Dict[str, Any], name: str, leaf: Node, force_array: bool = False
) -> None:
    """Attach ``leaf`` under ``name``, coalescing repeated names into a list.

    The first occurrence is stored as-is (or as a one-element list when
    ``force_array`` is set); the second turns the entry into a two-element
    list and later ones are appended.
    """
    if name in branch:
        existing = branch[name]
        if isinstance(existing, list):
            existing.append(leaf)
        else:
            branch[name] = [existing, leaf]
    elif force_array:
        branch[name] = [leaf]
    else:
        branch[name] = leaf


def collapse_leaf(leaf: Dict[str, Any], data_key: str) -> Node:
    """Reduce an element whose only entry is its data to that text."""
    if len(leaf) == 1 and data_key in leaf:
        return leaf[data_key]
    return leaf

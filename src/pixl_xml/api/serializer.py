"""Serializer turning node trees back into XML text.

The serializer mirrors the tree builder's conventions: the attributes entry
becomes the start tag's attributes, an element holding only data is written
inline, lists expand into repeated siblings and an element with nothing but
attributes is self-closed. Keys that are not valid tag names are skipped.
"""

import re
from typing import Any, Dict, List, Optional

from pixl_xml.character import encode_attribute_entities, encode_entities
from pixl_xml.shared import DEFAULT_ATTRIBUTES_KEY, DEFAULT_DATA_KEY, Node

XML_HEADER = '<?xml version="1.0"?>'

_VALID_TAG_NAME = re.compile(r"^\w[\w\-:.]*$")
_LEADING_DECLARATION = re.compile(r"^\s*<\?.+?\?>\s*")


class ComposeError(ValueError):
    """Raised when a tree cannot be written as a document."""


def stringify(
    node: Node,
    name: Optional[str] = None,
    indent: str = "\t",
    eol: str = "\n",
    sort: bool = True,
    attributes_key: str = DEFAULT_ATTRIBUTES_KEY,
    data_key: str = DEFAULT_DATA_KEY
) -> str:
    """Compose a node into an XML document, declaration included.

    Args:
        node: Text, element mapping or list of nodes
        name: Root tag name; when omitted ``node`` must be a mapping whose
            sole top-level key names the root
        indent: Indentation unit per depth level
        eol: Line ending
        sort: Sort attributes and children by name
        attributes_key: Reserved key holding attributes
        data_key: Reserved key holding element text

    Returns:
        XML text

    Raises:
        ComposeError: If no root name is given and ``node`` is not a mapping
            with exactly one key

    Examples:
        >>> stringify({"a": "1"}, "doc", indent="", eol="")
        '<?xml version="1.0"?><doc><a>1</a></doc>'
    """
    if not name:
        if not isinstance(node, dict) or len(node) != 1:
            raise ComposeError("A root name is required unless the tree has a single top-level key")
        name = next(iter(node))
        node = node[name]

    composer = _Composer(indent, eol, sort, attributes_key, data_key)
    return XML_HEADER + eol + composer.compose(node, name, 0)


def strip_declaration(xml: str) -> str:
    """Remove a leading ``<?...?>`` declaration and the whitespace around it."""
    return _LEADING_DECLARATION.sub("", xml, count=1)


def is_valid_tag_name(name: Any) -> bool:
    return isinstance(name, str) and bool(_VALID_TAG_NAME.match(name))


class _Composer:
    """Recursive composer holding the formatting options of one call."""

    def __init__(
        self,
        indent: str,
        eol: str,
        sort: bool,
        attributes_key: str,
        data_key: str
    ) -> None:
        self.indent = indent
        self.eol = eol
        self.sort = sort
        self.attributes_key = attributes_key
        self.data_key = data_key

    def compose(self, node: Node, name: str, depth: int) -> str:
        if isinstance(node, list):
            return "".join(self.compose(item, name, depth) for item in node)
        if isinstance(node, dict):
            return self._compose_element(node, name, depth)
        indent_text = self.indent * depth
        return f"{indent_text}<{name}>{encode_entities(node)}</{name}>{self.eol}"

    def _keys(self, mapping: Dict[str, Any]) -> List[str]:
        return sorted(mapping) if self.sort else list(mapping)

    def _compose_element(self, node: Dict[str, Any], name: str, depth: int) -> str:
        indent_text = self.indent * depth
        parts = [indent_text, "<", name]

        attributes = node.get(self.attributes_key)
        has_attributes = self.attributes_key in node
        if isinstance(attributes, dict):
            for key in self._keys(attributes):
                parts.append(f' {key}="{encode_attribute_entities(attributes[key])}"')

        if len(node) <= int(has_attributes):
            parts.append("/>" + self.eol)
            return "".join(parts)

        parts.append(">")
        children = [
            key for key in self._keys(node)
            if key not in (self.attributes_key, self.data_key) and is_valid_tag_name(key)
        ]
        data = node.get(self.data_key)

        if not children:
            parts.append(f"{encode_entities(data)}</{name}>{self.eol}")
            return "".join(parts)

        parts.append(self.eol)
        if data is not None and data != "":
            parts.append(f"{indent_text}{self.indent}{encode_entities(data)}{self.eol}")
        for key in children:
            parts.append(self.compose(node[key], key, depth + 1))
        parts.append(f"{indent_text}</{name}>{self.eol}")
        return "".join(parts)

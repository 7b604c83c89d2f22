"""Encoding and decoding of the five predefined XML entities.

Only ``&amp;``, ``&lt;``, ``&gt;``, ``&quot;`` and ``&apos;`` are handled;
numeric character references and DTD-declared entities pass through untouched.
"""

from typing import Any, Tuple

# Ampersand must be escaped first and unescaped last.
_CONTENT_ESCAPES: Tuple[Tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)
_ATTRIBUTE_ESCAPES: Tuple[Tuple[str, str], ...] = _CONTENT_ESCAPES + (
    ('"', "&quot;"),
    ("'", "&apos;"),
)
_UNESCAPES: Tuple[Tuple[str, str], ...] = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&amp;", "&"),
)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def encode_entities(text: Any) -> str:
    """Escape ``&``, ``<`` and ``>`` for element content.

    Args:
        text: Text to escape; ``None`` yields an empty string and other
            non-string values are converted with ``str()``

    Returns:
        Escaped text

    Examples:
        >>> encode_entities("a < b & c")
        'a &lt; b &amp; c'
    """
    text = _as_text(text)
    for char, entity in _CONTENT_ESCAPES:
        text = text.replace(char, entity)
    return text


def encode_attribute_entities(text: Any) -> str:
    """Escape element content characters plus both quote characters."""
    text = _as_text(text)
    for char, entity in _ATTRIBUTE_ESCAPES:
        text = text.replace(char, entity)
    return text


def decode_entities(text: Any) -> str:
    """Reverse the five predefined entities.

    Examples:
        >>> decode_entities("&amp;lt;")
        '&lt;'
    """
    text = _as_text(text)
    if "&" not in text:
        return text
    for entity, char in _UNESCAPES:
        text = text.replace(entity, char)
    return text

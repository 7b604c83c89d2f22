"""Sub-scanners for special tags.

Processing instructions, comments, DOCTYPE declarations and CDATA sections may
contain ``>`` characters, so the single ``<...>`` region returned by the tag
scanner is not always the whole construct. The sub-scanners here keep pulling
``>``-terminated segments from the source until the construct's own terminator
is found, and hand back the cursor just past it.

Every failure is reported through the ``ErrorReporter`` on the line where the
construct starts, which raises ``ParseFailure``.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .tokenizer import TagScanner, TokenType

if TYPE_CHECKING:
    from pixl_xml.tree.errors import ErrorReporter

_PI_NODE = re.compile(r"^\s*\?\s*([\w\-:]+)\s*(.*)$", re.DOTALL)
_END_COMMENT = "--"
_EXTERNAL_DTD = re.compile(r'^\s*!DOCTYPE\s+([\w\-:]+)\s+(SYSTEM|PUBLIC)\s+"([^"]+)"')
_INLINE_DTD = re.compile(r"^\s*!DOCTYPE\s+([\w\-:]+)\s+\[")
_END_DTD = "]"
_COMPLETE_DTD = re.compile(r"^\s*!DOCTYPE\s+([\w\-:]+)\s+\[(.*)]", re.DOTALL)
_END_CDATA = "]]"
_CDATA_NODE = re.compile(r"^\s*!\s*\[\s*CDATA\s*\[(.*)]]", re.DOTALL)


@dataclass(frozen=True)
class SpecialTag:
    """A fully scanned special tag.

    Attributes:
        kind: Token type of the construct
        body: Complete tag body between the outer ``<`` and ``>``
        payload: Literal CDATA text for CDATA sections, the body otherwise
        cursor: Source offset just past the construct
    """

    kind: TokenType
    body: str
    payload: str
    cursor: int


def scan_processing_instruction(
    body: str, cursor: int, reporter: "ErrorReporter"
) -> SpecialTag:
    """Validate a processing instruction such as ``?xml version="1.0"?``."""
    if not _PI_NODE.match(body):
        reporter.raise_error("Malformed processor instruction", body, cursor)
    return SpecialTag(TokenType.PROCESSING_INSTRUCTION, body, body, cursor)


def scan_comment(
    scanner: TagScanner, body: str, cursor: int, reporter: "ErrorReporter"
) -> SpecialTag:
    """Extend a comment across embedded ``>`` until the body ends in ``--``."""
    body, end, complete = scanner.extend_until(body, cursor, _END_COMMENT)
    if not complete:
        reporter.raise_error("Unclosed comment tag", body, end)
    return SpecialTag(TokenType.COMMENT, body, body, end)


def scan_doctype(
    scanner: TagScanner, body: str, cursor: int, reporter: "ErrorReporter"
) -> SpecialTag:
    """Scan an external (``SYSTEM``/``PUBLIC``) or inline (``[...]``) DOCTYPE."""
    if _EXTERNAL_DTD.match(body):
        return SpecialTag(TokenType.DOCTYPE, body, body, cursor)

    if not _INLINE_DTD.match(body):
        reporter.raise_error("Malformed DTD tag", body, cursor)

    body, end, complete = scanner.extend_until(body, cursor, _END_DTD)
    if not complete:
        reporter.raise_error("Unclosed DTD tag", body, end)
    if not _COMPLETE_DTD.match(body):
        reporter.raise_error("Malformed DTD tag", body, end)
    return SpecialTag(TokenType.DOCTYPE, body, body, end)


def scan_cdata(
    scanner: TagScanner, body: str, cursor: int, reporter: "ErrorReporter"
) -> SpecialTag:
    """Extend a CDATA section until ``]]`` and extract its literal payload."""
    body, end, complete = scanner.extend_until(body, cursor, _END_CDATA)
    if not complete:
        reporter.raise_error("Unclosed CDATA tag", body, end)
    match = _CDATA_NODE.match(body)
    if match is None:
        reporter.raise_error("Malformed CDATA tag", body, end)
    return SpecialTag(TokenType.CDATA, body, match.group(1), end)

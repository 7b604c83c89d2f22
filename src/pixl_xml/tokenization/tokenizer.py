"""Tag scanner for pixl-xml.

The scanner walks the source text one ``<...>`` region at a time, returning
each tag body together with the text that precedes it. It holds no scan
position of its own: every call takes an explicit cursor and reports the
cursor just past the token, so the recursive tree builder can thread the
position through its calls by value.

Text after the last tag is never returned; only text that precedes a tag
becomes element content.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Tuple

_TAG = re.compile(r"([^<]*?)<([^>]+)>")
_SPECIAL = re.compile(r"^\s*[!?]")
_PI = re.compile(r"^\s*\?")
_COMMENT = re.compile(r"^\s*!--")
_DOCTYPE = re.compile(r"^\s*!DOCTYPE")
_CDATA = re.compile(r"^\s*!\s*\[\s*CDATA")
_CLOSING = re.compile(r"^\s*/")


class TokenType(Enum):
    """Kinds of tag produced by the scanner."""

    TAG_OPEN = auto()                # <name ...> or <name .../>
    TAG_CLOSE = auto()               # </name>
    PROCESSING_INSTRUCTION = auto()  # <?target ...?>
    COMMENT = auto()                 # <!-- ... -->
    DOCTYPE = auto()                 # <!DOCTYPE ...>
    CDATA = auto()                   # <![CDATA[ ... ]]>
    MALFORMED_SPECIAL = auto()       # any other <!...> or <?...>

    @property
    def is_special(self) -> bool:
        return self not in (TokenType.TAG_OPEN, TokenType.TAG_CLOSE)


@dataclass(frozen=True)
class Token:
    """One scanned tag plus the raw text leading up to it.

    Attributes:
        type: Classification of the tag body
        preceding_text: Raw (undecoded) text between the previous tag and this one
        body: Content strictly between ``<`` and ``>``
        start: Offset of the ``<``
        end: Offset just past the ``>``; the cursor for the next scan
    """

    type: TokenType
    preceding_text: str
    body: str
    start: int
    end: int


def classify(body: str) -> TokenType:
    """Classify a tag body; for special tags the first matching kind wins."""
    if not _SPECIAL.match(body):
        return TokenType.TAG_CLOSE if _CLOSING.match(body) else TokenType.TAG_OPEN
    if _PI.match(body):
        return TokenType.PROCESSING_INSTRUCTION
    if _COMMENT.match(body):
        return TokenType.COMMENT
    if _DOCTYPE.match(body):
        return TokenType.DOCTYPE
    if _CDATA.match(body):
        return TokenType.CDATA
    return TokenType.MALFORMED_SPECIAL


class TagScanner:
    """Stateless, cursor-driven scanner over one source text.

    Examples:
        >>> scanner = TagScanner("<a>hi</a>")
        >>> [token.body for token in scanner.iter_tokens()]
        ['a', '/a']
    """

    def __init__(self, text: str) -> None:
        self.text = text

    def next_token(self, cursor: int) -> Optional[Token]:
        """Return the next tag at or after ``cursor``, or None when exhausted."""
        match = _TAG.search(self.text, cursor)
        if match is None:
            return None
        body = match.group(2)
        return Token(
            type=classify(body),
            preceding_text=match.group(1),
            body=body,
            start=match.start(2) - 1,
            end=match.end(),
        )

    def iter_tokens(self, cursor: int = 0) -> Iterator[Token]:
        """Lazily yield every token from ``cursor`` on, one ``<...>`` at a time.

        Special tags are not extended here; callers that need whole comments,
        CDATA sections or inline DOCTYPEs use the sub-scanners.
        """
        token = self.next_token(cursor)
        while token is not None:
            yield token
            token = self.next_token(token.end)

    def extend_until(
        self, body: str, cursor: int, terminator: str
    ) -> Tuple[str, int, bool]:
        """Append ``>``-terminated raw segments to ``body`` until it ends with ``terminator``.

        The ``>`` the tag scanner split on is re-inserted before each segment.
        Only the newest segment is checked against the terminator and the
        segments are joined once, so the scan stays linear in the number of
        embedded ``>``. The loop is bounded by the source length: once no
        further ``>`` exists the accumulated body is returned with
        ``complete=False``.

        Args:
            body: Tag body scanned so far
            cursor: Offset just past the body's closing ``>``
            terminator: Suffix the completed body must end with; it never
                contains ``>``

        Returns:
            Tuple of (body, cursor just past the last consumed ``>``, complete)
        """
        if body.endswith(terminator):
            return body, cursor, True

        segments = [body]
        while True:
            close = self.text.find(">", cursor)
            if close == -1:
                return ">".join(segments), cursor, False
            segment = self.text[cursor:close]
            segments.append(segment)
            cursor = close + 1
            if segment.endswith(terminator):
                return ">".join(segments), cursor, True

    def line_at(self, cursor: int, tag: str = "") -> int:
        """Line number for an error found after scanning up to ``cursor``.

        Newlines inside ``tag`` are subtracted so that a multi-line tag is
        reported at the line where it starts.
        """
        line = self.text.count("\n", 0, cursor) + 1 - tag.count("\n")
        return max(line, 1)

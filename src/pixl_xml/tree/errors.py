"""Error reporting for the tree builder.

Every parse error is fatal: it is recorded with the line it was found on and
then raised as ``ParseFailure``. The record list is kept so callers can
inspect what went wrong after the exception has been handled.
"""

from typing import List, NoReturn, Optional

from pixl_xml.shared import ErrorEntry, ParseFailure, get_logger
from pixl_xml.tokenization import TagScanner


class ErrorReporter:
    """Records parse errors against one source text and raises them."""

    def __init__(
        self, scanner: TagScanner, correlation_id: Optional[str] = None
    ) -> None:
        self.scanner = scanner
        self.errors: List[ErrorEntry] = []
        self.logger = get_logger(__name__, correlation_id, "error_reporter")

    def raise_error(self, message: str, tag: str, cursor: int) -> NoReturn:
        """Record an error for ``tag`` found with the scan at ``cursor`` and raise it.

        Args:
            message: Human readable description
            tag: Offending tag body (without the angle brackets)
            cursor: Source offset the scan had reached

        Raises:
            ParseFailure: Always
        """
        entry = ErrorEntry(
            message=message,
            text=f"<{tag}>",
            line=self.scanner.line_at(cursor, tag),
        )
        self.errors.append(entry)
        self.logger.debug(
            "Parse error recorded",
            extra={"error_message": message, "line": entry.line}
        )
        raise ParseFailure(entry)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def get_last_error(self) -> str:
        """Formatted text of the most recent error, or an empty string."""
        if not self.errors:
            return ""
        return self.errors[-1].format()

"""Result objects and error records for pixl-xml.

A parse either produces a tree or fails on the first error it meets. Both
outcomes are carried by ``ParseResult`` so callers never have to tell a tree
from an error message by inspecting its type.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Node = Union[str, Dict[str, "Node"], List["Node"]]
Node = Any


@dataclass(frozen=True)
class ErrorEntry:
    """A single recorded parse error."""

    message: str
    text: str = ""
    line: int = 0
    kind: str = "Parse"
    code: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate error entry."""
        if not self.message:
            raise ValueError("Error message cannot be empty")
        if self.line < 0:
            raise ValueError("Line number must be >= 0")

    def format(self) -> str:
        """Format as ``<Kind> Error[ <code>]: <message>[ on line <n>][: <text>]``."""
        text = f"{self.kind or 'General'} Error"
        if self.code:
            text += f" {self.code}"
        text += f": {self.message}"
        if self.line:
            text += f" on line {self.line}"
        if self.text:
            text += f": {self.text}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary representation."""
        return {
            "kind": self.kind,
            "code": self.code,
            "message": self.message,
            "text": self.text,
            "line": self.line,
        }

    def __str__(self) -> str:
        return self.format()


class ParseFailure(Exception):
    """Raised on the first fatal parse error; carries the recorded entry."""

    def __init__(self, entry: ErrorEntry) -> None:
        super().__init__(entry.format())
        self.entry = entry

    @property
    def line(self) -> int:
        return self.entry.line


@dataclass
class PerformanceMetrics:
    """Performance metrics for a parse pass."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tags_scanned: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


@dataclass
class ParseResult:
    """Outcome of one parse pass.

    ``tree`` is only meaningful when ``success`` is True; on failure ``errors``
    holds the structured error records and ``error_message`` the formatted text
    of the last one.
    """

    tree: Node = None
    success: bool = True
    errors: List[ErrorEntry] = field(default_factory=list)
    document_node_name: Optional[str] = None
    pi_nodes: List[str] = field(default_factory=list)
    dtd_nodes: List[str] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def last_error(self) -> Optional[ErrorEntry]:
        """Most recently recorded error, if any."""
        return self.errors[-1] if self.errors else None

    @property
    def error_message(self) -> str:
        """Formatted text of the last error, or an empty string."""
        return self.last_error.format() if self.errors else ""

    def unwrap(self) -> Node:
        """Return the tree, raising ``ParseFailure`` if the parse failed."""
        if not self.success:
            raise ParseFailure(self.errors[-1])
        return self.tree

    def __bool__(self) -> bool:
        return self.success

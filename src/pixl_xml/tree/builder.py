"""Recursive descent tree builder for pixl-xml.

The builder consumes tokens from the ``TagScanner`` and turns them into nested
dicts, lists and strings:

* text before a tag becomes the current element's data entry (space-joined);
* every opening tag that is not self-closing recurses into a fresh element;
* an element holding only data collapses to that text;
* repeated sibling names are coalesced into a list.

The scan position is an explicit integer passed into and returned from each
recursive call. Parsing stops at the first error, which is raised as
``ParseFailure`` by the ``ErrorReporter``.
"""

import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pixl_xml.character import decode_entities
from pixl_xml.shared import Node, ParserConfig, get_logger
from pixl_xml.tokenization import (
    SpecialTag,
    TagScanner,
    Token,
    TokenType,
    scan_cdata,
    scan_comment,
    scan_doctype,
    scan_processing_instruction,
)

from .errors import ErrorReporter
from .nodes import attach_child, collapse_leaf, first_key

_STANDARD_TAG = re.compile(r"^\s*(/?)([\w\-:.]+)\s*(.*)$", re.DOTALL)
_SELF_CLOSING = re.compile(r"/\s*$")
_ATTRIBUTE = re.compile(r"""([\w\-:.]+)\s*=\s*(["'])(.*?)\2""", re.DOTALL)
_NON_BLANK = re.compile(r"\S")


@dataclass
class BuildOutcome:
    """Everything one successful build pass produced."""

    tree: Node
    document_node_name: Optional[str]
    pi_nodes: List[str] = field(default_factory=list)
    dtd_nodes: List[str] = field(default_factory=list)
    tags_scanned: int = 0
    processing_time_ms: float = 0.0


class XMLTreeBuilder:
    """Builds a node tree from XML text in a single pass.

    A builder instance holds per-pass state (the scanner, the error reporter
    and the PI/DTD lists) and must not be shared between threads while a
    build is running.

    Examples:
        >>> XMLTreeBuilder().build("<doc><x>1</x><x>2</x></doc>").tree
        {'x': ['1', '2']}
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser options (defaults to ``ParserConfig()``)
            correlation_id: Optional correlation ID, defaults to the config's
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_tree_builder")

        self._attributes_key = self.config.effective_attributes_key
        self._data_key = self.config.effective_data_key
        self._reset_state("")

    def _reset_state(self, text: str) -> None:
        self.scanner = TagScanner(text)
        self.reporter = ErrorReporter(self.scanner, self.correlation_id)
        self.pi_nodes: List[str] = []
        self.dtd_nodes: List[str] = []
        self._tags_scanned = 0

    @property
    def errors(self):
        return self.reporter.errors

    @property
    def tags_scanned(self) -> int:
        return self._tags_scanned

    def build(self, text: str) -> BuildOutcome:
        """Parse ``text`` into a node tree.

        Args:
            text: Complete XML document

        Returns:
            BuildOutcome with the tree and the recorded PI and DOCTYPE bodies

        Raises:
            ParseFailure: On the first malformed construct
        """
        start_time = time.time()
        self._reset_state(text)

        self.logger.debug(
            "Starting tree building",
            extra={"content_length": len(text)}
        )

        root: Dict[str, Any] = {}
        self._parse_branch(root, None, 0, root)
        tree, document_name = self._finish_document(root)

        processing_time = (time.time() - start_time) * 1000
        self.logger.debug(
            "Tree building completed",
            extra={
                "document_node_name": document_name,
                "tags_scanned": self._tags_scanned,
                "processing_time_ms": processing_time
            }
        )

        return BuildOutcome(
            tree=tree,
            document_node_name=document_name,
            pi_nodes=list(self.pi_nodes),
            dtd_nodes=list(self.dtd_nodes),
            tags_scanned=self._tags_scanned,
            processing_time_ms=processing_time,
        )

    def _parse_branch(
        self,
        branch: Dict[str, Any],
        name: Optional[str],
        cursor: int,
        root: Dict[str, Any]
    ) -> int:
        """Fill ``branch`` with the content of element ``name``.

        Args:
            branch: Element being built
            name: Expected closing tag name, None for the document root
            cursor: Offset to resume scanning from
            root: The document-level mapping

        Returns:
            Cursor just past this element's closing tag (or the last token)
        """
        is_root = branch is root
        found_closing = False

        token = self.scanner.next_token(cursor)
        while token is not None:
            self._tags_scanned += 1
            cursor = token.end
            self._append_text(branch, token.preceding_text)

            if token.type.is_special:
                cursor = self._handle_special(branch, token)
            elif token.type is TokenType.TAG_CLOSE:
                self._check_closing(token, name)
                found_closing = True
                break
            else:
                if is_root and any(key != self._data_key for key in root):
                    self.reporter.raise_error(
                        "Only one top-level node is allowed in document",
                        token.body,
                        cursor,
                    )
                cursor = self._handle_open_tag(branch, token, root)

            token = self.scanner.next_token(cursor)

        if name is not None and not found_closing:
            self.reporter.raise_error(
                f"Missing closing tag (expected </{name}>)", name, cursor
            )

        return cursor

    def _append_text(self, branch: Dict[str, Any], raw: str) -> None:
        if not _NON_BLANK.search(raw):
            return
        self._append_data(branch, decode_entities(raw))

    def _append_data(self, branch: Dict[str, Any], text: str) -> None:
        if not self.config.preserve_whitespace:
            text = text.strip()
        if self._data_key in branch:
            branch[self._data_key] += " " + text
        else:
            branch[self._data_key] = text

    def _handle_special(self, branch: Dict[str, Any], token: Token) -> int:
        """Dispatch a special tag and return the cursor past it."""
        special = self._scan_special(token)
        self.logger.debug(
            "Special tag scanned",
            extra={
                "tag_kind": special.kind.name,
                "offset": token.start,
                "length": special.cursor - token.start
            }
        )

        if special.kind is TokenType.PROCESSING_INSTRUCTION:
            self.pi_nodes.append(special.body)
        elif special.kind is TokenType.DOCTYPE:
            self.dtd_nodes.append(special.body)
        elif special.kind is TokenType.CDATA:
            self._append_data(branch, special.payload)

        return special.cursor

    def _scan_special(self, token: Token) -> SpecialTag:
        body, cursor = token.body, token.end
        if token.type is TokenType.PROCESSING_INSTRUCTION:
            return scan_processing_instruction(body, cursor, self.reporter)
        if token.type is TokenType.COMMENT:
            return scan_comment(self.scanner, body, cursor, self.reporter)
        if token.type is TokenType.DOCTYPE:
            return scan_doctype(self.scanner, body, cursor, self.reporter)
        if token.type is TokenType.CDATA:
            return scan_cdata(self.scanner, body, cursor, self.reporter)
        self.reporter.raise_error("Malformed special tag", body, cursor)

    def _match_standard(self, token: Token) -> Tuple[str, str]:
        match = _STANDARD_TAG.match(token.body)
        if match is None:
            self.reporter.raise_error("Malformed tag", token.body, token.end)
        return self.config.normalize_name(match.group(2)), match.group(3)

    def _check_closing(self, token: Token, name: Optional[str]) -> None:
        node_name, _ = self._match_standard(token)
        if node_name != (name or ""):
            self.reporter.raise_error(
                f"Mismatched closing tag (expected </{name or ''}>)",
                token.body,
                token.end,
            )

    def _handle_open_tag(
        self, branch: Dict[str, Any], token: Token, root: Dict[str, Any]
    ) -> int:
        """Build the element opened by ``token``, attach it and return the cursor."""
        node_name, attributes_raw = self._match_standard(token)
        cursor = token.end

        leaf: Dict[str, Any] = {}
        attributes = self._parse_attributes(attributes_raw)
        if attributes:
            if self.config.preserve_attributes:
                leaf[self._attributes_key] = attributes
            else:
                leaf.update(attributes)

        if not _SELF_CLOSING.search(attributes_raw):
            cursor = self._parse_branch(leaf, node_name, cursor, root)

        attach_child(
            branch,
            node_name,
            collapse_leaf(leaf, self._data_key),
            force_array=self.config.force_arrays and branch is not root,
        )
        return cursor

    def _parse_attributes(self, raw: str) -> Dict[str, str]:
        return {
            self.config.normalize_name(match.group(1)): decode_entities(match.group(3))
            for match in _ATTRIBUTE.finditer(raw)
        }

    def _finish_document(self, root: Dict[str, Any]) -> Tuple[Node, Optional[str]]:
        """Drop stray top-level text and strip the document node unless preserved."""
        root.pop(self._data_key, None)

        document_name = first_key(root)
        if document_name is not None and not self.config.preserve_document_node:
            return root[document_name], document_name
        return root, document_name

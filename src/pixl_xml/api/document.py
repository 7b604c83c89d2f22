"""Document wrapper and convenience entry points for pixl-xml.

``XMLDocument`` owns one parse pass: the tree, the recorded processing
instructions and DOCTYPE declarations, the document node name and any error.
It can compose the (possibly edited) tree back into XML, replaying the
recorded PIs and DOCTYPEs ahead of the body.

Module-level functions give the common cases in one call:

* ``parse(text)`` returns a ``ParseResult`` that is either successful and
  carries the tree, or failed and carries the structured errors;
* ``parse_tree(text)`` returns the tree directly and raises ``ParseFailure``;
* ``compose(tree, name)`` writes a tree as an XML document.
"""

import re
import time
from typing import Any, List, Optional

from pixl_xml.shared import (
    ComposeConfig,
    ErrorEntry,
    Node,
    ParseFailure,
    ParseResult,
    ParserConfig,
    PerformanceMetrics,
    get_logger,
)
from pixl_xml.tree import XMLTreeBuilder

from .serializer import XML_HEADER, ComposeError, stringify, strip_declaration

# Max length for content preview in logs
PREVIEW_LENGTH = 100

_XML_DECLARATION_PI = re.compile(r"^\s*\?\s*xml(?![\w\-:.])")


def _resolve_config(config: Optional[ParserConfig], options: Any) -> ParserConfig:
    config = config or ParserConfig()
    return config.override(**options) if options else config


class XMLDocument:
    """One XML document: parse it, edit the tree, compose it back.

    Attributes:
        config: Parser options used for this document
        tree: Parsed tree (an empty dict before a successful parse)
        errors: Errors recorded by the last parse
        pi_nodes: Processing instruction bodies in document order
        dtd_nodes: DOCTYPE bodies in document order
        document_node_name: Name of the single top-level element

    Examples:
        >>> doc = XMLDocument('<?xml version="1.0"?><Document><Simple>Hello</Simple></Document>')
        >>> doc.tree
        {'Simple': 'Hello'}
        >>> doc.tree["Simple"] = "Hello2"
        >>> "<Simple>Hello2</Simple>" in doc.compose()
        True
    """

    def __init__(
        self,
        text: Optional[str] = None,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
        **options: Any
    ) -> None:
        """Initialize the document, parsing ``text`` when given.

        Args:
            text: XML text to parse immediately
            config: Parser options (defaults to ``ParserConfig()``)
            correlation_id: Optional correlation ID for request tracking
            **options: ``ParserConfig`` field overrides
        """
        self.config = _resolve_config(config, options)
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_document")
        self._reset_state()

        if text:
            self.parse(text)

    def _reset_state(self) -> None:
        self.tree: Node = {}
        self.errors: List[ErrorEntry] = []
        self.pi_nodes: List[str] = []
        self.dtd_nodes: List[str] = []
        self.document_node_name: Optional[str] = None

    def parse(self, text: str) -> ParseResult:
        """Parse ``text``, replacing any previous state of this document.

        Args:
            text: Complete XML document

        Returns:
            ParseResult describing the outcome; never raises for malformed XML
        """
        start_time = time.time()
        self._reset_state()

        self.logger.info(
            "Starting document parse",
            extra={
                "content_length": len(text),
                "preview": (
                    text[:PREVIEW_LENGTH] + "..."
                    if len(text) > PREVIEW_LENGTH else text
                )
            }
        )

        builder = XMLTreeBuilder(self.config, self.correlation_id)
        metrics = PerformanceMetrics(characters_processed=len(text))
        try:
            outcome = builder.build(text)
        except ParseFailure as failure:
            self.errors = list(builder.errors)
            metrics.processing_time_ms = (time.time() - start_time) * 1000
            metrics.tags_scanned = builder.tags_scanned
            self.logger.warning(
                "Document parse failed",
                extra={
                    "error": str(failure),
                    "line": failure.line,
                    "processing_time_ms": metrics.processing_time_ms
                }
            )
            return ParseResult(
                tree=None,
                success=False,
                errors=list(self.errors),
                performance=metrics,
                correlation_id=self.correlation_id,
            )

        self.tree = outcome.tree
        self.pi_nodes = outcome.pi_nodes
        self.dtd_nodes = outcome.dtd_nodes
        self.document_node_name = outcome.document_node_name

        metrics.processing_time_ms = (time.time() - start_time) * 1000
        metrics.tags_scanned = outcome.tags_scanned
        self.logger.info(
            "Document parse completed",
            extra={
                "document_node_name": self.document_node_name,
                "pi_count": len(self.pi_nodes),
                "dtd_count": len(self.dtd_nodes),
                "processing_time_ms": metrics.processing_time_ms
            }
        )

        return ParseResult(
            tree=self.tree,
            success=True,
            document_node_name=self.document_node_name,
            pi_nodes=list(self.pi_nodes),
            dtd_nodes=list(self.dtd_nodes),
            performance=metrics,
            correlation_id=self.correlation_id,
        )

    def get_tree(self) -> Node:
        return self.tree

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def get_last_error(self) -> str:
        """Formatted text of the most recent error, or an empty string."""
        if not self.errors:
            return ""
        return self.errors[-1].format()

    def compose(
        self,
        indent: Optional[str] = None,
        eol: Optional[str] = None,
        sort: Optional[bool] = None,
        compose_config: Optional[ComposeConfig] = None
    ) -> str:
        """Compose the current tree back into an XML document.

        The preamble is the XML declaration (unless the first recorded PI is
        itself one), then every recorded PI, then every recorded DOCTYPE, each
        on its own line, followed by the serialized body.

        Args:
            indent: Indentation unit override
            eol: Line ending override
            sort: Attribute/child sorting override
            compose_config: Base formatting options

        Returns:
            XML text

        Raises:
            ComposeError: If the document has no root element to write
        """
        options = (compose_config or ComposeConfig()).override(
            indent=indent, eol=eol, sort=sort
        )

        tree = self.tree
        name = self.document_node_name
        if self.config.preserve_document_node and name is not None:
            tree = tree[name]
        if name is None and not tree:
            raise ComposeError("Document has no root element to compose")

        raw = stringify(
            tree,
            name,
            indent=options.indent,
            eol=options.eol,
            sort=options.sort,
            attributes_key=self.config.effective_attributes_key,
            data_key=self.config.effective_data_key,
        )
        body = strip_declaration(raw)

        lines = []
        if not (self.pi_nodes and _XML_DECLARATION_PI.match(self.pi_nodes[0])):
            lines.append(XML_HEADER)
        lines.extend(f"<{pi}>" for pi in self.pi_nodes)
        lines.extend(f"<{dtd}>" for dtd in self.dtd_nodes)

        return "".join(line + options.eol for line in lines) + body


def parse(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
    **options: Any
) -> ParseResult:
    """Parse XML text into a tree.

    Args:
        text: Complete XML document
        config: Parser options (defaults to ``ParserConfig()``)
        correlation_id: Optional correlation ID for request tracking
        **options: ``ParserConfig`` field overrides, e.g. ``force_arrays=True``

    Returns:
        ParseResult; check ``success`` before using ``tree``

    Examples:
        >>> parse('<a><x>1</x><x>2</x></a>').tree
        {'x': ['1', '2']}
        >>> result = parse('<a><b></a>')
        >>> result.success
        False
        >>> result.error_message
        'Parse Error: Mismatched closing tag (expected </b>) on line 1: </a>'
    """
    document = XMLDocument(config=config, correlation_id=correlation_id, **options)
    return document.parse(text)


def parse_tree(
    text: str,
    config: Optional[ParserConfig] = None,
    **options: Any
) -> Node:
    """Parse XML text and return the tree, raising ``ParseFailure`` on error."""
    return parse(text, config, **options).unwrap()


def compose(
    tree: Node,
    name: Optional[str] = None,
    config: Optional[ComposeConfig] = None,
    parser_config: Optional[ParserConfig] = None
) -> str:
    """Write a tree as an XML document with the generic declaration.

    Args:
        tree: Node tree, typically from ``parse``
        name: Root tag name; derived from the tree's sole key when omitted
        config: Formatting options
        parser_config: Options the tree was parsed with, for the reserved keys

    Returns:
        XML text
    """
    config = config or ComposeConfig()
    parser_config = parser_config or ParserConfig()
    return stringify(
        tree,
        name,
        indent=config.indent,
        eol=config.eol,
        sort=config.sort,
        attributes_key=parser_config.effective_attributes_key,
        data_key=parser_config.effective_data_key,
    )

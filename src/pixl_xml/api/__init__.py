"""Public API for pixl-xml.

This module provides the document wrapper, the one-call parse/compose
functions, the serializer and the integration adapters.
"""

from .adapters import (
    AdapterMetadata,
    AdapterRegistry,
    AdapterType,
    ConversionDirection,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    PandasAdapter,
    get_adapter,
    get_adapters_by_type,
    list_available_adapters,
    register_adapter,
)
from .document import (
    XMLDocument,
    compose,
    parse,
    parse_tree,
)
from .serializer import (
    XML_HEADER,
    ComposeError,
    is_valid_tag_name,
    stringify,
    strip_declaration,
)

__all__ = [
    # Document API
    "XMLDocument",
    "parse",
    "parse_tree",
    "compose",
    # Serializer
    "XML_HEADER",
    "ComposeError",
    "is_valid_tag_name",
    "stringify",
    "strip_declaration",
    # Integration adapters
    "AdapterMetadata",
    "AdapterRegistry",
    "AdapterType",
    "ConversionDirection",
    "ConversionResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "PandasAdapter",
    "get_adapter",
    "get_adapters_by_type",
    "list_available_adapters",
    "register_adapter",
]

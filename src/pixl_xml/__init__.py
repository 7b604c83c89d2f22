"""pixl-xml.

A small XML parser and composer that turns a document into nested dicts,
lists and strings, and writes such a tree back out as XML.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_tree(), compose()
- Level 2: Document wrapper - XMLDocument with PI/DOCTYPE replay
- Level 3: Integration adapters - lxml, xml.etree and pandas
"""

__version__ = "0.1.0"
__author__ = "pixl-xml Team"

# Level 1 and 2: parsing, composing and the document wrapper
from .api import XMLDocument, compose, parse, parse_tree, stringify

# Level 3: integration adapters
from .api import get_adapter, list_available_adapters

# Entity helpers
from .character import decode_entities, encode_attribute_entities, encode_entities

# Configuration classes for advanced usage
from .shared import ComposeConfig, ConfigValidationError, ParserConfig

# Core result objects
from .shared import ErrorEntry, ParseFailure, ParseResult

# Tree helpers
from .tree import always_array, first_key, is_element, is_sequence, num_keys

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse",
    "parse_tree",
    "compose",
    "stringify",

    # Level 2: Document wrapper
    "XMLDocument",

    # Level 3: Integration adapters
    "get_adapter",
    "list_available_adapters",

    # Entity helpers
    "encode_entities",
    "encode_attribute_entities",
    "decode_entities",

    # Configuration
    "ParserConfig",
    "ComposeConfig",
    "ConfigValidationError",

    # Results
    "ParseResult",
    "ParseFailure",
    "ErrorEntry",

    # Tree helpers
    "always_array",
    "first_key",
    "num_keys",
    "is_element",
    "is_sequence",
]

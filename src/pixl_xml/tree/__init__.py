"""Tree building engine for pixl-xml.

Key Components:
    XMLTreeBuilder: Recursive descent builder turning XML text into nested dicts
    BuildOutcome: Tree, document name and recorded PI/DOCTYPE bodies of one pass
    ErrorReporter: Records fatal parse errors with their line numbers
"""

from .builder import (
    BuildOutcome,
    XMLTreeBuilder,
)
from .errors import ErrorReporter
from .nodes import (
    always_array,
    attach_child,
    collapse_leaf,
    first_key,
    is_element,
    is_sequence,
    num_keys,
)

__all__ = [
    "BuildOutcome",
    "ErrorReporter",
    "XMLTreeBuilder",
    "always_array",
    "attach_child",
    "collapse_leaf",
    "first_key",
    "is_element",
    "is_sequence",
    "num_keys",
]

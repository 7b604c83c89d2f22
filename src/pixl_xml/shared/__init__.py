"""Shared utilities for pixl-xml.

This module provides the configuration objects, result types and logging
helpers used by every layer of the parser.
"""

from .config import (
    DEFAULT_ATTRIBUTES_KEY,
    DEFAULT_DATA_KEY,
    ComposeConfig,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    ErrorEntry,
    Node,
    ParseFailure,
    ParseResult,
    PerformanceMetrics,
)

__all__ = [
    "DEFAULT_ATTRIBUTES_KEY",
    "DEFAULT_DATA_KEY",
    "ComposeConfig",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "CorrelationLogger",
    "get_logger",
    "ErrorEntry",
    "Node",
    "ParseFailure",
    "ParseResult",
    "PerformanceMetrics",
]

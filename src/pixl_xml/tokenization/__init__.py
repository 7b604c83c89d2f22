"""Tokenization layer for pixl-xml.

Key Components:
    TagScanner: Cursor-driven scanner yielding (preceding text, tag body) tokens
    Token: A scanned tag with its offsets
    TokenType: Classification of tag bodies
    SpecialTag: Result of a special-tag sub-scan
"""

from .special import (
    SpecialTag,
    scan_cdata,
    scan_comment,
    scan_doctype,
    scan_processing_instruction,
)
from .tokenizer import (
    TagScanner,
    Token,
    TokenType,
    classify,
)

__all__ = [
    "SpecialTag",
    "TagScanner",
    "Token",
    "TokenType",
    "classify",
    "scan_cdata",
    "scan_comment",
    "scan_doctype",
    "scan_processing_instruction",
]

"""Tests for result objects and error records."""

import pytest

from pixl_xml.shared.result import (
    ErrorEntry,
    ParseFailure,
    ParseResult,
    PerformanceMetrics,
)


class TestErrorEntry:
    """Test ErrorEntry formatting and validation."""

    def test_full_format(self) -> None:
        """Test every optional part appears in order."""
        entry = ErrorEntry(
            message="Mismatched closing tag (expected </b>)",
            text="</a>",
            line=3,
        )

        assert entry.format() == (
            "Parse Error: Mismatched closing tag (expected </b>) on line 3: </a>"
        )
        assert str(entry) == entry.format()

    def test_format_with_code_and_without_optional_parts(self) -> None:
        """Test code is included and empty line/text are omitted."""
        entry = ErrorEntry(message="Bad input", kind="Compose", code="E42")

        assert entry.format() == "Compose Error E42: Bad input"

    def test_empty_message_raises_error(self) -> None:
        """Test that an empty message is rejected."""
        with pytest.raises(ValueError, match="Error message cannot be empty"):
            ErrorEntry(message="")

    def test_negative_line_raises_error(self) -> None:
        """Test that negative line numbers are rejected."""
        with pytest.raises(ValueError, match="Line number must be >= 0"):
            ErrorEntry(message="x", line=-1)

    def test_to_dict(self) -> None:
        """Test dictionary representation."""
        entry = ErrorEntry(message="Malformed tag", text="<=>", line=1)

        assert entry.to_dict() == {
            "kind": "Parse",
            "code": None,
            "message": "Malformed tag",
            "text": "<=>",
            "line": 1,
        }


class TestParseFailure:
    """Test the exception carrying an error entry."""

    def test_exception_exposes_entry(self) -> None:
        """Test message, entry and line of the exception."""
        entry = ErrorEntry(message="Unclosed comment tag", text="<!-- x>", line=2)
        failure = ParseFailure(entry)

        assert failure.entry is entry
        assert failure.line == 2
        assert str(failure) == entry.format()


class TestParseResult:
    """Test ParseResult outcomes."""

    def test_successful_result(self) -> None:
        """Test a successful result unwraps to its tree."""
        result = ParseResult(tree={"a": "1"}, document_node_name="doc")

        assert result
        assert result.error_count == 0
        assert result.last_error is None
        assert result.error_message == ""
        assert result.unwrap() == {"a": "1"}

    def test_failed_result(self) -> None:
        """Test a failed result raises when unwrapped."""
        entry = ErrorEntry(message="Malformed tag", text="<=>", line=1)
        result = ParseResult(success=False, errors=[entry])

        assert not result
        assert result.error_count == 1
        assert result.last_error is entry
        assert result.error_message == "Parse Error: Malformed tag on line 1: <=>"
        with pytest.raises(ParseFailure) as exc_info:
            result.unwrap()
        assert exc_info.value.entry is entry


class TestPerformanceMetrics:
    """Test performance metric calculations."""

    def test_characters_per_second(self) -> None:
        """Test throughput calculation."""
        metrics = PerformanceMetrics(processing_time_ms=500.0, characters_processed=1000)

        assert metrics.characters_per_second == 2000.0

    def test_zero_time_gives_zero_throughput(self) -> None:
        """Test no division by zero for instant parses."""
        assert PerformanceMetrics(characters_processed=10).characters_per_second == 0.0

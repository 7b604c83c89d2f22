"""Tests for correlation-aware logging."""

import logging

from pixl_xml.shared.logging import CorrelationLogger, get_logger


class TestCorrelationLogger:
    """Test structured fields on emitted records."""

    def test_records_carry_component_and_correlation_id(self, caplog) -> None:
        """Test extra fields are merged into every record."""
        logger = get_logger("pixl_xml.test", "req-7", "unit")

        with caplog.at_level(logging.DEBUG, logger="pixl_xml.test"):
            logger.info("Parsed", extra={"tags_scanned": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "Parsed"
        assert record.component == "unit"
        assert record.correlation_id == "req-7"
        assert record.tags_scanned == 3

    def test_component_defaults_to_last_name_part(self) -> None:
        """Test the component is derived from the logger name."""
        logger = CorrelationLogger("pixl_xml.tree.builder")

        assert logger.component == "builder"


"""Tests for the configuration system."""

import json

import pytest

from pixl_xml.shared.config import (
    DEFAULT_ATTRIBUTES_KEY,
    DEFAULT_DATA_KEY,
    ComposeConfig,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)


class TestParserConfig:
    """Test suite for ParserConfig."""

    def test_default_configuration(self) -> None:
        """Test default parser configuration values."""
        config = ParserConfig()

        assert config.preserve_document_node is False
        assert config.preserve_attributes is True
        assert config.preserve_whitespace is False
        assert config.lower_case is False
        assert config.force_arrays is False
        assert config.attributes_key == DEFAULT_ATTRIBUTES_KEY == "_Attribs"
        assert config.data_key == DEFAULT_DATA_KEY == "_Data"
        assert config.correlation_id is None

    def test_config_is_immutable(self) -> None:
        """Test that configuration fields cannot be reassigned."""
        config = ParserConfig()

        with pytest.raises(AttributeError):
            config.force_arrays = True

    @pytest.mark.parametrize("field_name, value, message", [
        ("attributes_key", "", "attributes_key must be a non-empty string"),
        ("data_key", "", "data_key must be a non-empty string"),
        ("data_key", "_Attribs", "attributes_key and data_key must differ"),
    ])
    def test_validation_failures(self, field_name, value, message) -> None:
        """Test invalid reserved keys raise ConfigValidationError."""
        with pytest.raises(ConfigValidationError, match=message) as exc_info:
            ParserConfig(**{field_name: value})

        assert isinstance(exc_info.value, ConfigError)
        assert exc_info.value.suggestions

    def test_effective_keys_follow_lower_case(self) -> None:
        """Test reserved keys are lower-cased together with tag names."""
        config = ParserConfig(lower_case=True)

        assert config.effective_attributes_key == "_attribs"
        assert config.effective_data_key == "_data"
        assert config.normalize_name("Item") == "item"
        assert ParserConfig().normalize_name("Item") == "Item"

    def test_override_returns_new_config(self) -> None:
        """Test override leaves the original untouched."""
        base = ParserConfig()
        updated = base.override(force_arrays=True, data_key="#text")

        assert updated.force_arrays is True
        assert updated.data_key == "#text"
        assert base.force_arrays is False

    def test_override_rejects_unknown_option(self) -> None:
        """Test unknown option names are reported with the known ones."""
        with pytest.raises(ConfigValidationError, match="forceArrays") as exc_info:
            ParserConfig().override(forceArrays=True)

        assert exc_info.value.field_name == "forceArrays"
        assert "force_arrays" in exc_info.value.suggestions

    def test_override_still_validates(self) -> None:
        """Test overrides go through the same validation."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(attributes_key="_Data")

    def test_dict_and_json_round_trip(self) -> None:
        """Test serialization to dict and JSON and back."""
        config = ParserConfig(force_arrays=True, correlation_id="req-1")

        assert ParserConfig.from_dict(config.to_dict()) == config
        assert ParserConfig.from_json(config.to_json()) == config
        assert json.loads(config.to_json())["force_arrays"] is True

    def test_from_dict_ignores_unknown_keys(self) -> None:
        """Test loading tolerates keys from other tools."""
        config = ParserConfig.from_dict({"lower_case": True, "unrelated": 1})

        assert config.lower_case is True

    def test_presets(self) -> None:
        """Test preset factory methods."""
        assert ParserConfig.default() == ParserConfig()

        lossless = ParserConfig.lossless()
        assert lossless.preserve_document_node is True
        assert lossless.preserve_whitespace is True

        simple = ParserConfig.simple()
        assert simple.preserve_attributes is False


class TestComposeConfig:
    """Test suite for ComposeConfig."""

    def test_default_configuration(self) -> None:
        """Test default compose configuration values."""
        config = ComposeConfig()

        assert config.indent == "\t"
        assert config.eol == "\n"
        assert config.sort is True

    def test_empty_indent_is_allowed(self) -> None:
        """Test compact output configuration."""
        assert ComposeConfig(indent="").indent == ""

    def test_validation_failures(self) -> None:
        """Test invalid indentation and line endings."""
        with pytest.raises(ConfigValidationError, match="indent must consist of whitespace only"):
            ComposeConfig(indent="--")

        with pytest.raises(ConfigValidationError, match="eol must be a non-empty string"):
            ComposeConfig(eol="")

    def test_override_ignores_none(self) -> None:
        """Test None overrides keep the configured value."""
        config = ComposeConfig(indent="  ")

        assert config.override(indent=None, eol=None, sort=None) is config
        updated = config.override(sort=False, eol="\r\n")
        assert updated.indent == "  "
        assert updated.sort is False
        assert updated.eol == "\r\n"

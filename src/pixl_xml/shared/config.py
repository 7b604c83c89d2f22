"""Configuration classes for pixl-xml.

Parsing and composition options are immutable dataclasses validated on
construction. ``ParserConfig`` controls how a document is turned into a tree,
``ComposeConfig`` controls how a tree is written back out as text.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Optional

DEFAULT_ATTRIBUTES_KEY = "_Attribs"
DEFAULT_DATA_KEY = "_Data"


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Options applied to a single parse pass.

    Attributes:
        preserve_document_node: Keep ``{document_name: element}`` instead of
            returning the root element's content
        preserve_attributes: Store attributes under ``attributes_key`` rather
            than merging them among the children
        preserve_whitespace: Do not trim decoded text between tags
        lower_case: Lower-case tag names, attribute names and both reserved keys
        force_arrays: Wrap every non-root child in a list, even when singular
        attributes_key: Reserved key holding an element's attributes
        data_key: Reserved key holding an element's own text
        correlation_id: Optional correlation ID attached to log records
    """

    preserve_document_node: bool = False
    preserve_attributes: bool = True
    preserve_whitespace: bool = False
    lower_case: bool = False
    force_arrays: bool = False
    attributes_key: str = DEFAULT_ATTRIBUTES_KEY
    data_key: str = DEFAULT_DATA_KEY
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        try:
            if not isinstance(self.attributes_key, str) or not self.attributes_key:
                raise ValueError("attributes_key must be a non-empty string")
            if not isinstance(self.data_key, str) or not self.data_key:
                raise ValueError("data_key must be a non-empty string")
            if self.attributes_key == self.data_key:
                raise ValueError("attributes_key and data_key must differ")
        except ValueError as e:
            raise ConfigValidationError(
                str(e),
                suggestions=[
                    f"Use the defaults {DEFAULT_ATTRIBUTES_KEY!r} and "
                    f"{DEFAULT_DATA_KEY!r}"
                ],
            ) from e

    @property
    def effective_attributes_key(self) -> str:
        """Attributes key after the lower-case option is applied."""
        return self.attributes_key.lower() if self.lower_case else self.attributes_key

    @property
    def effective_data_key(self) -> str:
        """Data key after the lower-case option is applied."""
        return self.data_key.lower() if self.lower_case else self.data_key

    def normalize_name(self, name: str) -> str:
        """Apply the lower-case option to a tag or attribute name."""
        return name.lower() if self.lower_case else name

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig().override(force_arrays=True)
            >>> config.force_arrays
            True
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown parser option(s): {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Attributes preserved, document node stripped, whitespace trimmed."""
        return cls()

    @classmethod
    def lossless(cls) -> "ParserConfig":
        """Keep the document node and untrimmed text for faithful round trips."""
        return cls(preserve_document_node=True, preserve_whitespace=True)

    @classmethod
    def simple(cls) -> "ParserConfig":
        """Flatten attributes among children for plain data documents."""
        return cls(preserve_attributes=False)


@dataclass(frozen=True)
class ComposeConfig:
    """Options applied when writing a tree back out as XML text."""

    indent: str = "\t"
    eol: str = "\n"
    sort: bool = True

    def __post_init__(self) -> None:
        """Validate compose configuration."""
        if not isinstance(self.indent, str) or self.indent.strip():
            raise ConfigValidationError(
                "indent must consist of whitespace only", field_name="indent"
            )
        if not isinstance(self.eol, str) or not self.eol:
            raise ConfigValidationError(
                "eol must be a non-empty string", field_name="eol"
            )

    def override(self, **kwargs: Any) -> "ComposeConfig":
        """Create a new configuration with the non-None overrides applied."""
        changes = {key: value for key, value in kwargs.items() if value is not None}
        return replace(self, **changes) if changes else self

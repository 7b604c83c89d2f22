"""Integration adapters bridging pixl-xml trees and other XML/data libraries.

Each adapter converts a successful ``ParseResult`` into a target library's
representation (``to_target``) and back (``from_target``). The reverse path
always goes through XML text and the regular parser so the returned tree
follows exactly the same conventions as a direct parse.

Optional libraries are imported inside the adapter methods; an adapter whose
library is missing reports ``is_available() == False`` and is never handed out
by the registry.
"""

import threading
import time
import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Type

from pixl_xml.shared import Node, ParseResult, ParserConfig, get_logger
from pixl_xml.tree import always_array, first_key

from .serializer import is_valid_tag_name, stringify

# Prefix of DataFrame columns holding record attributes
ATTRIBUTE_COLUMN_PREFIX = "attr_"

# Column holding the record's own text
TEXT_COLUMN = "text"


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()     # Element tree libraries (lxml, xml.etree)
    DATA_FRAME = auto()      # DataFrame libraries (pandas)


class ConversionDirection(Enum):
    """Direction of data conversion."""

    TO_TARGET = auto()      # ParseResult to target format
    FROM_TARGET = auto()    # Target format to ParseResult


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    supported_versions: List[str]
    description: str
    author: str = "pixl-xml"


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    direction: ConversionDirection = ConversionDirection.TO_TARGET
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class AdapterPerformanceProfiler:
    """Keeps recent conversion timings per adapter."""

    # Number of recent timings kept per adapter
    HISTORY_SIZE = 1000

    def __init__(self) -> None:
        self._metrics: Dict[str, List[float]] = {}
        self._lock = threading.RLock()

    def record_conversion(self, adapter_name: str, conversion_time_ms: float) -> None:
        with self._lock:
            times = self._metrics.setdefault(adapter_name, [])
            times.append(conversion_time_ms)
            if len(times) > self.HISTORY_SIZE:
                del times[:-self.HISTORY_SIZE]

    def get_statistics(self, adapter_name: str) -> Dict[str, float]:
        """Get count, average, min, max and total time for an adapter."""
        with self._lock:
            times = self._metrics.get(adapter_name)
            if not times:
                return {}
            return {
                "count": len(times),
                "average_ms": sum(times) / len(times),
                "min_ms": min(times),
                "max_ms": max(times),
                "total_ms": sum(times),
            }

    def get_all_statistics(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            return {name: self.get_statistics(name) for name in self._metrics}


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Subclasses implement the two conversion directions; the base class carries
    the parser options used to read and write trees, logging and timing.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[ParserConfig] = None
    ) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
            config: Parser options trees are read and written with
        """
        self.correlation_id = correlation_id
        self.config = config or ParserConfig()
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)
        self._profiler = AdapterPerformanceProfiler()

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert a ParseResult to the target format.

        Args:
            parse_result: Successful parse of an XML document

        Returns:
            ConversionResult containing the converted data
        """

    @abstractmethod
    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert target format data to a ParseResult.

        Args:
            target_data: Data in target format

        Returns:
            ConversionResult whose ``converted_data`` is a ParseResult
        """

    def get_performance_stats(self) -> Dict[str, Dict[str, float]]:
        return self._profiler.get_all_statistics()

    def _record_performance(self, operation_time_ms: float) -> None:
        self._profiler.record_conversion(self.metadata.name, operation_time_ms)

    def _document_body(self, parse_result: ParseResult) -> Node:
        """Return the root element's node regardless of document node mode."""
        tree = parse_result.tree
        name = parse_result.document_node_name
        if self.config.preserve_document_node and name is not None:
            return tree[name]
        return tree

    def _parse_xml(self, xml: str) -> ParseResult:
        from pixl_xml.api.document import parse

        return parse(xml, self.config, correlation_id=self.correlation_id)

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        direction: ConversionDirection,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        self._logger.warning(
            "Conversion failed",
            extra={
                "adapter": self.metadata.name,
                "direction": direction.name,
                "error": error_message
            }
        )
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            direction=direction,
            errors=[error_message],
        )


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._instances: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            metadata = adapter_class().metadata
            self._adapters[metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name.

        Args:
            adapter_name: Name of the adapter
            correlation_id: Optional correlation ID

        Returns:
            Adapter instance if registered and available, None otherwise
        """
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
            if adapter_class is None:
                return None

            instance_key = f"{adapter_name}_{correlation_id or 'default'}"
            instance = self._instances.get(instance_key)
            if instance is not None:
                return instance

            instance = adapter_class(correlation_id)
            if not instance.is_available():
                return None
            self._instances[instance_key] = instance
            return instance

    def list_available_adapters(self) -> List[AdapterMetadata]:
        with self._lock:
            instances = [adapter_class() for adapter_class in self._adapters.values()]
        return [instance.metadata for instance in instances if instance.is_available()]

    def get_adapters_by_type(self, adapter_type: AdapterType) -> List[str]:
        return [
            metadata.name for metadata in self.list_available_adapters()
            if metadata.adapter_type == adapter_type
        ]


# Global adapter registry instance
_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance.

    Args:
        adapter_name: Name of the adapter ("lxml", "etree" or "pandas")
        correlation_id: Optional correlation ID

    Returns:
        Adapter instance if available, None otherwise
    """
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    return _adapter_registry.list_available_adapters()


def get_adapters_by_type(adapter_type: AdapterType) -> List[str]:
    return _adapter_registry.get_adapters_by_type(adapter_type)


def _text_of(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


class _ElementTreeConverter(IntegrationAdapter):
    """Shared conversion for libraries exposing the ElementTree API."""

    @abstractmethod
    def _etree(self) -> Any:
        """Return the etree module of the target library."""

    def _tostring(self, element: Any) -> str:
        return self._etree().tostring(element, encoding="unicode")

    def _build_element(self, make_element: Callable[[str], Any], name: str, node: Node) -> Any:
        """Build an element named ``name`` from a node, recursively."""
        element = make_element(name)
        if not isinstance(node, dict):
            element.text = _text_of(node)
            return element

        attributes_key = self.config.effective_attributes_key
        data_key = self.config.effective_data_key

        attributes = node.get(attributes_key)
        if isinstance(attributes, dict):
            for key, value in attributes.items():
                element.set(key, _text_of(value) or "")
        if data_key in node:
            element.text = _text_of(node[data_key])

        for key, value in node.items():
            if key in (attributes_key, data_key) or not is_valid_tag_name(key):
                continue
            for item in always_array(value):
                element.append(self._build_element(make_element, key, item))
        return element

    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert a ParseResult into an element of the target library."""
        start_time = time.time()
        direction = ConversionDirection.TO_TARGET
        name = parse_result.document_node_name

        if not parse_result.success or name is None:
            return self._create_error_result(
                "ParseResult is not successful or has no document node",
                parse_result,
                direction,
                (time.time() - start_time) * 1000
            )

        etree = self._etree()
        root = self._build_element(etree.Element, name, self._document_body(parse_result))

        processing_time = (time.time() - start_time) * 1000
        self._record_performance(processing_time)

        return ConversionResult(
            success=True,
            converted_data=root,
            original_data=parse_result,
            conversion_time_ms=processing_time,
            direction=direction,
            metadata={
                "root_tag": root.tag,
                "element_count": sum(1 for _ in root.iter()),
            }
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Serialize an element and parse it back into a ParseResult."""
        start_time = time.time()
        direction = ConversionDirection.FROM_TARGET

        if not hasattr(target_data, "tag"):
            return self._create_error_result(
                f"Target data is not a valid {self.metadata.target_library} element",
                target_data,
                direction,
                (time.time() - start_time) * 1000
            )

        xml_string = self._tostring(target_data)
        parse_result = self._parse_xml(xml_string)

        processing_time = (time.time() - start_time) * 1000
        self._record_performance(processing_time)

        return ConversionResult(
            success=parse_result.success,
            converted_data=parse_result,
            original_data=target_data,
            conversion_time_ms=processing_time,
            direction=direction,
            errors=[entry.format() for entry in parse_result.errors],
            metadata={
                "original_tag": target_data.tag,
                "xml_length": len(xml_string),
            }
        )


class LxmlAdapter(_ElementTreeConverter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            supported_versions=["4.0+"],
            description="Bidirectional conversion between pixl-xml trees and lxml.etree"
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _etree(self) -> Any:
        import lxml.etree

        return lxml.etree


class ElementTreeAdapter(_ElementTreeConverter):
    """Adapter for the standard library's xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="etree",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            supported_versions=["3.8+"],
            description="Bidirectional conversion between pixl-xml trees and ElementTree"
        )

    def is_available(self) -> bool:
        return True

    def _etree(self) -> Any:
        import xml.etree.ElementTree as ET

        return ET


class PandasAdapter(IntegrationAdapter):
    """Adapter turning repeated records into pandas DataFrame rows.

    A document such as ``<Items><Item id="1"><Name>A</Name></Item>...</Items>``
    becomes one row per ``Item``: text children become columns, attributes
    become ``attr_<name>`` columns and the record's own text a ``text`` column.
    Nested elements are not flattened; they are reported in the warnings.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[ParserConfig] = None,
        document_name: str = "data",
        record_name: str = "item"
    ) -> None:
        """Initialize the pandas adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
            config: Parser options trees are read and written with
            document_name: Root tag used when writing a DataFrame as XML
            record_name: Record tag used when writing a DataFrame as XML
        """
        super().__init__(correlation_id, config)
        self.document_name = document_name
        self.record_name = record_name

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            supported_versions=["1.0+"],
            description="Conversion between repeated XML records and pandas DataFrame rows"
        )

    def is_available(self) -> bool:
        try:
            import pandas  # noqa: F401
            return True
        except ImportError:
            return False

    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert the records of a ParseResult into a DataFrame."""
        start_time = time.time()
        direction = ConversionDirection.TO_TARGET

        if not parse_result.success:
            return self._create_error_result(
                "ParseResult is not successful",
                parse_result,
                direction,
                (time.time() - start_time) * 1000
            )

        import pandas as pd

        warnings: List[str] = []
        rows = self._extract_records(self._document_body(parse_result), warnings)
        df = pd.DataFrame(rows)

        processing_time = (time.time() - start_time) * 1000
        self._record_performance(processing_time)

        return ConversionResult(
            success=True,
            converted_data=df,
            original_data=parse_result,
            conversion_time_ms=processing_time,
            direction=direction,
            warnings=warnings,
            metadata={
                "dataframe_shape": df.shape,
                "row_count": len(df),
                "columns": list(df.columns),
            }
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Write DataFrame rows as XML records and parse the document."""
        start_time = time.time()
        direction = ConversionDirection.FROM_TARGET

        import pandas as pd

        if not isinstance(target_data, pd.DataFrame):
            return self._create_error_result(
                "Target data is not a pandas DataFrame",
                target_data,
                direction,
                (time.time() - start_time) * 1000
            )

        records = [self._row_to_record(row, pd) for _, row in target_data.iterrows()]
        xml_string = stringify(
            {self.record_name: records},
            self.document_name,
            attributes_key=self.config.effective_attributes_key,
            data_key=self.config.effective_data_key,
        )
        parse_result = self._parse_xml(xml_string)

        processing_time = (time.time() - start_time) * 1000
        self._record_performance(processing_time)

        return ConversionResult(
            success=parse_result.success,
            converted_data=parse_result,
            original_data=target_data,
            conversion_time_ms=processing_time,
            direction=direction,
            errors=[entry.format() for entry in parse_result.errors],
            metadata={
                "dataframe_shape": target_data.shape,
                "xml_length": len(xml_string),
            }
        )

    def _extract_records(self, body: Node, warnings: List[str]) -> List[Dict[str, Any]]:
        """Flatten the first repeated child of the document into rows."""
        if not isinstance(body, dict):
            return []

        attributes_key = self.config.effective_attributes_key
        data_key = self.config.effective_data_key
        record_key = first_key(
            {key: None for key in body if key not in (attributes_key, data_key)}
        )
        if record_key is None:
            return []

        rows = []
        for record in always_array(body[record_key]):
            if not isinstance(record, dict):
                rows.append({TEXT_COLUMN: record})
                continue

            row: Dict[str, Any] = {}
            for key, value in (record.get(attributes_key) or {}).items():
                row[ATTRIBUTE_COLUMN_PREFIX + key] = value
            if data_key in record:
                row[TEXT_COLUMN] = record[data_key]
            for key, value in record.items():
                if key in (attributes_key, data_key):
                    continue
                if isinstance(value, str):
                    row[key] = value
                else:
                    warnings.append(f"Skipped nested element <{key}> in <{record_key}>")
            rows.append(row)
        return rows

    def _row_to_record(self, row: Any, pd: Any) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        attributes: Dict[str, str] = {}
        for column, value in row.items():
            if pd.isna(value):
                continue
            column = str(column)
            if column.startswith(ATTRIBUTE_COLUMN_PREFIX):
                attributes[column[len(ATTRIBUTE_COLUMN_PREFIX):]] = str(value)
            elif column == TEXT_COLUMN:
                record[self.config.effective_data_key] = str(value)
            else:
                record[column] = str(value)
        if attributes:
            record[self.config.effective_attributes_key] = attributes
        return record


register_adapter(LxmlAdapter)
register_adapter(ElementTreeAdapter)
register_adapter(PandasAdapter)

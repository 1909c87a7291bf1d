"""
Multi-Format Converter package.
"""

__version__ = "1.0.0"

from multi_format_converter.casting import coerce
from multi_format_converter.config_models import ConversionOptions, Format
from multi_format_converter.exceptions import (
    ConversionError,
    ErrorKind,
    MalformedInputError,
    UnbalancedStructureError,
    UnsupportedShapeError,
)
from multi_format_converter.models import ConversionResult, XmlElement
from multi_format_converter.orchestrator import (
    convert,
    convert_file,
    csv_to_json,
    csv_to_xml,
    csv_to_yaml,
    json_to_csv,
    json_to_xml,
    json_to_yaml,
    xml_to_csv,
    xml_to_json,
    xml_to_yaml,
    yaml_to_csv,
    yaml_to_json,
    yaml_to_xml,
)

__all__ = [
    "ConversionOptions",
    "ConversionResult",
    "ConversionError",
    "ErrorKind",
    "Format",
    "MalformedInputError",
    "UnbalancedStructureError",
    "UnsupportedShapeError",
    "XmlElement",
    "coerce",
    "convert",
    "convert_file",
    "json_to_csv",
    "json_to_xml",
    "json_to_yaml",
    "csv_to_json",
    "csv_to_xml",
    "csv_to_yaml",
    "xml_to_json",
    "xml_to_csv",
    "xml_to_yaml",
    "yaml_to_json",
    "yaml_to_csv",
    "yaml_to_xml",
]

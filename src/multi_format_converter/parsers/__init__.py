"""
Parser modules for different file formats.
"""

from multi_format_converter.parsers.csv_parser import csv_to_value
from multi_format_converter.parsers.json_parser import parse_json, render_json
from multi_format_converter.parsers.xml_parser import parse_xml
from multi_format_converter.parsers.yaml_parser import parse_yaml

__all__ = [
    "csv_to_value",
    "parse_json",
    "render_json",
    "parse_xml",
    "parse_yaml",
]

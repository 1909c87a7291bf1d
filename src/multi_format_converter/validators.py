"""
Validation functions for input files.

These checks run before a file conversion so that a missing, empty, or
obviously broken file is reported without touching the output path.
"""

import csv
import json
import logging
from pathlib import Path
from typing import List

from lxml import etree

from multi_format_converter.config_models import Format

logger = logging.getLogger(__name__)


def _validate_csv(path: Path, delimiter: str, encoding: str) -> List[str]:
    errors = []
    with open(path, "r", encoding=encoding, newline="") as f:
        reader = csv.reader(f, delimiter=delimiter, strict=True)
        expected_cols = None
        try:
            for record in reader:
                if not record:
                    continue
                if expected_cols is None:
                    expected_cols = len(record)
                elif len(record) != expected_cols:
                    errors.append(
                        f"inconsistent number of columns at line {reader.line_num}: "
                        f"expected {expected_cols}, got {len(record)}"
                    )
                    break
        except csv.Error as e:
            errors.append(f"invalid CSV at line {reader.line_num}: {e}")
    return errors


def _validate_json(path: Path, encoding: str) -> List[str]:
    with open(path, "r", encoding=encoding) as f:
        try:
            json.load(f)
        except json.JSONDecodeError as e:
            return [f"invalid JSON format: {e}"]
    return []


def _validate_xml(path: Path) -> List[str]:
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        etree.parse(str(path), parser)
    except etree.XMLSyntaxError as e:
        return [f"invalid XML format: {e}"]
    return []


def validate_input_file(path: Path, fmt: Format, delimiter: str = ",", encoding: str = "utf-8") -> List[str]:
    """Validate an input file before conversion.

    Returns:
        List of validation errors (empty if valid)
    """
    path = Path(path)
    if not path.exists():
        return [f"file does not exist: {path}"]
    if path.is_dir():
        return [f"is a directory: {path}"]
    try:
        if path.stat().st_size == 0:
            return [f"file is empty: {path}"]
    except OSError as e:
        return [f"access error: {e}"]

    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        encoding = "utf-8-sig"

    try:
        if fmt is Format.CSV:
            errors = _validate_csv(path, delimiter, encoding)
        elif fmt is Format.JSON:
            errors = _validate_json(path, encoding)
        elif fmt is Format.XML:
            errors = _validate_xml(path)
        else:
            # YAML is only checked structurally by the parser itself
            errors = []
    except UnicodeDecodeError as e:
        errors = [f"file is not valid {encoding} text: {e}"]
    except OSError as e:
        errors = [f"access error: {e}"]

    for error in errors:
        logger.debug(f"Validation error for {path.name}: {error}")
    return errors

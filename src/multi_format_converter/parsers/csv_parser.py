"""
CSV parser module.
"""

import csv
import io
import logging
from typing import Any, Dict, List

from multi_format_converter.casting import coerce
from multi_format_converter.exceptions import ColumnMismatchError, EmptyDocumentError, MalformedInputError

logger = logging.getLogger(__name__)


def csv_to_value(text: str, delimiter: str = ",") -> List[Dict[str, Any]]:
    """Decode delimited text into a list of row maps.

    The first record is the header; every following record becomes a dict
    from header name to the coerced cell. Completely empty lines are skipped.

    Args:
        text: CSV document
        delimiter: Single-character field delimiter

    Returns:
        List of row dicts (empty when the input only has a header)

    Raises:
        EmptyDocumentError: If the input has no records at all
        ColumnMismatchError: If a record's field count differs from the header
        MalformedInputError: If the csv module rejects the input
    """
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)

    header = None
    rows: List[Dict[str, Any]] = []
    try:
        for record in reader:
            if not record:
                logger.debug(f"Skipping empty line {reader.line_num}")
                continue

            if header is None:
                header = [name.strip() for name in record]
                logger.debug(f"CSV header: {header}")
                continue

            if len(record) != len(header):
                raise ColumnMismatchError(row=len(rows) + 2, expected=len(header), actual=len(record))

            rows.append({name: coerce(cell) for name, cell in zip(header, record)})
    except csv.Error as e:
        raise MalformedInputError(f"failed to parse CSV at line {reader.line_num}: {e}", line=reader.line_num) from e

    if header is None:
        raise EmptyDocumentError("empty CSV input")

    logger.debug(f"Read {len(rows):,} CSV rows with {len(header)} columns")
    return rows

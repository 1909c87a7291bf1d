"""
CSV writer: renders a list of maps (or a single map) as a rectangular table.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from multi_format_converter.exceptions import UnsupportedShapeError
from multi_format_converter.values import FLATTEN_SEPARATOR, flatten_value, is_container, kind_of, render_scalar

logger = logging.getLogger(__name__)

LINE_TERMINATOR = "\n"


@dataclass
class CsvTable:
    """Rendered table plus what was lost on the way."""
    text: str
    header: List[str] = field(default_factory=list)
    row_count: int = 0
    flattened_fields: List[str] = field(default_factory=list)

    @property
    def lossy(self) -> bool:
        return bool(self.flattened_fields)


def _rows_of(value: Any) -> List[Dict[str, Any]]:
    """Select the row maps of a value.

    Raises:
        UnsupportedShapeError: If value cannot be viewed as rows
    """
    if isinstance(value, dict):
        if not value:
            raise UnsupportedShapeError("cannot render an empty object as CSV")
        return [value]
    if not isinstance(value, list):
        raise UnsupportedShapeError(f"cannot render a bare {kind_of(value).value} as CSV")

    rows = []
    for idx, item in enumerate(value):
        if isinstance(item, dict):
            rows.append(item)
        else:
            logger.warning(f"Skipping list item {idx}: {kind_of(item).value} is not a row object")
    if value and not rows:
        raise UnsupportedShapeError("list contains no objects to render as CSV rows")
    return rows


def header_of(rows: List[Dict[str, Any]]) -> List[str]:
    """Sorted union of the keys of all rows."""
    keys = set()
    for row in rows:
        keys.update(row)
    return sorted(keys)


def render_cell(value: Any) -> str:
    """Text for one cell; nested values are flattened."""
    if is_container(value):
        return flatten_value(value, FLATTEN_SEPARATOR)
    return render_scalar(value)


def value_to_csv(value: Any, delimiter: str = ",") -> CsvTable:
    """Render a value as CSV text.

    Accepts a list of row dicts or one non-empty dict (a one-row table).
    The header is the sorted union of all row keys; missing keys and nulls
    render as empty cells, nested values are flattened with `` | ``.

    Args:
        value: List or Map value
        delimiter: Single-character field delimiter

    Returns:
        CsvTable with the text and the list of flattened columns

    Raises:
        UnsupportedShapeError: If value is a scalar, an empty dict, or a list without dicts
    """
    rows = _rows_of(value)
    if not rows:
        return CsvTable(text="")

    header = header_of(rows)
    flattened = set()

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator=LINE_TERMINATOR)
    writer.writerow(header)
    for row in rows:
        record = []
        for column in header:
            cell = row.get(column)
            if is_container(cell):
                flattened.add(column)
            record.append(render_cell(cell))
        writer.writerow(record)

    table = CsvTable(
        text=buffer.getvalue(),
        header=header,
        row_count=len(rows),
        flattened_fields=sorted(flattened),
    )
    if table.lossy:
        logger.warning(f"Flattened nested values in columns {table.flattened_fields}; hierarchy is lost")
    logger.debug(f"Rendered {table.row_count:,} CSV rows with {len(header)} columns")
    return table

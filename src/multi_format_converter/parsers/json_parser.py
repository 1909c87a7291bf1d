"""
JSON parser module.
"""

import json
import logging
from typing import Any

from multi_format_converter.exceptions import EmptyDocumentError, MalformedInputError

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant '{name}'")


def parse_json(text: str) -> Any:
    """Parse JSON text into a value.

    Args:
        text: JSON document

    Returns:
        Parsed value (dict, list or scalar)

    Raises:
        EmptyDocumentError: If the text is blank
        MalformedInputError: If the text is not valid JSON
    """
    if not text.strip():
        raise EmptyDocumentError("empty JSON input")
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"failed to parse JSON: {e.msg}", line=e.lineno, column=e.colno) from e
    except ValueError as e:
        raise MalformedInputError(f"failed to parse JSON: {e}") from e
    logger.debug(f"Parsed JSON document of type {type(value).__name__}")
    return value


def render_json(value: Any, indent: int = 2) -> str:
    """Render a value as JSON text with sorted keys and a trailing newline."""
    return json.dumps(value, indent=indent, sort_keys=True, ensure_ascii=False) + "\n"

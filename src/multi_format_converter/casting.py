"""
Scalar coercion for the multi-format converter.

This module turns raw text tokens (CSV cells, YAML values, XML leaf text)
into typed values, trying the most specific interpretation first.
"""

import json
import logging
import math
import re
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^[+-]?\d+$")

_QUOTES = ('"', "'")


def _parse_number(s: str) -> Optional[Union[int, float]]:
    """Parse integer text first, then float text.

    Returns:
        int, float, or None when the text is not numeric
    """
    if _INT_RE.match(s):
        return int(s)
    if "_" in s:
        return None
    try:
        number = float(s)
    except ValueError:
        return None
    # nan/inf have no JSON representation, keep them as text
    if not math.isfinite(number):
        return None
    return number


def _parse_collection_literal(s: str) -> Optional[Any]:
    """Parse ``[...]`` or ``{...}`` text as a JSON literal, None on failure."""
    if not ((s.startswith("[") and s.endswith("]")) or (s.startswith("{") and s.endswith("}"))):
        return None
    try:
        return json.loads(s)
    except ValueError:
        logger.debug(f"Text '{s}' looks like a collection literal but is not valid JSON")
        return None


def coerce(text: str) -> Any:
    """Convert a raw text token into a typed value.

    Checked in order:
    - matching single/double quotes: the unquoted interior as a string
    - empty text or ``null``: None
    - ``true`` / ``false``: bool
    - ``[...]`` / ``{...}``: the parsed JSON literal when valid
    - integer text: int
    - float text: float
    - anything else: the text itself

    Never raises; every input maps to some value.

    Args:
        text: Raw token

    Returns:
        Typed value
    """
    s = text.strip()

    if s and s[0] in _QUOTES and s[-1] == s[0]:
        return s[1:-1] if len(s) > 1 else ""
    if s == "" or s == "null":
        return None
    if s == "true":
        return True
    if s == "false":
        return False

    literal = _parse_collection_literal(s)
    if literal is not None:
        return literal

    number = _parse_number(s)
    if number is not None:
        return number
    return s

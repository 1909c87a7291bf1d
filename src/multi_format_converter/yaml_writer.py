"""
YAML writer.

Renders a value as block-style YAML: two spaces per level, map keys in
ascending order, no flow collections. String scalars are written as JSON
string literals (double quotes, backslash escapes for quotes, backslashes
and control characters) so that text such as ``"true"``, ``"100"`` or a
multi-line note reads back as the same string. Keys are written bare unless
they would be misread, in which case they are quoted the same way.
"""

import json
import logging
from typing import Any, List

from multi_format_converter.exceptions import UnsupportedShapeError
from multi_format_converter.values import ValueKind, is_container, kind_of, render_scalar

logger = logging.getLogger(__name__)

INDENT = "  "

_KEY_START_CHARS = ("-", "#", '"', "'")


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def render_yaml_scalar(value: Any) -> str:
    """Render a scalar as it appears after ``key: `` or ``- ``."""
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return "null"
    if kind is ValueKind.STRING:
        return _quote(value)
    return render_scalar(value)


def render_yaml_key(key: str) -> str:
    """Render a map key, quoting it when the bare form would parse differently."""
    if (
        not key
        or key.startswith(_KEY_START_CHARS)
        or ":" in key
        or key != key.strip()
        or not key.isprintable()
    ):
        return _quote(key)
    return key


def _write(lines: List[str], value: Any, level: int) -> None:
    indent = INDENT * level
    if isinstance(value, dict):
        for key in sorted(value):
            item = value[key]
            name = render_yaml_key(key)
            if is_container(item):
                lines.append(f"{indent}{name}:")
                _write(lines, item, level + 1)
            else:
                lines.append(f"{indent}{name}: {render_yaml_scalar(item)}")
    else:
        for item in value:
            if is_container(item):
                lines.append(f"{indent}-")
                _write(lines, item, level + 1)
            else:
                lines.append(f"{indent}- {render_yaml_scalar(item)}")


def value_to_yaml(value: Any) -> str:
    """Render a dict or list as YAML text.

    Empty containers have no block form and render as nothing. On re-read
    the elided container is typed by the next line: ``{"k": []}`` comes
    back as ``{"k": {}}``, and a bare ``-`` item followed by another item
    becomes a list, so ``[{}, 1]`` comes back as ``[[], 1]``.

    Args:
        value: Map or List value

    Returns:
        YAML text ending with a newline (empty for empty containers)

    Raises:
        UnsupportedShapeError: If value is a bare scalar
    """
    if not is_container(value):
        raise UnsupportedShapeError(f"cannot render a bare {kind_of(value).value} as a YAML document")
    lines: List[str] = []
    _write(lines, value, 0)
    logger.debug(f"Rendered {len(lines)} YAML lines")
    return "\n".join(lines) + "\n" if lines else ""

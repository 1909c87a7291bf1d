"""
YAML parser module.

Indentation-driven reader for the block subset of YAML the converter
produces and consumes: nested maps (``key: value``), lists (``- item``),
inline JSON collection literals and plain or quoted scalars. Double-quoted
scalars and keys may carry JSON-style backslash escapes. Anchors, tags,
block scalars, flow mappings and multi-document streams are not supported.

The parser keeps a stack of open containers keyed by indentation column.
When a key or list item has no inline value, the next content line decides
whether the new container is a list or a map.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from multi_format_converter.casting import coerce
from multi_format_converter.exceptions import InvalidYamlSyntaxError, YamlIndentationError

logger = logging.getLogger(__name__)

Container = Union[list, dict]

_QUOTES = ('"', "'")


@dataclass
class _Line:
    number: int  # 1-based, counted over the raw input
    indent: int
    content: str


@dataclass
class _Frame:
    indent: int
    container: Container
    keyed_list: bool = False  # list opened by ``key:``, its items may share the key's column


def _is_list_item(content: str) -> bool:
    return content == "-" or content.startswith("- ")


def _closing_quote(text: str) -> Optional[int]:
    """Index of the quote closing the one at text[0], None when unterminated.

    Backslash escapes are honoured inside double quotes only.
    """
    quote = text[0]
    i = 1
    while i < len(text):
        char = text[i]
        if char == "\\" and quote == '"':
            i += 2
            continue
        if char == quote:
            return i
        i += 1
    return None


def _is_quoted(text: str) -> bool:
    """True when text is exactly one quoted token."""
    return len(text) >= 2 and text[0] in _QUOTES and _closing_quote(text) == len(text) - 1


def _unquote(token: str) -> str:
    """Strip the quotes of a quoted token, decoding escapes in double quotes."""
    if token[0] == '"' and "\\" in token:
        try:
            value = json.loads(token)
        except ValueError:
            logger.debug(f"Quoted text {token} has invalid escapes, keeping it verbatim")
        else:
            return value
    return token[1:-1]


def _scalar(text: str) -> Any:
    """Coerce a scalar token, decoding escapes of double-quoted text."""
    text = text.strip()
    if text.startswith('"') and _is_quoted(text):
        return _unquote(text)
    return coerce(text)


def _split_pair(content: str) -> Tuple[str, str]:
    """Split ``key: value`` on the colon ending the key.

    A quoted key may itself contain colons; otherwise the first colon wins.
    """
    if content[0] in _QUOTES:
        end = _closing_quote(content)
        if end is not None:
            rest = content[end + 1:].lstrip()
            if rest.startswith(":"):
                return _unquote(content[:end + 1]), rest[1:].strip()

    key, _, value = content.partition(":")
    key = key.strip()
    if _is_quoted(key):
        key = _unquote(key)
    return key, value.strip()


def _content_lines(text: str) -> List[_Line]:
    """Return the lines that carry content; blanks and comments are dropped.

    Only ``\\n`` (optionally preceded by ``\\r``) ends a line, so other
    Unicode line separators stay inside their scalar.
    """
    lines = []
    for number, raw in enumerate(text.split("\n"), 1):
        stripped = raw.rstrip(" \t\r")
        body = stripped.lstrip(" ")
        if not body.strip() or body.startswith("#"):
            continue
        if body.startswith("\t"):
            raise YamlIndentationError(f"tab used for indentation at line {number}", line=number)
        lines.append(_Line(number=number, indent=len(stripped) - len(body), content=body))
    return lines


def _new_container(lines: List[_Line], index: int) -> Container:
    """Choose list or map for an elided container by peeking at the next line."""
    if index + 1 < len(lines) and _is_list_item(lines[index + 1].content):
        return []
    return {}


class YamlParser:
    """Single-use parser over one YAML document."""

    def __init__(self, text: str):
        self.lines = _content_lines(text)
        self.root: Container = [] if self.lines and _is_list_item(self.lines[0].content) else {}
        self.stack: List[_Frame] = [_Frame(indent=-1, container=self.root)]

    def parse(self) -> Any:
        for index, line in enumerate(self.lines):
            self._unwind(line)
            if _is_list_item(line.content):
                self._list_item(index, line)
            elif ":" in line.content:
                self._pair(index, line)
            else:
                raise InvalidYamlSyntaxError(
                    f"invalid yaml syntax at line {line.number}: {line.content}", line=line.number
                )
        logger.debug(f"Parsed {len(self.lines)} YAML content lines")
        return self.root

    def _unwind(self, line: _Line) -> None:
        """Pop containers opened at or right of this line's column, keeping the sentinel."""
        while len(self.stack) > 1 and self.stack[-1].indent >= line.indent:
            top = self.stack[-1]
            if top.keyed_list and top.indent == line.indent and _is_list_item(line.content):
                break
            self.stack.pop()

    def _push(self, indent: int, container: Container, keyed_list: bool = False) -> None:
        self.stack.append(_Frame(indent=indent, container=container, keyed_list=keyed_list))

    def _list_item(self, index: int, line: _Line) -> None:
        parent = self.stack[-1].container
        if not isinstance(parent, list):
            raise YamlIndentationError(
                f"invalid indentation at line {line.number}: list item outside of a list", line=line.number
            )

        after_dash = line.content[1:]
        rest = after_dash.strip()
        item_column = line.indent + 1 + len(after_dash) - len(after_dash.lstrip(" "))

        if not rest:
            container = _new_container(self.lines, index)
            parent.append(container)
            self._push(line.indent, container)
        elif _is_list_item(rest):
            nested = [_scalar(rest[1:])]
            parent.append(nested)
            self._push(line.indent + 1, nested)
        elif ":" in rest and not _is_quoted(rest):
            key, value = _split_pair(rest)
            item: dict = {}
            parent.append(item)
            self._push(line.indent + 1, item)
            if value:
                item[key] = _scalar(value)
            else:
                container = _new_container(self.lines, index)
                item[key] = container
                self._push(item_column, container, keyed_list=isinstance(container, list))
        else:
            parent.append(_scalar(rest))

    def _pair(self, index: int, line: _Line) -> None:
        parent = self.stack[-1].container
        if not isinstance(parent, dict):
            raise YamlIndentationError(
                f"invalid yaml at line {line.number}: key/value pair inside a list", line=line.number
            )

        key, value = _split_pair(line.content)
        if value:
            parent[key] = _scalar(value)
            return
        container = _new_container(self.lines, index)
        parent[key] = container
        self._push(line.indent, container, keyed_list=isinstance(container, list))


def parse_yaml(text: str) -> Any:
    """Parse YAML text into a value.

    Args:
        text: YAML document

    Returns:
        dict or list; an input without content lines yields an empty dict

    Raises:
        YamlIndentationError: If a line does not fit its enclosing container
        InvalidYamlSyntaxError: If a line is neither a list item nor a key/value pair
    """
    return YamlParser(text).parse()

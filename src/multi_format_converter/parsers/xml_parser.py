"""
XML parser module.

Builds an order-preserving XmlElement tree from lxml's start/end event
stream, keeping our own stack of open elements.
"""

import logging
from typing import IO, List, Optional, Union

from lxml import etree

from multi_format_converter.exceptions import (
    EmptyDocumentError,
    MalformedInputError,
    MismatchedTagError,
    UnbalancedXmlError,
)
from multi_format_converter.models import XmlElement

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _local_name(elem: etree._Element) -> str:
    return etree.QName(elem).localname


def _last_text(elem: etree._Element) -> str:
    """Return the last non-blank character data directly inside elem."""
    text = ""
    for fragment in [elem.text] + [child.tail for child in elem]:
        if fragment and fragment.strip():
            text = fragment.strip()
    return text


class _TreeBuilder:
    """Stack of open elements driven by start/end events."""

    def __init__(self):
        self.stack: List[XmlElement] = []
        self.root: Optional[XmlElement] = None

    def start(self, elem: etree._Element) -> None:
        self.stack.append(XmlElement(tag=_local_name(elem)))

    def end(self, elem: etree._Element) -> None:
        tag = _local_name(elem)
        if not self.stack:
            raise MismatchedTagError(f"unexpected end element '{tag}'", tag=tag, line=elem.sourceline)

        current = self.stack.pop()
        if current.tag != tag:
            raise MismatchedTagError(
                f"mismatched tags: expected '{current.tag}', got '{tag}'",
                tag=tag,
                line=elem.sourceline,
            )
        current.text = _last_text(elem)

        if self.stack:
            self.stack[-1].append(current)
        else:
            self.root = current
        logger.debug(f"Closed element '{tag}' with {len(current.children)} children")

        # Keep tails, the parent reads them when it closes
        elem.clear(keep_tail=True)

    def feed(self, parser: etree.XMLPullParser, data: Union[bytes, str]) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        parser.feed(data)
        self._drain(parser)

    def close(self, parser: etree.XMLPullParser) -> None:
        parser.close()
        self._drain(parser)

    def _drain(self, parser: etree.XMLPullParser) -> None:
        for event, elem in parser.read_events():
            if event == "start":
                self.start(elem)
            else:
                self.end(elem)


def _translate_syntax_error(error: etree.XMLSyntaxError, builder: _TreeBuilder, at_end: bool):
    """Map an lxml syntax error onto the conversion error taxonomy."""
    line = error.lineno
    if error.code == etree.ErrorTypes.ERR_TAG_NAME_MISMATCH or "mismatch" in (error.msg or ""):
        tag = builder.stack[-1].tag if builder.stack else None
        return MismatchedTagError(f"mismatched tags: {error.msg}", tag=tag, line=line)
    if builder.root is None and not builder.stack and at_end:
        return EmptyDocumentError("invalid or empty XML structure", line=line)
    if builder.stack and at_end:
        open_tags = "/".join(element.tag for element in builder.stack)
        return UnbalancedXmlError(f"unclosed elements at end of input: {open_tags}",
                                  tag=builder.stack[-1].tag, line=line)
    return MalformedInputError(f"failed to parse XML: {error.msg}", line=line)


def parse_xml(source: Union[bytes, str, IO]) -> XmlElement:
    """Parse an XML document into an XmlElement tree.

    Character data that is blank after trimming is ignored; the last
    non-blank run inside an element becomes its text. Attributes, comments
    and processing instructions are dropped and namespaces are reduced to
    local names.

    Args:
        source: XML bytes/text or a readable stream

    Returns:
        Root element

    Raises:
        MismatchedTagError: If a closing tag does not match the open element
        UnbalancedXmlError: If elements are still open at end of input
        EmptyDocumentError: If no root element was produced
        MalformedInputError: For any other token error
    """
    parser = etree.XMLPullParser(
        events=("start", "end"),
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )
    builder = _TreeBuilder()

    at_end = False
    try:
        if hasattr(source, "read"):
            while True:
                chunk = source.read(CHUNK_SIZE)
                if not chunk:
                    break
                builder.feed(parser, chunk)
        elif source:
            builder.feed(parser, source)
        at_end = True
        builder.close(parser)
    except etree.XMLSyntaxError as e:
        raise _translate_syntax_error(e, builder, at_end) from e

    if builder.stack:
        open_tags = "/".join(element.tag for element in builder.stack)
        raise UnbalancedXmlError(f"unclosed elements at end of input: {open_tags}", tag=builder.stack[-1].tag)
    if builder.root is None:
        raise EmptyDocumentError("invalid or empty XML structure")
    return builder.root

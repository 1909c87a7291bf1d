"""
XML writer: serializes an XmlElement tree with lxml.
"""

import logging

from lxml import etree

from multi_format_converter.exceptions import UnsupportedShapeError
from multi_format_converter.models import XmlElement

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def _build(element: XmlElement, parent=None) -> etree._Element:
    try:
        if parent is None:
            node = etree.Element(element.tag)
        else:
            node = etree.SubElement(parent, element.tag)
    except ValueError as e:
        raise UnsupportedShapeError(f"'{element.tag}' cannot be used as an XML tag name", tag=element.tag) from e

    if element.is_leaf:
        if element.text:
            try:
                node.text = element.text
            except ValueError as e:
                raise UnsupportedShapeError(f"text of <{element.tag}> is not XML compatible", tag=element.tag) from e
    else:
        for child in element.children:
            _build(child, node)
    return node


def render_xml(root: XmlElement) -> str:
    """Render an element tree as an XML document.

    The output starts with the UTF-8 declaration line and is indented with
    two spaces per level.

    Args:
        root: Document root

    Returns:
        XML text ending with a newline

    Raises:
        UnsupportedShapeError: If a tag name or text cannot be expressed in XML
    """
    tree = _build(root)
    body = etree.tostring(tree, encoding="unicode", pretty_print=True)
    logger.debug(f"Rendered XML document with root <{root.tag}>")
    return f"{XML_DECLARATION}\n{body}"

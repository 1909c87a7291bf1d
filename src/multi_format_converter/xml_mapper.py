"""
Mapping between values and XML element trees.

XML has ordered, repeatable tags; values have maps and lists. The two
directions are asymmetric:

Value -> XML
    A map becomes an element with one child per key (one child per item
    when the key holds a list). A list becomes one element per item, all
    with the same tag. A scalar becomes a leaf with its text rendering.

XML -> Value (decision table on the grouped children)

    =====================  =======================  ==========
    children               tag groups               shape
    =====================  =======================  ==========
    none                   -                        SCALAR
    more than one          one distinct tag         LIST
    anything else          -                        MAP
    =====================  =======================  ==========

A LIST discards the repeated child tag, so ``<items><item>1</item>
<item>2</item></items>`` maps to ``[1, 2]`` while a mixed element keeps
the tags as keys and groups repeated ones into lists.
"""

import logging
from typing import Any, Dict, List

from multi_format_converter.casting import coerce
from multi_format_converter.models import ElementShape, XmlElement
from multi_format_converter.values import render_scalar

logger = logging.getLogger(__name__)


def group_children(element: XmlElement) -> Dict[str, List[XmlElement]]:
    """Bucket children by tag, preserving first-seen tag order."""
    groups: Dict[str, List[XmlElement]] = {}
    for child in element.children:
        groups.setdefault(child.tag, []).append(child)
    return groups


def classify_element(element: XmlElement) -> ElementShape:
    """Decide which value shape an element maps to."""
    if element.is_leaf:
        return ElementShape.SCALAR
    groups = group_children(element)
    if len(groups) == 1 and len(element.children) > 1:
        return ElementShape.LIST
    return ElementShape.MAP


def xml_to_value(element: XmlElement) -> Any:
    """Map an element tree to a value.

    Args:
        element: Parsed element

    Returns:
        Coerced scalar, list, or dict depending on classify_element
    """
    shape = classify_element(element)
    if shape is ElementShape.SCALAR:
        return coerce(element.text)
    if shape is ElementShape.LIST:
        return [xml_to_value(child) for child in element.children]

    result: Dict[str, Any] = {}
    for tag, children in group_children(element).items():
        if len(children) == 1:
            result[tag] = xml_to_value(children[0])
        else:
            result[tag] = [xml_to_value(child) for child in children]
    return result


def value_to_xml(value: Any, tag: str) -> List[XmlElement]:
    """Map a value to elements named tag.

    A list yields one element per item; anything else yields exactly one.

    Args:
        value: Any value
        tag: Element name

    Returns:
        Elements in document order
    """
    if isinstance(value, list):
        return [value_to_element(item, tag) for item in value]
    return [value_to_element(value, tag)]


def value_to_element(value: Any, tag: str) -> XmlElement:
    """Map a value to a single element named tag.

    Map keys are emitted in ascending order. A nested list is wrapped in its
    own element whose children repeat the tag.
    """
    element = XmlElement(tag=tag)
    if isinstance(value, dict):
        for key in sorted(value):
            for child in value_to_xml(value[key], key):
                element.append(child)
    elif isinstance(value, list):
        for child in value_to_xml(value, tag):
            element.append(child)
    else:
        element.text = render_scalar(value)
    return element


def rows_to_element(rows: List[Dict[str, Any]], root_tag: str, row_tag: str) -> XmlElement:
    """Wrap table rows in a root element, one row_tag child per row."""
    root = XmlElement(tag=root_tag)
    for row in rows:
        root.append(value_to_element(row, row_tag))
    logger.debug(f"Mapped {len(rows):,} rows under <{root_tag}>")
    return root

"""Encode plain Python values as XML documents with lxml.

Mapping keys become child elements, sequences become repeated ``<item>``
elements and scalars become text. A mapping with a single key names the
document root; anything else is wrapped in ``root_tag``.
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from lxml import etree

from httpaddons.errors import SerializationError

ITEM_TAG = "item"


def _fill(element: etree._Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, child_value in value.items():
            child = etree.SubElement(element, str(key))
            _fill(child, child_value)
    elif isinstance(value, list):
        for child_value in value:
            child = etree.SubElement(element, ITEM_TAG)
            _fill(child, child_value)
    elif value is None:
        return
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    else:
        element.text = str(value)


def to_element(value: Any, root_tag: str = "response") -> etree._Element:
    """Build an element tree for ``value``."""
    if isinstance(value, etree._Element):
        return value

    data = jsonable_encoder(value)
    if isinstance(data, dict) and len(data) == 1:
        (tag, inner), = data.items()
        root = etree.Element(str(tag))
        _fill(root, inner)
        return root

    root = etree.Element(root_tag)
    _fill(root, data)
    return root


def encode_xml(value: Any, root_tag: str = "response", encoding: str = "UTF-8") -> bytes:
    """Serialize ``value`` to an XML document, raising ``SerializationError`` on failure."""
    try:
        root = to_element(value, root_tag)
        return etree.tostring(root, xml_declaration=True, encoding=encoding)
    except (TypeError, ValueError, LookupError, RecursionError) as exc:
        raise SerializationError(f"cannot encode value as XML: {exc}") from exc

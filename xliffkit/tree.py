"""
Generic attributed-element tree shared by the parser and the writer.

An Element is a tag, an ordered attribute mapping and ordered children, where a
child is either a nested Element or a text string. lxml does the actual markup
reading and writing; the dialect code only ever sees Elements or their dict
notation:

    <trans-unit id="a"><source>Hi</source></trans-unit>
    -> {"@_id": "a", "source": "Hi"}

Attributes carry a prefix, a text-only leaf collapses to its string, a repeated
tag becomes a list and a single child stays a bare value. as_list() undoes that
last ambiguity.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from lxml import etree

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


@dataclass
class Element:
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[Union["Element", str]] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Concatenated direct text children."""
        return "".join(c for c in self.children if isinstance(c, str))

    def elements(self) -> List["Element"]:
        return [c for c in self.children if isinstance(c, Element)]

    def without_attributes(self) -> "Element":
        return Element(
            self.tag,
            {},
            [c.without_attributes() if isinstance(c, Element) else c for c in self.children],
        )


def as_list(value: Any) -> List[Any]:
    """absent -> [], single value -> [value], list -> as-is."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


# --- lxml bridge ---

def _attribute_name(key: str, nsmap: Dict[Optional[str], str]) -> str:
    if not key.startswith("{"):
        return key
    qname = etree.QName(key)
    if qname.namespace == _XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def _lxml_attribute_name(name: str) -> str:
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    if prefix == "xml":
        return f"{{{_XML_NAMESPACE}}}{local}"
    return local


def from_lxml(node, parent_namespace: Optional[str] = None) -> Element:
    """
    Converts an lxml element into an Element.

    Tags are stored as local names; a namespace differing from the parent's is
    kept as an "xmlns" attribute. Comments and processing instructions are
    dropped (their tail text is not). Whitespace-only text next to child
    elements is indentation and is dropped too.
    """
    qname = etree.QName(node)
    attributes = {}
    if qname.namespace and qname.namespace != parent_namespace:
        attributes["xmlns"] = qname.namespace
    for key, value in node.attrib.items():
        attributes[_attribute_name(key, node.nsmap)] = value

    children: List[Union[Element, str]] = []
    if node.text:
        children.append(node.text)
    for child in node:
        if isinstance(child.tag, str):
            children.append(from_lxml(child, qname.namespace))
        if child.tail:
            children.append(child.tail)

    if any(isinstance(c, Element) for c in children):
        children = [c for c in children if isinstance(c, Element) or c.strip()]

    return Element(qname.localname, attributes, children)


def to_lxml(element: Element, namespace: Optional[str] = None, parent=None):
    """Inverse of from_lxml. With parent given, the node is created inside it."""
    attributes = dict(element.attributes)
    declared = attributes.pop("xmlns", None)
    nsmap = None
    if declared:
        namespace = declared
        nsmap = {None: declared}

    tag = f"{{{namespace}}}{element.tag}" if namespace else element.tag
    if parent is None:
        node = etree.Element(tag, nsmap=nsmap)
    else:
        node = etree.SubElement(parent, tag, nsmap=nsmap)
    for key, value in attributes.items():
        node.set(_lxml_attribute_name(key), value)

    last = None
    for child in element.children:
        if isinstance(child, Element):
            last = to_lxml(child, namespace, node)
        elif not child:
            continue
        elif last is None:
            node.text = (node.text or "") + child
        else:
            last.tail = (last.tail or "") + child
    return node


def parse_text(text: Union[str, bytes]) -> Element:
    """
    Parses markup into an Element tree.

    Raises lxml.etree.XMLSyntaxError for malformed input. A str may still carry
    an encoding declaration in its prologue.
    """
    if isinstance(text, str):
        data = text.encode("utf-8")
        parser = etree.XMLParser(
            remove_blank_text=False, resolve_entities=False, no_network=True, encoding="utf-8"
        )
    else:
        data = text
        parser = etree.XMLParser(remove_blank_text=False, resolve_entities=False, no_network=True)
    return from_lxml(etree.fromstring(data, parser))


def serialize(
    element: Element,
    format: bool = True,
    indent: str = "    ",
    xml_declaration: bool = True,
    ignore_attributes: bool = False,
) -> str:
    """
    Writes an Element tree as text.

    Elements without content are always self-closed. With format=True every
    nesting level is indented by one more copy of indent; with format=False
    the output carries no newlines at all.
    """
    if ignore_attributes:
        element = element.without_attributes()
    node = to_lxml(element)
    if format:
        etree.indent(node, space=indent)
    body = etree.tostring(node, encoding="unicode")
    if not xml_declaration:
        return body
    return XML_DECLARATION + ("\n" if format else "") + body


# --- dict notation ---

def to_dict(element: Element, attribute_prefix: str = ATTRIBUTE_PREFIX, text_key: str = TEXT_KEY) -> Any:
    """
    Returns the dict-notation value of element (not keyed by its own tag).

    A leaf without attributes becomes its text, "" when empty.
    """
    elements = element.elements()
    if not element.attributes and not elements:
        return element.text

    value: Dict[str, Any] = {attribute_prefix + k: v for k, v in element.attributes.items()}
    for child in elements:
        child_value = to_dict(child, attribute_prefix, text_key)
        if child.tag not in value:
            value[child.tag] = child_value
        elif isinstance(value[child.tag], list):
            value[child.tag].append(child_value)
        else:
            value[child.tag] = [value[child.tag], child_value]

    text = element.text
    if text:
        value[text_key] = text
    return value


def _scalar(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def from_dict(tag: str, value: Any, attribute_prefix: str = ATTRIBUTE_PREFIX, text_key: str = TEXT_KEY) -> Element:
    """Inverse of to_dict. A list value repeats the child tag once per entry."""
    element = Element(tag)
    if value is None:
        return element
    if not isinstance(value, dict):
        text = _scalar(value)
        if text:
            element.children.append(text)
        return element

    for key, item in value.items():
        if key == text_key:
            if item is not None and _scalar(item):
                element.children.append(_scalar(item))
        elif key.startswith(attribute_prefix):
            element.attributes[key[len(attribute_prefix):]] = _scalar(item)
        else:
            for entry in as_list(item):
                element.children.append(from_dict(key, entry, attribute_prefix, text_key))
    return element

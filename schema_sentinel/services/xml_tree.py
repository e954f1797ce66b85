"""
Namespace-stripped XML tree with typed accessors.

Parsed documents are converted into immutable XmlNode values whose element
names and attribute keys have their namespace removed, both the Clark form
("{uri}local") and any "prefix:" form. Accessors return None or an empty
tuple on absence and never raise, so callers walk WSDL and SOAP documents
without guarding every step.

Usage:
    root = parse_xml(wsdl_text)
    for schema in root.find_all("types", "schema"):
        ...
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union
from xml.etree import ElementTree

from ..core.errors import ParseError

logger = logging.getLogger(__name__)


def local_name(name: str) -> str:
    """
    Strip a namespace from an element or attribute name.

    Example:
        >>> local_name("{http://schemas.xmlsoap.org/soap/envelope/}Body")
        'Body'
        >>> local_name("xs:element")
        'element'
    """
    if name.startswith("{"):
        name = name.split("}", 1)[1]
    return name.rsplit(":", 1)[-1]


@dataclass(frozen=True)
class XmlNode:
    """An element with its namespace-free name, attributes, children and text."""

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: tuple["XmlNode", ...] = ()
    text: str = ""

    def attr(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(key, default)

    def child(self, name: str) -> Optional["XmlNode"]:
        """First child with the given local name, or None."""
        for node in self.children:
            if node.name == name:
                return node
        return None

    def children_named(self, name: str) -> tuple["XmlNode", ...]:
        return tuple(node for node in self.children if node.name == name)

    def find(self, *path: str) -> Optional["XmlNode"]:
        """Follow a path of child names, taking the first match at each step."""
        node: Optional[XmlNode] = self
        for name in path:
            if node is None:
                return None
            node = node.child(name)
        return node

    def find_all(self, *path: str) -> tuple["XmlNode", ...]:
        """Every node reachable through the path, matching all children at each step."""
        nodes: tuple[XmlNode, ...] = (self,)
        for name in path:
            nodes = tuple(c for n in nodes for c in n.children_named(name))
        return nodes

    def child_names(self) -> Iterator[str]:
        return (node.name for node in self.children)


def _convert(element: ElementTree.Element) -> XmlNode:
    return XmlNode(
        name=local_name(element.tag),
        attributes={local_name(k): v for k, v in element.attrib.items()},
        children=tuple(
            _convert(child) for child in element if isinstance(child.tag, str)
        ),
        text=(element.text or "").strip(),
    )


def parse_xml(document: Union[str, bytes]) -> XmlNode:
    """
    Parse an XML document into an XmlNode tree.

    Args:
        document: XML text or bytes

    Returns:
        XmlNode: The root element

    Raises:
        ParseError: If the document is empty or not well-formed
    """
    if isinstance(document, str):
        document = document.encode("utf-8")
    if not document.strip():
        raise ParseError("Empty XML document")
    try:
        root = ElementTree.fromstring(document)
    except ElementTree.ParseError as e:
        raise ParseError(f"Malformed XML: {e}") from e
    return _convert(root)

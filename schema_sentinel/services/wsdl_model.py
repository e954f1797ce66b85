"""
WSDL Structural Model Builder.

Parses a WSDL document into operation descriptors:
- top-level element declarations from every types/schema section
- operations (name + soapAction) from every binding section
- request/response field lists taken from the "{Operation}Request" and
  "{Operation}Response" element declarations

This is a structural model (element presence and declared types), not a full
XSD model. An operation whose request or response element is not declared
gets an empty field list; validation against it then reports every field
that the message is expected to carry as missing.

Usage:
    model = load_model(Path("contracts/wsdl/order-service.wsdl").read_bytes())
    op = model.get_operation("CreateOrder")
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..core.resources import ResourceReader
from ..schemas.wsdl import OperationDescriptor, SchemaElementDescriptor
from .xml_tree import XmlNode, parse_xml

logger = logging.getLogger(__name__)


# Field type used when an element declares no primitive type
DEFAULT_FIELD_TYPE = "complex"


class WsdlModel:
    """
    Immutable structural model of one loaded WSDL document.

    Attributes:
        elements: Top-level element declarations keyed by name
        operations: Operation descriptors keyed by operation name
    """

    def __init__(
        self,
        elements: dict[str, XmlNode],
        operations: dict[str, OperationDescriptor],
    ) -> None:
        self._elements = dict(elements)
        self._operations = dict(operations)

    @property
    def elements(self) -> dict[str, XmlNode]:
        return dict(self._elements)

    @property
    def operations(self) -> dict[str, OperationDescriptor]:
        return dict(self._operations)

    def get_operations(self) -> list[OperationDescriptor]:
        """All operation descriptors (order is not significant)."""
        return list(self._operations.values())

    def get_operation(self, name: str) -> Optional[OperationDescriptor]:
        return self._operations.get(name)

    def operation_names(self) -> set[str]:
        return set(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)


# =============================================================================
# Extraction
# =============================================================================


def _extract_elements(definitions: XmlNode) -> dict[str, XmlNode]:
    elements: dict[str, XmlNode] = {}
    for schema in definitions.find_all("types", "schema"):
        for element in schema.children_named("element"):
            name = element.attr("name")
            if name and name not in elements:
                elements[name] = element
    return elements


def _sequence_fields(element: XmlNode) -> tuple[SchemaElementDescriptor, ...]:
    """Ordered named fields under an element's complexType/sequence."""
    sequence = element.find("complexType", "sequence")
    if sequence is None:
        return ()
    return tuple(
        _describe_field(item)
        for item in sequence.children_named("element")
        if item.attr("name")
    )


def _describe_field(item: XmlNode) -> SchemaElementDescriptor:
    children = _sequence_fields(item) if item.find("complexType") is not None else None
    return SchemaElementDescriptor(
        name=item.attr("name"),
        type=item.attr("type") or DEFAULT_FIELD_TYPE,
        # Only an explicit minOccurs="0" makes a field optional
        required=item.attr("minOccurs") != "0",
        children=children,
    )


def _element_fields(
    elements: dict[str, XmlNode], element_name: str
) -> tuple[SchemaElementDescriptor, ...]:
    element = elements.get(element_name)
    if element is None:
        logger.debug(f"Element {element_name} not declared in WSDL types")
        return ()
    return _sequence_fields(element)


def _extract_operations(
    definitions: XmlNode, elements: dict[str, XmlNode]
) -> dict[str, OperationDescriptor]:
    operations: dict[str, OperationDescriptor] = {}
    for operation in definitions.find_all("binding", "operation"):
        name = operation.attr("name")
        if not name or name in operations:
            continue
        soap_operation = operation.child("operation")
        action = soap_operation.attr("soapAction", "") if soap_operation is not None else ""
        operations[name] = OperationDescriptor(
            name=name,
            action_identifier=action or "",
            input_fields=_element_fields(elements, f"{name}Request"),
            output_fields=_element_fields(elements, f"{name}Response"),
        )
    return operations


# =============================================================================
# Public API
# =============================================================================


def load_model(document: Union[str, bytes]) -> WsdlModel:
    """
    Parse a WSDL document into a WsdlModel.

    Args:
        document: WSDL XML text or bytes

    Returns:
        WsdlModel: Elements and operations of the document

    Raises:
        ParseError: If the document is not well-formed XML
    """
    definitions = parse_xml(document)
    if definitions.name != "definitions":
        logger.warning(f"WSDL root element is '{definitions.name}', expected 'definitions'")

    elements = _extract_elements(definitions)
    operations = _extract_operations(definitions, elements)
    logger.info(
        f"Loaded WSDL model: {len(operations)} operations, {len(elements)} elements"
    )
    return WsdlModel(elements, operations)


def load_model_file(path: Union[str, Path], reader: ResourceReader) -> WsdlModel:
    """Read a WSDL document through the given reader and build its model."""
    return load_model(reader.read_bytes(path))

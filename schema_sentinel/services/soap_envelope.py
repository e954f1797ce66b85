"""
SOAP 1.1 envelope builder driven by operation descriptors.

Renders a request or response envelope whose wrapper element carries one
child per declared field, in declaration order:
- values given for a field are rendered as its text (lists repeat the
  element, mappings render the field's declared children)
- required fields without a value get a placeholder
- optional fields are emitted only when a value is given

Usage:
    envelope = build_envelope(op, "input", {"customerId": "CUST-12345"})
"""

from typing import Any, Mapping, Optional, Sequence
from xml.etree import ElementTree

from ..schemas.wsdl import Direction, OperationDescriptor, SchemaElementDescriptor, wrapper_name


SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
DEFAULT_NAMESPACE = "http://app2.example.com/orders"

# Placeholder text for required fields left unset
PLACEHOLDER = "?"

ElementTree.register_namespace("soap", SOAP_ENV_NS)
ElementTree.register_namespace("ns", DEFAULT_NAMESPACE)


def _qualified(namespace: str, name: str) -> str:
    return f"{{{namespace}}}{name}" if namespace else name


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _render_fields(
    parent: ElementTree.Element,
    fields: Sequence[SchemaElementDescriptor],
    values: Mapping[str, Any],
    namespace: str,
) -> None:
    for field in fields:
        value = values.get(field.name)
        if value is None and not field.required:
            continue
        items = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            _render_field(parent, field, item, namespace)


def _render_field(
    parent: ElementTree.Element,
    field: SchemaElementDescriptor,
    value: Any,
    namespace: str,
) -> None:
    element = ElementTree.SubElement(parent, _qualified(namespace, field.name))
    if isinstance(value, Mapping):
        if field.children:
            _render_fields(element, field.children, value, namespace)
        else:
            # No declared children: render the mapping keys as-is
            for key, nested in value.items():
                child = ElementTree.SubElement(element, _qualified(namespace, key))
                child.text = _format_scalar(nested)
    elif value is None:
        if field.children:
            _render_fields(element, field.children, {}, namespace)
        else:
            element.text = PLACEHOLDER
    else:
        element.text = _format_scalar(value)


def build_envelope(
    operation: OperationDescriptor,
    direction: Direction,
    values: Optional[Mapping[str, Any]] = None,
    namespace: str = DEFAULT_NAMESPACE,
) -> str:
    """
    Build a SOAP envelope for an operation from its own field list.

    Args:
        operation: Descriptor from a loaded WsdlModel
        direction: 'input' renders "{Op}Request", 'output' renders "{Op}Response"
        values: Field values keyed by field name
        namespace: Target namespace of the body elements

    Returns:
        str: The envelope as an XML document string
    """
    fields = operation.fields_for(direction)
    envelope = ElementTree.Element(_qualified(SOAP_ENV_NS, "Envelope"))
    body = ElementTree.SubElement(envelope, _qualified(SOAP_ENV_NS, "Body"))
    wrapper = ElementTree.SubElement(
        body, _qualified(namespace, wrapper_name(operation.name, direction))
    )
    _render_fields(wrapper, fields, values or {}, namespace)

    ElementTree.indent(envelope)
    return ElementTree.tostring(envelope, encoding="utf-8", xml_declaration=True).decode("utf-8")

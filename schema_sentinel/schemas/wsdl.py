"""
Pydantic schemas for the WSDL structural model and SOAP body validation.

Example usage:
    from schema_sentinel.schemas.wsdl import OperationDescriptor

    op = model.get_operation("CreateOrder")
    required = [f.name for f in op.input_fields if f.required]
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


Direction = Literal["input", "output"]


class SchemaElementDescriptor(BaseModel):
    """One field in a message shape.

    ``required`` is True unless the source declares ``minOccurs="0"``.
    ``children`` is set only for fields with an inline complex type.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    type: str = Field(default="complex", description="Declared type, or 'complex' when none is given")
    required: bool = True
    children: Optional[Tuple["SchemaElementDescriptor", ...]] = None


class OperationDescriptor(BaseModel):
    """Structural model of a SOAP operation, built once at load time."""
    model_config = ConfigDict(frozen=True)

    name: str
    action_identifier: str = ""
    input_fields: Tuple[SchemaElementDescriptor, ...] = ()
    output_fields: Tuple[SchemaElementDescriptor, ...] = ()

    def fields_for(self, direction: Direction) -> Tuple[SchemaElementDescriptor, ...]:
        """Return the request fields for 'input' and the response fields for 'output'."""
        if direction == "input":
            return self.input_fields
        if direction == "output":
            return self.output_fields
        raise ValueError(f"Invalid direction: {direction!r}. Must be 'input' or 'output'")


class SoapValidationResult(BaseModel):
    """Outcome of validating a SOAP body against an operation descriptor."""
    valid: bool
    missing_elements: List[str] = Field(default_factory=list)
    unexpected_elements: List[str] = Field(default_factory=list)
    operation: str


def wrapper_name(operation_name: str, direction: Direction) -> str:
    """Name of the body wrapper element for an operation and direction."""
    suffix = "Request" if direction == "input" else "Response"
    return f"{operation_name}{suffix}"

"""
SOAP Body Structural Validator.

Checks that a SOAP envelope's body carries the wrapper element and required
fields declared for an operation in a loaded WsdlModel.

Usage:
    validator = SoapBodyValidator(model)
    result = validator.validate_body(envelope_xml, "CreateOrder", "input")

    if not result.valid:
        for name in result.missing_elements:
            print(f"missing: {name}")

Configuration problems (unknown operation, missing body or wrapper) are
reported in the result, never raised.
"""

import logging
from typing import Optional, Union

from ..core.errors import ParseError
from ..schemas.wsdl import Direction, SoapValidationResult, wrapper_name
from .wsdl_model import WsdlModel
from .xml_tree import XmlNode, parse_xml

logger = logging.getLogger(__name__)


SOAP_BODY_NOT_FOUND = "SOAP Body not found"


class SoapBodyValidator:
    """
    Validates SOAP bodies against the operations of a WsdlModel.

    By default unexpected child elements are advisory only. With
    ``strict=True`` they also make the result invalid.
    """

    def __init__(self, model: WsdlModel, strict: bool = False) -> None:
        self.model = model
        self.strict = strict

    def validate_body(
        self,
        xml: Union[str, bytes],
        operation_name: str,
        direction: Direction,
    ) -> SoapValidationResult:
        """
        Validate a SOAP envelope against an operation's field list.

        Args:
            xml: SOAP envelope text or bytes
            operation_name: Operation to validate against
            direction: 'input' for requests, 'output' for responses

        Returns:
            SoapValidationResult: valid is True iff no required field is missing
                (and, in strict mode, no unexpected element is present)

        Raises:
            ValueError: If direction is not 'input' or 'output'
        """
        if direction not in ("input", "output"):
            raise ValueError(f"Invalid direction: {direction!r}. Must be 'input' or 'output'")

        operation = self.model.get_operation(operation_name)
        if operation is None:
            return self._invalid(operation_name, f"Operation not found: {operation_name}")

        expected_fields = operation.fields_for(direction)

        body = _find_body(xml)
        if body is None:
            return self._invalid(operation_name, SOAP_BODY_NOT_FOUND)

        wrapper = wrapper_name(operation_name, direction)
        content = body.child(wrapper)
        if content is None:
            return self._invalid(operation_name, f"{wrapper} element not found in SOAP Body")

        actual_names = list(content.child_names())
        present = set(actual_names)

        missing = [
            field.name
            for field in expected_fields
            if field.required and field.name not in present
        ]

        expected_names = {field.name for field in expected_fields}
        unexpected: list[str] = []
        for name in actual_names:
            if name not in expected_names and name not in unexpected:
                unexpected.append(name)

        valid = not missing and not (self.strict and unexpected)
        if not valid:
            logger.debug(
                f"{wrapper} failed validation: missing={missing} unexpected={unexpected}"
            )
        return SoapValidationResult(
            valid=valid,
            missing_elements=missing,
            unexpected_elements=unexpected,
            operation=operation_name,
        )

    @staticmethod
    def _invalid(operation_name: str, reason: str) -> SoapValidationResult:
        return SoapValidationResult(
            valid=False,
            missing_elements=[reason],
            unexpected_elements=[],
            operation=operation_name,
        )


def _find_body(xml: Union[str, bytes]) -> Optional[XmlNode]:
    try:
        envelope = parse_xml(xml)
    except ParseError as e:
        logger.warning(f"SOAP envelope is not well-formed: {e}")
        return None
    if envelope.name != "Envelope":
        return None
    return envelope.child("Body")

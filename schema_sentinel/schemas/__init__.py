"""
Pydantic schemas for schema-sentinel.
"""

from .drift import (
    DriftCheck,
    DriftPolicy,
    DriftReport,
    DriftResult,
    DriftSummary,
    SchemaFamily,
    UnreachablePolicy,
)
from .json_schema import JsonValidationResult, SchemaViolation
from .wsdl import (
    Direction,
    OperationDescriptor,
    SchemaElementDescriptor,
    SoapValidationResult,
    wrapper_name,
)

"""Pydantic schemas for JSON Schema validation results."""

from typing import List, Optional

from pydantic import BaseModel, Field


class SchemaViolation(BaseModel):
    """A single JSON Schema violation."""
    path: str = Field(..., description="JSON pointer to the offending value ('' for the root)")
    message: str
    validator: str = Field(..., description="Failing schema keyword, e.g. 'required'")

    def __str__(self) -> str:
        return f"{self.path} {self.message}"


class JsonValidationResult(BaseModel):
    """Outcome of validating a payload against a registered schema."""
    valid: bool
    errors: Optional[List[SchemaViolation]] = None
    schema_id: str

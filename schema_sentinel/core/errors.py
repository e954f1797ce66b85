"""
Error taxonomy for schema-sentinel.

- ParseError: a WSDL or JSON Schema document could not be parsed/compiled
- NotFoundError: an unregistered schema id or a missing local baseline
- NetworkError: a live fetch failed (transport error or non-2xx status)
- SchemaAssertionError: raised only by assert-style helpers meant for tests

Structural mismatches are never raised; they are returned as result objects.
"""

from typing import Optional


class SentinelError(Exception):
    """Base class for all schema-sentinel errors."""

    pass


class ParseError(SentinelError):
    """Raised when an XML or JSON Schema document is malformed."""

    pass


class NotFoundError(SentinelError):
    """Raised when a schema id or local resource does not exist."""

    pass


class NetworkError(SentinelError):
    """Raised when fetching a live artifact fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SchemaAssertionError(SentinelError, AssertionError):
    """Aggregated validation failure raised by SchemaRegistry.assert_valid."""

    def __init__(self, schema_id: str, violations: list[str]) -> None:
        self.schema_id = schema_id
        self.violations = violations
        super().__init__(
            f"Schema validation failed for {schema_id}: {'; '.join(violations)}"
        )

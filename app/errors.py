"""
Custom error types for the FHIR query gateway.

Remote failures never surface as exceptions here: the query executor turns
them into `Failure` results. These classes cover the problems detected
locally, before any network call is made.
"""

from typing import Any


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidInputError(GatewayError):
    """Raised when caller input is rejected before a query is built."""

    def __init__(self, message: str, field: str | None = None, value: str | None = None):
        self.field = field
        self.value = value
        super().__init__(message, details={"field": field, "value": value})


class MissingParameterError(InvalidInputError):
    """Raised when a required parameter is absent or blank."""

    def __init__(self, field: str):
        super().__init__(f"{field} parameter is required", field=field, value="")


class InvalidIdentifierError(InvalidInputError):
    """Raised when an identifier does not have the FHIR id format."""

    def __init__(self, field: str, value: str):
        message = (
            f"Invalid {field} '{value}'. "
            f"Must be 1-64 characters with letters, digits, hyphens, and dots."
        )
        super().__init__(message, field=field, value=value)


class UnsupportedFilterError(InvalidInputError):
    """Raised when a filter kind is not offered for a resource type."""

    def __init__(self, resource_type: str, filter_kind: str):
        self.resource_type = resource_type
        self.filter_kind = filter_kind
        super().__init__(
            f"Filter '{filter_kind}' is not supported for {resource_type}",
            field="filter_kind",
            value=filter_kind,
        )


class UnknownOperationError(GatewayError):
    """Raised when a gateway operation name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown gateway operation: {name}", details={"operation": name})

"""
Input validation for the FHIR query gateway.

Every check here runs before a query descriptor is built, so a rejected
value never reaches the remote server.
"""

import re

from app.errors import InvalidIdentifierError, InvalidInputError, MissingParameterError

# FHIR logical id: https://hl7.org/fhir/R4/datatypes.html#id
RESOURCE_ID_PATTERN = re.compile(r"^[A-Za-z0-9\-\.]{1,64}$")

MAX_SEARCH_TEXT_LENGTH = 200


def validate_required(value: str | None, field: str) -> str:
    """
    Ensure a parameter is present and not blank.

    Args:
        value: Raw parameter value, possibly None
        field: Parameter name used in the error message

    Returns:
        The value with surrounding whitespace removed

    Raises:
        MissingParameterError: If the value is None, empty or only whitespace
    """
    if value is None or not value.strip():
        raise MissingParameterError(field)
    return value.strip()


def validate_resource_id(value: str | None, field: str = "id") -> str:
    """
    Validate a FHIR logical id.

    Args:
        value: Identifier to validate
        field: Parameter name used in the error message

    Returns:
        The validated identifier

    Raises:
        MissingParameterError: If the identifier is blank
        InvalidIdentifierError: If the identifier has the wrong format
    """
    value = validate_required(value, field)
    if not RESOURCE_ID_PATTERN.match(value):
        raise InvalidIdentifierError(field, value)
    return value


def validate_search_text(value: str | None, field: str = "name") -> str:
    """Validate free text passed to a string search parameter."""
    value = validate_required(value, field)
    if len(value) > MAX_SEARCH_TEXT_LENGTH:
        raise InvalidInputError(
            f"{field} must be at most {MAX_SEARCH_TEXT_LENGTH} characters",
            field=field,
            value=value,
        )
    return value

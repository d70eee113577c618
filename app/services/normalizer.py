"""
Turn execution results and classified failures into caller-facing envelopes.
"""

import json
from typing import Any

from app.config.logging import get_logger
from app.errors import InvalidInputError
from app.models.envelopes import ErrorEnvelope, ErrorKind, SuccessEnvelope
from app.models.query import Collection, ResourceType, Single

logger = get_logger(__name__)

STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONNECTION_FAILED: 503,
    ErrorKind.INTERNAL: 500,
}

CONNECTION_FAILED_LABEL = "FHIR server connection failed"
INTERNAL_LABEL = "Internal server error"
INVALID_INPUT_LABEL = "Invalid request"


def encode_resource(resource: dict[str, Any], pretty: bool = False) -> str:
    """Encode a resource or bundle as JSON text."""
    if pretty:
        return json.dumps(resource, indent=2, ensure_ascii=False)
    return json.dumps(resource, separators=(",", ":"), ensure_ascii=False)


def build_bundle(result: Collection) -> dict[str, Any]:
    """
    The Bundle to return for a collection.

    A server Bundle is passed through untouched apart from `total`, which is
    filled in when the server left it out. A collection built without one
    gets a minimal searchset Bundle in resource order.
    """
    if result.bundle is not None:
        return {**result.bundle, "total": result.total_count}

    return {
        "resourceType": "Bundle",
        "type": "searchset",
        "total": result.total_count,
        "entry": [{"resource": resource} for resource in result.resources],
    }


def to_success_envelope(
    result: Single | Collection,
    resource_type: ResourceType,
    context: dict[str, str] | None = None,
) -> SuccessEnvelope:
    """
    Encode a successful result.

    A single resource is encoded as-is; a collection is encoded as the
    pretty-printed server Bundle. The logged count covers only resources of
    the requested type, not included resources or outcomes.
    """
    if isinstance(result, Single):
        content = encode_resource(result.resource)
        count = 1
        logger.info(
            f"Retrieved {resource_type.value}",
            resource_type=resource_type.value,
            **(context or {}),
        )
    else:
        content = encode_resource(build_bundle(result), pretty=True)
        count = result.count_of(resource_type)
        logger.info(
            f"Found {count} {resource_type.value} resources",
            resource_type=resource_type.value,
            count=count,
            total=result.total_count,
            **(context or {}),
        )
    return SuccessEnvelope(content=content, count=count)


def error_label(kind: ErrorKind, resource_type: ResourceType) -> str:
    """Short error text for a kind; only NOT_FOUND names the resource type."""
    if kind is ErrorKind.NOT_FOUND:
        return f"{resource_type.value} not found"
    if kind is ErrorKind.CONNECTION_FAILED:
        return CONNECTION_FAILED_LABEL
    return INTERNAL_LABEL


def to_error_envelope(
    kind: ErrorKind,
    resource_type: ResourceType,
    context: dict[str, str],
    message: str,
) -> ErrorEnvelope:
    """Build the error envelope for a classified failure."""
    return ErrorEnvelope(
        status_code=STATUS_CODES[kind],
        error=error_label(kind, resource_type),
        message=message,
        context=dict(context),
        error_kind=kind,
    )


def invalid_input_envelope(error: InvalidInputError, context: dict[str, str]) -> ErrorEnvelope:
    """Build the 400 envelope for input rejected before any remote call."""
    return ErrorEnvelope(
        status_code=400,
        error=INVALID_INPUT_LABEL,
        message=error.message,
        context=dict(context),
    )

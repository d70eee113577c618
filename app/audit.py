"""
Audit logging for clinical resource access.

Every read, search and failed access is recorded on the dedicated
`fhir.audit` logger so it can be routed separately from application logs.
"""

import logging
from typing import Any

import structlog

_audit_logger = structlog.wrap_logger(
    logging.getLogger("fhir.audit"),
    wrapper_class=structlog.stdlib.BoundLogger,
)


class AuditEvent:
    """Constants for audit event types."""

    RESOURCE_READ = "resource.read"
    RESOURCE_SEARCH = "resource.search"

    RESOURCE_ACCESS_ERROR = "error.resource_access"
    VALIDATION_ERROR = "error.validation"


def audit_log(
    event: str,
    *,
    resource_type: str | None = None,
    resource_id: str | None = None,
    success: bool = True,
    error: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """
    Log an audit event.

    Args:
        event: Event type from AuditEvent constants
        resource_type: Optional FHIR resource type
        resource_id: Optional resource ID
        success: Whether the operation succeeded
        error: Optional error message if failed
        details: Optional additional details
    """
    log_data: dict[str, Any] = {
        "audit_event": event,
        "success": success,
    }

    if resource_type:
        log_data["resource_type"] = resource_type
    if resource_id:
        log_data["resource_id"] = resource_id
    if error:
        log_data["error"] = error
    if details:
        log_data["details"] = details

    if success:
        _audit_logger.info(event, **log_data)
    else:
        _audit_logger.warning(event, **log_data)

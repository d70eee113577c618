"""
Models for the FHIR query gateway.

This module contains:
- Query descriptors and execution results
- Caller-facing success and error envelopes
"""

from app.models.envelopes import (
    ErrorBody,
    ErrorEnvelope,
    ErrorKind,
    GatewayResponse,
    SuccessEnvelope,
)
from app.models.query import (
    ById,
    BySubjectReference,
    ByTextSearch,
    Collection,
    ExecutionResult,
    Failure,
    FailureReason,
    FilterKind,
    QueryDescriptor,
    ResourceType,
    Single,
)

__all__ = [
    "ResourceType",
    "FilterKind",
    "ById",
    "BySubjectReference",
    "ByTextSearch",
    "QueryDescriptor",
    "Single",
    "Collection",
    "Failure",
    "FailureReason",
    "ExecutionResult",
    "ErrorKind",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "GatewayResponse",
    "ErrorBody",
]

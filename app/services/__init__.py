"""
Service layer for the FHIR query gateway.

Query building, remote execution, failure classification and response
normalization, composed by the gateway pipeline.
"""

from app.services.error_classifier import classify
from app.services.fhir_client import (
    FHIRQueryExecutor,
    QueryExecutor,
    get_query_executor,
)
from app.services.gateway import (
    OPERATIONS,
    GatewayOperation,
    LoggingObserver,
    QueryGateway,
    QueryObserver,
    get_operation,
)
from app.services.query_builder import build_query

__all__ = [
    "build_query",
    "classify",
    "FHIRQueryExecutor",
    "QueryExecutor",
    "get_query_executor",
    "GatewayOperation",
    "OPERATIONS",
    "get_operation",
    "QueryGateway",
    "QueryObserver",
    "LoggingObserver",
]

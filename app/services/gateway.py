"""
Gateway operations.

Every supported query runs through the same pipeline:

    validate + build descriptor -> execute once -> normalize

Operations differ only in their registration entry (resource type, filter
kind and the context key that echoes the caller's value back in errors).
"""

import time
from dataclasses import dataclass
from typing import Protocol, Sequence

from app.audit import AuditEvent, audit_log
from app.config.logging import get_logger
from app.errors import InvalidInputError, UnknownOperationError
from app.models.envelopes import ErrorKind, GatewayResponse
from app.models.query import (
    ExecutionResult,
    Failure,
    FilterKind,
    QueryDescriptor,
    ResourceType,
)
from app.services.error_classifier import classify
from app.services.fhir_client import QueryExecutor
from app.services.normalizer import (
    invalid_input_envelope,
    to_error_envelope,
    to_success_envelope,
)
from app.services.query_builder import build_query

logger = get_logger(__name__)


@dataclass(frozen=True)
class GatewayOperation:
    """Registration entry for one inbound query."""

    name: str
    resource_type: ResourceType
    filter_kind: FilterKind
    context_key: str
    summary: str


OPERATIONS: dict[str, GatewayOperation] = {
    op.name: op
    for op in (
        GatewayOperation(
            "get-patient-by-id",
            ResourceType.PATIENT,
            FilterKind.BY_ID,
            "patientId",
            "Get patient by ID",
        ),
        GatewayOperation(
            "search-patient-by-name",
            ResourceType.PATIENT,
            FilterKind.BY_TEXT_SEARCH,
            "name",
            "Search patients by name",
        ),
        GatewayOperation(
            "get-observation-by-id",
            ResourceType.OBSERVATION,
            FilterKind.BY_ID,
            "observationId",
            "Get observation by ID",
        ),
        GatewayOperation(
            "list-observations-by-patient",
            ResourceType.OBSERVATION,
            FilterKind.BY_SUBJECT_REFERENCE,
            "patientId",
            "Get observations by patient ID",
        ),
        GatewayOperation(
            "get-documentreference-by-id",
            ResourceType.DOCUMENT_REFERENCE,
            FilterKind.BY_ID,
            "documentReferenceId",
            "Get document reference by ID",
        ),
        GatewayOperation(
            "list-documentreferences-by-patient",
            ResourceType.DOCUMENT_REFERENCE,
            FilterKind.BY_SUBJECT_REFERENCE,
            "patientId",
            "Get document references by patient ID",
        ),
        GatewayOperation(
            "get-diagnosticreport-by-id",
            ResourceType.DIAGNOSTIC_REPORT,
            FilterKind.BY_ID,
            "diagnosticReportId",
            "Get diagnostic report by ID",
        ),
        GatewayOperation(
            "list-diagnosticreports-by-patient",
            ResourceType.DIAGNOSTIC_REPORT,
            FilterKind.BY_SUBJECT_REFERENCE,
            "patientId",
            "Get diagnostic reports by patient ID",
        ),
    )
}


def get_operation(name: str) -> GatewayOperation:
    """Look up a registered operation by name."""
    try:
        return OPERATIONS[name]
    except KeyError:
        raise UnknownOperationError(name) from None


class QueryObserver(Protocol):
    """Hook notified around each executor call."""

    def before_execute(self, descriptor: QueryDescriptor) -> None: ...

    def after_execute(
        self, descriptor: QueryDescriptor, result: ExecutionResult, elapsed_ms: float
    ) -> None: ...


class LoggingObserver:
    """Logs every remote query and a summary of its outcome."""

    def before_execute(self, descriptor: QueryDescriptor) -> None:
        logger.debug("Remote query started", descriptor=repr(descriptor))

    def after_execute(
        self, descriptor: QueryDescriptor, result: ExecutionResult, elapsed_ms: float
    ) -> None:
        if isinstance(result, Failure):
            outcome = {"failure": result.reason.value, "failure_message": result.message}
        else:
            outcome = {"count": result.count}
        logger.debug(
            "Remote query finished",
            descriptor=repr(descriptor),
            elapsed_ms=round(elapsed_ms, 1),
            **outcome,
        )


class QueryGateway:
    """Runs registered operations against a query executor."""

    def __init__(self, executor: QueryExecutor, observers: Sequence[QueryObserver] = ()):
        self.executor = executor
        self.observers = tuple(observers)

    async def run(self, operation: GatewayOperation | str, value: str | None) -> GatewayResponse:
        """
        Run one operation for a caller-supplied value.

        Args:
            operation: Registered operation or its name
            value: Identifier, patient ID or search text from the caller

        Returns:
            SuccessEnvelope, or ErrorEnvelope with status 400/404/500/503
        """
        if isinstance(operation, str):
            operation = get_operation(operation)

        resource_type = operation.resource_type
        context = {operation.context_key: value or ""}

        try:
            descriptor = build_query(
                resource_type, operation.filter_kind, value, input_name=operation.context_key
            )
        except InvalidInputError as e:
            logger.warning(
                "Rejected invalid request",
                operation=operation.name,
                reason=e.message,
                **context,
            )
            audit_log(
                AuditEvent.VALIDATION_ERROR,
                resource_type=resource_type.value,
                success=False,
                error=e.message,
                details={"operation": operation.name, **e.details},
            )
            return invalid_input_envelope(e, context)

        logger.info(f"Fetching {resource_type.value}", operation=operation.name, **context)
        result = await self._execute(descriptor)

        if isinstance(result, Failure):
            return self._failed(operation, result, context)

        envelope = to_success_envelope(result, resource_type, context)
        audit_log(
            AuditEvent.RESOURCE_SEARCH
            if operation.filter_kind is not FilterKind.BY_ID
            else AuditEvent.RESOURCE_READ,
            resource_type=resource_type.value,
            resource_id=value if operation.filter_kind is FilterKind.BY_ID else None,
            details={"operation": operation.name, "count": envelope.count},
        )
        return envelope

    async def _execute(self, descriptor: QueryDescriptor) -> ExecutionResult:
        for observer in self.observers:
            observer.before_execute(descriptor)
        started = time.perf_counter()
        result = await self.executor.execute(descriptor)
        elapsed_ms = (time.perf_counter() - started) * 1000
        for observer in self.observers:
            observer.after_execute(descriptor, result, elapsed_ms)
        return result

    def _failed(
        self, operation: GatewayOperation, failure: Failure, context: dict[str, str]
    ) -> GatewayResponse:
        kind = classify(failure)
        resource_type = operation.resource_type

        if kind is ErrorKind.NOT_FOUND:
            logger.warning(f"{resource_type.value} not found", operation=operation.name, **context)
        elif kind is ErrorKind.CONNECTION_FAILED:
            logger.error(
                "Failed to connect to FHIR server",
                operation=operation.name,
                reason=failure.reason.value,
                error=failure.message,
                **context,
            )
        else:
            logger.error(
                f"Error fetching {resource_type.value}",
                operation=operation.name,
                reason=failure.reason.value,
                error=failure.message,
                exc_info=failure.exception,
                **context,
            )

        audit_log(
            AuditEvent.RESOURCE_ACCESS_ERROR,
            resource_type=resource_type.value,
            success=False,
            error=failure.message,
            details={"operation": operation.name, "error_kind": kind.value},
        )
        return to_error_envelope(kind, resource_type, context, failure.message)

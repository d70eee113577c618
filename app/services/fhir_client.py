"""
FHIR query executor backed by fhirpy.

The executor performs exactly one round trip per descriptor and reports the
outcome as an ExecutionResult. Library exceptions (fhirpy, aiohttp, asyncio
timeouts, JSON decoding) are translated into a Failure with a library-neutral
FailureReason; they never escape `execute`.
"""

import asyncio
import ssl
from functools import lru_cache
from typing import Any, Protocol

import aiohttp
from fhirpy import AsyncFHIRClient
from fhirpy.base.exceptions import OperationOutcome, ResourceNotFound

from app.config.logging import get_logger
from app.config.settings import Settings, get_settings
from app.models.query import (
    ById,
    Collection,
    ExecutionResult,
    Failure,
    FailureReason,
    QueryDescriptor,
    ResourceType,
    Single,
)

logger = get_logger(__name__)

FHIR_JSON_CONTENT_TYPE = "application/fhir+json"


class QueryExecutor(Protocol):
    """Anything that can run a descriptor against a FHIR server."""

    async def execute(self, descriptor: QueryDescriptor) -> ExecutionResult: ...


class InvalidFHIRResponseError(ValueError):
    """Raised when the server answers with a payload of the wrong shape."""

    pass


def failure_reason(exc: BaseException) -> FailureReason:
    """Describe an exception raised by the FHIR client stack."""
    if isinstance(exc, ResourceNotFound):
        return FailureReason.NOT_FOUND
    if isinstance(exc, (aiohttp.ClientSSLError, ssl.SSLError)):
        return FailureReason.TLS_HANDSHAKE
    if isinstance(exc, (aiohttp.ServerTimeoutError, asyncio.TimeoutError, TimeoutError)):
        return FailureReason.TIMEOUT
    if isinstance(exc, (aiohttp.ClientConnectorError, ConnectionError)):
        return FailureReason.UNREACHABLE
    if isinstance(exc, aiohttp.ClientConnectionError):
        return FailureReason.DISCONNECTED
    if isinstance(exc, OperationOutcome):
        return FailureReason.REMOTE_OUTCOME
    if isinstance(exc, (aiohttp.ContentTypeError, ValueError)):
        return FailureReason.INVALID_RESPONSE
    return FailureReason.UNEXPECTED


def failure_from_exception(exc: BaseException) -> Failure:
    """Wrap an exception in a Failure, keeping its own message."""
    return Failure(
        reason=failure_reason(exc),
        message=str(exc) or exc.__class__.__name__,
        exception=exc,
    )


def collection_from_bundle(bundle: Any) -> Collection:
    """
    Read a searchset Bundle into a Collection.

    The Bundle itself is kept unchanged on the Collection so it can be passed
    through to the caller. The number of delivered entries stands in for
    `total` only when the server does not report one.
    """
    if not isinstance(bundle, dict) or bundle.get("resourceType") != "Bundle":
        raise InvalidFHIRResponseError("Expected a Bundle from the FHIR server")

    resources = tuple(
        entry["resource"]
        for entry in bundle.get("entry") or []
        if isinstance(entry, dict) and isinstance(entry.get("resource"), dict)
    )
    total = bundle.get("total")
    if not isinstance(total, int) or isinstance(total, bool) or total < 0:
        total = len(resources)

    return Collection(resources=resources, total_count=total, bundle=bundle)


class FHIRQueryExecutor:
    """Runs query descriptors against one FHIR server."""

    def __init__(self, client: AsyncFHIRClient):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "FHIRQueryExecutor":
        """Create an executor for the configured FHIR base URL."""
        client = AsyncFHIRClient(
            url=settings.fhir_server_base_url,
            aiohttp_config={
                "timeout": aiohttp.ClientTimeout(total=settings.request_timeout),
            },
            extra_headers={"Accept": FHIR_JSON_CONTENT_TYPE},
        )
        logger.info(
            "Created FHIR query executor",
            base_url=settings.fhir_server_base_url,
            timeout=settings.request_timeout,
        )
        return cls(client)

    async def read_by_id(self, descriptor: ById) -> Single:
        data = await self._client.execute(descriptor.path, method="get")
        if not isinstance(data, dict):
            raise InvalidFHIRResponseError(f"Expected a {descriptor.resource_type.value} resource")
        return Single(resource=data)

    async def search(self, resource_type: ResourceType, params: dict[str, str]) -> Collection:
        data = await self._client.execute(resource_type.value, method="get", params=params)
        return collection_from_bundle(data)

    async def execute(self, descriptor: QueryDescriptor) -> ExecutionResult:
        """Run one descriptor; remote failures come back as Failure, never raised."""
        try:
            if isinstance(descriptor, ById):
                return await self.read_by_id(descriptor)
            return await self.search(descriptor.resource_type, descriptor.search_params())
        except Exception as e:
            return failure_from_exception(e)


@lru_cache
def get_query_executor() -> FHIRQueryExecutor:
    """Get the executor for the configured FHIR server (FastAPI dependency)."""
    return FHIRQueryExecutor.from_settings(get_settings())


def reset_query_executor() -> None:
    """Forget the cached executor so the next call rebuilds it from settings."""
    get_query_executor.cache_clear()

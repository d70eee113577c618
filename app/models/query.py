"""
Query descriptors and execution results.

A descriptor is the normalized request handed to the query executor; an
execution result is what comes back. Both are created per request and never
shared.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceType(str, Enum):
    """FHIR resource types served by the gateway."""

    PATIENT = "Patient"
    OBSERVATION = "Observation"
    DOCUMENT_REFERENCE = "DocumentReference"
    DIAGNOSTIC_REPORT = "DiagnosticReport"


class FilterKind(str, Enum):
    """How an incoming value selects resources."""

    BY_ID = "by_id"
    BY_SUBJECT_REFERENCE = "by_subject_reference"
    BY_TEXT_SEARCH = "by_text_search"


@dataclass(frozen=True)
class ById:
    """Read a single resource by its logical id."""

    resource_type: ResourceType
    id: str

    @property
    def path(self) -> str:
        return f"{self.resource_type.value}/{self.id}"


@dataclass(frozen=True)
class BySubjectReference:
    """Search resources whose subject references the given patient."""

    resource_type: ResourceType
    patient_id: str

    def search_params(self) -> dict[str, str]:
        return {"subject": f"{ResourceType.PATIENT.value}/{self.patient_id}"}


@dataclass(frozen=True)
class ByTextSearch:
    """
    Search resources by a string parameter.

    FHIR string search is case-insensitive and matches on prefixes of the
    name parts, so this is never an exact-match lookup.
    """

    resource_type: ResourceType
    field: str
    value: str

    def search_params(self) -> dict[str, str]:
        return {self.field: self.value}


QueryDescriptor = ById | BySubjectReference | ByTextSearch


class FailureReason(str, Enum):
    """Library-neutral description of why a remote call failed."""

    NOT_FOUND = "not_found"
    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    TLS_HANDSHAKE = "tls_handshake"
    DISCONNECTED = "disconnected"
    REMOTE_OUTCOME = "remote_outcome"
    INVALID_RESPONSE = "invalid_response"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Single:
    """A single resource returned by a read."""

    resource: dict[str, Any]

    @property
    def count(self) -> int:
        return 1


@dataclass(frozen=True)
class Collection:
    """
    Resources returned by a search, in server order.

    `total_count` is the total reported by the server and may exceed the
    number of resources delivered in this round trip. `bundle` is the Bundle
    exactly as the server sent it, or None when the collection was not read
    from a server response.
    """

    resources: tuple[dict[str, Any], ...]
    total_count: int
    bundle: dict[str, Any] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.total_count < 0:
            raise ValueError("total_count must be >= 0")

    @property
    def count(self) -> int:
        return len(self.resources)

    def count_of(self, resource_type: "ResourceType") -> int:
        """Number of delivered resources of one type (includes and outcomes excluded)."""
        return sum(1 for r in self.resources if r.get("resourceType") == resource_type.value)


@dataclass(frozen=True)
class Failure:
    """A remote call that did not produce a result."""

    reason: FailureReason
    message: str
    exception: BaseException | None = field(default=None, compare=False)


ExecutionResult = Single | Collection | Failure

"""
Caller-facing response envelopes.
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Closed set of failure kinds a remote call can be classified into."""

    NOT_FOUND = "not_found"
    CONNECTION_FAILED = "connection_failed"
    INTERNAL = "internal"


@dataclass(frozen=True)
class SuccessEnvelope:
    """Encoded resource or bundle, passed to the caller unmodified."""

    content: str
    count: int
    status_code: int = 200


@dataclass(frozen=True)
class ErrorEnvelope:
    """
    Normalized error returned to the caller.

    `error_kind` is None for invalid input, which is rejected before any
    remote call and therefore never classified.
    """

    status_code: int
    error: str
    message: str
    context: dict[str, str] = field(default_factory=dict)
    error_kind: ErrorKind | None = None

    def to_body(self) -> dict[str, str]:
        """Flatten into the JSON object sent to the caller."""
        return {"error": self.error, **self.context, "message": self.message}


GatewayResponse = SuccessEnvelope | ErrorEnvelope


class ErrorBody(BaseModel):
    """Error response body. Identifying context keys (e.g. patientId) sit beside these fields."""

    model_config = ConfigDict(extra="allow")

    error: str = Field(description="Short error label, e.g. 'Patient not found'")
    message: str = Field(description="Underlying failure message for diagnostics")

"""
Classify executor failures into the gateway's error kinds.
"""

from app.models.envelopes import ErrorKind
from app.models.query import Failure, FailureReason

FAILURE_KINDS: dict[FailureReason, ErrorKind] = {
    FailureReason.NOT_FOUND: ErrorKind.NOT_FOUND,
    FailureReason.UNREACHABLE: ErrorKind.CONNECTION_FAILED,
    FailureReason.TIMEOUT: ErrorKind.CONNECTION_FAILED,
    FailureReason.TLS_HANDSHAKE: ErrorKind.CONNECTION_FAILED,
    FailureReason.DISCONNECTED: ErrorKind.CONNECTION_FAILED,
    FailureReason.REMOTE_OUTCOME: ErrorKind.INTERNAL,
    FailureReason.INVALID_RESPONSE: ErrorKind.INTERNAL,
    FailureReason.UNEXPECTED: ErrorKind.INTERNAL,
}


def classify(failure: Failure) -> ErrorKind:
    """Map a failure to exactly one error kind; anything unrecognized is INTERNAL."""
    return FAILURE_KINDS.get(failure.reason, ErrorKind.INTERNAL)

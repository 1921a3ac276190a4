"""
Failure classification.

Every failure the card store knows how to explain is raised as a subclass of
KnownError carrying a FailureKind. Refresh failures are caught and logged by
the refresh cycle; lifecycle failures propagate to the caller.

Failure kinds:
- Transport: the remote catalog could not be reached
- Protocol: the remote catalog answered with an error status or bad payload
- Read: the response body could not be read
- Lifecycle: the store was used outside its valid lifecycle
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Remote source failures
    EXTERNAL_API_ERROR = "external_api_error"
    UNEXPECTED_STATUS = "unexpected_status"
    READ_FAILED = "read_failed"
    MALFORMED_PAYLOAD = "malformed_payload"

    # Lifecycle failures
    ALREADY_CLOSED = "already_closed"
    ALREADY_STARTED = "already_started"
    NOT_READY = "not_ready"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message

"""Error taxonomy for remote inference calls."""

from enum import Enum


class InferenceErrorKind(str, Enum):
    """Tag identifying why an inference call failed."""

    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    AUTH_FAILURE = "auth_failure"
    TRANSPORT_FAILURE = "transport_failure"


class InferenceError(Exception):
    """Base class for failures surfaced by the call client."""

    kind: InferenceErrorKind
    retryable: bool = False


class InferenceTimeoutError(InferenceError):
    """An attempt exceeded the per-attempt timeout."""

    kind = InferenceErrorKind.TIMEOUT
    retryable = True


class InferenceCancelledError(InferenceError):
    """The analysis cancellation token fired."""

    kind = InferenceErrorKind.CANCELLED


class InferenceAuthError(InferenceError):
    """The service rejected the configured credentials (401/403)."""

    kind = InferenceErrorKind.AUTH_FAILURE


class InferenceTransportError(InferenceError):
    """Connection, protocol or server-side failure."""

    kind = InferenceErrorKind.TRANSPORT_FAILURE
    retryable = True

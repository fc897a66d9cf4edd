"""Error types for the JWNET client."""

import asyncio
from enum import Enum
from typing import Any


class JwnetErrorKind(str, Enum):
    """Classification of JWNET call failures.

    - TRANSPORT: Connection refused, DNS failure, reset, other network errors
    - TIMEOUT: Per-attempt deadline exceeded
    - CLIENT_ERROR: 4xx response, never retried
    - SERVER_ERROR: 5xx response, retried
    - PROTOCOL_ERROR: Malformed success payload or unexpected status, never retried
    - CANCELLED: Caller cancelled the call; upstream effect may be unknown
    """

    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    CLIENT_ERROR = "client-error"
    SERVER_ERROR = "server-error"
    PROTOCOL_ERROR = "protocol-error"
    CANCELLED = "cancelled"


RETRYABLE_KINDS = frozenset(
    {
        JwnetErrorKind.TRANSPORT,
        JwnetErrorKind.TIMEOUT,
        JwnetErrorKind.SERVER_ERROR,
    }
)


class JwnetConfigError(Exception):
    """Raised when required JWNET configuration is missing.

    Deliberately not a ValueError so pydantic validators let it propagate
    unwrapped.
    """

    def __init__(self, missing: list[str]) -> None:
        """Initialize the configuration error.

        Args:
            missing: Human-readable names of the missing settings.
        """
        self.missing = missing
        super().__init__(
            "Missing required JWNET configuration: " + ", ".join(missing)
        )


class JwnetApiError(Exception):
    """Failure of a logical JWNET call.

    Carries the taxonomy kind plus whatever the upstream returned, so callers
    can choose between a retry affordance and a hard failure without
    inspecting transport internals.
    """

    def __init__(  # noqa: PLR0913
        self,
        kind: JwnetErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any = None,
        error_code: str | None = None,
        operation: str | None = None,
        attempts: int = 0,
    ) -> None:
        """Initialize the API error.

        Args:
            kind: Classification of the failure.
            message: Human-readable message.
            status_code: Upstream HTTP status, if a response was received.
            payload: Parsed JSON body, or raw text when parsing failed.
            error_code: Upstream ``errorCode`` field, if the body had one.
            operation: Name of the operation that failed.
            attempts: Number of dispatch attempts made.
        """
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.payload = payload
        self.error_code = error_code
        self.operation = operation
        self.attempts = attempts

    @property
    def retryable(self) -> bool:
        """Whether this kind of failure may succeed on another attempt."""
        return self.kind in RETRYABLE_KINDS

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "kind": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "payload": self.payload,
            "operation": self.operation,
            "attempts": self.attempts,
        }

    def __repr__(self) -> str:
        return (
            f"JwnetApiError(kind={self.kind.value!r}, message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )


# Attribute holding the JwnetCancellation on a cancelled call's CancelledError
CANCELLATION_ATTR = "jwnet_cancellation"


class JwnetCancellation:
    """Record of a logical call cancelled by its caller.

    The caller's own CancelledError propagates unchanged, with this record
    attached, so enclosing ``asyncio.timeout()`` scopes still turn it into
    TimeoutError. For non-idempotent operations any dispatched attempt may
    have been applied upstream; ``outcome_unknown`` flags that case and the
    call must not be blindly reissued.
    """

    kind = JwnetErrorKind.CANCELLED

    def __init__(
        self,
        operation: str,
        *,
        attempts: int,
        in_flight: bool,
        outcome_unknown: bool,
    ) -> None:
        """Initialize the cancellation record.

        Args:
            operation: Name of the cancelled operation.
            attempts: Number of dispatch attempts started.
            in_flight: Whether an attempt was in flight when cancelled.
            outcome_unknown: Whether the upstream effect is unknown.
        """
        self.operation = operation
        self.attempts = attempts
        self.in_flight = in_flight
        self.outcome_unknown = outcome_unknown
        if outcome_unknown:
            message = f"{operation} cancelled after {attempts} attempt(s); upstream outcome unknown"
        else:
            message = f"{operation} cancelled after {attempts} attempt(s)"
        self.message = message

    def attach(self, exc: asyncio.CancelledError) -> asyncio.CancelledError:
        """Attach this record to the cancellation being propagated.

        Args:
            exc: The CancelledError delivered to the call.

        Returns:
            The same exception, for re-raising.
        """
        setattr(exc, CANCELLATION_ATTR, self)
        return exc

    def to_dict(self) -> dict[str, Any]:
        """Convert the record to a dictionary for logging/serialization.

        Returns:
            Dictionary representation of the record.
        """
        return {
            "kind": self.kind.value,
            "message": self.message,
            "operation": self.operation,
            "attempts": self.attempts,
            "in_flight": self.in_flight,
            "outcome_unknown": self.outcome_unknown,
        }

    def __repr__(self) -> str:
        return (
            f"JwnetCancellation(operation={self.operation!r}, "
            f"attempts={self.attempts!r}, outcome_unknown={self.outcome_unknown!r})"
        )


def cancellation_of(exc: BaseException | None) -> JwnetCancellation | None:
    """Find the cancellation record of a cancelled call.

    Follows ``__cause__`` and ``__context__``, so it also finds the record
    behind the TimeoutError raised by an enclosing ``asyncio.timeout()``.

    Args:
        exc: Exception raised out of a JWNET call.

    Returns:
        The attached record, or None if the call was not cancelled.
    """
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        record = getattr(exc, CANCELLATION_ATTR, None)
        if isinstance(record, JwnetCancellation):
            return record
        exc = exc.__cause__ or exc.__context__
    return None

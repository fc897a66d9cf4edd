"""Resilient JWNET API client.

This package provides:
- Per-attempt timeouts and bounded retries with exponential backoff and jitter
- A typed error taxonomy separating retryable from terminal failures
- Cancellation that reports an unknown upstream outcome
- A lazily constructed, replaceable process-wide client
"""

from jwnet.client.classifier import (
    classify_exception,
    classify_status,
    error_from_exception,
    error_from_response,
)
from jwnet.client.client import JwnetClient
from jwnet.client.config import JwnetConfig
from jwnet.client.dispatcher import AttemptResult, RequestDispatcher
from jwnet.client.errors import (
    RETRYABLE_KINDS,
    JwnetApiError,
    JwnetCancellation,
    JwnetConfigError,
    JwnetErrorKind,
    cancellation_of,
)
from jwnet.client.redact import redact_headers
from jwnet.client.registry import (
    JwnetClientRegistry,
    create_jwnet_client,
    get_jwnet_client,
)
from jwnet.client.retry import RetryPolicy
from jwnet.client.state_machine import (
    CallState,
    CallStateMachine,
    CallStateTransitionError,
)


__all__ = [
    # Client
    "JwnetClient",
    "RequestDispatcher",
    "AttemptResult",
    # Lifecycle
    "JwnetClientRegistry",
    "create_jwnet_client",
    "get_jwnet_client",
    # Config
    "JwnetConfig",
    "RetryPolicy",
    # Errors
    "JwnetApiError",
    "JwnetCancellation",
    "cancellation_of",
    "JwnetConfigError",
    "JwnetErrorKind",
    "RETRYABLE_KINDS",
    # Classification
    "classify_exception",
    "classify_status",
    "error_from_exception",
    "error_from_response",
    # State machine
    "CallState",
    "CallStateMachine",
    "CallStateTransitionError",
    # Redaction
    "redact_headers",
]

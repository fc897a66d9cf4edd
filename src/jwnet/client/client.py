"""JWNET API client with bounded retries, backoff and typed errors."""

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from jwnet.client.config import JwnetConfig
from jwnet.client.constants import (
    COMPONENT_JWNET,
    PATH_HEALTH,
    PATH_MANIFEST_INQUIRY,
    PATH_MANIFEST_REGISTER,
    PATH_RESERVATION_CREATE,
)
from jwnet.client.dispatcher import RequestDispatcher
from jwnet.client.errors import JwnetApiError, JwnetCancellation
from jwnet.client.retry import RetryPolicy
from jwnet.client.state_machine import CallState, CallStateMachine
from jwnet.models.manifest import (
    JwnetModel,
    ManifestInquiryRequest,
    ManifestInquiryResponse,
    ManifestRegisterRequest,
    ManifestRegisterResponse,
    ReservationRequest,
    ReservationResponse,
)


logger = structlog.get_logger()

ResponseT = TypeVar("ResponseT", bound=BaseModel)
Sleeper = Callable[[float], Awaitable[None]]

# Operations whose upstream effect is not idempotent
NON_IDEMPOTENT_OPERATIONS = frozenset({"register_manifest", "reserve_numbers"})


class JwnetClient:
    """Asynchronous client for the JWNET electronic manifest API.

    Each operation is one logical call: up to ``max_retries + 1`` dispatch
    attempts, each bounded by the per-attempt timeout, with exponential
    backoff and jitter in between. Transport, timeout and 5xx failures are
    retried; 4xx and malformed success payloads are surfaced at once.

    The instance is read-only after construction and safe to share between
    concurrent tasks. Every logical call opens its own ``httpx.AsyncClient``
    and closes it when the call resolves. An injected ``transport`` is shared
    by all calls and is closed along with each call's client, so it must
    tolerate ``aclose()`` (``httpx.MockTransport`` does).
    """

    def __init__(
        self,
        config: JwnetConfig,
        *,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            config: Validated connection configuration.
            retry_policy: Retry/backoff policy. Defaults to the standard
                policy with ``config.max_retries``.
            transport: Optional httpx transport (tests inject MockTransport).
            sleep: Coroutine used for backoff waits.
        """
        self._config = config
        self._retry_policy = retry_policy or RetryPolicy(
            max_retries=config.max_retries
        )
        self._transport = transport
        self._sleep = sleep
        self._dispatcher = RequestDispatcher(config)
        self._log = logger.bind(component=COMPONENT_JWNET)

    @property
    def config(self) -> JwnetConfig:
        """Get the connection configuration."""
        return self._config

    @property
    def retry_policy(self) -> RetryPolicy:
        """Get the retry policy."""
        return self._retry_policy

    async def register_manifest(
        self,
        request: ManifestRegisterRequest | Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        allow_header_override: bool = False,
    ) -> ManifestRegisterResponse:
        """Register a manifest.

        Args:
            request: Manifest registration record.
            headers: Additional request headers.
            allow_header_override: Let ``headers`` replace the standard
                content-type and credential headers.

        Returns:
            Registration result.

        Raises:
            JwnetApiError: If the call failed.
            asyncio.CancelledError: If the caller cancelled the call; the
                attached JwnetCancellation is found with cancellation_of().
        """
        return await self._call(
            "register_manifest",
            "POST",
            PATH_MANIFEST_REGISTER,
            body=_serialize(request),
            response_model=ManifestRegisterResponse,
            headers=headers,
            allow_header_override=allow_header_override,
        )

    async def reserve_numbers(
        self,
        request: ReservationRequest | Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        allow_header_override: bool = False,
    ) -> ReservationResponse:
        """Reserve a block of manifest numbers.

        Args:
            request: Reservation record.
            headers: Additional request headers.
            allow_header_override: Let ``headers`` replace the standard
                content-type and credential headers.

        Returns:
            Reservation result with the allocated numbers.

        Raises:
            JwnetApiError: If the call failed.
            asyncio.CancelledError: If the caller cancelled the call; the
                attached JwnetCancellation is found with cancellation_of().
        """
        return await self._call(
            "reserve_numbers",
            "POST",
            PATH_RESERVATION_CREATE,
            body=_serialize(request),
            response_model=ReservationResponse,
            headers=headers,
            allow_header_override=allow_header_override,
        )

    async def inquire_manifest(
        self,
        request: ManifestInquiryRequest | Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        allow_header_override: bool = False,
    ) -> ManifestInquiryResponse:
        """Look up a registered manifest.

        Args:
            request: Inquiry record.
            headers: Additional request headers.
            allow_header_override: Let ``headers`` replace the standard
                content-type and credential headers.

        Returns:
            Manifest details.

        Raises:
            JwnetApiError: If the call failed.
            asyncio.CancelledError: If the caller cancelled the call; the
                attached JwnetCancellation is found with cancellation_of().
        """
        return await self._call(
            "inquire_manifest",
            "POST",
            PATH_MANIFEST_INQUIRY,
            body=_serialize(request),
            response_model=ManifestInquiryResponse,
            headers=headers,
            allow_header_override=allow_header_override,
        )

    async def test_connection(self) -> bool:
        """Check the health endpoint.

        Failures are logged, never raised. Cancellation still propagates.
        Unexpected exceptions are logged with their traceback.

        Returns:
            True if the API answered with a 2xx status.
        """
        try:
            await self._call("test_connection", "GET", PATH_HEALTH)
        except JwnetApiError as exc:
            self._log.error("jwnet_connection_test_failed", **exc.to_dict())
            return False
        except Exception:
            self._log.exception("jwnet_connection_test_failed", kind="unexpected")
            return False
        return True

    async def _call(  # noqa: PLR0913
        self,
        operation: str,
        method: str,
        path: str,
        *,
        body: Any = None,
        response_model: type[ResponseT] | None = None,
        headers: Mapping[str, str] | None = None,
        allow_header_override: bool = False,
    ) -> Any:
        """Run one logical call.

        Args:
            operation: Operation name for logs and errors.
            method: HTTP method.
            path: Endpoint path.
            body: JSON-serializable request body.
            response_model: Model for the success body.
            headers: Caller headers.
            allow_header_override: Let caller headers replace standard ones.

        Returns:
            Validated response model, or None when no model is given.
        """
        machine = CallStateMachine(operation)
        request_headers = self._dispatcher.build_headers(
            headers, allow_override=allow_header_override
        )
        start_ns = time.perf_counter_ns()

        with structlog.contextvars.bound_contextvars(
            call_id=uuid.uuid4().hex[:12], operation=operation
        ):
            try:
                async with self._open_http() as http:
                    result = await self._execute_with_retry(
                        machine,
                        http,
                        method,
                        path,
                        headers=request_headers,
                        body=body,
                        response_model=response_model,
                    )
            except JwnetApiError as exc:
                self._log.warning(
                    "jwnet_call_failed",
                    kind=exc.kind.value,
                    status_code=exc.status_code,
                    attempts=machine.attempts,
                    duration_ms=_elapsed_ms(start_ns),
                )
                raise
            except asyncio.CancelledError as exc:
                self._cancelled(machine).attach(exc)
                raise

            self._log.info(
                "jwnet_call_complete",
                attempts=machine.attempts,
                duration_ms=_elapsed_ms(start_ns),
            )
            return result

    async def _execute_with_retry(  # noqa: PLR0913
        self,
        machine: CallStateMachine,
        http: httpx.AsyncClient,
        method: str,
        path: str,
        *,
        headers: httpx.Headers,
        body: Any,
        response_model: type[BaseModel] | None,
    ) -> Any:
        """Dispatch attempts until success or a terminal failure.

        Args:
            machine: State machine of this logical call.
            http: Client owned by this logical call.
            method: HTTP method.
            path: Endpoint path.
            headers: Request headers.
            body: Request body.
            response_model: Model for the success body.

        Returns:
            Parsed response value.

        Raises:
            JwnetApiError: When the failure is not retryable or retries are
                exhausted.
        """
        policy = self._retry_policy

        for attempt in range(policy.max_retries + 1):
            if attempt > 0:
                delay_ms = policy.get_delay_ms(attempt - 1)
                self._log.info(
                    "jwnet_retry_scheduled",
                    attempt=attempt,
                    delay_ms=round(delay_ms, 1),
                    max_retries=policy.max_retries,
                )
                await self._sleep(delay_ms / 1000.0)

            machine.to_dispatch()
            result = await self._dispatcher.send(
                http,
                method,
                path,
                headers=headers,
                body=body,
                response_model=response_model,
            )

            if result.error is None:
                machine.to_success()
                return result.value

            machine.to_failure()
            machine.to_classify()
            error = result.error
            error.operation = machine.operation
            error.attempts = machine.attempts
            self._log.warning(
                "jwnet_attempt_failed",
                attempt=attempt,
                kind=error.kind.value,
                status_code=error.status_code,
                elapsed_ms=result.elapsed_ms,
                retryable=error.retryable,
            )

            if not policy.should_retry(error, attempt):
                machine.to_terminal_failure()
                raise error

            machine.to_retry()

        # should_retry() is False on the last attempt, so the loop never falls through
        msg = f"Retry loop for {machine.operation} ended without an outcome"
        raise RuntimeError(msg)

    def _cancelled(self, machine: CallStateMachine) -> JwnetCancellation:
        """Record a caller cancellation.

        Args:
            machine: State machine of the cancelled call.

        Returns:
            Record describing what may have reached upstream.
        """
        in_flight = machine.in_flight
        if machine.can_transition_to(CallState.CANCELLED):
            machine.to_cancelled()

        outcome_unknown = (
            machine.operation in NON_IDEMPOTENT_OPERATIONS and machine.attempts > 0
        )
        record = JwnetCancellation(
            machine.operation,
            attempts=machine.attempts,
            in_flight=in_flight,
            outcome_unknown=outcome_unknown,
        )
        self._log.warning("jwnet_call_cancelled", **record.to_dict())
        return record

    def _open_http(self) -> httpx.AsyncClient:
        """Create the HTTP client for one logical call."""
        return httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            transport=self._transport,
            follow_redirects=False,
        )


def _serialize(request: JwnetModel | Mapping[str, Any]) -> dict[str, Any]:
    """Serialize a request record to a JSON-compatible dict."""
    if isinstance(request, JwnetModel):
        return request.to_wire()
    return dict(request)


def _elapsed_ms(start_ns: int) -> float:
    return round((time.perf_counter_ns() - start_ns) / 1_000_000, 2)

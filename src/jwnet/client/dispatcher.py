"""Single-attempt HTTP dispatch to JWNET."""

import asyncio
import json
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from jwnet.client.classifier import (
    error_from_exception,
    error_from_response,
    malformed_success,
)
from jwnet.client.config import JwnetConfig
from jwnet.client.constants import (
    COMPONENT_JWNET,
    CONTENT_TYPE_JSON,
    HEADER_API_KEY,
    HEADER_CONTENT_TYPE,
    HEADER_PUBLIC_CONFIRM_NO,
    HEADER_SUBSCRIBER_NO,
)
from jwnet.client.errors import JwnetApiError
from jwnet.client.redact import redact_headers


logger = structlog.get_logger()


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of one dispatch attempt.

    Exactly one of ``value`` (on success) or ``error`` is meaningful.
    """

    value: Any = None
    error: JwnetApiError | None = None
    status_code: int | None = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if the attempt succeeded."""
        return self.error is None


class RequestDispatcher:
    """Builds and sends one HTTP attempt against the JWNET API.

    Enforces the per-attempt timeout and turns every network or protocol
    failure into a classified JwnetApiError on the returned AttemptResult.
    Exceptions that are not network failures propagate unchanged.
    """

    def __init__(self, config: JwnetConfig) -> None:
        """Initialize the dispatcher.

        Args:
            config: JWNET connection configuration.
        """
        self._config = config
        self._log = logger.bind(component=COMPONENT_JWNET, subcomponent="dispatcher")

    def build_headers(
        self,
        extra_headers: Mapping[str, str] | None = None,
        *,
        allow_override: bool = False,
    ) -> httpx.Headers:
        """Build request headers.

        Args:
            extra_headers: Additional headers from the caller.
            allow_override: Let caller headers replace the standard ones.

        Returns:
            Complete headers (case-insensitive).
        """
        standard = {
            HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON,
            HEADER_API_KEY: self._config.api_key,
            HEADER_SUBSCRIBER_NO: self._config.subscriber_no,
            HEADER_PUBLIC_CONFIRM_NO: self._config.public_confirm_no,
        }

        headers = httpx.Headers(standard)
        if not extra_headers:
            return headers

        if allow_override:
            headers.update(extra_headers)
            return headers

        merged = httpx.Headers(extra_headers)
        for name, value in standard.items():
            merged[name] = value
        return merged

    async def send(  # noqa: PLR0913
        self,
        http: httpx.AsyncClient,
        method: str,
        path: str,
        *,
        headers: httpx.Headers,
        body: Any = None,
        response_model: type[BaseModel] | None = None,
    ) -> AttemptResult:
        """Execute a single HTTP attempt.

        Args:
            http: Client owned by the current logical call.
            method: HTTP method.
            path: Endpoint path.
            headers: Request headers.
            body: JSON-serializable request body, or None.
            response_model: Model to validate a 2xx body into. None skips
                body parsing (health check).

        Returns:
            AttemptResult with the parsed response or a classified error.
        """
        url = self._config.url_for(path)
        self._log.debug(
            "jwnet_attempt_start",
            method=method,
            path=path,
            headers=redact_headers(headers.items()),
        )

        start_ns = time.perf_counter_ns()
        try:
            async with asyncio.timeout(self._config.timeout_seconds):
                response = await http.request(method, url, headers=headers, json=body)
        except Exception as exc:
            error = error_from_exception(exc)
            if error is None:
                raise
            error.__cause__ = exc
            return AttemptResult(error=error, elapsed_ms=_elapsed_ms(start_ns))

        elapsed_ms = _elapsed_ms(start_ns)
        status_code = response.status_code
        text = response.text

        http_error = error_from_response(status_code, text, response.reason_phrase)
        if http_error is not None:
            return AttemptResult(
                error=http_error, status_code=status_code, elapsed_ms=elapsed_ms
            )

        if response_model is None:
            return AttemptResult(status_code=status_code, elapsed_ms=elapsed_ms)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            error = malformed_success(status_code, text, "body is not valid JSON")
            error.__cause__ = exc
            return AttemptResult(
                error=error, status_code=status_code, elapsed_ms=elapsed_ms
            )

        if not isinstance(data, dict):
            error = malformed_success(
                status_code, text, f"expected a JSON object, got {type(data).__name__}"
            )
            return AttemptResult(
                error=error, status_code=status_code, elapsed_ms=elapsed_ms
            )

        try:
            value = response_model.model_validate(data)
        except ValidationError as exc:
            error = malformed_success(
                status_code,
                text,
                f"does not match {response_model.__name__} ({exc.error_count()} errors)",
            )
            error.payload = data
            error.__cause__ = exc
            return AttemptResult(
                error=error, status_code=status_code, elapsed_ms=elapsed_ms
            )

        return AttemptResult(value=value, status_code=status_code, elapsed_ms=elapsed_ms)


def _elapsed_ms(start_ns: int) -> float:
    return round((time.perf_counter_ns() - start_ns) / 1_000_000, 2)

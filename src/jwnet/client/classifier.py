"""Map attempt outcomes onto the JWNET error taxonomy.

Pure functions: no I/O, no logging. Transport failures are classified by
exception type, never by matching on message text.
"""

import json
from typing import Any

import httpx

from jwnet.client.constants import (
    HTTP_STATUS_CLIENT_ERROR_MIN,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MIN,
)
from jwnet.client.errors import JwnetApiError, JwnetErrorKind


def classify_exception(exc: BaseException) -> JwnetErrorKind | None:
    """Classify an exception raised while performing an attempt.

    Args:
        exc: The exception raised by the transport or the timeout guard.

    Returns:
        Error kind, or None if the exception is not a network failure and
        should propagate unchanged.
    """
    # Order matters: TimeoutException and DecodingError are RequestErrors too.
    if isinstance(exc, httpx.TimeoutException | TimeoutError):
        return JwnetErrorKind.TIMEOUT
    if isinstance(exc, httpx.DecodingError):
        return JwnetErrorKind.PROTOCOL_ERROR
    if isinstance(exc, httpx.RequestError | OSError):
        return JwnetErrorKind.TRANSPORT
    return None


def classify_status(status_code: int) -> JwnetErrorKind | None:
    """Classify an HTTP status code.

    Args:
        status_code: HTTP status code.

    Returns:
        None for 2xx, otherwise the error kind.
    """
    if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
        return None
    if HTTP_STATUS_CLIENT_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
        return JwnetErrorKind.CLIENT_ERROR
    if status_code >= HTTP_STATUS_SERVER_ERROR_MIN:
        return JwnetErrorKind.SERVER_ERROR
    # 1xx and 3xx: redirects are not followed
    return JwnetErrorKind.PROTOCOL_ERROR


def parse_body(text: str) -> Any:
    """Parse a response body as JSON, falling back to the raw text.

    Args:
        text: Decoded response body.

    Returns:
        Parsed JSON value, the raw text if it is not JSON, or None if empty.
    """
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def error_from_exception(exc: BaseException) -> JwnetApiError | None:
    """Build an API error for a failed attempt.

    Args:
        exc: The exception raised during the attempt.

    Returns:
        JwnetApiError, or None if the exception is not classifiable.
    """
    kind = classify_exception(exc)
    if kind is None:
        return None

    detail = str(exc) or type(exc).__name__
    if kind is JwnetErrorKind.TIMEOUT:
        message = f"Request timed out: {detail}"
    elif kind is JwnetErrorKind.PROTOCOL_ERROR:
        message = f"Could not decode response: {detail}"
    else:
        message = f"Connection failed: {detail}"
    return JwnetApiError(kind, message)


def error_from_response(
    status_code: int,
    text: str,
    reason_phrase: str = "",
) -> JwnetApiError | None:
    """Build an API error for a non-2xx response.

    Args:
        status_code: HTTP status code.
        text: Decoded response body.
        reason_phrase: HTTP reason phrase.

    Returns:
        JwnetApiError carrying the parsed or raw body, or None for 2xx.
    """
    kind = classify_status(status_code)
    if kind is None:
        return None

    payload = parse_body(text)
    message = f"HTTP {status_code}: {reason_phrase}".rstrip(": ")
    error_code = None
    if isinstance(payload, dict):
        body_message = payload.get("message")
        if isinstance(body_message, str) and body_message:
            message = body_message
        raw_code = payload.get("errorCode")
        if raw_code is not None:
            error_code = str(raw_code)

    return JwnetApiError(
        kind,
        message,
        status_code=status_code,
        payload=payload,
        error_code=error_code,
    )


def malformed_success(status_code: int, text: str, detail: str) -> JwnetApiError:
    """Build a protocol error for a 2xx response that could not be parsed.

    Args:
        status_code: HTTP status code of the response.
        text: Raw response body.
        detail: What was wrong with it.

    Returns:
        JwnetApiError of kind PROTOCOL_ERROR.
    """
    return JwnetApiError(
        JwnetErrorKind.PROTOCOL_ERROR,
        f"Malformed success payload: {detail}",
        status_code=status_code,
        payload=text,
    )

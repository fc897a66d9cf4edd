"""Unit tests for JWNET error types."""

import asyncio

import pytest

from jwnet.client.errors import (
    RETRYABLE_KINDS,
    JwnetApiError,
    JwnetCancellation,
    JwnetConfigError,
    JwnetErrorKind,
    cancellation_of,
)


class TestJwnetErrorKind:
    """Tests for the error taxonomy."""

    def test_wire_values(self) -> None:
        """Kinds serialize to their hyphenated names."""
        assert [kind.value for kind in JwnetErrorKind] == [
            "transport",
            "timeout",
            "client-error",
            "server-error",
            "protocol-error",
            "cancelled",
        ]

    def test_retryable_kinds(self) -> None:
        """Only transport, timeout and 5xx failures are retryable."""
        assert RETRYABLE_KINDS == {
            JwnetErrorKind.TRANSPORT,
            JwnetErrorKind.TIMEOUT,
            JwnetErrorKind.SERVER_ERROR,
        }


class TestJwnetApiError:
    """Tests for JwnetApiError."""

    def test_fields_and_message(self) -> None:
        """All upstream details are kept."""
        error = JwnetApiError(
            JwnetErrorKind.CLIENT_ERROR,
            "Invalid manifest",
            status_code=400,
            payload={"message": "Invalid manifest", "errorCode": "E001"},
            error_code="E001",
        )

        assert str(error) == "Invalid manifest"
        assert error.status_code == 400
        assert error.error_code == "E001"
        assert error.retryable is False
        assert error.attempts == 0

    def test_to_dict(self) -> None:
        """to_dict is JSON-friendly and uses the kind's value."""
        error = JwnetApiError(
            JwnetErrorKind.SERVER_ERROR,
            "HTTP 503",
            status_code=503,
            operation="register_manifest",
            attempts=4,
        )

        assert error.to_dict() == {
            "kind": "server-error",
            "message": "HTTP 503",
            "status_code": 503,
            "error_code": None,
            "payload": None,
            "operation": "register_manifest",
            "attempts": 4,
        }

    def test_repr(self) -> None:
        """repr names the kind and status."""
        error = JwnetApiError(JwnetErrorKind.TIMEOUT, "slow")

        assert "timeout" in repr(error)


class TestJwnetCancellation:
    """Tests for the cancellation record."""

    def test_kind(self) -> None:
        """The record carries the cancelled kind."""
        record = JwnetCancellation(
            "inquire_manifest", attempts=0, in_flight=False, outcome_unknown=False
        )

        assert record.kind is JwnetErrorKind.CANCELLED
        assert "outcome unknown" not in record.message

    def test_outcome_unknown_message(self) -> None:
        """The message warns when the upstream effect is unknown."""
        record = JwnetCancellation(
            "register_manifest", attempts=2, in_flight=True, outcome_unknown=True
        )

        assert "outcome unknown" in record.message
        assert record.to_dict()["outcome_unknown"] is True
        assert record.to_dict()["attempts"] == 2

    def test_attach_keeps_exception_type(self) -> None:
        """Attaching returns the very same CancelledError."""
        exc = asyncio.CancelledError()
        record = JwnetCancellation(
            "register_manifest", attempts=1, in_flight=True, outcome_unknown=True
        )

        assert record.attach(exc) is exc
        assert type(exc) is asyncio.CancelledError
        assert cancellation_of(exc) is record

    def test_found_through_cause(self) -> None:
        """The record is found behind a TimeoutError raised from the cancellation."""
        cancelled = asyncio.CancelledError()
        record = JwnetCancellation(
            "reserve_numbers", attempts=1, in_flight=False, outcome_unknown=True
        )
        record.attach(cancelled)
        timeout = TimeoutError()
        timeout.__cause__ = cancelled

        assert cancellation_of(timeout) is record

    def test_absent(self) -> None:
        """Ordinary exceptions have no record."""
        assert cancellation_of(asyncio.CancelledError()) is None
        assert cancellation_of(ValueError("x")) is None
        assert cancellation_of(None) is None


class TestJwnetConfigError:
    """Tests for JwnetConfigError."""

    def test_lists_missing(self) -> None:
        """The message names every missing setting."""
        error = JwnetConfigError(["api_key (JWNET_API_KEY)", "api_url (JWNET_API_URL)"])

        assert error.missing == ["api_key (JWNET_API_KEY)", "api_url (JWNET_API_URL)"]
        assert "JWNET_API_KEY" in str(error)
        assert "JWNET_API_URL" in str(error)

    def test_not_a_value_error(self) -> None:
        """Validators must not wrap it into a ValidationError."""
        with pytest.raises(JwnetConfigError):
            raise JwnetConfigError(["x"])
        assert not issubclass(JwnetConfigError, ValueError)

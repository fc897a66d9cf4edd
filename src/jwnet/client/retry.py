"""Retry policy for JWNET calls."""

import random
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from jwnet.client.constants import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_EXPONENTIAL_BASE,
    DEFAULT_JITTER_FACTOR,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    MAX_RETRIES_LIMIT,
)
from jwnet.client.errors import JwnetApiError


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    Controls how many times to retry and the backoff strategy.
    Uses exponential backoff: delay = base_delay_ms * (exponential_base ^ attempt),
    capped at max_delay_ms, plus up to jitter_factor * delay of random jitter.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0, le=MAX_RETRIES_LIMIT)] = (
        DEFAULT_MAX_RETRIES
    )
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = DEFAULT_BASE_DELAY_MS
    max_delay_ms: Annotated[int, Field(ge=0, le=300000)] = DEFAULT_MAX_DELAY_MS
    exponential_base: Annotated[float, Field(ge=1.0, le=5.0)] = (
        DEFAULT_EXPONENTIAL_BASE
    )
    jitter_factor: Annotated[float, Field(ge=0.0, le=1.0)] = DEFAULT_JITTER_FACTOR

    def should_retry(self, error: JwnetApiError, attempt: int) -> bool:
        """Determine if a call should be retried.

        Args:
            error: The error from the failed attempt.
            attempt: Current attempt number (0-indexed).

        Returns:
            True if another attempt should be made.
        """
        if attempt >= self.max_retries:
            return False
        return error.retryable

    def get_delay_ms(self, attempt: int) -> float:
        """Calculate delay before the next retry attempt.

        Args:
            attempt: Number of the attempt that just failed (0-indexed).

        Returns:
            Delay in milliseconds, never negative.
        """
        delay = self.base_delay_ms * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay_ms)

        # Up to jitter_factor of the capped delay, added on top
        jitter = delay * self.jitter_factor * random.random()  # noqa: S311
        return delay + jitter

    def max_delay_for(self, attempt: int) -> float:
        """Upper bound of get_delay_ms for an attempt.

        Args:
            attempt: Attempt number (0-indexed).

        Returns:
            Maximum possible delay in milliseconds.
        """
        delay = min(
            self.base_delay_ms * (self.exponential_base**attempt), self.max_delay_ms
        )
        return delay * (1 + self.jitter_factor)

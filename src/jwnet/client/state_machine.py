"""State machine for a single logical JWNET call."""

from enum import Enum

import structlog

from jwnet.client.constants import COMPONENT_JWNET


logger = structlog.get_logger()


class CallState(str, Enum):
    """State of a logical call.

    - INIT: Not yet dispatched
    - DISPATCH: An attempt is in flight
    - SUCCESS: Attempt returned a usable response
    - FAILURE: Attempt failed, not yet classified
    - CLASSIFY: Failure is being classified
    - RETRY: Waiting out the backoff before the next attempt
    - TERMINAL_FAILURE: Gave up; error surfaced to the caller
    - CANCELLED: Caller cancelled the call
    """

    INIT = "INIT"
    DISPATCH = "DISPATCH"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    CLASSIFY = "CLASSIFY"
    RETRY = "RETRY"
    TERMINAL_FAILURE = "TERMINAL_FAILURE"
    CANCELLED = "CANCELLED"


# Valid state transitions
_VALID_TRANSITIONS: dict[CallState, set[CallState]] = {
    CallState.INIT: {CallState.DISPATCH, CallState.CANCELLED},
    CallState.DISPATCH: {
        CallState.SUCCESS,
        CallState.FAILURE,
        CallState.CANCELLED,
    },
    CallState.FAILURE: {CallState.CLASSIFY},
    CallState.CLASSIFY: {CallState.RETRY, CallState.TERMINAL_FAILURE},
    CallState.RETRY: {CallState.DISPATCH, CallState.CANCELLED},
    CallState.SUCCESS: set(),  # Terminal state
    CallState.TERMINAL_FAILURE: set(),  # Terminal state
    CallState.CANCELLED: set(),  # Terminal state
}

_TERMINAL_STATES = frozenset(
    {CallState.SUCCESS, CallState.TERMINAL_FAILURE, CallState.CANCELLED}
)


class CallStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        operation: str,
        from_state: CallState,
        to_state: CallState,
    ) -> None:
        """Initialize the transition error.

        Args:
            operation: Name of the operation.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.operation = operation
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for call '{operation}': "
            f"{from_state.value} -> {to_state.value}"
        )


class CallStateMachine:
    """Tracks the state and attempt count of one logical call.

    Created per call and never shared, so the attempt counter always
    starts at zero.
    """

    def __init__(self, operation: str) -> None:
        """Initialize the state machine.

        Args:
            operation: Name of the operation being called.
        """
        self._operation = operation
        self._state = CallState.INIT
        self._attempts = 0
        self._log = logger.bind(component=COMPONENT_JWNET, operation=operation)

    @property
    def operation(self) -> str:
        """Get the operation name."""
        return self._operation

    @property
    def state(self) -> CallState:
        """Get the current state."""
        return self._state

    @property
    def attempts(self) -> int:
        """Number of attempts dispatched so far."""
        return self._attempts

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in _TERMINAL_STATES

    @property
    def in_flight(self) -> bool:
        """Check if an attempt is currently in flight."""
        return self._state is CallState.DISPATCH

    def can_transition_to(self, target: CallState) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: CallState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            CallStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise CallStateTransitionError(
                operation=self._operation,
                from_state=self._state,
                to_state=target,
            )

        old_state = self._state
        self._state = target
        if target is CallState.DISPATCH:
            self._attempts += 1

        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
            attempts=self._attempts,
        )

    def to_dispatch(self) -> None:
        """Transition to DISPATCH, counting a new attempt."""
        self.transition_to(CallState.DISPATCH)

    def to_success(self) -> None:
        """Transition to SUCCESS state."""
        self.transition_to(CallState.SUCCESS)

    def to_failure(self) -> None:
        """Transition to FAILURE state."""
        self.transition_to(CallState.FAILURE)

    def to_classify(self) -> None:
        """Transition to CLASSIFY state."""
        self.transition_to(CallState.CLASSIFY)

    def to_retry(self) -> None:
        """Transition to RETRY state."""
        self.transition_to(CallState.RETRY)

    def to_terminal_failure(self) -> None:
        """Transition to TERMINAL_FAILURE state."""
        self.transition_to(CallState.TERMINAL_FAILURE)

    def to_cancelled(self) -> None:
        """Transition to CANCELLED state."""
        self.transition_to(CallState.CANCELLED)

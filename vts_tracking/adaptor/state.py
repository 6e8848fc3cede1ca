"""Adaptor State Machine - run lifecycle of an adaptor.

States:
- STOPPED: No sockets or threads are owned
- STARTING: Sockets are being created and bound, threads spawned
- RUNNING: Keep-alive and receiver threads are live
- STOPPING: Shutdown requested, threads being joined, sockets closing

A failed start (bind error) goes straight from STARTING back to STOPPED.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from vts_tracking.exceptions import AdaptorStateError


class AdaptorState(Enum):
    """Adaptor run state."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


# Valid state transitions
VALID_TRANSITIONS: dict[AdaptorState, set[AdaptorState]] = {
    AdaptorState.STOPPED: {AdaptorState.STARTING},
    AdaptorState.STARTING: {AdaptorState.RUNNING, AdaptorState.STOPPED},
    AdaptorState.RUNNING: {AdaptorState.STOPPING},
    AdaptorState.STOPPING: {AdaptorState.STOPPED},
}


@dataclass
class StateTransition:
    """Record of a state transition."""

    old_state: AdaptorState
    new_state: AdaptorState
    t_ms: int
    reason: str
    metadata: dict = field(default_factory=dict)


StateChangeCallback = Callable[[StateTransition], None]


class AdaptorStateMachine:
    """4-state FSM guarding start/stop ordering.

    Usage:
        fsm = AdaptorStateMachine()
        fsm.on_state_change(log_transition)
        fsm.transition_to(AdaptorState.STARTING, "start_requested")
    """

    def __init__(self, max_history: int = 50) -> None:
        self._state = AdaptorState.STOPPED
        self._on_change_callbacks: list[StateChangeCallback] = []
        self._history: list[StateTransition] = []
        self._max_history = max_history

    @property
    def state(self) -> AdaptorState:
        """Current state."""
        return self._state

    @property
    def history(self) -> list[StateTransition]:
        """Most recent transitions, oldest first."""
        return list(self._history)

    def on_state_change(self, callback: StateChangeCallback) -> None:
        """Register callback for any state change."""
        self._on_change_callbacks.append(callback)

    def can_transition_to(self, new_state: AdaptorState) -> bool:
        """Whether new_state is reachable from the current state."""
        return new_state in VALID_TRANSITIONS.get(self._state, set())

    def transition_to(
        self,
        new_state: AdaptorState,
        reason: str = "",
        metadata: dict | None = None,
    ) -> StateTransition:
        """Transition to a new state.

        Raises:
            AdaptorStateError: If the transition is not allowed
        """
        old_state = self._state
        if not self.can_transition_to(new_state):
            raise AdaptorStateError(
                f"Invalid transition: {old_state.value} -> {new_state.value}",
                current_state=old_state.value,
                target_state=new_state.value,
            )

        transition = StateTransition(
            old_state=old_state,
            new_state=new_state,
            t_ms=time.monotonic_ns() // 1_000_000,
            reason=reason,
            metadata=metadata or {},
        )
        self._state = new_state

        for callback in self._on_change_callbacks:
            callback(transition)

        self._history.append(transition)
        if len(self._history) > self._max_history:
            self._history.pop(0)

        return transition

"""
Finite state machine for saving one availability edit.

    EDITING -> VALIDATING -> REJECTED | TRIMMED | ACCEPTED
    ACCEPTED -> PERSISTING -> SAVED | FAILED

REJECTED, TRIMMED and FAILED all return to EDITING with the form intact.
A trimmed selection is never saved automatically; the driver confirms it
by saving again.

Usage:
    flow = SaveFlow()
    flow.transition(SaveTrigger.SUBMIT)
    assert flow.current_state == SaveState.VALIDATING
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class SaveState(str, Enum):
    """All states an availability save passes through."""
    EDITING = "editing"
    VALIDATING = "validating"
    REJECTED = "rejected"
    TRIMMED = "trimmed"
    ACCEPTED = "accepted"
    PERSISTING = "persisting"
    SAVED = "saved"
    FAILED = "failed"


class SaveTrigger(str, Enum):
    """Events that move a save forward."""
    SUBMIT = "submit"
    ALL_PAST = "all_past"
    SOME_PAST = "some_past"
    VALID = "valid"
    PERSIST = "persist"
    STORE_OK = "store_ok"
    STORE_ERROR = "store_error"
    RESUME_EDITING = "resume_editing"


@dataclass
class Transition:
    """A single valid state transition."""
    from_state: SaveState
    to_state: SaveState
    trigger: SaveTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: SaveState
    entered_at: datetime
    trigger: Optional[SaveTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


class SaveFlow:
    """Deterministic state machine behind the "Set Available" button."""

    TRANSITIONS: list[Transition] = [
        Transition(SaveState.EDITING, SaveState.VALIDATING, SaveTrigger.SUBMIT),

        # --- Validation against the clock ---
        Transition(SaveState.VALIDATING, SaveState.REJECTED, SaveTrigger.ALL_PAST),
        Transition(SaveState.VALIDATING, SaveState.TRIMMED, SaveTrigger.SOME_PAST),
        Transition(SaveState.VALIDATING, SaveState.ACCEPTED, SaveTrigger.VALID),

        # --- Persistence ---
        Transition(SaveState.ACCEPTED, SaveState.PERSISTING, SaveTrigger.PERSIST),
        Transition(SaveState.PERSISTING, SaveState.SAVED, SaveTrigger.STORE_OK),
        Transition(SaveState.PERSISTING, SaveState.FAILED, SaveTrigger.STORE_ERROR),

        # --- Back to the form ---
        Transition(SaveState.REJECTED, SaveState.EDITING, SaveTrigger.RESUME_EDITING),
        Transition(SaveState.TRIMMED, SaveState.EDITING, SaveTrigger.RESUME_EDITING),
        Transition(SaveState.FAILED, SaveState.EDITING, SaveTrigger.RESUME_EDITING),
    ]

    def __init__(self) -> None:
        self._current_state = SaveState.EDITING
        self._history: list[StateEntry] = [
            StateEntry(state=SaveState.EDITING, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_state(self) -> SaveState:
        return self._current_state

    def transition(self, trigger: SaveTrigger) -> SaveState:
        """
        Execute a state transition.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state
                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                logger.debug(
                    "Save transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[SaveTrigger]:
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_state == SaveState.SAVED

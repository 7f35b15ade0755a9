"""Tests for the availability save state machine."""

import pytest

from tartrack_schedule.calendar.save_flow import (
    InvalidTransitionError,
    SaveFlow,
    SaveState,
    SaveTrigger,
)


@pytest.fixture
def flow():
    return SaveFlow()


class TestInitialState:
    def test_starts_editing(self, flow):
        assert flow.current_state == SaveState.EDITING

    def test_initial_history_has_one_entry(self, flow):
        assert len(flow.get_history()) == 1

    def test_not_terminal_at_start(self, flow):
        assert not flow.is_terminal()

    def test_only_submit_is_valid(self, flow):
        assert flow.get_valid_triggers() == [SaveTrigger.SUBMIT]


class TestValidation:
    def test_submit_goes_to_validating(self, flow):
        assert flow.transition(SaveTrigger.SUBMIT) == SaveState.VALIDATING

    def test_all_past_rejects(self, flow):
        flow.transition(SaveTrigger.SUBMIT)
        assert flow.transition(SaveTrigger.ALL_PAST) == SaveState.REJECTED

    def test_some_past_trims(self, flow):
        flow.transition(SaveTrigger.SUBMIT)
        assert flow.transition(SaveTrigger.SOME_PAST) == SaveState.TRIMMED

    def test_trimmed_cannot_persist(self, flow):
        flow.transition(SaveTrigger.SUBMIT)
        flow.transition(SaveTrigger.SOME_PAST)
        with pytest.raises(InvalidTransitionError):
            flow.transition(SaveTrigger.PERSIST)

    def test_trimmed_returns_to_editing(self, flow):
        flow.transition(SaveTrigger.SUBMIT)
        flow.transition(SaveTrigger.SOME_PAST)
        assert flow.transition(SaveTrigger.RESUME_EDITING) == SaveState.EDITING


class TestPersistence:
    def _accept(self, flow):
        flow.transition(SaveTrigger.SUBMIT)
        flow.transition(SaveTrigger.VALID)
        flow.transition(SaveTrigger.PERSIST)

    def test_store_ok_is_terminal(self, flow):
        self._accept(flow)
        assert flow.transition(SaveTrigger.STORE_OK) == SaveState.SAVED
        assert flow.is_terminal()
        assert flow.get_valid_triggers() == []

    def test_store_error_can_retry(self, flow):
        self._accept(flow)
        assert flow.transition(SaveTrigger.STORE_ERROR) == SaveState.FAILED
        flow.transition(SaveTrigger.RESUME_EDITING)
        assert flow.transition(SaveTrigger.SUBMIT) == SaveState.VALIDATING

    def test_invalid_trigger_message_lists_valid(self, flow):
        with pytest.raises(InvalidTransitionError, match="submit"):
            flow.transition(SaveTrigger.STORE_OK)


class TestHistory:
    def test_state_trace(self, flow):
        flow.transition(SaveTrigger.SUBMIT)
        flow.transition(SaveTrigger.VALID)
        flow.transition(SaveTrigger.PERSIST)
        flow.transition(SaveTrigger.STORE_OK)
        assert flow.get_state_trace() == [
            "editing", "validating", "accepted", "persisting", "saved",
        ]

    def test_history_records_triggers(self, flow):
        flow.transition(SaveTrigger.SUBMIT)
        entry = flow.get_history()[-1]
        assert entry.trigger == SaveTrigger.SUBMIT
        assert entry.entered_at is not None

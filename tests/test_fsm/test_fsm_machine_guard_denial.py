"""Cobertura adicional para guard denial na RequestStateMachine."""

from __future__ import annotations

import fsm.manager.machine as machine_module
from fsm.manager.machine import RequestStateMachine
from fsm.rules.guards import GuardResult
from fsm.states import RequestState


def test_transition_returns_failure_when_guard_blocks_valid_transition(
    monkeypatch,
) -> None:
    def _deny_guard(from_state: RequestState, to_state: RequestState) -> GuardResult:
        del from_state, to_state
        return GuardResult.deny("blocked_by_guard")

    monkeypatch.setattr(machine_module, "evaluate_guards", _deny_guard)

    machine = RequestStateMachine("protected", request_id="req-guard")
    result = machine.transition(target=RequestState.AUTH_CHECKED, trigger="test")

    assert result.success is False
    assert result.error_reason == "blocked_by_guard"
    assert machine.current_state == RequestState.RECEIVED

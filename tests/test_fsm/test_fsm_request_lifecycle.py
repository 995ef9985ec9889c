"""
Testes do módulo FSM de ciclo de vida de requisições.

- Testamos comportamento e contrato público
- Foco em cenários válidos + inválidos + bordas
"""

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    TRANSITIONS_BY_ROUTE_CLASS,
    RequestState,
    RequestStateMachine,
    StateTransition,
    TransitionResult,
    create_request_fsm,
    evaluate_guards,
    get_transition_map,
    is_terminal,
    is_transition_valid,
    validate_transition_map,
)
from fsm.rules.guards import guard_same_state, guard_terminal_state, guard_valid_state


class TestRequestStateAndTerminals:
    def test_terminal_states(self) -> None:
        assert TERMINAL_STATES == {
            RequestState.DISPATCHED,
            RequestState.DUPLICATE,
            RequestState.REJECTED,
        }
        assert DEFAULT_INITIAL_STATE == RequestState.RECEIVED
        assert is_terminal(RequestState.REJECTED)
        assert not is_terminal(RequestState.RATE_LIMIT_CHECKED)

    def test_str_returns_value(self) -> None:
        assert str(RequestState.SIGNATURE_CHECKED) == "SIGNATURE_CHECKED"


class TestTransitionMaps:
    @pytest.mark.parametrize("route_class", sorted(TRANSITIONS_BY_ROUTE_CLASS))
    def test_all_maps_are_consistent(self, route_class: str) -> None:
        assert validate_transition_map(get_transition_map(route_class)) == []

    def test_unknown_route_class_raises(self) -> None:
        with pytest.raises(ValueError, match="Classe de rota desconhecida"):
            get_transition_map("admin")

    def test_webhook_requires_signature_before_replay(self) -> None:
        transitions = get_transition_map("webhook")
        assert not is_transition_valid(
            RequestState.RATE_LIMIT_CHECKED, RequestState.REPLAY_CHECKED, transitions
        )
        assert not is_transition_valid(
            RequestState.RATE_LIMIT_CHECKED, RequestState.DISPATCHED, transitions
        )

    def test_protected_requires_auth_before_rate_limit(self) -> None:
        transitions = get_transition_map("protected")
        assert not is_transition_valid(
            RequestState.RECEIVED, RequestState.RATE_LIMIT_CHECKED, transitions
        )

    def test_map_validation_reports_broken_map(self) -> None:
        broken = {
            RequestState.RECEIVED: frozenset({RequestState.AUTH_CHECKED}),
            RequestState.REJECTED: frozenset({RequestState.RECEIVED}),
        }
        errors = validate_transition_map(broken)
        assert any("ausente" in e for e in errors)
        assert any("terminal" in e for e in errors)
        assert any("não pode ser rejeitado" in e for e in errors)


class TestGuards:
    def test_guards_allow_forward_transition(self) -> None:
        result = evaluate_guards(RequestState.RECEIVED, RequestState.AUTH_CHECKED)
        assert result.allowed is True

    def test_terminal_guard_denies(self) -> None:
        result = guard_terminal_state(RequestState.DISPATCHED, RequestState.REJECTED)
        assert result.allowed is False
        assert "terminal" in (result.reason or "")

    def test_same_state_guard_denies(self) -> None:
        result = guard_same_state(RequestState.AUTH_CHECKED, RequestState.AUTH_CHECKED)
        assert result.allowed is False

    def test_valid_state_guard_denies_unknown(self) -> None:
        result = guard_valid_state("RECEIVED", RequestState.AUTH_CHECKED)  # type: ignore[arg-type]
        assert result.allowed is False


class TestRequestStateMachine:
    def test_webhook_happy_path(self) -> None:
        fsm = create_request_fsm("webhook", request_id="req_1")
        for state, trigger in (
            (RequestState.RATE_LIMIT_CHECKED, "rate_limit"),
            (RequestState.SIGNATURE_CHECKED, "signature"),
            (RequestState.REPLAY_CHECKED, "replay"),
            (RequestState.DISPATCHED, "dispatch"),
        ):
            result = fsm.transition(state, trigger=trigger)
            assert result.success is True

        assert fsm.is_terminal
        assert [t.trigger for t in fsm.history] == [
            "rate_limit",
            "signature",
            "replay",
            "dispatch",
        ]

    def test_webhook_duplicate_is_terminal(self) -> None:
        fsm = RequestStateMachine("webhook")
        fsm.transition(RequestState.RATE_LIMIT_CHECKED, "rate_limit")
        fsm.transition(RequestState.SIGNATURE_CHECKED, "signature")
        assert fsm.transition(RequestState.DUPLICATE, "replay").success is True

        result = fsm.transition(RequestState.DISPATCHED, "dispatch")
        assert result.success is False
        assert fsm.current_state == RequestState.DUPLICATE

    def test_invalid_transition_keeps_state(self) -> None:
        fsm = RequestStateMachine("public")
        result = fsm.transition(RequestState.AUTH_CHECKED, "auth")

        assert isinstance(result, TransitionResult)
        assert result.success is False
        assert "Transição inválida" in (result.error_reason or "")
        assert fsm.current_state == RequestState.RECEIVED
        assert fsm.history == []

    def test_any_non_terminal_can_reject(self) -> None:
        fsm = RequestStateMachine("protected")
        fsm.transition(RequestState.AUTH_CHECKED, "auth")
        assert fsm.transition(RequestState.REJECTED, "rate_limit").success is True
        assert fsm.can_transition_to(RequestState.DISPATCHED) is False

    def test_summaries_are_log_safe(self) -> None:
        fsm = RequestStateMachine("public", request_id="req_abc")
        fsm.transition(RequestState.RATE_LIMIT_CHECKED, "rate_limit", {"limiter": "webhook"})

        summary = fsm.get_state_summary()
        assert summary["request_id"] == "req_abc"
        assert summary["route_class"] == "public"
        assert summary["transition_count"] == 1

        history = fsm.get_history_summary()
        assert history[0]["to_state"] == "RATE_LIMIT_CHECKED"
        assert history[0]["metadata"] == {"limiter": "webhook"}


class TestTransitionTypes:
    def test_state_transition_requires_trigger(self) -> None:
        with pytest.raises(ValueError, match="trigger"):
            StateTransition(
                from_state=RequestState.RECEIVED,
                to_state=RequestState.REJECTED,
                trigger="  ",
            )

    def test_transition_result_consistency(self) -> None:
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)

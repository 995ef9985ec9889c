"""
Módulo FSM: máquina de estados do ciclo de vida de uma requisição.

Governa a ordem dos checks de segurança por classe de rota e garante
que cada requisição termine em DISPATCHED, DUPLICATE ou REJECTED.

Estrutura:
    - states/: Definições dos estados (RequestState enum)
    - transitions/: Grafos de transição por classe de rota
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (RequestStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

from fsm.manager import RequestStateMachine, create_request_fsm
from fsm.rules import GuardResult, evaluate_guards
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    RequestState,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    TRANSITIONS_BY_ROUTE_CLASS,
    get_transition_map,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "TRANSITIONS_BY_ROUTE_CLASS",
    "GuardResult",
    "RequestState",
    "RequestStateMachine",
    "StateTransition",
    "TransitionResult",
    "create_request_fsm",
    "evaluate_guards",
    "get_transition_map",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]

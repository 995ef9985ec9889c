"""
Exports públicos do módulo fsm/states.

Estados canônicos do ciclo de vida de uma requisição.
"""

from fsm.states.request import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    RequestState,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "RequestState",
    "is_terminal",
    "is_valid_state",
]

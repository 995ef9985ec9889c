"""
Exports públicos do módulo fsm/transitions.

Grafos de transição por classe de rota.
"""

from fsm.transitions.rules import (
    PROTECTED_TRANSITIONS,
    PUBLIC_TRANSITIONS,
    TRANSITIONS_BY_ROUTE_CLASS,
    WEBHOOK_TRANSITIONS,
    TransitionMap,
    get_transition_map,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)

__all__ = [
    "PROTECTED_TRANSITIONS",
    "PUBLIC_TRANSITIONS",
    "TRANSITIONS_BY_ROUTE_CLASS",
    "WEBHOOK_TRANSITIONS",
    "TransitionMap",
    "get_transition_map",
    "get_valid_targets",
    "is_transition_valid",
    "validate_transition_map",
]

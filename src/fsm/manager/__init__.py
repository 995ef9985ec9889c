"""
Exports públicos do módulo fsm/manager.

Máquina de estados (RequestStateMachine) do pipeline de requisições.
"""

from fsm.manager.machine import RequestStateMachine, create_request_fsm

__all__ = [
    "RequestStateMachine",
    "create_request_fsm",
]

"""
Máquina de estados (RequestStateMachine) do pipeline de requisições.

Controla as transições de uma única requisição segundo o grafo da sua
classe de rota e mantém histórico rastreável para auditoria.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.request import (
    DEFAULT_INITIAL_STATE,
    RequestState,
    is_terminal,
)
from fsm.transitions.rules import (
    TransitionMap,
    get_transition_map,
    get_valid_targets,
    is_transition_valid,
)
from fsm.types.transition import StateTransition, TransitionResult


class RequestStateMachine:
    """
    Máquina de estados de uma requisição.

    Attributes:
        current_state: Estado atual da máquina
        history: Histórico de transições realizadas
    """

    __slots__ = ("_current_state", "_history", "_request_id", "_route_class", "_transitions")

    def __init__(
        self,
        route_class: str,
        request_id: str = "",
    ) -> None:
        """
        Inicializa a máquina em RECEIVED.

        Args:
            route_class: Classe de rota (webhook|protected|public)
            request_id: Identificador da requisição para logs

        Raises:
            ValueError: Se a classe de rota não for conhecida.
        """
        self._transitions: TransitionMap = get_transition_map(route_class)
        self._route_class = str(route_class)
        self._current_state = DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._request_id = request_id

    @property
    def current_state(self) -> RequestState:
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def route_class(self) -> str:
        return self._route_class

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    def can_transition_to(self, target: RequestState) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target, self._transitions):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[RequestState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state, self._transitions)

    def transition(
        self,
        target: RequestState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do check (ex: 'rate_limit', 'signature')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        # Guards antes do grafo para mensagens mais específicas (terminal, reflexiva)
        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        if not is_transition_valid(self._current_state, target, self._transitions):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida para rota {self._route_class}: "
                    f"{self._current_state.name} → {target.name}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """Retorna resumo do estado atual para observability."""
        return {
            "request_id": self._request_id,
            "route_class": self._route_class,
            "current_state": self._current_state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Retorna histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_request_fsm(route_class: str, request_id: str = "") -> RequestStateMachine:
    """Factory function para criar a FSM de uma requisição."""
    return RequestStateMachine(route_class=route_class, request_id=request_id)

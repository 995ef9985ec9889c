"""
Estados canônicos do ciclo de vida de uma requisição no pipeline.

Cada requisição percorre os checks de segurança na ordem fixa da sua
classe de rota e termina em exatamente um estado terminal.
"""

from enum import StrEnum


class RequestState(StrEnum):
    """
    Estados de uma requisição no pipeline de segurança.

    Estados não-terminais:
        - RECEIVED: Requisição recebida, nenhum check executado
        - AUTH_CHECKED: Token validado e ability autorizada
        - RATE_LIMIT_CHECKED: Dentro dos tetos da classe de limiter
        - SIGNATURE_CHECKED: HMAC e timestamp do webhook válidos
        - REPLAY_CHECKED: Identificador do webhook registrado como novo

    Estados terminais:
        - DISPATCHED: Entregue ao colaborador downstream
        - DUPLICATE: Webhook já processado dentro do TTL
        - REJECTED: Recusada com corpo de erro uniforme
    """

    # Estados não-terminais (checks em andamento)
    RECEIVED = "RECEIVED"
    AUTH_CHECKED = "AUTH_CHECKED"
    RATE_LIMIT_CHECKED = "RATE_LIMIT_CHECKED"
    SIGNATURE_CHECKED = "SIGNATURE_CHECKED"
    REPLAY_CHECKED = "REPLAY_CHECKED"

    # Estados terminais
    DISPATCHED = "DISPATCHED"
    DUPLICATE = "DUPLICATE"
    REJECTED = "REJECTED"

    def __str__(self) -> str:
        return self.value


# Uma vez em estado terminal, a requisição não transita mais
TERMINAL_STATES: frozenset[RequestState] = frozenset({
    RequestState.DISPATCHED,
    RequestState.DUPLICATE,
    RequestState.REJECTED,
})

DEFAULT_INITIAL_STATE: RequestState = RequestState.RECEIVED


def is_terminal(state: RequestState) -> bool:
    """Verifica se o estado é terminal (requisição encerrada)."""
    return state in TERMINAL_STATES


def is_valid_state(state: RequestState) -> bool:
    """Verifica se o valor é um RequestState válido."""
    return isinstance(state, RequestState)

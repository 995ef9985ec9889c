"""
Regras de transição válidas entre estados da FSM de requisição.

Cada classe de rota tem seu próprio grafo, que fixa a ordem dos checks:

    webhook:   RECEIVED → RATE_LIMIT_CHECKED → SIGNATURE_CHECKED
               → REPLAY_CHECKED → DISPATCHED (ou DUPLICATE)
    protected: RECEIVED → AUTH_CHECKED → RATE_LIMIT_CHECKED → DISPATCHED
    public:    RECEIVED → RATE_LIMIT_CHECKED → DISPATCHED

Qualquer estado não-terminal pode ir para REJECTED.
"""

from fsm.states.request import TERMINAL_STATES, RequestState

# Tipagem explícita do mapa de transições
TransitionMap = dict[RequestState, frozenset[RequestState]]

_TERMINAL_ENTRIES: TransitionMap = {state: frozenset() for state in TERMINAL_STATES}

WEBHOOK_TRANSITIONS: TransitionMap = {
    RequestState.RECEIVED: frozenset({
        RequestState.RATE_LIMIT_CHECKED,
        RequestState.REJECTED,
    }),
    RequestState.RATE_LIMIT_CHECKED: frozenset({
        RequestState.SIGNATURE_CHECKED,
        RequestState.REJECTED,
    }),
    # Validação de payload ocorre após a assinatura; replay decide novo/duplicado
    RequestState.SIGNATURE_CHECKED: frozenset({
        RequestState.REPLAY_CHECKED,
        RequestState.DUPLICATE,
        RequestState.REJECTED,
    }),
    RequestState.REPLAY_CHECKED: frozenset({
        RequestState.DISPATCHED,
        RequestState.REJECTED,
    }),
    **_TERMINAL_ENTRIES,
}

PROTECTED_TRANSITIONS: TransitionMap = {
    RequestState.RECEIVED: frozenset({
        RequestState.AUTH_CHECKED,
        RequestState.REJECTED,
    }),
    RequestState.AUTH_CHECKED: frozenset({
        RequestState.RATE_LIMIT_CHECKED,
        RequestState.REJECTED,
    }),
    RequestState.RATE_LIMIT_CHECKED: frozenset({
        RequestState.DISPATCHED,
        RequestState.REJECTED,
    }),
    **_TERMINAL_ENTRIES,
}

PUBLIC_TRANSITIONS: TransitionMap = {
    RequestState.RECEIVED: frozenset({
        RequestState.RATE_LIMIT_CHECKED,
        RequestState.REJECTED,
    }),
    RequestState.RATE_LIMIT_CHECKED: frozenset({
        RequestState.DISPATCHED,
        RequestState.REJECTED,
    }),
    **_TERMINAL_ENTRIES,
}

# Chave: classe de rota (valor de RouteClass)
TRANSITIONS_BY_ROUTE_CLASS: dict[str, TransitionMap] = {
    "webhook": WEBHOOK_TRANSITIONS,
    "protected": PROTECTED_TRANSITIONS,
    "public": PUBLIC_TRANSITIONS,
}


def get_transition_map(route_class: str) -> TransitionMap:
    """
    Retorna o grafo de transições da classe de rota.

    Raises:
        ValueError: Se a classe de rota não for conhecida.
    """
    try:
        return TRANSITIONS_BY_ROUTE_CLASS[str(route_class)]
    except KeyError:
        raise ValueError(f"Classe de rota desconhecida: {route_class}") from None


def get_valid_targets(
    state: RequestState,
    transitions: TransitionMap,
) -> frozenset[RequestState]:
    """Retorna os estados de destino válidos (vazio se terminal ou ausente)."""
    return transitions.get(state, frozenset())


def is_transition_valid(
    from_state: RequestState,
    to_state: RequestState,
    transitions: TransitionMap,
) -> bool:
    """Verifica se uma transição é válida no grafo informado."""
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state, transitions)


def validate_transition_map(transitions: TransitionMap) -> list[str]:
    """
    Valida a integridade de um mapa de transições.

    Verifica:
    - RECEIVED e todos os terminais estão no mapa
    - Estados terminais têm conjunto vazio
    - Todo não-terminal pode ir para REJECTED
    - Todo destino também está no mapa

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in (RequestState.RECEIVED, *TERMINAL_STATES):
        if state not in transitions:
            errors.append(f"Estado {state.name} ausente no mapa de transições")

    for from_state, targets in transitions.items():
        if from_state in TERMINAL_STATES:
            if targets:
                errors.append(
                    f"Estado terminal {from_state.name} não deveria ter transições"
                )
            continue
        if RequestState.REJECTED not in targets:
            errors.append(f"Estado {from_state.name} não pode ser rejeitado")
        for target in targets:
            if target not in transitions:
                errors.append(
                    f"Transição {from_state.name} → {target}: destino fora do mapa"
                )

    return errors

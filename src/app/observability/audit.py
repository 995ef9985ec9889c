"""Trilha de auditoria LGPD de acesso a dados.

Toda requisição às rotas de consentimento, exportação e exclusão gera um
log `audit_data_access`, aceita ou rejeitada. O log carrega a ação, a rota,
a identidade mascarada e o payload com campos sensíveis redigidos.

Níveis:
- critical: payload toca dados de saúde ou documentos pessoais
- high: demais acessos a rotas auditadas
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.observability.redaction import mask_identifier, redact_payload

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

AUDITED_LIMITER_CLASSES = frozenset({"lgpd", "export"})

ACTION_BY_METHOD = {
    "GET": "read",
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}

HEALTH_DATA_FIELDS = frozenset(
    {
        "medical_notes",
        "health_conditions",
        "medications",
        "diagnosis",
        "treatment",
        "patient_id",
        "health_data",
        "medical_history",
        "insurance_number",
        "cpf",
        "rg",
        "passport",
    }
)


def is_audited(limiter_class: str) -> bool:
    return limiter_class in AUDITED_LIMITER_CLASSES


def determine_action(method: str) -> str:
    """Mapeia o método HTTP para a ação auditada (read/create/update/delete)."""
    return ACTION_BY_METHOD.get(method.upper(), "unknown")


def find_sensitive_fields(payload: Any, path: str = "") -> list[str]:
    """Caminhos (a.b.c) de campos de dados de saúde presentes no payload.

    Valores também contam: `consent_type="health_data"` marca o acesso
    como envolvendo dados de saúde.
    """
    found: list[str] = []
    if isinstance(payload, dict):
        for key, value in payload.items():
            current = f"{path}.{key}" if path else str(key)
            if str(key).lower() in HEALTH_DATA_FIELDS or (
                isinstance(value, str) and value.lower() in HEALTH_DATA_FIELDS
            ):
                found.append(current)
            found.extend(find_sensitive_fields(value, current))
    elif isinstance(payload, list):
        for index, item in enumerate(payload):
            found.extend(find_sensitive_fields(item, f"{path}[{index}]"))
    return found


def record_data_access(
    *,
    route_name: str,
    method: str,
    outcome: str,
    status_code: int,
    identity: str,
    path_params: Mapping[str, str] | None = None,
    payload: dict[str, Any] | None = None,
    client_ip: str = "",
    user_agent: str = "",
    request_id: str | None = None,
) -> None:
    """Registra um acesso auditado a dados pessoais.

    Args:
        route_name: Nome estável da rota (ex.: lgpd.delete_data)
        method: Método HTTP da requisição
        outcome: Estado terminal (dispatched|rejected)
        status_code: Status HTTP devolvido
        identity: Identidade do chamador (mascarada antes do log)
        path_params: Parâmetros de rota (ids do recurso)
        payload: Payload decodificado (redigido antes do log)
        client_ip: IP do chamador
        user_agent: User agent do chamador
        request_id: ID da requisição para rastreamento
    """
    sensitive_fields = find_sensitive_fields(payload) if payload else []
    extra: dict[str, object] = {
        "audit_type": "data_access",
        "route": route_name,
        "action": determine_action(method),
        "outcome": outcome,
        "status_code": status_code,
        "identity": mask_identifier(identity),
        "resource": dict(path_params or {}),
        "payload": redact_payload(payload) if payload is not None else None,
        "sensitive_fields": sensitive_fields,
        "audit_level": "critical" if sensitive_fields else "high",
        "ip": client_ip,
        "user_agent": user_agent,
    }
    if request_id:
        extra["request_id"] = request_id
    logger.info("audit_data_access", extra=extra)

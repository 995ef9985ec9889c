"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e agregadas
posteriormente pela plataforma de logs.

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Rejeição: counter de requisições recusadas por error_code

Uso:
    start = time.perf_counter()
    # ... operação ...
    record_latency("request_pipeline", "webhook", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    request_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "request_pipeline", "replay_guard")
        operation: Nome da operação (ex: "webhook", "check_and_record")
        latency_ms: Latência em milissegundos
        request_id: ID da requisição para rastreamento
    """
    extra: dict[str, object] = {
        "metric_type": "latency",
        "component": component,
        "operation": operation,
        "latency_ms": round(latency_ms, 2),
    }
    if request_id:
        extra["request_id"] = request_id
    logger.info("metric_latency", extra=extra)


def record_rejection(
    route_class: str,
    error_code: str,
    status_code: int,
    request_id: str | None = None,
) -> None:
    """Registra rejeição de requisição.

    Args:
        route_class: Classe da rota (webhook|protected|public)
        error_code: Código estável da rejeição
        status_code: Status HTTP devolvido
        request_id: ID da requisição para rastreamento
    """
    extra: dict[str, object] = {
        "metric_type": "rejection",
        "component": "request_pipeline",
        "route_class": route_class,
        "error_code": error_code,
        "status_code": status_code,
    }
    if request_id:
        extra["request_id"] = request_id
    logger.info("metric_rejection", extra=extra)

"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_request_pipeline

    # Na inicialização do serviço
    initialize_app()

    # Pipeline compartilhado pelas rotas
    pipeline = get_request_pipeline()
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_request_id
from config.logging import configure_logging
from config.settings import (
    get_auth_settings,
    get_base_settings,
    get_chatwoot_settings,
    get_rate_limit_settings,
    get_replay_settings,
)

if TYPE_CHECKING:
    from app.infra.dispatch import TaskDispatcher
    from app.services.request_pipeline import RequestPipeline

# Nome do serviço para logs e métricas
SERVICE_NAME = "crm_bridge"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.

    Configura:
    - Logging estruturado JSON com request_id
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        request_id_getter=get_request_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        request_id_getter=get_request_id,
    )


def collect_settings_errors() -> list[str]:
    """Agrega erros de validação de todas as settings, prefixados pelo domínio."""
    base = get_base_settings()
    chatwoot = get_chatwoot_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"chatwoot: {error}" for error in chatwoot.validate())
    errors.extend(
        f"replay: {error}"
        for error in get_replay_settings().validate(base, chatwoot.timestamp_tolerance_seconds)
    )
    errors.extend(f"rate_limit: {error}" for error in get_rate_limit_settings().validate(base))
    errors.extend(f"auth: {error}" for error in get_auth_settings().validate())
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_dispatcher() -> TaskDispatcher:
    """Obtém dispatcher downstream (singleton)."""
    from app.bootstrap.dependencies import create_dispatcher

    return create_dispatcher()


@lru_cache(maxsize=1)
def get_request_pipeline() -> RequestPipeline:
    """Obtém pipeline de segurança (singleton).

    Returns:
        RequestPipeline com stores e verificador conforme env
    """
    from app.bootstrap.dependencies import create_request_pipeline

    return create_request_pipeline(dispatcher=get_dispatcher())

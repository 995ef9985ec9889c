"""Settings base da ponte CRM.

Configurações comuns a todos os componentes do pipeline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]
FailMode = Literal["open", "closed"]


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço para logs
        debug: Modo debug ativo
        redis_url: URL de conexão Redis (rate limit e replay compartilhados)
        store_timeout_ms: Timeout máximo de uma chamada ao store compartilhado
        trust_forwarded_for: Usa X-Forwarded-For para o IP do cliente
    """

    environment: Environment = "development"
    service_name: str = "crm-bridge"
    debug: bool = False

    redis_url: str = ""
    store_timeout_ms: int = 150

    trust_forwarded_for: bool = False

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment == "development"

    @property
    def store_timeout_seconds(self) -> float:
        return self.store_timeout_ms / 1000

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        valid_envs = {"development", "staging", "production"}
        if self.environment not in valid_envs:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.store_timeout_ms <= 0:
            errors.append("STORE_TIMEOUT_MS deve ser > 0")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Converte string de ambiente para tipo Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def parse_fail_mode(value: str, default: FailMode) -> FailMode:
    """Converte string de env para FailMode, mantendo o default se inválida."""
    value_lower = value.strip().lower()
    if value_lower in ("open", "closed"):
        return value_lower  # type: ignore[return-value]
    return default


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "crm-bridge"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        redis_url=os.getenv("REDIS_URL", ""),
        store_timeout_ms=int(os.getenv("STORE_TIMEOUT_MS", "150")),
        trust_forwarded_for=os.getenv("TRUST_FORWARDED_FOR", "").lower() in ("true", "1"),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()

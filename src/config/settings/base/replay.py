"""Settings do store de replay/idempotência de webhooks.

Configurações para garantir processamento único de eventos.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from config.settings.base.core import FailMode, parse_fail_mode

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

StoreBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class ReplaySettings:
    """Configurações de replay/idempotência.

    Attributes:
        backend: Backend do store (memory|redis)
        ttl_seconds: TTL dos registros de webhook vistos
        fail_mode: Política quando o store está indisponível
    """

    backend: StoreBackend = "memory"
    ttl_seconds: int = 86400  # 24h
    fail_mode: FailMode = "closed"

    def validate(self, base: BaseSettings, timestamp_tolerance_seconds: int) -> list[str]:
        """Valida configurações de replay.

        Args:
            base: BaseSettings para verificar ambiente.
            timestamp_tolerance_seconds: Tolerância de relógio do webhook.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"REPLAY_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append(
                "REPLAY_BACKEND=memory proibido em staging/production. Use Redis."
            )

        if self.backend == "redis" and not base.redis_url:
            errors.append("REPLAY_BACKEND=redis requer REDIS_URL configurado")

        # Registro precisa sobreviver à janela em que o timestamp ainda é aceito
        if self.ttl_seconds <= timestamp_tolerance_seconds:
            errors.append(
                "REPLAY_TTL_SECONDS deve ser maior que WEBHOOK_TIMESTAMP_TOLERANCE"
            )

        return errors


def _load_replay_from_env() -> ReplaySettings:
    """Carrega ReplaySettings de variáveis de ambiente."""
    backend_str = os.getenv("REPLAY_BACKEND", "memory").lower()
    backend: StoreBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    return ReplaySettings(
        backend=backend,
        ttl_seconds=int(os.getenv("REPLAY_TTL_SECONDS", "86400")),
        fail_mode=parse_fail_mode(os.getenv("REPLAY_FAIL_MODE", "closed"), "closed"),
    )


@lru_cache(maxsize=1)
def get_replay_settings() -> ReplaySettings:
    """Retorna instância cacheada de ReplaySettings."""
    return _load_replay_from_env()

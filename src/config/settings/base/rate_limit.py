"""Settings de rate limiting por classe de endpoint.

Cada classe declara dois tetos independentes: por minuto e por hora.
Override via env no formato `RATE_LIMIT_<CLASSE>=<minuto>/<hora>`,
ex.: `RATE_LIMIT_WEBHOOK=200/2000`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from config.settings.base.core import FailMode, parse_fail_mode

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

RateLimitBackend = Literal["memory", "redis"]


@dataclass(frozen=True, slots=True)
class LimiterCeilings:
    """Tetos de uma classe de limiter."""

    per_minute: int
    per_hour: int


DEFAULT_LIMITER_CEILINGS: dict[str, LimiterCeilings] = {
    "login": LimiterCeilings(per_minute=5, per_hour=20),
    "refresh": LimiterCeilings(per_minute=5, per_hour=20),
    "api": LimiterCeilings(per_minute=60, per_hour=600),
    "ai": LimiterCeilings(per_minute=30, per_hour=300),
    "lgpd": LimiterCeilings(per_minute=5, per_hour=20),
    "export": LimiterCeilings(per_minute=5, per_hour=20),
    "webhook": LimiterCeilings(per_minute=100, per_hour=1000),
}


@dataclass(frozen=True)
class RateLimitSettings:
    """Configurações de rate limiting.

    Attributes:
        backend: Backend dos contadores (memory|redis)
        fail_mode: Política quando o store está indisponível
        ceilings: Tetos por classe de limiter
    """

    backend: RateLimitBackend = "memory"
    fail_mode: FailMode = "open"
    ceilings: dict[str, LimiterCeilings] = field(
        default_factory=lambda: dict(DEFAULT_LIMITER_CEILINGS)
    )

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de rate limiting."""
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"RATE_LIMIT_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append(
                "RATE_LIMIT_BACKEND=memory não é compartilhado entre instâncias; "
                "use Redis em staging/production"
            )

        if self.backend == "redis" and not base.redis_url:
            errors.append("RATE_LIMIT_BACKEND=redis requer REDIS_URL configurado")

        for name, ceilings in self.ceilings.items():
            if ceilings.per_minute <= 0 or ceilings.per_hour <= 0:
                errors.append(f"RATE_LIMIT_{name.upper()}: tetos devem ser > 0")
            elif ceilings.per_minute > ceilings.per_hour:
                errors.append(
                    f"RATE_LIMIT_{name.upper()}: teto por minuto maior que por hora"
                )

        return errors


def parse_ceilings(raw: str) -> LimiterCeilings:
    """Converte `"<minuto>/<hora>"` em LimiterCeilings.

    Raises:
        ValueError: Se o formato for inválido.
    """
    minute_str, sep, hour_str = raw.partition("/")
    if not sep:
        raise ValueError(f"Formato de rate limit inválido: {raw!r} (esperado N/M)")
    return LimiterCeilings(per_minute=int(minute_str), per_hour=int(hour_str))


def _load_rate_limit_from_env() -> RateLimitSettings:
    """Carrega RateLimitSettings de variáveis de ambiente."""
    backend_str = os.getenv("RATE_LIMIT_BACKEND", "memory").lower()
    backend: RateLimitBackend = backend_str if backend_str in ("memory", "redis") else "memory"

    ceilings = dict(DEFAULT_LIMITER_CEILINGS)
    for name in DEFAULT_LIMITER_CEILINGS:
        override = os.getenv(f"RATE_LIMIT_{name.upper()}")
        if override:
            ceilings[name] = parse_ceilings(override)

    return RateLimitSettings(
        backend=backend,
        fail_mode=parse_fail_mode(os.getenv("RATE_LIMIT_FAIL_MODE", "open"), "open"),
        ceilings=ceilings,
    )


@lru_cache(maxsize=1)
def get_rate_limit_settings() -> RateLimitSettings:
    """Retorna instância cacheada de RateLimitSettings."""
    return _load_rate_limit_from_env()

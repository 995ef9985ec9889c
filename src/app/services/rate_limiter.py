"""Rate limiter em janelas fixas por (limiter_class, identity).

Cada classe tem dois tetos independentes (minuto e hora). A requisição é
limitada se qualquer janela excederia o teto; requisições limitadas não
consomem saldo. O consumo de uma classe não afeta as demais.

Política de falha do store:
- open (padrão): permite e registra fallback
- closed: BackendUnavailableError (503)
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import TYPE_CHECKING

from app.domain.security import RateLimitDecision
from app.protocols.rate_limit_store import WindowLimit
from config.logging import log_fallback
from utils.errors import BackendUnavailableError, RedisConnectionError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.rate_limit_store import RateLimitHit, RateLimitStoreProtocol
    from config.settings.base.core import FailMode
    from config.settings.base.rate_limit import LimiterCeilings

logger = logging.getLogger(__name__)

MINUTE_SECONDS = 60
HOUR_SECONDS = 3600


class RateLimiter:
    """Aplica os tetos de cada classe de limiter.

    Args:
        store: Store atômico de buckets
        ceilings: Tetos por classe (login, api, webhook...)
        fail_mode: Política quando o store falha
        timeout_seconds: Tempo máximo de uma chamada ao store
    """

    def __init__(
        self,
        store: RateLimitStoreProtocol,
        ceilings: Mapping[str, LimiterCeilings],
        fail_mode: FailMode = "open",
        timeout_seconds: float = 0.15,
    ) -> None:
        self._store = store
        self._windows: dict[str, tuple[WindowLimit, WindowLimit]] = {
            name: (
                WindowLimit(name="minute", seconds=MINUTE_SECONDS, ceiling=c.per_minute),
                WindowLimit(name="hour", seconds=HOUR_SECONDS, ceiling=c.per_hour),
            )
            for name, c in ceilings.items()
        }
        self._fail_mode = fail_mode
        self._timeout = timeout_seconds

    @property
    def limiter_classes(self) -> frozenset[str]:
        return frozenset(self._windows)

    def windows_for(self, limiter_class: str) -> tuple[WindowLimit, WindowLimit]:
        """Retorna as janelas (minuto, hora) da classe.

        Raises:
            ValueError: Classe desconhecida (erro de programação na rota).
        """
        try:
            return self._windows[limiter_class]
        except KeyError:
            raise ValueError(f"Classe de limiter desconhecida: {limiter_class}") from None

    async def check(self, limiter_class: str, identity: str) -> RateLimitDecision:
        """Conta a requisição e decide Allowed/Limited."""
        windows = self.windows_for(limiter_class)
        minute = windows[0]
        started = time.perf_counter()

        try:
            hit = await asyncio.wait_for(
                self._store.hit(f"{limiter_class}:{identity}", windows),
                timeout=self._timeout,
            )
        except (TimeoutError, RedisConnectionError) as exc:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            reason = "store_timeout" if isinstance(exc, TimeoutError) else "store_error"
            if self._fail_mode == "open":
                log_fallback(logger, "rate_limiter", reason=reason, elapsed_ms=elapsed_ms)
                return RateLimitDecision(
                    allowed=True, limit=minute.ceiling, remaining=minute.ceiling
                )
            logger.error(
                "rate_limit_store_unavailable",
                extra={"reason": reason, "elapsed_ms": elapsed_ms, "fail_mode": "closed"},
            )
            raise BackendUnavailableError("Rate limit store unavailable") from exc

        return _to_decision(hit, minute.ceiling)


def _to_decision(hit: RateLimitHit, minute_ceiling: int) -> RateLimitDecision:
    minute_usage = next((w for w in hit.windows if w.name == "minute"), None)
    minute_count = minute_usage.count if minute_usage else 0

    if hit.allowed:
        return RateLimitDecision(
            allowed=True,
            limit=minute_ceiling,
            remaining=max(minute_ceiling - minute_count, 0),
        )

    # Janelas violadas: as que já estão no teto
    breached = [w.reset_in_seconds for w in hit.windows if w.exhausted]
    retry_after = max((math.ceil(r) for r in breached), default=1)
    return RateLimitDecision(
        allowed=False,
        limit=minute_ceiling,
        remaining=0,
        retry_after_seconds=max(retry_after, 1),
    )

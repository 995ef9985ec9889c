"""Guard de replay/idempotência sobre o ReplayStoreProtocol.

Aplica timeout limitado à chamada do store e a política de falha
configurada:
- closed (padrão): store indisponível → BackendUnavailableError (503)
- open: store indisponível → tratado como FRESH, com log de fallback
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.domain.security import ReplayStatus
from config.logging import log_fallback
from utils.errors import BackendUnavailableError, RedisConnectionError

if TYPE_CHECKING:
    from app.protocols.replay_store import ReplayStoreProtocol
    from config.settings.base.core import FailMode

logger = logging.getLogger(__name__)


class ReplayGuard:
    """Registra identificadores de webhook e detecta reentregas.

    Args:
        store: Store atômico de identificadores
        ttl_seconds: TTL dos registros
        fail_mode: Política quando o store falha
        timeout_seconds: Tempo máximo de uma chamada ao store
    """

    def __init__(
        self,
        store: ReplayStoreProtocol,
        ttl_seconds: int = 86400,
        fail_mode: FailMode = "closed",
        timeout_seconds: float = 0.15,
    ) -> None:
        self._store = store
        self._ttl = ttl_seconds
        self._fail_mode = fail_mode
        self._timeout = timeout_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    async def check_and_record(self, identifier: str) -> ReplayStatus:
        """Retorna FRESH na primeira entrega do identificador, DUPLICATE nas demais.

        Raises:
            BackendUnavailableError: Store indisponível com fail_mode=closed.
        """
        started = time.perf_counter()
        try:
            return await asyncio.wait_for(
                self._store.check_and_record(identifier, self._ttl),
                timeout=self._timeout,
            )
        except (TimeoutError, RedisConnectionError) as exc:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            reason = "store_timeout" if isinstance(exc, TimeoutError) else "store_error"
            if self._fail_mode == "open":
                log_fallback(logger, "replay_guard", reason=reason, elapsed_ms=elapsed_ms)
                return ReplayStatus.FRESH
            logger.error(
                "replay_store_unavailable",
                extra={"reason": reason, "elapsed_ms": elapsed_ms, "fail_mode": "closed"},
            )
            if isinstance(exc, TimeoutError):
                # A escrita pode ter chegado ao store; a reentrega não pode virar duplicata
                await self.release(identifier)
            raise BackendUnavailableError("Idempotency store unavailable") from exc

    async def release(self, identifier: str) -> bool:
        """Remove o registro após falha de dispatch.

        Returns:
            False se o store falhou (o webhook ficará marcado até o TTL).
        """
        try:
            await asyncio.wait_for(self._store.release(identifier), timeout=self._timeout)
        except (TimeoutError, RedisConnectionError) as exc:
            logger.warning(
                "replay_release_failed",
                extra={"error_type": type(exc).__name__},
            )
            return False
        return True

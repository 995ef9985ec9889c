"""Protocolo e modelos do store de contadores de rate limit.

Interfaces leves (ABCs) dependidas por Application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class WindowLimit:
    """Janela fixa com teto (ex.: minute/60s/5)."""

    name: str
    seconds: int
    ceiling: int


@dataclass(frozen=True, slots=True)
class WindowUsage:
    """Estado de uma janela após o hit.

    Attributes:
        name: Nome da janela (minute|hour)
        count: Contagem na janela (incluindo este hit, se permitido)
        ceiling: Teto da janela
        reset_in_seconds: Tempo até a janela reiniciar
    """

    name: str
    count: int
    ceiling: int
    reset_in_seconds: float

    @property
    def exhausted(self) -> bool:
        return self.count >= self.ceiling


@dataclass(frozen=True, slots=True)
class RateLimitHit:
    """Resultado atômico de um hit em todas as janelas do bucket."""

    allowed: bool
    windows: tuple[WindowUsage, ...]


class RateLimitStoreProtocol(ABC):
    """Contrato do store de buckets de rate limit.

    Método canônico:
    - hit(bucket_key, windows) -> RateLimitHit
      Em uma única operação atômica: se qualquer janela excederia o teto,
      retorna allowed=False sem incrementar nenhuma; caso contrário
      incrementa todas e retorna allowed=True.

    Falhas de backend levantam RedisConnectionError.
    """

    @abstractmethod
    async def hit(self, bucket_key: str, windows: Sequence[WindowLimit]) -> RateLimitHit:
        """Registra uma requisição no bucket.

        Args:
            bucket_key: Chave opaca do bucket ({limiter_class}:{identity})
            windows: Janelas e tetos a aplicar

        Returns:
            RateLimitHit com uso de cada janela.
        """

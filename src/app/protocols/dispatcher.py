"""Protocolo do colaborador downstream que recebe requisições aceitas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.security import DispatchedEvent


class DispatcherProtocol(ABC):
    """Recebe o evento aceito ao fim do pipeline (ex.: fila).

    Falhas devem levantar exceção; o pipeline converte em DispatchError
    e libera o registro de replay.
    """

    @abstractmethod
    async def dispatch(self, event: DispatchedEvent) -> None:
        """Entrega o evento ao downstream."""

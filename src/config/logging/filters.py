"""Filters de logging para injeção de contexto.

Filters adicionam campos contextuais aos logs sem que o chamador
precise informá-los manualmente.

Campos injetados:
- request_id: ID da requisição (X-Request-ID ou gerado)
- service: Nome do serviço (ex: crm_bridge)

Logs estruturados, sem PII.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class RequestIdFilter(logging.Filter):
    """Injeta request_id e service em cada record de log.

    Importante: nunca adicionar payloads brutos, tokens ou PII nos logs.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        request_id_getter: Função que retorna o request_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        request_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_request_id = request_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona request_id e service ao record.

        Se request_id já foi passado via `extra`, preserva o valor.

        Returns:
            True sempre (não filtra, apenas enriquece).
        """
        existing = getattr(record, "request_id", None)
        record.request_id = existing if existing else self._get_request_id()
        record.service = self._service_name
        return True

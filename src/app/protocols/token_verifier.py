"""Protocolo do verificador de tokens (colaborador de emissão externa)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.security import Principal


class TokenVerifierProtocol(ABC):
    """Valida assinatura/expiração de um bearer token.

    Implementações levantam AuthenticationError com error_code
    TOKEN_EXPIRED, TOKEN_MALFORMED ou UNAUTHENTICATED.
    """

    @abstractmethod
    def verify(self, token: str) -> Principal:
        """Decodifica o token e retorna o Principal."""

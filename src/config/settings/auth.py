"""Settings de validação de tokens JWT.

A emissão de tokens é externa; aqui só o contrato de verificação.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

SUPPORTED_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


@dataclass(frozen=True)
class AuthSettings:
    """Configurações do verificador de tokens.

    Attributes:
        jwt_secret: Chave simétrica compartilhada com o emissor
        jwt_algorithm: Algoritmo HMAC aceito
        jwt_issuer: Claim `iss` exigida (vazio = não verifica)
        jwt_audience: Claim `aud` exigida (vazio = não verifica)
        leeway_seconds: Folga de relógio para exp/nbf
    """

    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = ""
    jwt_audience: str = ""
    leeway_seconds: int = 0

    def validate(self) -> list[str]:
        errors: list[str] = []

        if not self.jwt_secret:
            errors.append("JWT_SECRET não configurado")
        elif len(self.jwt_secret) < 32:
            errors.append("JWT_SECRET deve ter pelo menos 32 caracteres")

        if self.jwt_algorithm not in SUPPORTED_ALGORITHMS:
            errors.append(f"JWT_ALGORITHM não suportado: {self.jwt_algorithm}")

        if self.leeway_seconds < 0:
            errors.append("JWT_LEEWAY_SECONDS deve ser >= 0")

        return errors


def _load_from_env() -> AuthSettings:
    return AuthSettings(
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256").upper(),
        jwt_issuer=os.getenv("JWT_ISSUER", ""),
        jwt_audience=os.getenv("JWT_AUDIENCE", ""),
        leeway_seconds=int(os.getenv("JWT_LEEWAY_SECONDS", "0")),
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Retorna instância cacheada de AuthSettings."""
    return _load_from_env()

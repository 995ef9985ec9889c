"""Verificador de tokens JWT (HMAC) usando PyJWT.

Apenas o contrato de validação: a emissão acontece fora deste serviço.
Claims lidas: sub (ou user_id), abilities, exp, jti.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import jwt
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidSignatureError,
    InvalidTokenError,
)

from app.domain.security import Principal
from app.protocols.token_verifier import TokenVerifierProtocol
from utils.errors import AuthenticationError

if TYPE_CHECKING:
    from config.settings.auth import AuthSettings


class JwtTokenVerifier(TokenVerifierProtocol):
    """Valida bearer tokens JWT assinados com segredo compartilhado.

    Args:
        secret: Chave HMAC compartilhada com o emissor
        algorithm: Algoritmo aceito (HS256 por padrão)
        issuer: Claim iss exigida (None = não verifica)
        audience: Claim aud exigida (None = não verifica)
        leeway_seconds: Folga de relógio para exp/nbf
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str | None = None,
        audience: str | None = None,
        leeway_seconds: int = 0,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer or None
        self._audience = audience or None
        self._leeway = leeway_seconds

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> JwtTokenVerifier:
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            leeway_seconds=settings.leeway_seconds,
        )

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                audience=self._audience,
                leeway=self._leeway,
                options={
                    "require": ["exp"],
                    "verify_aud": self._audience is not None,
                },
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired", "TOKEN_EXPIRED") from exc
        # InvalidSignatureError herda de DecodeError: tratar antes
        except InvalidSignatureError as exc:
            raise AuthenticationError("Invalid token", "UNAUTHENTICATED") from exc
        except DecodeError as exc:
            raise AuthenticationError("Malformed token", "TOKEN_MALFORMED") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token", "UNAUTHENTICATED") from exc

    def verify(self, token: str) -> Principal:
        claims = self._decode(token)

        subject = claims.get("sub") or claims.get("user_id")
        if subject in (None, ""):
            raise AuthenticationError("Token subject missing", "UNAUTHENTICATED")

        raw_abilities = claims.get("abilities", [])
        if isinstance(raw_abilities, str):
            raw_abilities = raw_abilities.split()
        if not isinstance(raw_abilities, list) or not all(
            isinstance(a, str) for a in raw_abilities
        ):
            raise AuthenticationError("Malformed abilities claim", "TOKEN_MALFORMED")

        exp = claims.get("exp")
        return Principal(
            principal_id=str(subject),
            abilities=frozenset(raw_abilities),
            expires_at=datetime.fromtimestamp(exp, UTC) if exp is not None else None,
            token_id=claims.get("jti"),
        )

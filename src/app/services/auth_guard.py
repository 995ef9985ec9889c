"""Guard de autenticação e autorização por abilities.

Orquestra: extrai o bearer token do header Authorization, delega a
validação ao TokenVerifierProtocol, mapeia falhas para códigos HTTP e
confere a ability exigida pela rota.

Match de abilities:
- exato: `lgpd:write`
- curinga de recurso: `lgpd:*`
- curinga de ação: `*:read`
- total: `*`

Falhas são logadas com fingerprint do token e identidade mascarada,
nunca o token.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.observability.redaction import fingerprint_token, mask_identifier
from utils.errors import AuthenticationError, AuthorizationError

if TYPE_CHECKING:
    from app.domain.security import Principal
    from app.protocols.token_verifier import TokenVerifierProtocol

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"
WILDCARD = "*"


def extract_bearer_token(authorization_header: str | None) -> str:
    """Extrai o token de `Authorization: Bearer <token>`.

    Raises:
        AuthenticationError: TOKEN_MISSING (header ausente/vazio) ou
            TOKEN_MALFORMED (esquema diferente de Bearer ou token vazio).
    """
    if not authorization_header or not authorization_header.strip():
        raise AuthenticationError("Token not provided", "TOKEN_MISSING")

    scheme, _, token = authorization_header.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token or " " in token:
        raise AuthenticationError("Malformed authorization header", "TOKEN_MALFORMED")
    return token


def ability_matches(granted: str, required: str) -> bool:
    """Verifica se uma ability concedida cobre a exigida."""
    if granted in (required, WILDCARD):
        return True

    granted_resource, sep, granted_action = granted.partition(":")
    if not sep:
        return False
    required_resource, _, required_action = required.partition(":")

    resource_ok = granted_resource in (WILDCARD, required_resource)
    action_ok = granted_action in (WILDCARD, required_action)
    return resource_ok and action_ok


def has_ability(abilities: frozenset[str], required: str) -> bool:
    return any(ability_matches(granted, required) for granted in abilities)


class AuthGuard:
    """Autentica bearer tokens e autoriza abilities.

    Args:
        verifier: Colaborador que valida assinatura/expiração do token
    """

    def __init__(self, verifier: TokenVerifierProtocol) -> None:
        self._verifier = verifier

    def authenticate(
        self,
        authorization_header: str | None,
        *,
        client_ip: str = "",
        user_agent: str = "",
    ) -> Principal:
        """Extrai e valida o token, retornando o Principal.

        Raises:
            AuthenticationError: TOKEN_MISSING, TOKEN_MALFORMED,
                TOKEN_EXPIRED ou UNAUTHENTICATED.
        """
        token: str | None = None
        try:
            token = extract_bearer_token(authorization_header)
            return self._verifier.verify(token)
        except AuthenticationError as exc:
            logger.warning(
                "auth_failed",
                extra={
                    "error_code": exc.error_code,
                    "token_fingerprint": fingerprint_token(token),
                    "ip": client_ip,
                    "user_agent": user_agent,
                },
            )
            raise

    def authorize(
        self,
        principal: Principal,
        required_ability: str,
        *,
        client_ip: str = "",
        user_agent: str = "",
    ) -> None:
        """Confere a ability exigida pela rota.

        Raises:
            AuthorizationError: FORBIDDEN se nenhuma ability cobre a exigida.
        """
        if has_ability(principal.abilities, required_ability):
            return

        logger.warning(
            "auth_forbidden",
            extra={
                "identity": mask_identifier(principal.identity),
                "required_ability": required_ability,
                "ip": client_ip,
                "user_agent": user_agent,
            },
        )
        raise AuthorizationError(
            "Insufficient permissions",
            details={"required_ability": required_ability},
        )

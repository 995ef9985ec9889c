"""Tipos de domínio do pipeline de segurança.

Modelos imutáveis trocados entre rotas, serviços e stores:
- InboundRequest / SignedWebhookEnvelope: entrada crua da requisição
- Principal: identidade autenticada (produzida pelo verificador de tokens)
- RoutePolicy: contrato de segurança de cada rota
- SignatureCheck, ReplayStatus, RateLimitDecision: resultados dos checks
- DispatchedEvent: o que chega ao colaborador downstream

Nenhum destes tipos carrega token ou secret em claro.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class RouteClass(StrEnum):
    """Classe de rota: define a ordem dos checks no pipeline."""

    WEBHOOK = "webhook"
    PROTECTED = "protected"
    PUBLIC = "public"


class ReplayStatus(StrEnum):
    FRESH = "fresh"
    DUPLICATE = "duplicate"


class SignatureFailure(StrEnum):
    """Motivos de falha da verificação de assinatura (também são error_code)."""

    MISSING_HEADER = "MISSING_HEADER"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
    STALE_TIMESTAMP = "STALE_TIMESTAMP"
    SIGNATURE_MISMATCH = "SIGNATURE_MISMATCH"
    SECRET_NOT_CONFIGURED = "SECRET_NOT_CONFIGURED"


@dataclass(frozen=True, slots=True)
class SignatureCheck:
    """Resultado de `verify`: ok ou falha com motivo."""

    ok: bool
    failure: SignatureFailure | None = None

    @classmethod
    def success(cls) -> SignatureCheck:
        return cls(ok=True)

    @classmethod
    def fail(cls, failure: SignatureFailure) -> SignatureCheck:
        return cls(ok=False, failure=failure)


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    """Decisão do rate limiter para um (limiter_class, identity).

    Attributes:
        allowed: Se a requisição está dentro dos tetos
        limit: Teto da janela de minuto
        remaining: Saldo restante na janela de minuto (após esta requisição)
        retry_after_seconds: Segundos até a janela violada reiniciar (0 se allowed)
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int = 0

    @property
    def limited(self) -> bool:
        return not self.allowed

    def headers(self) -> dict[str, str]:
        """Headers X-RateLimit-* (janela de minuto)."""
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(max(self.remaining, 0)),
        }


@dataclass(frozen=True, slots=True)
class Principal:
    """Identidade autenticada.

    Attributes:
        principal_id: ID do usuário/cliente (claim sub ou user_id)
        abilities: Scopes concedidos (ex.: lgpd:write)
        expires_at: Expiração do token
        token_id: Claim jti, quando presente
    """

    principal_id: str
    abilities: frozenset[str] = frozenset()
    expires_at: datetime | None = None
    token_id: str | None = None

    @property
    def identity(self) -> str:
        """Chave de rate limit do principal."""
        return f"user:{self.principal_id}"


@dataclass(frozen=True, slots=True)
class InboundRequest:
    """Requisição HTTP recebida, desacoplada do framework.

    `headers` deve ter chaves em minúsculas.
    """

    request_id: str
    method: str
    path: str
    client_ip: str
    user_agent: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    path_params: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    @property
    def ip_identity(self) -> str:
        return f"ip:{self.client_ip}"


@dataclass(frozen=True, slots=True)
class SignedWebhookEnvelope:
    """Corpo cru do webhook e headers de assinatura. Consumido uma vez."""

    raw_body: bytes
    signature: str | None
    timestamp: str | None
    client_ip: str = ""
    user_agent: str = ""

    @classmethod
    def from_request(
        cls,
        request: InboundRequest,
        signature_header: str,
        timestamp_header: str,
    ) -> SignedWebhookEnvelope:
        return cls(
            raw_body=request.body,
            signature=request.header(signature_header),
            timestamp=request.header(timestamp_header),
            client_ip=request.client_ip,
            user_agent=request.user_agent,
        )


# Recebe o JSON decodificado e devolve o payload normalizado, ou levanta ValidationError
PayloadValidator = Callable[[Any], dict[str, Any]]


@dataclass(frozen=True, slots=True)
class RoutePolicy:
    """Contrato de segurança de uma rota.

    Attributes:
        name: Nome estável da rota (ex.: chatwoot.message_created)
        route_class: webhook | protected | public
        limiter_class: Classe de rate limit (login, api, lgpd, webhook...)
        required_ability: Ability exigida (rotas protected; None = só autenticação)
        validator: Validação do corpo JSON (opcional)
        dispatch: Se a requisição aceita segue para o DispatcherProtocol
    """

    name: str
    route_class: RouteClass
    limiter_class: str
    required_ability: str | None = None
    validator: PayloadValidator | None = None
    dispatch: bool = True


@dataclass(frozen=True, slots=True)
class DispatchedEvent:
    """Requisição aceita, entregue ao colaborador downstream (fila)."""

    request_id: str
    route_name: str
    route_class: RouteClass
    payload: dict[str, Any] = field(default_factory=dict)
    path_params: Mapping[str, str] = field(default_factory=dict)
    principal: Principal | None = None
    webhook_id: str | None = None
    client_ip: str = ""
    user_agent: str = ""
    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))

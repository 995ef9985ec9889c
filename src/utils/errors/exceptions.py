"""Exceções de domínio da ponte e falhas recuperáveis de infraestrutura.

Toda rejeição do pipeline é uma `BridgeError` com status HTTP e
`error_code` estáveis. `to_error_body()` produz o corpo uniforme:

    {"success": false, "error", "error_code", "details"?, "timestamp", "request_id"}
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class BridgeError(Exception):
    """Base das rejeições com formato HTTP.

    Args:
        message: Texto curto para o cliente (sem PII)
        error_code: Código estável (ex.: SIGNATURE_MISMATCH)
        details: Informações adicionais seguras para o cliente
    """

    status_code: int = 500
    default_error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details

    def headers(self) -> dict[str, str]:
        """Headers extras da resposta de erro."""
        return {}

    def to_error_body(self, request_id: str) -> dict[str, Any]:
        """Monta o corpo JSON padronizado de rejeição."""
        body: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            body["details"] = self.details
        body["timestamp"] = datetime.now(UTC).isoformat()
        body["request_id"] = request_id
        return body


class ValidationError(BridgeError):
    """Entrada malformada (422)."""

    status_code = 422
    default_error_code = "VALIDATION_ERROR"


class PayloadTooLargeError(ValidationError):
    """Corpo acima do limite configurado (413)."""

    status_code = 413
    default_error_code = "PAYLOAD_TOO_LARGE"


class InvalidJsonError(ValidationError):
    """Corpo não é um objeto JSON (400)."""

    status_code = 400
    default_error_code = "INVALID_JSON"


class AuthenticationError(BridgeError):
    """Token ausente, inválido ou expirado (401)."""

    status_code = 401
    default_error_code = "UNAUTHENTICATED"


class AuthorizationError(BridgeError):
    """Identidade válida sem a ability exigida (403)."""

    status_code = 403
    default_error_code = "FORBIDDEN"


class SignatureError(BridgeError):
    """Assinatura do webhook ausente, inválida ou expirada.

    O status varia pelo motivo: 401 (padrão), 400 para timestamp
    malformado e 500 quando o secret não está configurado.
    """

    status_code = 401
    default_error_code = "SIGNATURE_MISMATCH"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, error_code, details)
        if status_code is not None:
            self.status_code = status_code


class DuplicateEventError(BridgeError):
    """Evento já processado dentro do TTL (200, não é falha)."""

    status_code = 200
    default_error_code = "DUPLICATE_EVENT"

    def __init__(self, webhook_id: str) -> None:
        super().__init__("Already processed", details={"webhook_id": webhook_id})
        self.webhook_id = webhook_id


class RateLimitError(BridgeError):
    """Teto de requisições excedido (429 + Retry-After)."""

    status_code = 429
    default_error_code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, limiter_class: str, retry_after_seconds: int) -> None:
        super().__init__(
            "Rate limit exceeded",
            details={
                "limiter": limiter_class,
                "retry_after": retry_after_seconds,
            },
        )
        self.limiter_class = limiter_class
        self.retry_after_seconds = retry_after_seconds

    def headers(self) -> dict[str, str]:
        return {"Retry-After": str(self.retry_after_seconds)}


class BackendUnavailableError(BridgeError):
    """Store compartilhado indisponível com política fail-closed (503)."""

    status_code = 503
    default_error_code = "BACKEND_UNAVAILABLE"


class DispatchError(BridgeError):
    """Falha ao entregar o evento ao colaborador de fila (500)."""

    status_code = 500
    default_error_code = "DISPATCH_FAILED"

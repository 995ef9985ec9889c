"""Verificação de assinatura HMAC-SHA256 dos webhooks do Chatwoot.

String canônica: `"{timestamp}." + corpo cru` (bytes recebidos, nunca o
JSON re-serializado). Header no formato `sha256=<hex>` (hex puro também
é aceito).

Ordem dos checks: secret configurado → headers presentes → timestamp
inteiro → timestamp dentro da tolerância → digest. Timestamp fora da
tolerância é rejeitado mesmo com assinatura correta.

Funções puras: sem logging e sem IO. Quem chama registra a rejeição.
"""

from __future__ import annotations

import hashlib
import hmac
import time
from typing import TYPE_CHECKING

from app.domain.security import SignatureCheck, SignatureFailure
from utils.errors import SignatureError

if TYPE_CHECKING:
    from app.domain.security import SignedWebhookEnvelope

SIGNATURE_PREFIX = "sha256="
DEFAULT_TOLERANCE_SECONDS = 300

# motivo -> (status HTTP, mensagem ao cliente)
_FAILURE_RESPONSES: dict[SignatureFailure, tuple[int, str]] = {
    SignatureFailure.MISSING_HEADER: (401, "Missing signature or timestamp"),
    SignatureFailure.INVALID_TIMESTAMP: (400, "Invalid timestamp format"),
    SignatureFailure.STALE_TIMESTAMP: (401, "Request timestamp outside tolerance"),
    SignatureFailure.SIGNATURE_MISMATCH: (401, "Invalid signature"),
    SignatureFailure.SECRET_NOT_CONFIGURED: (500, "Webhook secret not configured"),
}


def compute_signature(raw_body: bytes, timestamp: str | int, secret: str) -> str:
    """Calcula a assinatura esperada no formato `sha256=<hex>`."""
    message = f"{timestamp}.".encode() + raw_body
    digest = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def _parse_timestamp(value: str) -> int | None:
    stripped = value.strip()
    if not (stripped.isascii() and stripped.isdigit()):
        return None
    return int(stripped)


def verify(
    raw_body: bytes,
    signature_header: str | None,
    timestamp_header: str | None,
    secret: str,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: float | None = None,
) -> SignatureCheck:
    """Valida autenticidade e frescor de um webhook.

    Args:
        raw_body: Corpo cru da requisição
        signature_header: Valor de X-Chatwoot-Signature
        timestamp_header: Valor de X-Chatwoot-Timestamp (Unix, segundos)
        secret: Secret compartilhado
        tolerance_seconds: Diferença máxima aceita entre relógios
        now: Instante atual (injetável em testes)

    Returns:
        SignatureCheck ok, ou com o motivo da falha.
    """
    if not secret:
        return SignatureCheck.fail(SignatureFailure.SECRET_NOT_CONFIGURED)

    if not signature_header or not timestamp_header:
        return SignatureCheck.fail(SignatureFailure.MISSING_HEADER)

    timestamp = _parse_timestamp(timestamp_header)
    if timestamp is None:
        return SignatureCheck.fail(SignatureFailure.INVALID_TIMESTAMP)

    current = time.time() if now is None else now
    if abs(current - timestamp) > tolerance_seconds:
        return SignatureCheck.fail(SignatureFailure.STALE_TIMESTAMP)

    expected = compute_signature(raw_body, timestamp_header.strip(), secret)
    provided = signature_header.strip().lower()
    if not provided.startswith(SIGNATURE_PREFIX):
        provided = f"{SIGNATURE_PREFIX}{provided}"

    if not hmac.compare_digest(expected.encode(), provided.encode("utf-8")):
        return SignatureCheck.fail(SignatureFailure.SIGNATURE_MISMATCH)

    return SignatureCheck.success()


def verify_envelope(
    envelope: SignedWebhookEnvelope,
    secret: str,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: float | None = None,
) -> SignatureCheck:
    """Atalho de `verify` para um SignedWebhookEnvelope."""
    return verify(
        envelope.raw_body,
        envelope.signature,
        envelope.timestamp,
        secret,
        tolerance_seconds,
        now=now,
    )


def signature_error(failure: SignatureFailure) -> SignatureError:
    """Converte o motivo de falha na exceção HTTP correspondente."""
    status_code, message = _FAILURE_RESPONSES[failure]
    return SignatureError(message, error_code=str(failure), status_code=status_code)

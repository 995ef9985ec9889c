"""Conector Chatwoot - adapter de borda dos webhooks do Chatwoot.

Responsabilidades:
- Cálculo de webhook_id para idempotência
"""

from .event_id import compute_webhook_id

__all__ = ["compute_webhook_id"]

"""Observabilidade: request_id, redação e métricas.

Re-exporta helpers (inclusive a auditoria LGPD) para uso em toda a aplicação.

Uso:
    from app.observability import get_request_id, set_request_id
    from app.observability import mask_identifier, record_latency
"""

from app.observability.audit import determine_action, is_audited, record_data_access
from app.observability.metrics import record_latency, record_rejection
from app.observability.redaction import (
    fingerprint_token,
    mask_identifier,
    redact_payload,
)
from app.observability.request_context import (
    REQUEST_ID_HEADER,
    generate_request_id,
    get_request_id,
    reset_request_id,
    set_request_id,
)

__all__ = [
    "REQUEST_ID_HEADER",
    "determine_action",
    "fingerprint_token",
    "generate_request_id",
    "get_request_id",
    "is_audited",
    "mask_identifier",
    "record_data_access",
    "record_latency",
    "record_rejection",
    "redact_payload",
    "reset_request_id",
    "set_request_id",
]

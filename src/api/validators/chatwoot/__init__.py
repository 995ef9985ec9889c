"""Validadores dos payloads recebidos pela ponte.

Cada função recebe o JSON decodificado (mais path params, em rotas
protegidas) e retorna o dict normalizado ou levanta
`utils.errors.ValidationError` com os erros por campo.

Uso:
    from api.validators.chatwoot import validate_message_created

    payload = validate_message_created(data)
"""

from api.validators.chatwoot.base import validate_model
from api.validators.chatwoot.export import (
    MAX_BULK_EXPORT_CONTACTS,
    validate_bulk_export,
    validate_export_reference,
)
from api.validators.chatwoot.lgpd import (
    validate_consent,
    validate_contact_reference,
    validate_lead_reference,
)
from api.validators.chatwoot.webhooks import (
    MAX_MESSAGE_CONTENT_LENGTH,
    validate_conversation_created,
    validate_conversation_status_changed,
    validate_message_created,
)

__all__ = [
    "MAX_BULK_EXPORT_CONTACTS",
    "MAX_MESSAGE_CONTENT_LENGTH",
    "validate_bulk_export",
    "validate_consent",
    "validate_contact_reference",
    "validate_conversation_created",
    "validate_conversation_status_changed",
    "validate_export_reference",
    "validate_lead_reference",
    "validate_message_created",
    "validate_model",
]

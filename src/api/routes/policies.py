"""Tabela de políticas de segurança por rota.

Cada endpoint declara sua classe (webhook | protected | public), a classe
de rate limit e a ability exigida. O pipeline aplica os checks na ordem
da classe; as rotas só traduzem HTTP ⇄ pipeline.
"""

from __future__ import annotations

from api.validators.chatwoot import (
    validate_bulk_export,
    validate_consent,
    validate_contact_reference,
    validate_conversation_created,
    validate_conversation_status_changed,
    validate_export_reference,
    validate_lead_reference,
    validate_message_created,
)
from app.domain.security import RouteClass, RoutePolicy

# ──────────────────────────────────────────────────────────────────────────────
# Webhooks Chatwoot
# ──────────────────────────────────────────────────────────────────────────────

CONVERSATION_CREATED = RoutePolicy(
    name="chatwoot.conversation_created",
    route_class=RouteClass.WEBHOOK,
    limiter_class="webhook",
    validator=validate_conversation_created,
)
MESSAGE_CREATED = RoutePolicy(
    name="chatwoot.message_created",
    route_class=RouteClass.WEBHOOK,
    limiter_class="webhook",
    validator=validate_message_created,
)
CONVERSATION_STATUS_CHANGED = RoutePolicy(
    name="chatwoot.conversation_status_changed",
    route_class=RouteClass.WEBHOOK,
    limiter_class="webhook",
    validator=validate_conversation_status_changed,
)
WEBHOOK_TEST = RoutePolicy(
    name="chatwoot.webhook_test",
    route_class=RouteClass.PUBLIC,
    limiter_class="webhook",
    dispatch=False,
)

# ──────────────────────────────────────────────────────────────────────────────
# Rotas protegidas (bearer token)
# ──────────────────────────────────────────────────────────────────────────────

AUTH_VALIDATE = RoutePolicy(
    name="auth.validate",
    route_class=RouteClass.PROTECTED,
    limiter_class="api",
    dispatch=False,
)
CONVERSATIONS_BY_LEAD = RoutePolicy(
    name="chatwoot.conversations",
    route_class=RouteClass.PROTECTED,
    limiter_class="api",
    required_ability="conversations:read",
    validator=validate_lead_reference,
)
AI_INSIGHTS = RoutePolicy(
    name="ai.insights",
    route_class=RouteClass.PROTECTED,
    limiter_class="ai",
    required_ability="insights:read",
    validator=validate_lead_reference,
)
LGPD_RECORD_CONSENT = RoutePolicy(
    name="lgpd.consent.record",
    route_class=RouteClass.PROTECTED,
    limiter_class="lgpd",
    required_ability="lgpd:write",
    validator=validate_consent,
)
LGPD_GET_CONSENT = RoutePolicy(
    name="lgpd.consent.get",
    route_class=RouteClass.PROTECTED,
    limiter_class="lgpd",
    required_ability="lgpd:read",
    validator=validate_contact_reference,
)
LGPD_DELETE_DATA = RoutePolicy(
    name="lgpd.data.delete",
    route_class=RouteClass.PROTECTED,
    limiter_class="lgpd",
    required_ability="admin:write",
    validator=validate_contact_reference,
)
LGPD_EXPORT_CONTACT = RoutePolicy(
    name="lgpd.export",
    route_class=RouteClass.PROTECTED,
    limiter_class="lgpd",
    required_ability="lgpd:read",
    validator=validate_contact_reference,
)
EXPORT_BULK = RoutePolicy(
    name="export.bulk",
    route_class=RouteClass.PROTECTED,
    limiter_class="export",
    required_ability="admin:write",
    validator=validate_bulk_export,
)
EXPORT_STATUS = RoutePolicy(
    name="export.status",
    route_class=RouteClass.PROTECTED,
    limiter_class="export",
    required_ability="admin:read",
    validator=validate_export_reference,
)
EXPORT_DELETE = RoutePolicy(
    name="export.delete",
    route_class=RouteClass.PROTECTED,
    limiter_class="export",
    required_ability="admin:write",
    validator=validate_export_reference,
)

ALL_POLICIES: tuple[RoutePolicy, ...] = (
    CONVERSATION_CREATED,
    MESSAGE_CREATED,
    CONVERSATION_STATUS_CHANGED,
    WEBHOOK_TEST,
    AUTH_VALIDATE,
    CONVERSATIONS_BY_LEAD,
    AI_INSIGHTS,
    LGPD_RECORD_CONSENT,
    LGPD_GET_CONSENT,
    LGPD_DELETE_DATA,
    LGPD_EXPORT_CONTACT,
    EXPORT_BULK,
    EXPORT_STATUS,
    EXPORT_DELETE,
)

"""Endpoints de webhook do Chatwoot.

Endpoints:
- POST /v1/webhooks/chatwoot/conversation-created
- POST /v1/webhooks/chatwoot/message-created
- POST /v1/webhooks/chatwoot/conversation-status-changed
- GET  /v1/webhooks/chatwoot/test: checagem de conectividade (pública)

Segurança (aplicada pelo RequestPipeline):
- Rate limit por IP antes do HMAC
- Assinatura HMAC-SHA256 com timestamp (X-Chatwoot-Signature/Timestamp)
- Replay/idempotência por webhook_id
- Resposta rápida (200 OK); processamento delegado ao dispatcher
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.routes import policies
from api.routes.pipeline_runtime import run_policy, to_response

router = APIRouter()


@router.post("/conversation-created")
async def conversation_created(request: Request) -> JSONResponse:
    """Recebe `conversation_created`."""
    return to_response(await run_policy(request, policies.CONVERSATION_CREATED))


@router.post("/message-created")
async def message_created(request: Request) -> JSONResponse:
    """Recebe `message_created`."""
    return to_response(await run_policy(request, policies.MESSAGE_CREATED))


@router.post("/conversation-status-changed")
async def conversation_status_changed(request: Request) -> JSONResponse:
    """Recebe `conversation_status_changed`."""
    return to_response(await run_policy(request, policies.CONVERSATION_STATUS_CHANGED))


@router.get("/test")
async def webhook_test(request: Request) -> JSONResponse:
    """Checagem de conectividade usada na configuração do webhook no Chatwoot."""
    result = await run_policy(request, policies.WEBHOOK_TEST)
    if result.accepted:
        result.body["message"] = "Webhook endpoint is working"
    return to_response(result)

"""Consultas de CRM: conversas do lead e insights de IA.

O processamento é assíncrono: a requisição aceita é enfileirada (202).
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.routes import policies
from api.routes.pipeline_runtime import run_policy, to_response

router = APIRouter()


@router.get("/chatwoot/conversations/{lead_id}")
async def conversations_by_lead(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.CONVERSATIONS_BY_LEAD))


@router.get("/ai/insights/{lead_id}")
async def ai_insights(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.AI_INSIGHTS))

"""Validação de token para clientes da API."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.routes import policies
from api.routes.pipeline_runtime import run_policy, to_response

router = APIRouter()


@router.get("/validate")
async def validate_token(request: Request) -> JSONResponse:
    """Confirma que o bearer token é válido e devolve o principal.

    Não exige ability específica; limiter `api`.
    """
    result = await run_policy(request, policies.AUTH_VALIDATE)
    principal = result.event.principal if result.event is not None else None
    if result.accepted and principal is not None:
        result.body["valid"] = True
        result.body["user"] = {
            "id": principal.principal_id,
            "abilities": sorted(principal.abilities),
            "expires_at": principal.expires_at.isoformat() if principal.expires_at else None,
        }
    return to_response(result)

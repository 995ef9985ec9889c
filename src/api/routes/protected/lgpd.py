"""Endpoints LGPD: consentimento, exclusão e portabilidade por contato.

Limiter `lgpd` (tetos baixos); exclusão exige `admin:write`.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.routes import policies
from api.routes.pipeline_runtime import run_policy, to_response

router = APIRouter()


@router.post("/consent")
async def record_consent(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.LGPD_RECORD_CONSENT))


@router.get("/consent/{contact_id}")
async def get_consent(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.LGPD_GET_CONSENT))


@router.delete("/data/{contact_id}")
async def delete_contact_data(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.LGPD_DELETE_DATA))


@router.get("/export/{contact_id}")
async def export_contact_data(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.LGPD_EXPORT_CONTACT))

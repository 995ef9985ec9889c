"""Exportação em lote (até 100 contatos). A geração do arquivo é externa."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.routes import policies
from api.routes.pipeline_runtime import run_policy, to_response

router = APIRouter()


@router.post("/bulk")
async def bulk_export(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.EXPORT_BULK))


@router.get("/status/{export_id}")
async def export_status(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.EXPORT_STATUS))


@router.delete("/{export_id}")
async def delete_export(request: Request) -> JSONResponse:
    return to_response(await run_policy(request, policies.EXPORT_DELETE))

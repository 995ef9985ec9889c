"""Runtime helpers compartilhados pelas rotas: HTTP ⇄ RequestPipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.responses import JSONResponse

from app.domain.security import InboundRequest
from app.observability import get_request_id
from config.settings import get_base_settings
from utils.errors import PayloadTooLargeError

if TYPE_CHECKING:
    from fastapi import Request

    from app.domain.security import RoutePolicy
    from app.services.request_pipeline import PipelineResult, RequestPipeline

UNKNOWN_CLIENT_IP = "unknown"


def resolve_client_ip(request: Request, trust_forwarded_for: bool) -> str:
    """IP do cliente; X-Forwarded-For só vale atrás de proxy confiável."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client is not None and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT_IP


def _too_large(max_bytes: int) -> PayloadTooLargeError:
    return PayloadTooLargeError("Payload too large", details={"max_bytes": max_bytes})


async def read_body(request: Request, max_bytes: int) -> bytes:
    """Lê o corpo sem passar do teto.

    Content-Length acima do teto é recusado sem ler nada; sem o header
    (chunked), a leitura do stream é interrompida ao passar do teto.

    Raises:
        PayloadTooLargeError: Corpo declarado ou lido acima de max_bytes.
    """
    declared = request.headers.get("content-length", "").strip()
    if declared.isascii() and declared.isdigit() and int(declared) > max_bytes:
        raise _too_large(max_bytes)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise _too_large(max_bytes)
    return bytes(body)


def _inbound(request: Request, raw_body: bytes) -> InboundRequest:
    return InboundRequest(
        request_id=get_request_id(),
        method=request.method,
        path=request.url.path,
        client_ip=resolve_client_ip(request, get_base_settings().trust_forwarded_for),
        user_agent=request.headers.get("user-agent", ""),
        headers={key.lower(): value for key, value in request.headers.items()},
        body=raw_body,
        path_params={key: str(value) for key, value in request.path_params.items()},
    )


async def build_inbound_request(request: Request, max_bytes: int) -> InboundRequest:
    """Captura o request HTTP (corpo bruto incluso) para o pipeline."""
    return _inbound(request, await read_body(request, max_bytes))


def get_pipeline(request: Request) -> RequestPipeline:
    return request.app.state.pipeline


def to_response(result: PipelineResult) -> JSONResponse:
    return JSONResponse(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


async def run_policy(request: Request, policy: RoutePolicy) -> PipelineResult:
    """Executa o pipeline da rota para o request HTTP atual."""
    pipeline = get_pipeline(request)
    try:
        inbound = await build_inbound_request(request, pipeline.max_body_bytes)
    except PayloadTooLargeError as exc:
        return pipeline.reject(_inbound(request, b""), policy, exc)
    return await pipeline.run(inbound, policy)

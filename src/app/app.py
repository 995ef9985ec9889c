"""Entrypoint da ponte CRM (Chatwoot ⇄ Krayin).

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import create_api_router
from app.bootstrap import (
    get_dispatcher,
    get_request_pipeline,
    initialize_app,
    validate_runtime_settings,
)
from app.bootstrap.clients import create_async_redis_client
from app.observability import (
    REQUEST_ID_HEADER,
    get_request_id,
    record_rejection,
    reset_request_id,
    set_request_id,
)
from config.logging import get_logger
from config.settings import get_rate_limit_settings, get_replay_settings
from utils.errors import BridgeError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from fastapi import Response

    from app.infra.dispatch import TaskDispatcher
    from app.services.request_pipeline import RequestPipeline

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

SERVICE_NAME = "crm-bridge"
DRAIN_TIMEOUT_SECONDS = 30.0


def _uses_redis() -> bool:
    return "redis" in (get_replay_settings().backend, get_rate_limit_settings().backend)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações (fail fast em staging/production)
    - Expõe o cliente Redis para o readiness

    Shutdown:
    - Drena tasks do dispatcher
    - Fecha conexões gracefully
    """
    logger.info("app_starting", extra={"service": SERVICE_NAME})
    validate_runtime_settings()
    if getattr(app.state, "redis_client", None) is None and _uses_redis():
        try:
            app.state.redis_client = create_async_redis_client()
        except ValueError as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_NAME})
    dispatcher = getattr(app.state, "dispatcher", None)
    if dispatcher is not None:
        await dispatcher.drain(timeout_seconds=DRAIN_TIMEOUT_SECONDS)
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()


async def _request_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Propaga X-Request-ID (ou gera um) e devolve em toda resposta."""
    token = set_request_id(request.headers.get(REQUEST_ID_HEADER))
    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = get_request_id()
        return response
    finally:
        reset_request_id(token)


async def _bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    """Renderiza BridgeError que escape do pipeline no corpo uniforme."""
    request_id = get_request_id()
    logger.warning(
        "request_rejected",
        extra={
            "path": request.url.path,
            "error_code": exc.error_code,
            "status_code": exc.status_code,
        },
    )
    record_rejection("unrouted", exc.error_code, exc.status_code, request_id)
    return JSONResponse(
        content=exc.to_error_body(request_id),
        status_code=exc.status_code,
        headers=exc.headers(),
    )


def create_app(
    pipeline: RequestPipeline | None = None,
    dispatcher: TaskDispatcher | None = None,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        pipeline: Pipeline pronto (testes); padrão é o do bootstrap.
        dispatcher: Dispatcher a drenar no shutdown.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="CRM Bridge",
        description="Ponte Chatwoot ⇄ Krayin: webhooks, LGPD e exportação",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    if pipeline is None:
        dispatcher = dispatcher or get_dispatcher()
        pipeline = get_request_pipeline()
    fastapi_app.state.pipeline = pipeline
    fastapi_app.state.dispatcher = dispatcher
    fastapi_app.state.redis_client = None

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After", "X-RateLimit-Limit", "X-RateLimit-Remaining"],
    )
    fastapi_app.middleware("http")(_request_id_middleware)
    fastapi_app.add_exception_handler(BridgeError, _bridge_error_handler)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE_NAME})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting CRM bridge in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()

"""Agregador de rotas — registra todos os routers da API.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.chatwoot.webhook import router as chatwoot_webhook_router
from api.routes.health.router import router as health_router
from api.routes.protected.auth import router as auth_router
from api.routes.protected.crm import router as crm_router
from api.routes.protected.export import router as export_router
from api.routes.protected.lgpd import router as lgpd_router

API_PREFIX = "/v1"


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    # Webhooks Chatwoot (HMAC + replay)
    api_router.include_router(
        chatwoot_webhook_router,
        prefix=f"{API_PREFIX}/webhooks/chatwoot",
        tags=["chatwoot"],
    )

    # Rotas protegidas (bearer token)
    api_router.include_router(auth_router, prefix=f"{API_PREFIX}/auth", tags=["auth"])
    api_router.include_router(crm_router, prefix=API_PREFIX, tags=["crm"])
    api_router.include_router(lgpd_router, prefix=f"{API_PREFIX}/lgpd", tags=["lgpd"])
    api_router.include_router(export_router, prefix=f"{API_PREFIX}/export", tags=["export"])

    return api_router

"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (webhooks, rotas protegidas, health)
- Traduzir request HTTP ⇄ RequestPipeline
- Declarar a política de segurança de cada rota (policies.py)

Estrutura:
- routes/chatwoot/: webhooks do Chatwoot
- routes/protected/: auth, CRM, LGPD e exportação
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]

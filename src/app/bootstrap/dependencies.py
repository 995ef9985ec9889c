"""Factories de dependências — criação de implementações concretas.

Este módulo centraliza a criação de stores, verificador de tokens,
dispatcher e do pipeline baseados nas configurações de ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.chatwoot.event_id import compute_webhook_id
from app.bootstrap.clients import create_async_redis_client
from app.infra.auth import JwtTokenVerifier
from app.infra.dispatch import TaskDispatcher
from app.infra.stores import (
    MemoryRateLimitStore,
    MemoryReplayStore,
    RedisRateLimitStore,
    RedisReplayStore,
)
from app.services.auth_guard import AuthGuard
from app.services.rate_limiter import RateLimiter
from app.services.replay_guard import ReplayGuard
from app.services.request_pipeline import RequestPipeline
from config.settings import (
    get_auth_settings,
    get_base_settings,
    get_chatwoot_settings,
    get_rate_limit_settings,
    get_replay_settings,
)

if TYPE_CHECKING:
    from app.protocols.dispatcher import DispatcherProtocol
    from app.protocols.rate_limit_store import RateLimitStoreProtocol
    from app.protocols.replay_store import ReplayStoreProtocol
    from app.protocols.token_verifier import TokenVerifierProtocol

logger = logging.getLogger(__name__)


def _warn_memory_backend(component: str) -> None:
    environment = get_base_settings().environment
    if environment != "development":
        logger.warning(
            "memory_store_in_non_dev",
            extra={"component": component, "backend": "memory", "environment": environment},
        )


# ──────────────────────────────────────────────────────────────────────────────
# Store Factories
# ──────────────────────────────────────────────────────────────────────────────


def create_replay_store() -> ReplayStoreProtocol:
    """Cria store de replay baseado em REPLAY_BACKEND.

    - "memory": MemoryReplayStore (dev only, não compartilhado)
    - "redis": RedisReplayStore (staging/production)
    """
    backend = get_replay_settings().backend

    if backend == "redis":
        store: ReplayStoreProtocol = RedisReplayStore(create_async_redis_client())
    else:
        _warn_memory_backend("replay_store")
        store = MemoryReplayStore()

    logger.info("replay_store_created", extra={"backend": backend})
    return store


def create_rate_limit_store() -> RateLimitStoreProtocol:
    """Cria store de rate limit baseado em RATE_LIMIT_BACKEND."""
    backend = get_rate_limit_settings().backend

    if backend == "redis":
        store: RateLimitStoreProtocol = RedisRateLimitStore(create_async_redis_client())
    else:
        _warn_memory_backend("rate_limit_store")
        store = MemoryRateLimitStore()

    logger.info("rate_limit_store_created", extra={"backend": backend})
    return store


# ──────────────────────────────────────────────────────────────────────────────
# Service Factories
# ──────────────────────────────────────────────────────────────────────────────


def create_token_verifier() -> TokenVerifierProtocol:
    """Cria verificador JWT a partir de AuthSettings."""
    return JwtTokenVerifier.from_settings(get_auth_settings())


def create_dispatcher() -> TaskDispatcher:
    """Cria dispatcher padrão (tasks asyncio com log do evento aceito)."""
    return TaskDispatcher()


def create_request_pipeline(
    dispatcher: DispatcherProtocol | None = None,
    replay_store: ReplayStoreProtocol | None = None,
    rate_limit_store: RateLimitStoreProtocol | None = None,
    token_verifier: TokenVerifierProtocol | None = None,
) -> RequestPipeline:
    """Monta o RequestPipeline com guards configurados por env.

    Colaboradores explícitos substituem os criados por padrão (testes).
    """
    base = get_base_settings()
    replay_settings = get_replay_settings()
    rate_limit_settings = get_rate_limit_settings()
    timeout = base.store_timeout_seconds

    replay_guard = ReplayGuard(
        replay_store or create_replay_store(),
        ttl_seconds=replay_settings.ttl_seconds,
        fail_mode=replay_settings.fail_mode,
        timeout_seconds=timeout,
    )
    rate_limiter = RateLimiter(
        rate_limit_store or create_rate_limit_store(),
        rate_limit_settings.ceilings,
        fail_mode=rate_limit_settings.fail_mode,
        timeout_seconds=timeout,
    )
    pipeline = RequestPipeline(
        rate_limiter=rate_limiter,
        replay_guard=replay_guard,
        auth_guard=AuthGuard(token_verifier or create_token_verifier()),
        dispatcher=dispatcher or create_dispatcher(),
        chatwoot_settings=get_chatwoot_settings(),
        webhook_identifier=compute_webhook_id,
    )
    logger.info(
        "request_pipeline_created",
        extra={
            "replay_backend": replay_settings.backend,
            "rate_limit_backend": rate_limit_settings.backend,
            "replay_fail_mode": replay_settings.fail_mode,
            "rate_limit_fail_mode": rate_limit_settings.fail_mode,
        },
    )
    return pipeline

"""Serviços de aplicação.

Unidades de orquestração do pipeline de segurança (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.auth_guard import AuthGuard, ability_matches, extract_bearer_token
from app.services.rate_limiter import RateLimiter
from app.services.replay_guard import ReplayGuard
from app.services.request_pipeline import PipelineResult, RequestPipeline
from app.services.signature_verifier import compute_signature, verify

__all__ = [
    "AuthGuard",
    "PipelineResult",
    "RateLimiter",
    "ReplayGuard",
    "RequestPipeline",
    "ability_matches",
    "compute_signature",
    "extract_bearer_token",
    "verify",
]

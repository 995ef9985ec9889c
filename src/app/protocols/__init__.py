"""Protocolos e contratos do core da aplicação."""

from .dispatcher import DispatcherProtocol
from .rate_limit_store import (
    RateLimitHit,
    RateLimitStoreProtocol,
    WindowLimit,
    WindowUsage,
)
from .replay_store import ReplayStoreProtocol
from .token_verifier import TokenVerifierProtocol

__all__ = [
    "DispatcherProtocol",
    "RateLimitHit",
    "RateLimitStoreProtocol",
    "ReplayStoreProtocol",
    "TokenVerifierProtocol",
    "WindowLimit",
    "WindowUsage",
]

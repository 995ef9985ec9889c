"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    FailMode,
    get_base_settings,
)
from config.settings.base.rate_limit import (
    DEFAULT_LIMITER_CEILINGS,
    LimiterCeilings,
    RateLimitSettings,
    get_rate_limit_settings,
)
from config.settings.base.replay import (
    ReplaySettings,
    StoreBackend,
    get_replay_settings,
)

__all__ = [
    "DEFAULT_LIMITER_CEILINGS",
    # Core
    "BaseSettings",
    # Types
    "Environment",
    "FailMode",
    # Rate limit
    "LimiterCeilings",
    "RateLimitSettings",
    # Replay
    "ReplaySettings",
    "StoreBackend",
    "get_base_settings",
    "get_rate_limit_settings",
    "get_replay_settings",
]

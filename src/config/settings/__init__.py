"""Agregador de settings da ponte CRM.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Auth settings
from config.settings.auth import AuthSettings, get_auth_settings

# Base settings
from config.settings.base import (
    DEFAULT_LIMITER_CEILINGS,
    BaseSettings,
    Environment,
    FailMode,
    LimiterCeilings,
    RateLimitSettings,
    ReplaySettings,
    StoreBackend,
    get_base_settings,
    get_rate_limit_settings,
    get_replay_settings,
)

# Channel-specific settings
from config.settings.chatwoot import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    ChatwootSettings,
    get_chatwoot_settings,
)

__all__ = [
    # Constants
    "DEFAULT_LIMITER_CEILINGS",
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    # Auth
    "AuthSettings",
    # Base
    "BaseSettings",
    # Channels
    "ChatwootSettings",
    "Environment",
    "FailMode",
    "LimiterCeilings",
    "RateLimitSettings",
    "ReplaySettings",
    "StoreBackend",
    "get_auth_settings",
    "get_base_settings",
    "get_chatwoot_settings",
    "get_rate_limit_settings",
    "get_replay_settings",
]

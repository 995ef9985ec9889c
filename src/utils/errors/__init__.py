"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendUnavailableError,
    BridgeError,
    DispatchError,
    DuplicateEventError,
    InfrastructureError,
    InvalidJsonError,
    PayloadTooLargeError,
    RateLimitError,
    RedisConnectionError,
    SignatureError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "BackendUnavailableError",
    "BridgeError",
    "DispatchError",
    "DuplicateEventError",
    "InfrastructureError",
    "InvalidJsonError",
    "PayloadTooLargeError",
    "RateLimitError",
    "RedisConnectionError",
    "SignatureError",
    "ValidationError",
]

"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ClientFactoryNotConfiguredError,
    ConnectionOpenError,
    InfrastructureError,
    InstanceError,
    NotFoundError,
    ReconnectExhaustedError,
    StatusStoreUnavailableError,
    UpstreamProtocolError,
    ValidationError,
)

__all__ = [
    "ClientFactoryNotConfiguredError",
    "ConnectionOpenError",
    "InfrastructureError",
    "InstanceError",
    "NotFoundError",
    "ReconnectExhaustedError",
    "StatusStoreUnavailableError",
    "UpstreamProtocolError",
    "ValidationError",
]

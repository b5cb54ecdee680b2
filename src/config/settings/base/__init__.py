"""Agregador de settings base."""

from __future__ import annotations

from config.settings.base.core import (
    DEFAULT_PORT,
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.status_store import (
    StatusStoreBackend,
    StatusStoreSettings,
    get_status_store_settings,
)

__all__ = [
    "DEFAULT_PORT",
    "BaseSettings",
    "Environment",
    "StatusStoreBackend",
    "StatusStoreSettings",
    "get_base_settings",
    "get_status_store_settings",
]

"""Agregador de settings do serviço de instâncias WhatsApp.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    DEFAULT_PORT,
    BaseSettings,
    Environment,
    StatusStoreBackend,
    StatusStoreSettings,
    get_base_settings,
    get_status_store_settings,
)
from config.settings.database import (
    DatabaseSettings,
    get_database_settings,
)
from config.settings.whatsapp import (
    DEFAULT_AUTH_PATH,
    DEFAULT_BROWSER,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    "DEFAULT_AUTH_PATH",
    "DEFAULT_BROWSER",
    "DEFAULT_PORT",
    "BaseSettings",
    "DatabaseSettings",
    "Environment",
    "StatusStoreBackend",
    "StatusStoreSettings",
    "WhatsAppSettings",
    "get_base_settings",
    "get_database_settings",
    "get_status_store_settings",
    "get_whatsapp_settings",
]

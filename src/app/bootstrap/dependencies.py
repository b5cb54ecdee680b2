"""Factories de dependências — criação de implementações concretas.

Este módulo centraliza a criação do store de status, da factory do
cliente de protocolo e do gerenciador de conexões a partir das
configurações de ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_db_session_factory
from app.infra.credentials import FileCredentialStore
from app.infra.qr import PngDataUrlQREncoder
from app.infra.stores import MemoryStatusStore, PostgresStatusStore
from app.infra.whatsapp import load_client_factory
from app.sessions.manager import ConnectionManager
from config.settings import (
    get_base_settings,
    get_status_store_settings,
    get_whatsapp_settings,
)
from utils.errors import ClientFactoryNotConfiguredError

if TYPE_CHECKING:
    from app.protocols import AsyncStatusStoreProtocol, WhatsAppClientFactory

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Status Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_status_store() -> AsyncStatusStoreProtocol:
    """Cria store de status baseado na configuração.

    Lê STATUS_STORE_BACKEND da env:
    - "memory": MemoryStatusStore (dev only)
    - "postgres": PostgresStatusStore (staging/production)

    Returns:
        Implementação de AsyncStatusStoreProtocol
    """
    backend = get_status_store_settings().backend

    if backend == "postgres":
        store = PostgresStatusStore(create_db_session_factory())
        logger.info("status_store_created", extra={"backend": "postgres"})
        return store

    environment = get_base_settings().environment
    if environment != "development":
        logger.warning(
            "memory_store_in_non_dev",
            extra={"backend": "memory", "environment": environment},
        )
    logger.info("status_store_created", extra={"backend": "memory"})
    return MemoryStatusStore()


# ──────────────────────────────────────────────────────────────────────────────
# WhatsApp Client / Connection Manager Factories
# ──────────────────────────────────────────────────────────────────────────────


def create_client_factory() -> WhatsAppClientFactory:
    """Carrega a factory do cliente de protocolo (WHATSAPP_CLIENT_FACTORY).

    Raises:
        ClientFactoryNotConfiguredError: Variável ausente ou inválida
    """
    import_path = get_whatsapp_settings().client_factory
    if not import_path:
        raise ClientFactoryNotConfiguredError("WHATSAPP_CLIENT_FACTORY não configurado")
    return load_client_factory(import_path)


def create_connection_manager(
    status_store: AsyncStatusStoreProtocol,
    client_factory: WhatsAppClientFactory,
) -> ConnectionManager:
    """Monta o gerenciador de conexões com as dependências concretas."""
    settings = get_whatsapp_settings()
    manager = ConnectionManager(
        status_store=status_store,
        client_factory=client_factory,
        credential_store=FileCredentialStore(settings.auth_path),
        qr_encoder=PngDataUrlQREncoder(),
        settings=settings,
    )
    logger.info(
        "connection_manager_created",
        extra={
            "auth_path": str(settings.auth_path),
            "max_reconnect_attempts": settings.max_reconnect_attempts,
            "reconnect_delay_seconds": settings.reconnect_delay_seconds,
        },
    )
    return manager

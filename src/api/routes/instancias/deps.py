"""Dependências FastAPI das rotas de instância."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from app.sessions.manager import ConnectionManager
from app.use_cases.whatsapp import (
    ContactOperationsUseCase,
    GroupOperationsUseCase,
    SendMessageUseCase,
)


def get_connection_manager(request: Request) -> ConnectionManager:
    """Gerenciador criado no lifespan (app.state.connection_manager)."""
    manager = getattr(request.app.state, "connection_manager", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="Gerenciador de conexões indisponível.")
    return manager


def get_send_message_use_case(
    manager: ConnectionManager = Depends(get_connection_manager),
) -> SendMessageUseCase:
    return SendMessageUseCase(manager)


def get_group_operations(
    manager: ConnectionManager = Depends(get_connection_manager),
) -> GroupOperationsUseCase:
    return GroupOperationsUseCase(manager)


def get_contact_operations(
    manager: ConnectionManager = Depends(get_connection_manager),
) -> ContactOperationsUseCase:
    return ContactOperationsUseCase(manager)

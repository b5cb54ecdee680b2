"""Rotas de ciclo de vida da instância: criar, conectar, QR Code e status."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.routes.instancias.deps import get_connection_manager
from api.routes.instancias.schemas import CreateInstanceRequest, SessionRequest
from app.sessions.manager import ConnectionManager
from utils.errors import NotFoundError

router = APIRouter()

INSTANCE_CREATED_MESSAGE = "Instância criada. Agora conecte o WhatsApp."
QR_NOT_REQUIRED_MESSAGE = "Instância já conectada ou QR Code não necessário."
QR_NOT_AVAILABLE_MESSAGE = "QR Code não disponível."


@router.post("/instancia")
async def create_instance(
    body: CreateInstanceRequest,
    manager: ConnectionManager = Depends(get_connection_manager),
) -> dict[str, Any]:
    """Registra a instância com status desconectado (idempotente)."""
    record = await manager.create(body.nome)
    return {"message": INSTANCE_CREATED_MESSAGE, "sessionId": record.session_id}


@router.post("/conectar")
async def connect_instance(
    body: SessionRequest,
    manager: ConnectionManager = Depends(get_connection_manager),
) -> dict[str, Any]:
    """Conecta com QR; devolve o QR se ele surgir dentro da janela de espera."""
    qr = await manager.connect_for_qr(body.session_id)
    if qr:
        return {"sessionId": body.session_id, "qr": qr}
    return {"message": QR_NOT_REQUIRED_MESSAGE}


@router.get("/qrcode/{session_id}")
async def get_qr_code(
    session_id: str,
    manager: ConnectionManager = Depends(get_connection_manager),
) -> dict[str, Any]:
    qr = manager.get_qr_code(session_id)
    if not qr:
        raise NotFoundError(QR_NOT_AVAILABLE_MESSAGE)
    return {"sessionId": session_id, "qr": qr}


@router.get("/status/{session_id}")
async def get_status(
    session_id: str,
    manager: ConnectionManager = Depends(get_connection_manager),
) -> dict[str, Any]:
    record = await manager.get_status(session_id)
    return record.to_dict()

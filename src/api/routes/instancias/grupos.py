"""Rotas de grupos da instância."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.normalizers.whatsapp import format_group_jid, format_individual_jid
from api.routes.instancias.deps import get_group_operations
from api.routes.instancias.schemas import AddParticipantRequest, CreateGroupRequest
from app.use_cases.whatsapp import GroupOperationsUseCase

router = APIRouter()


@router.get("/grupos/{session_id}")
async def list_groups(
    session_id: str,
    groups: GroupOperationsUseCase = Depends(get_group_operations),
) -> dict[str, Any]:
    """Todos os grupos dos quais a conta participa, indexados por JID."""
    return await groups.list_groups(session_id)


@router.get("/grupo/{session_id}/{group_id}")
async def get_group(
    session_id: str,
    group_id: str,
    groups: GroupOperationsUseCase = Depends(get_group_operations),
) -> dict[str, Any]:
    return await groups.get_group(session_id, format_group_jid(group_id))


@router.post("/grupos")
async def create_group(
    body: CreateGroupRequest,
    groups: GroupOperationsUseCase = Depends(get_group_operations),
) -> dict[str, Any]:
    participants = [format_individual_jid(item) for item in body.participants]
    metadata = await groups.create_group(body.session_id, body.subject, participants)
    return {"message": "Grupo criado com sucesso.", "group": metadata}


@router.post("/grupos/adicionar")
async def add_participant(
    body: AddParticipantRequest,
    groups: GroupOperationsUseCase = Depends(get_group_operations),
) -> dict[str, Any]:
    await groups.add_participant(
        body.session_id,
        format_group_jid(body.group_id),
        format_individual_jid(body.participant),
    )
    return {"message": "Participante adicionado com sucesso."}

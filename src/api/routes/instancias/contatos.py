"""Rotas de contatos da instância."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.normalizers.whatsapp import format_individual_jid
from api.routes.instancias.deps import get_contact_operations
from app.use_cases.whatsapp import ContactOperationsUseCase

router = APIRouter()


@router.get("/contatos/{session_id}")
async def list_contacts(
    session_id: str,
    contacts: ContactOperationsUseCase = Depends(get_contact_operations),
) -> list[dict[str, Any]]:
    return await contacts.list_contacts(session_id)


@router.get("/contato/{session_id}/{contact_id}")
async def get_contact(
    session_id: str,
    contact_id: str,
    contacts: ContactOperationsUseCase = Depends(get_contact_operations),
) -> dict[str, Any]:
    """Status do contato com `profilePicUrl` (null quando indisponível)."""
    return await contacts.get_contact(session_id, format_individual_jid(contact_id))

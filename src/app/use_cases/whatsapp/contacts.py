"""Use case de consulta de contatos de uma instância."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.use_cases.whatsapp._upstream import call_upstream

if TYPE_CHECKING:
    from app.sessions.manager import ConnectionManager

logger = logging.getLogger(__name__)


class ContactOperationsUseCase:
    """Lista contatos e detalha um contato (status + foto de perfil)."""

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    async def list_contacts(self, session_id: str) -> list[dict[str, Any]]:
        handle = self._manager.require_handle(session_id)
        return await call_upstream(
            "fetch_contacts",
            session_id,
            handle.fetch_contacts(),
            error_message="Erro ao buscar contatos.",
        )

    async def get_contact(self, session_id: str, contact_jid: str) -> dict[str, Any]:
        """Status do contato enriquecido com `profilePicUrl`.

        A foto é opcional: recusa do WhatsApp (privacidade, sem foto)
        resulta em `profilePicUrl: None`, não em erro.
        """
        handle = self._manager.require_handle(session_id)
        status = await call_upstream(
            "fetch_status",
            session_id,
            handle.fetch_status(contact_jid),
            error_message="Erro ao buscar informações do contato.",
        )

        try:
            picture_url = await handle.profile_picture_url(contact_jid)
        except Exception as exc:
            logger.info(
                "profile_picture_unavailable",
                extra={"session_id": session_id, "error_type": type(exc).__name__},
            )
            picture_url = None

        details: dict[str, Any] = dict(status or {})
        details["profilePicUrl"] = picture_url
        return details

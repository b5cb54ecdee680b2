"""Use case de operações de grupo de uma instância."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.use_cases.whatsapp._upstream import call_upstream
from utils.errors import UpstreamProtocolError

if TYPE_CHECKING:
    from app.sessions.manager import ConnectionManager

logger = logging.getLogger(__name__)

PARTICIPANT_NOT_ON_WHATSAPP = "O número não está registrado no WhatsApp."


class GroupOperationsUseCase:
    """Listagem, consulta, criação e adição de participantes em grupos."""

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    async def list_groups(self, session_id: str) -> dict[str, dict[str, Any]]:
        handle = self._manager.require_handle(session_id)
        return await call_upstream(
            "group_fetch_all_participating",
            session_id,
            handle.group_fetch_all_participating(),
            error_message="Erro ao buscar grupos.",
        )

    async def get_group(self, session_id: str, group_jid: str) -> dict[str, Any]:
        handle = self._manager.require_handle(session_id)
        return await call_upstream(
            "group_metadata",
            session_id,
            handle.group_metadata(group_jid),
            error_message="Erro ao buscar informações do grupo.",
        )

    async def create_group(
        self,
        session_id: str,
        subject: str,
        participant_jids: list[str],
    ) -> dict[str, Any]:
        handle = self._manager.require_handle(session_id)
        metadata = await call_upstream(
            "group_create",
            session_id,
            handle.group_create(subject, participant_jids),
            error_message="Erro ao criar grupo.",
        )
        logger.info(
            "group_created",
            extra={"session_id": session_id, "participants": len(participant_jids)},
        )
        return metadata

    async def add_participant(
        self,
        session_id: str,
        group_jid: str,
        participant_jid: str,
    ) -> None:
        """Adiciona participante após confirmar que o número usa WhatsApp.

        Raises:
            NotFoundError: Instância sem handle vivo
            UpstreamProtocolError: 400 se o número não existe no WhatsApp ou
                o grupo recusou a adição; 500 em falha da consulta
        """
        handle = self._manager.require_handle(session_id)

        lookup = await call_upstream(
            "on_whatsapp",
            session_id,
            handle.on_whatsapp(participant_jid),
            error_message="Erro ao adicionar participante ao grupo.",
        )
        if not lookup or not lookup[0].get("exists"):
            raise UpstreamProtocolError(PARTICIPANT_NOT_ON_WHATSAPP, status_code=400)

        await call_upstream(
            "group_participants_update",
            session_id,
            handle.group_participants_update(group_jid, [participant_jid], "add"),
            error_message="Não foi possível adicionar o participante ao grupo.",
            status_code=400,
        )
        logger.info("group_participant_added", extra={"session_id": session_id})

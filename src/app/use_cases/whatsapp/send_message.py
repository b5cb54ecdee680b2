"""Use case para envio de mensagens por uma instância conectada."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.use_cases.whatsapp._upstream import call_upstream

if TYPE_CHECKING:
    from app.sessions.manager import ConnectionManager

logger = logging.getLogger(__name__)


class SendMessageUseCase:
    """Envia conteúdo já montado para um JID já normalizado."""

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    async def execute(
        self,
        session_id: str,
        jid: str,
        content: dict[str, Any],
        *,
        kind: str = "text",
    ) -> dict[str, Any] | None:
        """Envia a mensagem.

        Raises:
            NotFoundError: Instância sem handle vivo (nada é enviado)
            UpstreamProtocolError: Falha do envio no WhatsApp
        """
        handle = self._manager.require_handle(session_id)
        result = await call_upstream(
            "send_message",
            session_id,
            handle.send_message(jid, content),
            error_message=f"Erro ao enviar mensagem ({kind}).",
        )
        logger.info(
            "message_sent",
            extra={
                "session_id": session_id,
                "kind": kind,
                "is_group": jid.endswith("@g.us"),
            },
        )
        return result

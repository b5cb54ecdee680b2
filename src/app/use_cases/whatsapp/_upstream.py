"""Tradução de falhas do cliente de protocolo para UpstreamProtocolError."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from utils.errors import UpstreamProtocolError

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_upstream(
    operation: str,
    session_id: str,
    awaitable: Awaitable[T],
    *,
    error_message: str,
    status_code: int = 500,
) -> T:
    """Executa a chamada ao handle; falhas viram UpstreamProtocolError.

    Args:
        operation: Nome da operação para logs (ex: "send_message")
        session_id: Instância dona do handle
        awaitable: Chamada ao handle
        error_message: Mensagem exposta ao cliente HTTP
        status_code: Status HTTP da falha (400 para recusas do destinatário)
    """
    try:
        return await awaitable
    except UpstreamProtocolError:
        raise
    except Exception as exc:
        logger.error(
            "upstream_operation_failed",
            extra={
                "operation": operation,
                "session_id": session_id,
                "error_type": type(exc).__name__,
            },
        )
        raise UpstreamProtocolError(
            error_message,
            status_code=status_code,
            detail=str(exc) or type(exc).__name__,
        ) from exc

"""Reconexão das instâncias conectadas no boot do processo."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from app.sessions.models import InstanceStatus
from utils.errors import ConnectionOpenError, ReconnectExhaustedError

if TYPE_CHECKING:
    from app.sessions.manager import ConnectionManager

logger = logging.getLogger(__name__)


async def reconnect_connected_sessions(
    manager: ConnectionManager,
    *,
    attempts: int,
    delay_seconds: float,
) -> dict[str, bool]:
    """Reconecta, uma por vez, as instâncias com status conectado.

    Cada instância tem até `attempts` tentativas com espera fixa entre
    elas; esgotadas, o status passa a desconectado. O contador de
    reconexão começa em zero, pois não é persistido.

    Args:
        manager: Gerenciador de conexões
        attempts: Tentativas por instância
        delay_seconds: Espera entre tentativas

    Returns:
        Mapa session_id → reconectou
    """
    session_ids = await manager.status_store.list_by_status_async(
        InstanceStatus.CONNECTED
    )
    logger.info("startup_reconnect_started", extra={"sessions": len(session_ids)})

    results: dict[str, bool] = {}
    for session_id in session_ids:
        results[session_id] = await _reconnect_one(
            manager, session_id, attempts=attempts, delay_seconds=delay_seconds
        )

    logger.info(
        "startup_reconnect_finished",
        extra={
            "sessions": len(results),
            "reconnected": sum(1 for ok in results.values() if ok),
        },
    )
    return results


async def _reconnect_one(
    manager: ConnectionManager,
    session_id: str,
    *,
    attempts: int,
    delay_seconds: float,
) -> bool:
    for attempt in range(1, attempts + 1):
        try:
            await manager.connect(session_id, want_qr=False, interactive=False)
        except (ConnectionOpenError, ReconnectExhaustedError) as exc:
            logger.warning(
                "startup_reconnect_attempt_failed",
                extra={
                    "session_id": session_id,
                    "attempt": attempt,
                    "max_attempts": attempts,
                    "error_type": type(exc).__name__,
                },
            )
            if attempt < attempts:
                await asyncio.sleep(delay_seconds)
            continue
        logger.info(
            "startup_reconnect_succeeded",
            extra={"session_id": session_id, "attempt": attempt},
        )
        return True

    await manager.mark_disconnected(session_id, trigger="startup_exhausted")
    return False

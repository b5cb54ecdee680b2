"""Módulo de instâncias WhatsApp.

Exporta modelos, eventos de ciclo de vida e o gerenciador de conexões.
"""

from app.sessions.events import (
    ConnectionClosed,
    ConnectionOpened,
    DisconnectReason,
    LifecycleEvent,
    QRChallenge,
    parse_connection_update,
)
from app.sessions.manager import NO_LIVE_HANDLE_MESSAGE, ConnectionManager
from app.sessions.models import InstanceRecord, InstanceStatus, SessionRuntime
from app.sessions.retry_tasks import RetryScheduler

__all__ = [
    "NO_LIVE_HANDLE_MESSAGE",
    "ConnectionClosed",
    "ConnectionManager",
    "ConnectionOpened",
    "DisconnectReason",
    "InstanceRecord",
    "InstanceStatus",
    "LifecycleEvent",
    "QRChallenge",
    "RetryScheduler",
    "SessionRuntime",
    "parse_connection_update",
]

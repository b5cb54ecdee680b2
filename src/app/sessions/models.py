"""Modelos de instância: status persistido e estado de runtime.

InstanceRecord espelha a linha da tabela de status; SessionRuntime é o
estado em memória de uma instância, pertencente exclusivamente ao
ConnectionManager.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from fsm import ConnectionState, FSMStateMachine, create_fsm

if TYPE_CHECKING:
    from app.protocols.whatsapp_client import WhatsAppConnectionProtocol


class InstanceStatus(StrEnum):
    """Status persistido na tabela whatsapp_instancias."""

    CONNECTED = "conectado"
    DISCONNECTED = "desconectado"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class InstanceRecord:
    """Linha do store de status.

    Atributos:
        session_id: Identificador externo da instância
        status: Último status conhecido
        last_updated: Momento da última escrita (None se nunca atualizado)
    """

    session_id: str
    status: InstanceStatus
    last_updated: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serializa para resposta HTTP."""
        return {
            "session_id": self.session_id,
            "status": self.status.value,
            "dt_ultima_atualizacao": (
                self.last_updated.isoformat() if self.last_updated else None
            ),
        }


@dataclass
class SessionRuntime:
    """Estado em memória de uma instância.

    Atributos:
        session_id: Identificador da instância
        fsm: Máquina de estados de conexão
        handle: Handle vivo (None entre tentativas ou após queda)
        attempt: Contador de tentativas de conexão; eventos de handles
            substituídos carregam um attempt antigo e são descartados
        want_qr: Se a tentativa atual deve expor QR Code
        qr_code: QR Code codificado (data URL) da tentativa atual
        qr_recorded: Se a tentativa atual já registrou um QR Code
        qr_ready: Sinaliza QR disponível ou conexão aberta
        reconnect_attempts: Reconexões automáticas consecutivas
        retry_task: Reconexão agendada, se houver
    """

    session_id: str
    fsm: FSMStateMachine
    handle: WhatsAppConnectionProtocol | None = None
    attempt: int = 0
    want_qr: bool = False
    qr_code: str | None = None
    qr_recorded: bool = False
    qr_ready: asyncio.Event = field(default_factory=asyncio.Event)
    reconnect_attempts: int = 0
    retry_task: asyncio.Task[None] | None = None

    @classmethod
    def new(cls, session_id: str) -> SessionRuntime:
        """Cria runtime em UNREGISTERED."""
        return cls(session_id=session_id, fsm=create_fsm(session_id))

    @property
    def state(self) -> ConnectionState:
        """Estado atual da FSM."""
        return self.fsm.current_state

    def begin_attempt(self, *, want_qr: bool) -> int:
        """Inicia nova tentativa de conexão e descarta o QR da anterior."""
        self.attempt += 1
        self.want_qr = want_qr
        self.qr_code = None
        self.qr_recorded = False
        self.qr_ready = asyncio.Event()
        return self.attempt

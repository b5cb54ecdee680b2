"""Eventos de ciclo de vida emitidos por um handle de conexão.

O handle emite três tipos de evento: desafio de QR, conexão aberta e
conexão fechada (com motivo). `parse_connection_update` converte o
payload `connection.update` do cliente multi-device nesses eventos.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class DisconnectReason(IntEnum):
    """Códigos de desconexão do protocolo multi-device."""

    CONNECTION_CLOSED = 428
    CONNECTION_LOST = 408
    CONNECTION_REPLACED = 440
    LOGGED_OUT = 401
    BAD_SESSION = 500
    RESTART_REQUIRED = 515
    MULTIDEVICE_MISMATCH = 411
    FORBIDDEN = 403
    UNAVAILABLE_SERVICE = 503


@dataclass(frozen=True, slots=True)
class QRChallenge:
    """Novo QR Code de pareamento (string bruta, ainda não codificada)."""

    qr: str

    @property
    def name(self) -> str:
        return "qr_challenge"


@dataclass(frozen=True, slots=True)
class ConnectionOpened:
    """Conexão aberta com o WhatsApp."""

    @property
    def name(self) -> str:
        return "opened"


@dataclass(frozen=True, slots=True)
class ConnectionClosed:
    """Conexão encerrada.

    Atributos:
        status_code: Código de desconexão informado pelo servidor (se houver)
        reason: Descrição curta, sem PII
    """

    status_code: int | None = None
    reason: str = ""

    @property
    def name(self) -> str:
        return "closed"

    @property
    def is_logout(self) -> bool:
        """Logout autoritativo: o servidor invalidou a sessão."""
        return self.status_code == DisconnectReason.LOGGED_OUT


LifecycleEvent = QRChallenge | ConnectionOpened | ConnectionClosed


def parse_connection_update(update: dict[str, Any]) -> list[LifecycleEvent]:
    """Converte um payload connection.update em eventos de ciclo de vida.

    Formato esperado:
        {"qr": "...", "connection": "open"|"close"|"connecting",
         "lastDisconnect": {"error": {"output": {"statusCode": 401}}}}

    Args:
        update: Payload emitido pelo cliente

    Returns:
        Lista de eventos na ordem QR → abertura/fechamento
    """
    events: list[LifecycleEvent] = []

    qr = update.get("qr")
    if isinstance(qr, str) and qr:
        events.append(QRChallenge(qr=qr))

    connection = update.get("connection")
    if connection == "open":
        events.append(ConnectionOpened())
    elif connection == "close":
        events.append(_parse_close(update.get("lastDisconnect")))

    return events


def _parse_close(last_disconnect: Any) -> ConnectionClosed:
    if not isinstance(last_disconnect, dict):
        return ConnectionClosed()
    error = last_disconnect.get("error")
    if not isinstance(error, dict):
        return ConnectionClosed()
    output = error.get("output")
    status_code = output.get("statusCode") if isinstance(output, dict) else None
    message = error.get("message")
    return ConnectionClosed(
        status_code=status_code if isinstance(status_code, int) else None,
        reason=message if isinstance(message, str) else "",
    )

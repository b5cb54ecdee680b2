"""Protocolos do cliente de protocolo WhatsApp (multi-device).

O core não implementa o protocolo: recebe uma factory que carrega
credenciais, descobre a versão atual e abre conexões. Cada conexão
emite eventos de ciclo de vida (ver app.sessions.events) pelo callback
registrado em `on_lifecycle_event`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.sessions.events import LifecycleEvent

LifecycleCallback = Callable[["LifecycleEvent"], Awaitable[None]]


class WhatsAppConnectionProtocol(Protocol):
    """Handle de uma conexão viva.

    Métodos levantam exceção em falha do protocolo; o core traduz
    para UpstreamProtocolError.
    """

    def on_lifecycle_event(self, callback: LifecycleCallback) -> None: ...

    async def send_message(
        self, jid: str, content: dict[str, Any]
    ) -> dict[str, Any] | None: ...

    async def group_fetch_all_participating(self) -> dict[str, dict[str, Any]]: ...

    async def group_metadata(self, jid: str) -> dict[str, Any]: ...

    async def group_create(
        self, subject: str, participants: list[str]
    ) -> dict[str, Any]: ...

    async def group_participants_update(
        self, jid: str, participants: list[str], action: str
    ) -> list[dict[str, Any]]: ...

    async def on_whatsapp(self, jid: str) -> list[dict[str, Any]]: ...

    async def fetch_contacts(self) -> list[dict[str, Any]]: ...

    async def fetch_status(self, jid: str) -> dict[str, Any] | None: ...

    async def profile_picture_url(self, jid: str) -> str | None: ...

    async def close(self) -> None: ...


class WhatsAppClientFactory(ABC):
    """Factory de conexões do protocolo.

    `load_credentials` também é responsável por persistir atualizações
    de credenciais no escopo enquanto a conexão estiver viva.
    """

    @abstractmethod
    async def load_credentials(self, scope_path: Path) -> Any:
        """Carrega (ou inicializa) credenciais a partir do escopo."""

    @abstractmethod
    async def fetch_latest_version(self) -> Any:
        """Descobre a versão atual do protocolo."""

    @abstractmethod
    async def create_connection(
        self,
        session_id: str,
        credentials: Any,
        version: Any,
        browser: tuple[str, str, str],
    ) -> WhatsAppConnectionProtocol:
        """Abre conexão; eventos chegam via on_lifecycle_event."""

"""Protocolo de domínio para persistência de status das instâncias."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.sessions.models import InstanceRecord, InstanceStatus


class AsyncStatusStoreProtocol(ABC):
    """Contrato assíncrono para a tabela de status das instâncias.

    Uma linha por session_id. Escritas são por instância; não há
    transação entre instâncias.
    """

    @abstractmethod
    async def create_if_absent_async(
        self,
        session_id: str,
        status: InstanceStatus,
    ) -> bool:
        """Insere a linha se não existir. Retorna True se inseriu."""

    @abstractmethod
    async def set_status_async(self, session_id: str, status: InstanceStatus) -> None:
        """Grava status e carimba o horário da atualização."""

    @abstractmethod
    async def get_async(self, session_id: str) -> InstanceRecord | None: ...

    @abstractmethod
    async def list_by_status_async(self, status: InstanceStatus) -> list[str]:
        """Lista session_ids com o status informado."""

    @abstractmethod
    async def ping_async(self) -> None:
        """Verifica disponibilidade do backend (levanta em falha)."""

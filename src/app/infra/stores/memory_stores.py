"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

from datetime import UTC, datetime

from app.protocols.status_store import AsyncStatusStoreProtocol
from app.sessions.models import InstanceRecord, InstanceStatus


class MemoryStatusStore(AsyncStatusStoreProtocol):
    """Store de status em memória — apenas para dev/test."""

    def __init__(self) -> None:
        self._rows: dict[str, InstanceRecord] = {}
        self.writes: list[tuple[str, InstanceStatus]] = []

    async def create_if_absent_async(
        self,
        session_id: str,
        status: InstanceStatus,
    ) -> bool:
        """Insere a linha apenas se ainda não existir."""
        if session_id in self._rows:
            return False
        self._rows[session_id] = InstanceRecord(
            session_id=session_id,
            status=status,
            last_updated=datetime.now(UTC),
        )
        return True

    async def set_status_async(self, session_id: str, status: InstanceStatus) -> None:
        """Atualiza status; linha inexistente é ignorada, como no UPDATE SQL."""
        self.writes.append((session_id, status))
        if session_id not in self._rows:
            return
        self._rows[session_id] = InstanceRecord(
            session_id=session_id,
            status=status,
            last_updated=datetime.now(UTC),
        )

    async def get_async(self, session_id: str) -> InstanceRecord | None:
        return self._rows.get(session_id)

    async def list_by_status_async(self, status: InstanceStatus) -> list[str]:
        return sorted(sid for sid, row in self._rows.items() if row.status is status)

    async def ping_async(self) -> None:
        return None

"""Postgres Status Store — tabela whatsapp_instancias via SQLAlchemy async.

Todas as consultas são parametrizadas. A criação usa
INSERT ... ON CONFLICT (session_id) DO NOTHING para ser idempotente.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select, text, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError

from app.infra.stores.models import WhatsAppInstanceModel
from app.protocols.status_store import AsyncStatusStoreProtocol
from app.sessions.models import InstanceRecord, InstanceStatus
from utils.errors import StatusStoreUnavailableError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


def _to_record(row: WhatsAppInstanceModel) -> InstanceRecord:
    return InstanceRecord(
        session_id=row.session_id,
        status=InstanceStatus(row.status),
        last_updated=row.last_updated,
    )


class PostgresStatusStore(AsyncStatusStoreProtocol):
    """Store de status em PostgreSQL.

    Args:
        session_factory: async_sessionmaker ligado ao engine asyncpg
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_if_absent_async(
        self,
        session_id: str,
        status: InstanceStatus,
    ) -> bool:
        stmt = (
            insert(WhatsAppInstanceModel)
            .values(session_id=session_id, status=status.value)
            .on_conflict_do_nothing(index_elements=["session_id"])
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            raise self._unavailable("create_if_absent", session_id, exc) from exc
        inserted = bool(result.rowcount)
        logger.debug(
            "instance_status_upserted",
            extra={"session_id": session_id, "inserted": inserted},
        )
        return inserted

    async def set_status_async(self, session_id: str, status: InstanceStatus) -> None:
        stmt = (
            update(WhatsAppInstanceModel)
            .where(WhatsAppInstanceModel.session_id == session_id)
            .values(status=status.value, last_updated=datetime.now(UTC))
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            raise self._unavailable("set_status", session_id, exc) from exc
        if not result.rowcount:
            logger.warning(
                "instance_status_row_missing",
                extra={"session_id": session_id, "status": status.value},
            )
            return
        logger.info(
            "instance_status_written",
            extra={"session_id": session_id, "status": status.value},
        )

    async def get_async(self, session_id: str) -> InstanceRecord | None:
        stmt = select(WhatsAppInstanceModel).where(
            WhatsAppInstanceModel.session_id == session_id
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                row = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise self._unavailable("get", session_id, exc) from exc
        return _to_record(row) if row is not None else None

    async def list_by_status_async(self, status: InstanceStatus) -> list[str]:
        stmt = (
            select(WhatsAppInstanceModel.session_id)
            .where(WhatsAppInstanceModel.status == status.value)
            .order_by(WhatsAppInstanceModel.session_id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise self._unavailable("list_by_status", None, exc) from exc

    async def ping_async(self) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise self._unavailable("ping", None, exc) from exc

    @staticmethod
    def _unavailable(
        operation: str,
        session_id: str | None,
        exc: SQLAlchemyError,
    ) -> StatusStoreUnavailableError:
        logger.error(
            "status_store_error",
            extra={
                "operation": operation,
                "session_id": session_id,
                "error_type": type(exc).__name__,
            },
        )
        return StatusStoreUnavailableError(f"Falha no store de status ({operation})")

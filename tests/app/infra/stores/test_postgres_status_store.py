"""
Testes do PostgresStatusStore com sessão SQLAlchemy mockada.

As instruções são compiladas com o dialeto PostgreSQL para verificar o
SQL gerado sem banco real.
"""

import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from app.infra.stores import PostgresStatusStore, WhatsAppInstanceModel
from app.sessions import InstanceStatus
from utils.errors import StatusStoreUnavailableError


def _session_factory(result=None, *, error: Exception | None = None):
    session = MagicMock()
    session.execute = AsyncMock(return_value=result, side_effect=error)
    session.commit = AsyncMock()
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory, session


def _compiled_sql(session) -> str:
    stmt = session.execute.await_args.args[0]
    return str(stmt.compile(dialect=postgresql.dialect()))


class TestPostgresStatusStoreWrites:
    """INSERT idempotente e UPDATE de status."""

    @pytest.mark.asyncio
    async def test_create_if_absent_uses_on_conflict_do_nothing(self) -> None:
        factory, session = _session_factory(MagicMock(rowcount=1))
        store = PostgresStatusStore(factory)

        inserted = await store.create_if_absent_async("biz1", InstanceStatus.DISCONNECTED)

        assert inserted is True
        sql = _compiled_sql(session)
        assert "INSERT INTO whatsapp_instancias" in sql
        assert "ON CONFLICT (session_id) DO NOTHING" in sql
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_if_absent_existing_row(self) -> None:
        factory, _ = _session_factory(MagicMock(rowcount=0))

        assert not await PostgresStatusStore(factory).create_if_absent_async(
            "biz1", InstanceStatus.DISCONNECTED
        )

    @pytest.mark.asyncio
    async def test_set_status_updates_timestamp(self) -> None:
        factory, session = _session_factory(MagicMock(rowcount=1))

        await PostgresStatusStore(factory).set_status_async("biz1", InstanceStatus.CONNECTED)

        sql = _compiled_sql(session)
        assert sql.startswith("UPDATE whatsapp_instancias")
        assert "dt_ultima_atualizacao" in sql
        params = session.execute.await_args.args[0].compile().params
        assert params["status"] == "conectado"
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_set_status_missing_row_only_warns(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        factory, _ = _session_factory(MagicMock(rowcount=0))

        with caplog.at_level(logging.WARNING):
            await PostgresStatusStore(factory).set_status_async("ghost", InstanceStatus.CONNECTED)

        assert any(r.getMessage() == "instance_status_row_missing" for r in caplog.records)


class TestPostgresStatusStoreReads:
    """Consultas por session_id e por status."""

    @pytest.mark.asyncio
    async def test_get_maps_row_to_record(self) -> None:
        updated = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
        row = WhatsAppInstanceModel(
            session_id="biz1", status="conectado", last_updated=updated
        )
        result = MagicMock()
        result.scalar_one_or_none.return_value = row
        factory, _ = _session_factory(result)

        record = await PostgresStatusStore(factory).get_async("biz1")

        assert record is not None
        assert record.status is InstanceStatus.CONNECTED
        assert record.last_updated == updated

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self) -> None:
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        factory, _ = _session_factory(result)

        assert await PostgresStatusStore(factory).get_async("ghost") is None

    @pytest.mark.asyncio
    async def test_list_by_status_orders_by_session_id(self) -> None:
        result = MagicMock()
        result.scalars.return_value.all.return_value = ["a", "b"]
        factory, session = _session_factory(result)

        ids = await PostgresStatusStore(factory).list_by_status_async(InstanceStatus.CONNECTED)

        assert ids == ["a", "b"]
        assert "ORDER BY whatsapp_instancias.session_id" in _compiled_sql(session)


class TestPostgresStatusStoreErrors:
    """Falhas do driver viram StatusStoreUnavailableError."""

    @pytest.mark.asyncio
    async def test_database_error_is_wrapped(self) -> None:
        error = OperationalError("SELECT 1", {}, Exception("conexão recusada"))
        factory, _ = _session_factory(error=error)
        store = PostgresStatusStore(factory)

        with pytest.raises(StatusStoreUnavailableError):
            await store.ping_async()
        with pytest.raises(StatusStoreUnavailableError):
            await store.set_status_async("biz1", InstanceStatus.CONNECTED)
        with pytest.raises(StatusStoreUnavailableError):
            await store.list_by_status_async(InstanceStatus.CONNECTED)

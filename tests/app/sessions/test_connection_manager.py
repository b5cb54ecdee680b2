"""
Testes do ConnectionManager.

Cenários de ponta a ponta com conexão fake: pareamento por QR,
reconexão automática até o teto, logout, substituição de handle,
eventos obsoletos e shutdown.
"""

import asyncio
import logging
from pathlib import Path

import pytest

from app.infra.stores.memory_stores import MemoryStatusStore
from app.sessions import (
    ConnectionClosed,
    ConnectionOpened,
    DisconnectReason,
    InstanceStatus,
    QRChallenge,
)
from fsm import ConnectionState
from tests.fakes.fake_whatsapp_client import (
    FakeClientFactory,
    UnwritableCredentialStore,
    make_manager,
)
from utils.errors import ConnectionOpenError, NotFoundError, ValidationError

CONNECTED = InstanceStatus.CONNECTED
DISCONNECTED = InstanceStatus.DISCONNECTED


class GatedQREncoder:
    """Encoder que só conclui quando o teste libera o portão."""

    def __init__(self) -> None:
        self.gate = asyncio.Event()

    async def encode(self, raw: str) -> str:
        await self.gate.wait()
        return f"data:image/png;base64,{raw}"


class FailingOpenStatusStore(MemoryStatusStore):
    """Store que falha ao gravar conectado."""

    async def set_status_async(self, session_id: str, status: InstanceStatus) -> None:
        if status is InstanceStatus.CONNECTED:
            raise RuntimeError("store fora do ar")
        await super().set_status_async(session_id, status)


# ──────────────────────────────────────────────────────────────
# Cadastro
# ──────────────────────────────────────────────────────────────


class TestCreate:
    """create() registra a instância como desconectada."""

    @pytest.mark.asyncio
    async def test_create_is_idempotent(self, tmp_path: Path) -> None:
        manager, store, _ = make_manager(tmp_path)

        first = await manager.create("biz1")
        second = await manager.create("biz1")

        assert first.status is DISCONNECTED
        assert second.session_id == "biz1"
        assert await store.list_by_status_async(DISCONNECTED) == ["biz1"]
        assert manager.get_state("biz1") is ConnectionState.DISCONNECTED
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_empty_session_id_rejected(self, tmp_path: Path) -> None:
        manager, _, factory = make_manager(tmp_path)

        with pytest.raises(ValidationError):
            await manager.create("  ")
        with pytest.raises(ValidationError):
            await manager.connect("")

        assert factory.create_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("session_id", ["a/b", "../fora", ".", ".."])
    async def test_path_like_session_id_rejected(
        self, tmp_path: Path, session_id: str
    ) -> None:
        manager, store, factory = make_manager(tmp_path)

        with pytest.raises(ValidationError):
            await manager.create(session_id)
        with pytest.raises(ValidationError):
            await manager.connect(session_id)

        assert await store.list_by_status_async(DISCONNECTED) == []
        assert factory.create_calls == []

    @pytest.mark.asyncio
    async def test_unknown_session_lookups(self, tmp_path: Path) -> None:
        manager, _, _ = make_manager(tmp_path)

        assert manager.get_state("nope") is ConnectionState.UNREGISTERED
        assert manager.get_qr_code("nope") is None
        assert manager.get_reconnect_attempts("nope") == 0
        with pytest.raises(NotFoundError):
            manager.require_handle("nope")
        with pytest.raises(NotFoundError):
            await manager.get_status("nope")


# ──────────────────────────────────────────────────────────────
# Pareamento e abertura
# ──────────────────────────────────────────────────────────────


class TestPairing:
    """Fluxo QR → aberto."""

    @pytest.mark.asyncio
    async def test_qr_then_open_marks_connected(self, tmp_path: Path) -> None:
        manager, store, factory = make_manager(tmp_path)
        await manager.create("biz1")

        handle = await manager.connect("biz1", want_qr=True)
        conn = factory.connections[0]
        assert handle is conn
        assert conn.browser == ("Chrome", "Chrome 110", "Windows")
        assert factory.loaded_scopes == [tmp_path / "biz1"]
        assert (tmp_path / "biz1").is_dir()
        assert manager.get_state("biz1") is ConnectionState.CONNECTING

        await conn.emit(QRChallenge(qr="2@abc"))
        assert manager.get_qr_code("biz1") == "data:image/png;base64,2@abc"
        assert manager.get_state("biz1") is ConnectionState.AWAITING_QR

        await conn.emit(ConnectionOpened())
        assert manager.get_qr_code("biz1") is None
        assert manager.get_state("biz1") is ConnectionState.CONNECTED
        assert manager.require_handle("biz1") is conn
        assert store.writes == [("biz1", CONNECTED)]
        record = await manager.get_status("biz1")
        assert record.status is CONNECTED

    @pytest.mark.asyncio
    async def test_only_first_qr_of_attempt_is_cached(self, tmp_path: Path) -> None:
        manager, _, factory = make_manager(tmp_path)
        await manager.connect("biz1", want_qr=True)
        conn = factory.connections[0]

        await conn.emit(QRChallenge(qr="primeiro"))
        await conn.emit(QRChallenge(qr="segundo"))

        assert manager.get_qr_code("biz1") == "data:image/png;base64,primeiro"

    @pytest.mark.asyncio
    async def test_qr_ignored_without_want_qr(self, tmp_path: Path) -> None:
        manager, _, factory = make_manager(tmp_path)
        await manager.connect("biz1")

        await factory.connections[0].emit(QRChallenge(qr="abc"))

        assert manager.get_qr_code("biz1") is None
        assert manager.get_state("biz1") is ConnectionState.CONNECTING

    @pytest.mark.asyncio
    async def test_qr_discarded_when_opened_during_encoding(self, tmp_path: Path) -> None:
        encoder = GatedQREncoder()
        manager, _, factory = make_manager(tmp_path, qr_encoder=encoder)
        await manager.connect("biz1", want_qr=True)
        conn = factory.connections[0]

        pending = asyncio.create_task(conn.emit(QRChallenge(qr="abc")))
        await asyncio.sleep(0)
        await conn.emit(ConnectionOpened())
        encoder.gate.set()
        await pending

        assert manager.get_qr_code("biz1") is None
        assert manager.get_state("biz1") is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_connect_failure_leaves_registry_untouched(self, tmp_path: Path) -> None:
        manager, store, factory = make_manager(
            tmp_path, factory=FakeClientFactory(open_failures=1)
        )
        await manager.create("biz1")

        with pytest.raises(ConnectionOpenError):
            await manager.connect("biz1")

        assert manager.get_handle("biz1") is None
        assert manager.get_state("biz1") is ConnectionState.DISCONNECTED
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_credential_scope_failure_fails_only_the_attempt(
        self, tmp_path: Path
    ) -> None:
        credentials = UnwritableCredentialStore(tmp_path, "biz1")
        manager, store, factory = make_manager(tmp_path, credential_store=credentials)
        await manager.create("biz1")

        with pytest.raises(ConnectionOpenError) as exc_info:
            await manager.connect("biz1")

        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert factory.create_calls == []
        assert manager.get_handle("biz1") is None
        assert manager.get_state("biz1") is ConnectionState.DISCONNECTED
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_callback_failure_is_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        manager, _, factory = make_manager(tmp_path, status_store=FailingOpenStatusStore())
        await manager.connect("biz1")

        with caplog.at_level(logging.ERROR):
            await factory.connections[0].emit(ConnectionOpened())

        assert any(r.getMessage() == "lifecycle_event_failed" for r in caplog.records)


# ──────────────────────────────────────────────────────────────
# connect_for_qr
# ──────────────────────────────────────────────────────────────


class TestConnectForQR:
    """Janela de espera do QR em /conectar."""

    @pytest.mark.asyncio
    async def test_returns_qr_emitted_within_window(self, tmp_path: Path) -> None:
        factory = FakeClientFactory(auto_events=[QRChallenge(qr="abc")])
        manager, _, _ = make_manager(tmp_path, factory=factory)

        qr = await manager.connect_for_qr("biz1")

        assert qr == "data:image/png;base64,abc"

    @pytest.mark.asyncio
    async def test_padded_session_id_is_normalized(self, tmp_path: Path) -> None:
        factory = FakeClientFactory(auto_events=[QRChallenge(qr="abc")])
        manager, _, _ = make_manager(tmp_path, factory=factory)

        qr = await manager.connect_for_qr("  biz1 ")

        assert qr == "data:image/png;base64,abc"
        assert factory.create_calls == ["biz1"]
        assert manager.get_qr_code("biz1") == qr

    @pytest.mark.asyncio
    async def test_returns_none_when_already_paired(self, tmp_path: Path) -> None:
        factory = FakeClientFactory(auto_events=[ConnectionOpened()])
        manager, _, _ = make_manager(tmp_path, factory=factory)

        assert await manager.connect_for_qr("biz1") is None
        assert manager.get_state("biz1") is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_returns_none_after_window_elapses(self, tmp_path: Path) -> None:
        manager, _, _ = make_manager(tmp_path, qr_wait_seconds=0.01)

        assert await manager.connect_for_qr("biz1") is None
        assert manager.get_state("biz1") is ConnectionState.CONNECTING


# ──────────────────────────────────────────────────────────────
# Reconexão automática
# ──────────────────────────────────────────────────────────────


async def _open_and_drop(manager, factory, session_id: str, drops: int) -> None:
    """Abre a instância e derruba a conexão vigente `drops` vezes."""
    await manager.connect(session_id)
    await factory.connections_for(session_id)[-1].emit(ConnectionOpened())
    for _ in range(drops):
        current = factory.connections_for(session_id)[-1]
        await current.emit(ConnectionClosed(status_code=DisconnectReason.CONNECTION_LOST))
        assert await manager.wait_for_pending_retries(2.0)


class TestReconnect:
    """Contador de reconexão e teto de tentativas."""

    @pytest.mark.asyncio
    async def test_transient_close_schedules_retry_without_status_write(
        self, tmp_path: Path
    ) -> None:
        manager, store, factory = make_manager(tmp_path, reconnect_delay_seconds=10.0)
        await manager.create("biz2")
        await manager.connect("biz2")
        conn = factory.connections[0]
        await conn.emit(ConnectionOpened())

        await conn.emit(ConnectionClosed(status_code=DisconnectReason.CONNECTION_LOST))

        assert manager.get_reconnect_attempts("biz2") == 1
        assert manager.get_state("biz2") is ConnectionState.CONNECTING
        assert manager.get_handle("biz2") is None
        assert manager.pending_retries == 1
        assert store.writes == [("biz2", CONNECTED)]

        await manager.shutdown()
        assert manager.pending_retries == 0

    @pytest.mark.asyncio
    async def test_reopen_resets_counter(self, tmp_path: Path) -> None:
        manager, _, factory = make_manager(tmp_path)
        await _open_and_drop(manager, factory, "biz2", drops=2)
        assert manager.get_reconnect_attempts("biz2") == 2

        await factory.connections[-1].emit(ConnectionOpened())

        assert manager.get_reconnect_attempts("biz2") == 0
        assert manager.get_state("biz2") is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_five_drops_exhaust_and_mark_disconnected(self, tmp_path: Path) -> None:
        manager, store, factory = make_manager(tmp_path)
        await manager.create("biz2")

        await _open_and_drop(manager, factory, "biz2", drops=5)

        assert len(factory.connections) == 5
        assert manager.get_state("biz2") is ConnectionState.DISCONNECTED
        assert manager.get_handle("biz2") is None
        assert store.writes == [("biz2", CONNECTED), ("biz2", DISCONNECTED)]
        record = await manager.get_status("biz2")
        assert record.status is DISCONNECTED

    @pytest.mark.asyncio
    async def test_failed_reopen_counts_as_drop(self, tmp_path: Path) -> None:
        manager, store, factory = make_manager(tmp_path)
        await manager.create("biz2")
        await manager.connect("biz2")
        await factory.connections[0].emit(ConnectionOpened())
        factory.open_failures = 10

        await factory.connections[0].emit(ConnectionClosed())
        assert await manager.wait_for_pending_retries(2.0)

        assert len(factory.create_calls) == 5
        assert manager.get_state("biz2") is ConnectionState.DISCONNECTED
        assert store.writes[-1] == ("biz2", DISCONNECTED)

    @pytest.mark.asyncio
    async def test_credential_failure_during_retry_still_exhausts(
        self, tmp_path: Path
    ) -> None:
        credentials = UnwritableCredentialStore(tmp_path)
        manager, store, factory = make_manager(tmp_path, credential_store=credentials)
        await manager.create("biz2")
        await manager.connect("biz2")
        await factory.connections[0].emit(ConnectionOpened())
        credentials.failing.add("biz2")

        await factory.connections[0].emit(ConnectionClosed())
        assert await manager.wait_for_pending_retries(2.0)

        assert factory.create_calls == ["biz2"]
        assert manager.pending_retries == 0
        assert manager.get_state("biz2") is ConnectionState.DISCONNECTED
        assert store.writes == [("biz2", CONNECTED), ("biz2", DISCONNECTED)]

    @pytest.mark.asyncio
    async def test_operator_connect_resets_counter_after_exhaustion(
        self, tmp_path: Path
    ) -> None:
        manager, _, factory = make_manager(tmp_path)
        await _open_and_drop(manager, factory, "biz2", drops=5)
        assert manager.get_state("biz2") is ConnectionState.DISCONNECTED

        handle = await manager.connect("biz2")

        assert manager.get_reconnect_attempts("biz2") == 0
        assert manager.require_handle("biz2") is handle
        assert manager.get_state("biz2") is ConnectionState.CONNECTING

    @pytest.mark.asyncio
    async def test_logout_removes_credentials_without_retry(self, tmp_path: Path) -> None:
        manager, store, factory = make_manager(tmp_path)
        await manager.create("biz3")
        await manager.connect("biz3")
        conn = factory.connections[0]
        await conn.emit(ConnectionOpened())
        assert (tmp_path / "biz3").is_dir()

        await conn.emit(ConnectionClosed(status_code=DisconnectReason.LOGGED_OUT))

        assert manager.pending_retries == 0
        assert len(factory.connections) == 1
        assert manager.get_state("biz3") is ConnectionState.UNREGISTERED
        assert manager.get_handle("biz3") is None
        assert not (tmp_path / "biz3").exists()
        assert store.writes == [("biz3", CONNECTED), ("biz3", DISCONNECTED)]

    @pytest.mark.asyncio
    async def test_mark_disconnected_writes_status(self, tmp_path: Path) -> None:
        manager, store, factory = make_manager(tmp_path)
        await manager.create("biz1")
        await manager.connect("biz1")

        await manager.mark_disconnected("biz1", trigger="manual")

        assert factory.connections[0].closed
        assert manager.get_handle("biz1") is None
        assert store.writes == [("biz1", DISCONNECTED)]

    @pytest.mark.asyncio
    async def test_disconnect_log_carries_recent_transitions(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        manager, _, _ = make_manager(tmp_path)
        await manager.create("biz1")
        await manager.connect("biz1")

        with caplog.at_level(logging.WARNING):
            await manager.mark_disconnected("biz1", trigger="manual")

        record = next(
            r for r in caplog.records if r.getMessage() == "instance_marked_disconnected"
        )
        assert [t["trigger"] for t in record.transitions] == ["create", "connect", "manual"]
        assert record.transitions[-1]["to_state"] == "DISCONNECTED"


# ──────────────────────────────────────────────────────────────
# Substituição de handle e eventos obsoletos
# ──────────────────────────────────────────────────────────────


class TestSupersede:
    """Um connect novo substitui o handle e descarta eventos antigos."""

    @pytest.mark.asyncio
    async def test_new_connect_closes_previous_handle(self, tmp_path: Path) -> None:
        manager, _, factory = make_manager(tmp_path)

        first = await manager.connect("biz1")
        second = await manager.connect("biz1")

        assert first is not second
        assert factory.connections[0].closed
        assert manager.require_handle("biz1") is second

    @pytest.mark.asyncio
    async def test_events_from_superseded_handle_are_ignored(self, tmp_path: Path) -> None:
        manager, store, factory = make_manager(tmp_path)
        await manager.connect("biz1")
        await manager.connect("biz1")
        old, new = factory.connections

        await old.emit(ConnectionClosed(status_code=DisconnectReason.CONNECTION_LOST))
        await old.emit(ConnectionOpened())

        assert manager.pending_retries == 0
        assert manager.get_reconnect_attempts("biz1") == 0
        assert manager.get_state("biz1") is ConnectionState.CONNECTING
        assert manager.require_handle("biz1") is new
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_event_for_unknown_session_is_ignored(self, tmp_path: Path) -> None:
        manager, store, _ = make_manager(tmp_path)

        await manager.handle_lifecycle_event("ghost", ConnectionOpened())

        assert manager.get_runtime("ghost") is None
        assert store.writes == []


# ──────────────────────────────────────────────────────────────
# Shutdown
# ──────────────────────────────────────────────────────────────


class TestShutdown:
    """shutdown() fecha handles sem alterar o status persistido."""

    @pytest.mark.asyncio
    async def test_shutdown_closes_handles_and_keeps_status(self, tmp_path: Path) -> None:
        manager, store, factory = make_manager(tmp_path)
        await manager.create("biz1")
        await manager.connect("biz1")
        conn = factory.connections[0]
        await conn.emit(ConnectionOpened())

        await manager.shutdown()

        assert conn.closed
        assert manager.get_handle("biz1") is None
        record = await manager.get_status("biz1")
        assert record.status is CONNECTED

        # Evento tardio do handle fechado não agenda reconexão
        await conn.emit(ConnectionClosed())
        assert manager.pending_retries == 0

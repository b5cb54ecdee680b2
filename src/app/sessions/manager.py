"""Gerenciador de conexões das instâncias WhatsApp.

Mapeia session_id para o handle vivo, mantém o cache de QR Code e os
contadores de reconexão, dirige a FSM de conexão e sincroniza o store
de status a cada abertura/queda.

Todo o estado por instância vive em `SessionRuntime`, dentro de um
único dicionário deste objeto. Mutações acontecem sempre no event loop
e nunca atravessam um `await` no meio de uma transição.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from app.sessions.events import (
    ConnectionClosed,
    ConnectionOpened,
    LifecycleEvent,
    QRChallenge,
)
from app.sessions.manager_recovery import reconnect_connected_sessions
from app.sessions.models import InstanceRecord, InstanceStatus, SessionRuntime
from app.sessions.retry_tasks import RetryScheduler
from config.settings import WhatsAppSettings
from fsm import ConnectionState
from utils.errors import (
    ConnectionOpenError,
    NotFoundError,
    ReconnectExhaustedError,
    ValidationError,
)

if TYPE_CHECKING:
    from app.protocols import (
        AsyncStatusStoreProtocol,
        CredentialStoreProtocol,
        LifecycleCallback,
        QREncoderProtocol,
        WhatsAppClientFactory,
        WhatsAppConnectionProtocol,
    )

logger = logging.getLogger(__name__)

NO_LIVE_HANDLE_MESSAGE = "Instância não encontrada ou não conectada."

# Transições recentes anexadas aos logs de desconexão
LOGGED_TRANSITIONS = 10


def _require_session_id(session_id: str | None) -> str:
    value = (session_id or "").strip()
    if not value:
        raise ValidationError("O identificador da instância é obrigatório.")
    # Vira nome de diretório de credenciais: um único segmento de caminho
    if PurePath(value).name != value or value == "..":
        raise ValidationError("Identificador de instância inválido.")
    return value


class ConnectionManager:
    """Dono do registro de handles, do cache de QR e dos contadores.

    A camada HTTP só lê handles (`require_handle`); apenas este objeto
    registra, substitui ou remove handles.
    """

    __slots__ = (
        "_client_factory",
        "_credential_store",
        "_qr_encoder",
        "_retries",
        "_runtimes",
        "_settings",
        "_status_store",
    )

    def __init__(
        self,
        *,
        status_store: AsyncStatusStoreProtocol,
        client_factory: WhatsAppClientFactory,
        credential_store: CredentialStoreProtocol,
        qr_encoder: QREncoderProtocol,
        settings: WhatsAppSettings | None = None,
        retry_scheduler: RetryScheduler | None = None,
    ) -> None:
        """Inicializa gerenciador.

        Args:
            status_store: Store de status (tabela whatsapp_instancias)
            client_factory: Factory de conexões do protocolo
            credential_store: Escopos de credenciais por instância
            qr_encoder: Codificador de QR Code
            settings: Política de reconexão (usa defaults se None)
            retry_scheduler: Scheduler de reconexões (um novo se None)
        """
        self._status_store = status_store
        self._client_factory = client_factory
        self._credential_store = credential_store
        self._qr_encoder = qr_encoder
        self._settings = settings or WhatsAppSettings()
        self._retries = retry_scheduler or RetryScheduler()
        self._runtimes: dict[str, SessionRuntime] = {}

    # ──────────────────────────────────────────────────────────────
    # Consultas
    # ──────────────────────────────────────────────────────────────

    @property
    def settings(self) -> WhatsAppSettings:
        return self._settings

    @property
    def status_store(self) -> AsyncStatusStoreProtocol:
        return self._status_store

    @property
    def pending_retries(self) -> int:
        return self._retries.active_count

    def get_runtime(self, session_id: str) -> SessionRuntime | None:
        return self._runtimes.get(session_id)

    def get_state(self, session_id: str) -> ConnectionState:
        """Estado da FSM (UNREGISTERED para instâncias desconhecidas)."""
        runtime = self._runtimes.get(session_id)
        if runtime is None:
            return ConnectionState.UNREGISTERED
        return runtime.state

    def get_reconnect_attempts(self, session_id: str) -> int:
        runtime = self._runtimes.get(session_id)
        return runtime.reconnect_attempts if runtime else 0

    def get_qr_code(self, session_id: str) -> str | None:
        """Retorna o QR Code em cache (ou None). Sem efeitos colaterais."""
        runtime = self._runtimes.get(session_id)
        return runtime.qr_code if runtime else None

    def get_handle(self, session_id: str) -> WhatsAppConnectionProtocol | None:
        runtime = self._runtimes.get(session_id)
        return runtime.handle if runtime else None

    def require_handle(self, session_id: str) -> WhatsAppConnectionProtocol:
        """Retorna o handle vivo ou levanta NotFoundError."""
        handle = self.get_handle(session_id)
        if handle is None:
            raise NotFoundError(NO_LIVE_HANDLE_MESSAGE)
        return handle

    async def get_status(self, session_id: str) -> InstanceRecord:
        """Lê a linha de status da instância.

        Raises:
            NotFoundError: Instância nunca registrada
        """
        record = await self._status_store.get_async(session_id)
        if record is None:
            raise NotFoundError("Instância não encontrada.")
        return record

    # ──────────────────────────────────────────────────────────────
    # Operações
    # ──────────────────────────────────────────────────────────────

    async def create(self, session_id: str) -> InstanceRecord:
        """Registra a instância com status desconectado (idempotente).

        Raises:
            ValidationError: session_id vazio ou inválido
        """
        session_id = _require_session_id(session_id)
        runtime = self._get_or_create_runtime(session_id)
        if runtime.state is ConnectionState.UNREGISTERED:
            self._transition(runtime, ConnectionState.DISCONNECTED, "create")

        inserted = await self._status_store.create_if_absent_async(
            session_id, InstanceStatus.DISCONNECTED
        )
        logger.info(
            "instance_created",
            extra={"session_id": session_id, "inserted": inserted},
        )
        return await self.get_status(session_id)

    async def connect(
        self,
        session_id: str,
        *,
        want_qr: bool = False,
        interactive: bool = True,
    ) -> WhatsAppConnectionProtocol:
        """Abre (ou substitui) o handle da instância.

        Chamadas interativas (operador) zeram o contador e cancelam
        reconexão pendente. Chamadas automáticas com o contador no teto
        são recusadas e gravam status desconectado.

        Args:
            session_id: Identificador da instância
            want_qr: Se a tentativa deve expor QR Code
            interactive: False para reconexões automáticas

        Returns:
            Handle registrado

        Raises:
            ValidationError: session_id vazio ou inválido
            ReconnectExhaustedError: Chamada automática no teto
            ConnectionOpenError: Falha ao carregar credenciais ou abrir conexão
        """
        session_id = _require_session_id(session_id)
        runtime = self._get_or_create_runtime(session_id)

        if interactive:
            runtime.reconnect_attempts = 0
            self._cancel_retry(runtime)
        elif runtime.reconnect_attempts >= self._settings.max_reconnect_attempts:
            await self._mark_exhausted(runtime, trigger="connect_refused")
            raise ReconnectExhaustedError(
                f"Teto de {self._settings.max_reconnect_attempts} reconexões atingido."
            )

        handle = await self._open_handle(session_id)

        previous = runtime.handle
        attempt = runtime.begin_attempt(want_qr=want_qr)
        runtime.handle = handle
        self._transition(
            runtime,
            ConnectionState.CONNECTING,
            "connect",
            {"attempt": attempt, "interactive": interactive},
        )
        handle.on_lifecycle_event(self._make_callback(session_id, attempt))

        logger.info(
            "connection_registered",
            extra={
                "session_id": session_id,
                "attempt": attempt,
                "want_qr": want_qr,
                "interactive": interactive,
                "reconnect_attempts": runtime.reconnect_attempts,
                "superseded": previous is not None,
            },
        )

        if previous is not None and previous is not handle:
            await self._close_quietly(session_id, previous)
        return handle

    async def connect_for_qr(self, session_id: str) -> str | None:
        """Conecta com QR e aguarda a janela configurada pelo desafio.

        Returns:
            QR Code codificado, ou None se já conectado ou não exigido
        """
        session_id = _require_session_id(session_id)
        await self.connect(session_id, want_qr=True)
        runtime = self._runtimes[session_id]
        ready = runtime.qr_ready
        if not ready.is_set():
            try:
                async with asyncio.timeout(self._settings.qr_wait_seconds):
                    await ready.wait()
            except TimeoutError:
                logger.info(
                    "qr_wait_window_elapsed",
                    extra={
                        "session_id": session_id,
                        "qr_wait_seconds": self._settings.qr_wait_seconds,
                    },
                )
        return runtime.qr_code

    async def handle_lifecycle_event(
        self,
        session_id: str,
        event: LifecycleEvent,
        *,
        attempt: int | None = None,
    ) -> None:
        """Despacha um evento de ciclo de vida para a FSM.

        Args:
            session_id: Instância que emitiu o evento
            event: QRChallenge, ConnectionOpened ou ConnectionClosed
            attempt: Tentativa do handle emissor (None = tentativa atual)
        """
        runtime = self._runtimes.get(session_id)
        if runtime is None:
            logger.warning(
                "lifecycle_event_unknown_session",
                extra={"session_id": session_id, "event": event.name},
            )
            return

        if attempt is not None and attempt != runtime.attempt:
            logger.info(
                "lifecycle_event_stale",
                extra={
                    "session_id": session_id,
                    "event": event.name,
                    "event_attempt": attempt,
                    "current_attempt": runtime.attempt,
                },
            )
            return

        if isinstance(event, QRChallenge):
            await self._on_qr_challenge(runtime, event)
        elif isinstance(event, ConnectionOpened):
            await self._on_opened(runtime)
        elif isinstance(event, ConnectionClosed):
            await self._on_closed(runtime, event)

    async def reconnect_all_connected_on_startup(self) -> dict[str, bool]:
        """Reconecta, em sequência, as instâncias marcadas como conectadas.

        Returns:
            Mapa session_id → reconectou
        """
        return await reconnect_connected_sessions(
            self,
            attempts=self._settings.startup_attempts,
            delay_seconds=self._settings.startup_retry_delay_seconds,
        )

    async def mark_disconnected(self, session_id: str, trigger: str) -> None:
        """Grava desconectado e libera o handle (sem retry)."""
        runtime = self._get_or_create_runtime(session_id)
        await self._mark_exhausted(runtime, trigger=trigger)

    async def wait_for_pending_retries(self, timeout_seconds: float = 30.0) -> bool:
        """Aguarda as reconexões agendadas terminarem."""
        return await self._retries.wait_idle(timeout_seconds)

    async def shutdown(self) -> None:
        """Cancela reconexões e fecha handles (shutdown do processo).

        O status persistido não é alterado, para que o boot seguinte
        reconecte as instâncias que estavam conectadas.
        """
        cancelled = await self._retries.cancel_all()
        closed = 0
        for session_id, runtime in list(self._runtimes.items()):
            handle = runtime.handle
            if handle is None:
                continue
            runtime.attempt += 1
            runtime.handle = None
            await self._close_quietly(session_id, handle)
            closed += 1
        logger.info(
            "connection_manager_shutdown",
            extra={"cancelled_retries": cancelled, "closed_handles": closed},
        )

    # ──────────────────────────────────────────────────────────────
    # Transições
    # ──────────────────────────────────────────────────────────────

    async def _on_qr_challenge(self, runtime: SessionRuntime, event: QRChallenge) -> None:
        if not runtime.want_qr or runtime.qr_recorded:
            logger.debug(
                "qr_challenge_ignored",
                extra={
                    "session_id": runtime.session_id,
                    "want_qr": runtime.want_qr,
                    "already_recorded": runtime.qr_recorded,
                },
            )
            return

        runtime.qr_recorded = True
        attempt = runtime.attempt
        encoded = await self._qr_encoder.encode(event.qr)

        # Conexão pode ter aberto, caído ou sido substituída durante a codificação
        if runtime.attempt != attempt or runtime.state is not ConnectionState.CONNECTING:
            logger.info(
                "qr_challenge_discarded",
                extra={"session_id": runtime.session_id, "state": runtime.state.name},
            )
            return

        runtime.qr_code = encoded
        self._transition(runtime, ConnectionState.AWAITING_QR, "qr_challenge")
        runtime.qr_ready.set()
        logger.info("qr_challenge_cached", extra={"session_id": runtime.session_id})

    async def _on_opened(self, runtime: SessionRuntime) -> None:
        runtime.qr_code = None
        runtime.reconnect_attempts = 0
        self._transition(runtime, ConnectionState.CONNECTED, "opened")
        runtime.qr_ready.set()
        logger.info("connection_opened", extra={"session_id": runtime.session_id})
        await self._status_store.set_status_async(
            runtime.session_id, InstanceStatus.CONNECTED
        )

    async def _on_closed(self, runtime: SessionRuntime, event: ConnectionClosed) -> None:
        runtime.handle = None
        runtime.qr_code = None
        # Handle fechado: qualquer evento tardio dele passa a ser obsoleto
        runtime.attempt += 1

        if event.is_logout:
            self._cancel_retry(runtime)
            self._transition(
                runtime,
                ConnectionState.UNREGISTERED,
                "logout",
                {"status_code": event.status_code},
            )
            logger.warning(
                "connection_logged_out",
                extra={
                    "session_id": runtime.session_id,
                    "status_code": event.status_code,
                    "transitions": runtime.fsm.get_history_summary(LOGGED_TRANSITIONS),
                },
            )
            await self._status_store.set_status_async(
                runtime.session_id, InstanceStatus.DISCONNECTED
            )
            await asyncio.to_thread(
                self._credential_store.remove_scope, runtime.session_id
            )
            return

        logger.info(
            "connection_closed",
            extra={
                "session_id": runtime.session_id,
                "status_code": event.status_code,
                "reason": event.reason,
                "reconnect_attempts": runtime.reconnect_attempts,
            },
        )
        await self._retry_or_exhaust(runtime, trigger="closed")

    async def _retry_or_exhaust(self, runtime: SessionRuntime, *, trigger: str) -> None:
        if runtime.reconnect_attempts < self._settings.max_reconnect_attempts:
            runtime.reconnect_attempts += 1
            self._transition(
                runtime,
                ConnectionState.CONNECTING,
                trigger,
                {"reconnect_attempts": runtime.reconnect_attempts},
            )
            self._schedule_retry(runtime)
            return
        await self._mark_exhausted(runtime, trigger=trigger)

    async def _mark_exhausted(self, runtime: SessionRuntime, *, trigger: str) -> None:
        handle = runtime.handle
        runtime.handle = None
        runtime.qr_code = None
        runtime.attempt += 1
        self._cancel_retry(runtime)
        self._transition(runtime, ConnectionState.DISCONNECTED, trigger)
        logger.warning(
            "instance_marked_disconnected",
            extra={
                "session_id": runtime.session_id,
                "trigger": trigger,
                "reconnect_attempts": runtime.reconnect_attempts,
                "transitions": runtime.fsm.get_history_summary(LOGGED_TRANSITIONS),
            },
        )
        await self._status_store.set_status_async(
            runtime.session_id, InstanceStatus.DISCONNECTED
        )
        if handle is not None:
            await self._close_quietly(runtime.session_id, handle)

    # ──────────────────────────────────────────────────────────────
    # Reconexão automática
    # ──────────────────────────────────────────────────────────────

    def _schedule_retry(self, runtime: SessionRuntime) -> None:
        self._cancel_retry(runtime)
        session_id = runtime.session_id
        runtime.retry_task = self._retries.schedule(
            session_id=session_id,
            delay_seconds=self._settings.reconnect_delay_seconds,
            attempt_number=runtime.reconnect_attempts,
            action=lambda: self._run_retry(session_id),
        )

    async def _run_retry(self, session_id: str) -> None:
        runtime = self._runtimes.get(session_id)
        if runtime is None:
            return
        try:
            await self.connect(session_id, want_qr=False, interactive=False)
        except ReconnectExhaustedError:
            logger.info("reconnect_refused", extra={"session_id": session_id})
        except ConnectionOpenError:
            # Falha ao reabrir conta como nova queda transitória
            await self._retry_or_exhaust(runtime, trigger="reconnect_failed")

    @staticmethod
    def _cancel_retry(runtime: SessionRuntime) -> None:
        task = runtime.retry_task
        runtime.retry_task = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()

    # ──────────────────────────────────────────────────────────────
    # Auxiliares
    # ──────────────────────────────────────────────────────────────

    def _get_or_create_runtime(self, session_id: str) -> SessionRuntime:
        runtime = self._runtimes.get(session_id)
        if runtime is None:
            runtime = SessionRuntime.new(session_id)
            self._runtimes[session_id] = runtime
        return runtime

    async def _open_handle(self, session_id: str) -> WhatsAppConnectionProtocol:
        try:
            scope = await asyncio.to_thread(
                self._credential_store.ensure_scope, session_id
            )
            credentials = await self._client_factory.load_credentials(scope)
            version = await self._client_factory.fetch_latest_version()
            return await self._client_factory.create_connection(
                session_id,
                credentials,
                version,
                self._settings.browser,
            )
        except Exception as exc:
            logger.error(
                "connection_open_failed",
                extra={"session_id": session_id, "error_type": type(exc).__name__},
            )
            raise ConnectionOpenError(
                f"Falha ao abrir conexão da instância {session_id}."
            ) from exc

    def _make_callback(self, session_id: str, attempt: int) -> LifecycleCallback:
        async def _dispatch(event: LifecycleEvent) -> None:
            try:
                await self.handle_lifecycle_event(session_id, event, attempt=attempt)
            except Exception:
                logger.exception(
                    "lifecycle_event_failed",
                    extra={"session_id": session_id, "event": event.name},
                )

        return _dispatch

    def _transition(
        self,
        runtime: SessionRuntime,
        target: ConnectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if runtime.state is target and not runtime.fsm.can_transition_to(target):
            return
        result = runtime.fsm.transition(target, trigger, metadata)
        if not result.success:
            logger.warning(
                "connection_transition_rejected",
                extra={
                    "to_state": target.name,
                    "trigger": trigger,
                    "reason": result.error_reason,
                    **runtime.fsm.get_state_summary(),
                },
            )
            return
        logger.debug(
            "connection_transition",
            extra={
                "session_id": runtime.session_id,
                "from_state": result.transition.from_state.name,
                "to_state": target.name,
                "trigger": trigger,
            },
        )

    @staticmethod
    async def _close_quietly(session_id: str, handle: WhatsAppConnectionProtocol) -> None:
        try:
            await handle.close()
        except Exception as exc:
            logger.warning(
                "connection_close_failed",
                extra={"session_id": session_id, "error_type": type(exc).__name__},
            )

"""Agendamento de reconexões automáticas como tasks asyncio.

Cada reconexão é uma task que dorme o intervalo de backoff e então
invoca a ação. O scheduler é dono do conjunto de tasks pendentes para
permitir espera (testes) e cancelamento (shutdown).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RetryScheduler:
    """Conjunto de reconexões agendadas."""

    __slots__ = ("_tasks",)

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def active_count(self) -> int:
        """Quantidade de reconexões ainda não concluídas."""
        return len(self._tasks)

    def schedule(
        self,
        *,
        session_id: str,
        delay_seconds: float,
        attempt_number: int,
        action: Callable[[], Awaitable[None]],
    ) -> asyncio.Task[None]:
        """Agenda `action` para rodar após `delay_seconds`."""
        task = asyncio.create_task(
            self._run_after(delay_seconds, action),
            name=f"reconnect:{session_id}:{attempt_number}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        logger.info(
            "reconnect_scheduled",
            extra={
                "session_id": session_id,
                "attempt": attempt_number,
                "delay_seconds": delay_seconds,
                "active_tasks": len(self._tasks),
            },
        )
        return task

    @staticmethod
    async def _run_after(
        delay_seconds: float,
        action: Callable[[], Awaitable[None]],
    ) -> None:
        await asyncio.sleep(delay_seconds)
        await action()

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "reconnect_task_failed",
                    extra={
                        "task": task.get_name(),
                        "error_type": type(exc).__name__,
                        "active_tasks": len(self._tasks),
                    },
                )

    async def wait_idle(self, timeout_seconds: float = 30.0) -> bool:
        """Aguarda até não restar reconexão pendente.

        Uma reconexão pode agendar a próxima; por isso o laço continua
        até o conjunto esvaziar ou o prazo acabar.

        Returns:
            True se esvaziou dentro do prazo.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_seconds
        while self._tasks:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return False
            await asyncio.wait(list(self._tasks), timeout=remaining)
        return True

    async def cancel_all(self) -> int:
        """Cancela reconexões pendentes (shutdown do processo)."""
        pending = [task for task in self._tasks if task is not asyncio.current_task()]
        if not pending:
            return 0
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.info("reconnect_tasks_cancelled", extra={"cancelled_tasks": len(pending)})
        return len(pending)

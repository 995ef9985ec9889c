"""Dispatcher padrão: agenda o handler downstream em tasks asyncio.

A resposta HTTP não espera o processamento. Concorrência limitada por
semáforo; tasks pendentes são drenadas no shutdown.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

from app.protocols.dispatcher import DispatcherProtocol

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.domain.security import DispatchedEvent

logger = logging.getLogger(__name__)


async def log_accepted_event(event: DispatchedEvent) -> None:
    """Handler padrão: registra o evento aceito (processamento de negócio é externo)."""
    logger.info(
        "event_accepted",
        extra={
            "request_id": event.request_id,
            "route": event.route_name,
            "route_class": str(event.route_class),
            "webhook_id": event.webhook_id,
        },
    )


class TaskDispatcher(DispatcherProtocol):
    """Agenda cada evento aceito como task com limite de concorrência.

    Args:
        handler: Corrotina downstream (padrão: log_accepted_event)
        max_concurrency: Máximo de handlers executando ao mesmo tempo
    """

    def __init__(
        self,
        handler: Callable[[DispatchedEvent], Awaitable[None]] | None = None,
        max_concurrency: int = 100,
    ) -> None:
        self._handler = handler or log_accepted_event
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._active_tasks: set[asyncio.Task[Any]] = set()

    @property
    def active_tasks(self) -> int:
        return len(self._active_tasks)

    async def dispatch(self, event: DispatchedEvent) -> None:
        task = asyncio.create_task(self._run_with_limit(event))
        self._active_tasks.add(task)
        task.add_done_callback(self._on_task_done)
        logger.info(
            "dispatch_scheduled",
            extra={
                "request_id": event.request_id,
                "route": event.route_name,
                "active_tasks": len(self._active_tasks),
            },
        )

    async def _run_with_limit(self, event: DispatchedEvent) -> None:
        async with self._semaphore:
            await self._handler(event)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._active_tasks.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "dispatch_task_failed",
                    extra={
                        "error_type": type(exc).__name__,
                        "active_tasks": len(self._active_tasks),
                    },
                )

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Aguarda tasks pendentes durante shutdown do processo."""
        if not self._active_tasks:
            return

        pending_now = list(self._active_tasks)
        logger.info(
            "dispatch_shutdown_wait",
            extra={
                "pending_tasks": len(pending_now),
                "timeout_seconds": timeout_seconds,
            },
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(
            "dispatch_shutdown_cancelled",
            extra={"cancelled_tasks": len(pending)},
        )

"""Testes do TaskDispatcher (tasks em background com drain no shutdown)."""

from __future__ import annotations

import asyncio
import logging

import pytest

from app.domain.security import DispatchedEvent, RouteClass
from app.infra.dispatch import TaskDispatcher


def _event(request_id: str = "req_1") -> DispatchedEvent:
    return DispatchedEvent(
        request_id=request_id,
        route_name="chatwoot.message_created",
        route_class=RouteClass.WEBHOOK,
        webhook_id="message_created:1:123",
    )


class TestTaskDispatcher:
    @pytest.mark.asyncio
    async def test_dispatch_runs_handler_in_background(self) -> None:
        handled: list[str] = []

        async def handler(event: DispatchedEvent) -> None:
            handled.append(event.request_id)

        dispatcher = TaskDispatcher(handler)

        await dispatcher.dispatch(_event())
        await dispatcher.drain(timeout_seconds=1)

        assert handled == ["req_1"]
        assert dispatcher.active_tasks == 0

    @pytest.mark.asyncio
    async def test_handler_failure_is_logged_not_raised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        async def handler(_event: DispatchedEvent) -> None:
            raise RuntimeError("crm down")

        dispatcher = TaskDispatcher(handler)

        with caplog.at_level(logging.ERROR):
            await dispatcher.dispatch(_event())
            await dispatcher.drain(timeout_seconds=1)

        assert any(r.getMessage() == "dispatch_task_failed" for r in caplog.records)

    @pytest.mark.asyncio
    async def test_drain_cancels_tasks_after_timeout(self) -> None:
        async def handler(_event: DispatchedEvent) -> None:
            await asyncio.sleep(10)

        dispatcher = TaskDispatcher(handler)
        await dispatcher.dispatch(_event())

        await dispatcher.drain(timeout_seconds=0.01)

        assert dispatcher.active_tasks == 0

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self) -> None:
        running = 0
        peak = 0

        async def handler(_event: DispatchedEvent) -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1

        dispatcher = TaskDispatcher(handler, max_concurrency=2)
        for index in range(6):
            await dispatcher.dispatch(_event(f"req_{index}"))
        await dispatcher.drain(timeout_seconds=1)

        assert peak == 2

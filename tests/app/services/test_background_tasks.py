"""Testes do controle de tasks em background."""

from __future__ import annotations

import asyncio
import logging

import pytest

from app.services import (
    active_task_count,
    drain_background_tasks,
    schedule_background_task,
)


class TestBackgroundTasks:
    @pytest.mark.asyncio
    async def test_drain_waits_for_pending_work(self) -> None:
        finished: list[str] = []

        async def slow_save() -> None:
            await asyncio.sleep(0.01)
            finished.append("saved")

        schedule_background_task(name="record_persistence", coroutine=slow_save())
        assert active_task_count() == 1

        cancelled = await drain_background_tasks(timeout_seconds=1.0)

        assert cancelled == 0
        assert finished == ["saved"]
        assert active_task_count() == 0

    @pytest.mark.asyncio
    async def test_drain_cancels_after_timeout(self, caplog: pytest.LogCaptureFixture) -> None:
        async def stuck() -> None:
            await asyncio.Event().wait()

        schedule_background_task(name="record_persistence", coroutine=stuck())

        with caplog.at_level(logging.WARNING, logger="app.services.background_tasks"):
            cancelled = await drain_background_tasks(timeout_seconds=0.01)

        assert cancelled == 1
        assert active_task_count() == 0
        assert "background_tasks_shutdown_cancelled" in caplog.messages

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        async def broken() -> None:
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="app.services.background_tasks"):
            schedule_background_task(name="record_persistence", coroutine=broken())
            await drain_background_tasks(timeout_seconds=1.0)

        record = next(r for r in caplog.records if r.message == "background_task_failed")
        assert record.task_name == "record_persistence"
        assert record.error_type == "RuntimeError"

    @pytest.mark.asyncio
    async def test_drain_without_tasks(self) -> None:
        assert await drain_background_tasks() == 0

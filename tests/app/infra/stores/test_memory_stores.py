"""Testes dos stores em memória."""

from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime, timedelta

import pytest

from app.domain.harvest import HarvestRecord
from app.domain.product import Product
from app.infra.stores import (
    MemoryAuditStore,
    MemoryHarvestRecordStore,
    MemoryProductCatalog,
    MemorySessionStore,
)
from app.sessions import EndReason, SessionEvent, SessionEventType, UssdSession

NOW = datetime(2024, 8, 20, 10, 0, tzinfo=UTC)


def _session(session_id: str = "mem-1", last_activity: datetime = NOW) -> UssdSession:
    return UssdSession(
        session_id=session_id,
        phone_number="08031234567",
        service_code="*123*456#",
        created_at=last_activity,
        last_activity=last_activity,
    )


class TestMemorySessionStore:
    @pytest.mark.asyncio
    async def test_upsert_and_get_returns_snapshot(self) -> None:
        store = MemorySessionStore()
        session = _session()
        await store.upsert(session)

        session.step = 9
        loaded = await store.get("mem-1")

        assert loaded is not None
        assert loaded.step == 0

    @pytest.mark.asyncio
    async def test_get_missing(self) -> None:
        assert await MemorySessionStore().get("missing") is None

    @pytest.mark.asyncio
    async def test_retention_expiry(self) -> None:
        store = MemorySessionStore(retention_seconds=-1)
        await store.upsert(_session())

        assert await store.get("mem-1") is None

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        store = MemorySessionStore()
        await store.upsert(_session())

        assert await store.delete("mem-1") is True
        assert await store.delete("mem-1") is False

    @pytest.mark.asyncio
    async def test_lock_serializes_same_session(self) -> None:
        store = MemorySessionStore()
        order: list[str] = []

        async def worker(name: str) -> None:
            async with store.lock("mem-1"):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))

        assert order in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])

    @pytest.mark.asyncio
    async def test_sweep_expires_idle_active_sessions(self) -> None:
        store = MemorySessionStore()
        await store.upsert(_session("old", NOW - timedelta(minutes=45)))
        await store.upsert(_session("new", NOW - timedelta(minutes=5)))

        expired = await store.sweep_expired(30, NOW)

        assert expired == ["old"]
        old = await store.get("old")
        assert old is not None
        assert old.end_reason is EndReason.EXPIRED
        assert store.active_count() == 1

    @pytest.mark.asyncio
    async def test_sweep_skips_locked_session(self) -> None:
        store = MemorySessionStore()
        await store.upsert(_session("busy", NOW - timedelta(hours=2)))

        async with store.lock("busy"):
            expired = await store.sweep_expired(30, NOW)

        assert expired == []
        busy = await store.get("busy")
        assert busy is not None and busy.is_active

    @pytest.mark.asyncio
    async def test_sweep_ignores_terminated_sessions(self) -> None:
        store = MemorySessionStore()
        session = _session("done", NOW - timedelta(hours=2))
        session.terminate(EndReason.COMPLETED, NOW - timedelta(hours=2))
        await store.upsert(session)

        assert await store.sweep_expired(30, NOW) == []
        done = await store.get("done")
        assert done is not None and done.end_reason is EndReason.COMPLETED

    @pytest.mark.asyncio
    async def test_locks_are_released_after_use(self) -> None:
        store = MemorySessionStore()

        async def worker() -> None:
            async with store.lock("mem-1"):
                await asyncio.sleep(0.01)

        await asyncio.gather(worker(), worker(), worker())
        assert store.lock_count() == 0

        for index in range(5):
            await store.upsert(_session(f"s-{index}", NOW - timedelta(hours=1)))
        await store.sweep_expired(30, NOW)

        assert store.lock_count() == 0

    @pytest.mark.asyncio
    async def test_lock_kept_while_waiters_remain(self) -> None:
        store = MemorySessionStore()
        entered = asyncio.Event()

        async def holder() -> None:
            async with store.lock("mem-1"):
                entered.set()
                await asyncio.sleep(0.01)

        task = asyncio.create_task(holder())
        await entered.wait()
        async with store.lock("mem-1"):
            assert store.lock_count() == 1
        await task

        assert store.lock_count() == 0


class TestMemoryAuditStore:
    @pytest.mark.asyncio
    async def test_append_caps_records(self) -> None:
        audit = MemoryAuditStore(max_records=2)
        for index in range(3):
            event = SessionEvent.from_session(
                _session(f"s{index}"), SessionEventType.SESSION_STARTED
            )
            await audit.append(event)

        records = audit.get_records()
        assert [r["session_id"] for r in records] == ["s1", "s2"]


class TestMemoryHarvestRecordStore:
    @pytest.mark.asyncio
    async def test_recent_harvests_newest_first(self) -> None:
        store = MemoryHarvestRecordStore()
        for index in range(3):
            await store.save_harvest(
                HarvestRecord(
                    batch_id=f"H{index}",
                    phone_number="08031234567",
                    session_id=f"s{index}",
                    crop_type="Maize",
                    quantity_kg=10 + index,
                    harvest_date=date(2024, 8, 1),
                    logged_at=NOW + timedelta(minutes=index),
                )
            )

        recent = await store.recent_harvests("08031234567", limit=2)

        assert [r.batch_id for r in recent] == ["H2", "H1"]
        assert await store.recent_harvests("08099999999") == []

    @pytest.mark.asyncio
    async def test_save_is_idempotent_per_batch(self) -> None:
        store = MemoryHarvestRecordStore()
        record = HarvestRecord(
            batch_id="HABC",
            phone_number="08031234567",
            session_id="s",
            crop_type="Yam",
            quantity_kg=5,
            harvest_date=date(2024, 8, 1),
        )
        await store.save_harvest(record)
        await store.save_harvest(record)

        assert len(await store.recent_harvests("08031234567")) == 1


class TestMemoryProductCatalog:
    @pytest.mark.asyncio
    async def test_filters_by_category_case_insensitive(self) -> None:
        catalog = MemoryProductCatalog()

        tubers = await catalog.list_products("tubers")

        assert [p.name for p in tubers] == ["Cassava Tubers", "White Yam"]

    @pytest.mark.asyncio
    async def test_custom_products_and_limit(self) -> None:
        products = [
            Product(product_id=f"p{i}", name=f"Goat {i}", category="Livestock", price=1000)
            for i in range(7)
        ]
        catalog = MemoryProductCatalog(products)

        assert len(await catalog.list_products("Livestock")) == 5

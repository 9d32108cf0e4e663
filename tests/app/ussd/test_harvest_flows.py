"""Testes dos fluxos de colheita (registro e listagem)."""

from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

import pytest

from app.domain.harvest import HarvestRecord, batch_id_for_session
from app.infra.stores import MemoryHarvestRecordStore
from app.services import drain_background_tasks
from app.sessions.flow_data import HarvestDraft
from app.ussd.flows import (
    FieldValidationError,
    FlowContext,
    FlowStatus,
    LogHarvestFlow,
    ViewHarvestsFlow,
)
from app.ussd.flows.harvest import parse_harvest_date, parse_quantity
from utils.errors import RecordPersistenceError

TODAY = date(2024, 8, 20)
PHONE = "08031234567"


def _context(session_id: str = "sess-1") -> FlowContext:
    return FlowContext(
        session_id=session_id,
        phone_number=PHONE,
        service_code="*123*456#",
        today=TODAY,
    )


class TestFieldParsers:
    @pytest.mark.parametrize(
        ("token", "expected"), [("500", 500.0), ("12.5", 12.5), ("1,200", 1200.0)]
    )
    def test_parse_quantity(self, token: str, expected: float) -> None:
        assert parse_quantity(token) == expected

    @pytest.mark.parametrize(
        ("token", "hint"),
        [
            ("abc", "Invalid quantity. Enter a number, e.g. 500."),
            ("0", "Quantity must be greater than 0."),
            ("-3", "Quantity must be greater than 0."),
            ("nan", "Quantity must be greater than 0."),
            ("2000000", "Quantity too large. Maximum is 1,000,000 kg."),
        ],
    )
    def test_parse_quantity_rejects(self, token: str, hint: str) -> None:
        with pytest.raises(FieldValidationError) as exc_info:
            parse_quantity(token)
        assert exc_info.value.hint == hint

    def test_parse_date(self) -> None:
        assert parse_harvest_date("15/08/2024", TODAY) == date(2024, 8, 15)
        assert parse_harvest_date("20/08/2024", TODAY) == TODAY

    @pytest.mark.parametrize("token", ["2024-08-15", "5/8/2024", "31/02/2024", "xx/08/2024"])
    def test_parse_date_rejects_malformed(self, token: str) -> None:
        with pytest.raises(FieldValidationError, match="Invalid date"):
            parse_harvest_date(token, TODAY)

    def test_parse_date_rejects_future(self) -> None:
        with pytest.raises(FieldValidationError, match="future"):
            parse_harvest_date("21/08/2024", TODAY)


class TestLogHarvestFlow:
    @pytest.mark.asyncio
    async def test_prompts_in_order(self) -> None:
        flow = LogHarvestFlow(MemoryHarvestRecordStore())

        first = await flow.handle(_context(), [])
        assert first.status is FlowStatus.PROMPT
        assert first.text == "Log New Harvest\nEnter crop type (e.g. Cassava, Yam, Rice):"

        second = await flow.handle(_context(), ["Cassava"])
        assert second.text == "Crop: Cassava\nEnter quantity in kg:"

        third = await flow.handle(_context(), ["Cassava", "500"])
        assert third.text == "Quantity: 500kg\nEnter harvest date (DD/MM/YYYY):"
        assert isinstance(third.data, HarvestDraft)
        assert third.data.quantity_kg == 500

    @pytest.mark.asyncio
    async def test_invalid_token_reprompts_same_field_with_hint(self) -> None:
        flow = LogHarvestFlow(MemoryHarvestRecordStore())

        outcome = await flow.handle(_context(), ["Cassava", "lots"])

        assert outcome.status is FlowStatus.PROMPT
        assert outcome.text == (
            "Invalid quantity. Enter a number, e.g. 500.\nCrop: Cassava\nEnter quantity in kg:"
        )

    @pytest.mark.asyncio
    async def test_correction_after_invalid_token(self) -> None:
        flow = LogHarvestFlow(MemoryHarvestRecordStore())

        outcome = await flow.handle(_context(), ["Yam", "lots", "20"])

        assert outcome.text == "Quantity: 20kg\nEnter harvest date (DD/MM/YYYY):"

    @pytest.mark.asyncio
    async def test_completion_text_and_persistence(self) -> None:
        store = MemoryHarvestRecordStore()
        flow = LogHarvestFlow(store)

        outcome = await flow.handle(_context("sess-9"), ["1", "500", "15/08/2024"])
        await drain_background_tasks()

        batch_id = batch_id_for_session("sess-9")
        assert outcome.status is FlowStatus.COMPLETED
        assert outcome.text == (
            "Harvest logged successfully!\n"
            f"Batch ID: {batch_id}\n"
            "Crop: 1\n"
            "Quantity: 500kg\n"
            "Date: 15/08/2024\n"
            "Thank you for using GroChain!"
        )
        saved = await store.recent_harvests(PHONE)
        assert [r.batch_id for r in saved] == [batch_id]
        assert saved[0].harvest_date == date(2024, 8, 15)

    @pytest.mark.asyncio
    async def test_replay_is_deterministic(self) -> None:
        flow = LogHarvestFlow(MemoryHarvestRecordStore())
        tokens = ["Rice", "bad", "75.5"]

        first = await flow.handle(_context(), tokens)
        second = await flow.handle(_context(), tokens)

        assert first == second

    @pytest.mark.asyncio
    async def test_persistence_failure_does_not_change_reply(self) -> None:
        store = AsyncMock()
        store.save_harvest.side_effect = RecordPersistenceError("down")
        flow = LogHarvestFlow(store)

        outcome = await flow.handle(_context(), ["Maize", "10", "01/08/2024"])
        await drain_background_tasks()

        assert outcome.status is FlowStatus.COMPLETED
        store.save_harvest.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_slow_save_finishes_on_drain(self) -> None:
        store = MemoryHarvestRecordStore()
        saved = store.save_harvest

        async def slow_save(record: HarvestRecord) -> None:
            await asyncio.sleep(0.01)
            await saved(record)

        store.save_harvest = slow_save  # type: ignore[method-assign]
        flow = LogHarvestFlow(store)

        await flow.handle(_context("sess-slow"), ["Yam", "40", "01/08/2024"])
        assert await store.recent_harvests(PHONE) == []

        assert await drain_background_tasks(timeout_seconds=1.0) == 0
        assert len(await store.recent_harvests(PHONE)) == 1

    @pytest.mark.asyncio
    async def test_prompt_and_completion_echo_quantity_as_typed(self) -> None:
        flow = LogHarvestFlow(MemoryHarvestRecordStore())

        prompt = await flow.handle(_context(), ["Maize", "500.50"])
        outcome = await flow.handle(_context(), ["Maize", "500.50", "15/08/2024"])
        await drain_background_tasks()

        assert prompt.text == "Quantity: 500.50kg\nEnter harvest date (DD/MM/YYYY):"
        assert "Quantity: 500.50kg\n" in outcome.text
        assert isinstance(prompt.data, HarvestDraft)
        assert prompt.data.quantity_kg == 500.5

    def test_batch_id_format(self) -> None:
        batch_id = batch_id_for_session("abc")
        assert batch_id.startswith("H")
        assert len(batch_id) == 11
        assert batch_id == batch_id_for_session("abc")
        assert batch_id != batch_id_for_session("abd")


class TestViewHarvestsFlow:
    @pytest.mark.asyncio
    async def test_empty_list(self) -> None:
        outcome = await ViewHarvestsFlow(MemoryHarvestRecordStore()).handle(_context(), [])

        assert outcome.status is FlowStatus.COMPLETED
        assert outcome.text.startswith("You have no harvests logged yet.")
        assert "*123*456#" in outcome.text

    @pytest.mark.asyncio
    async def test_lists_most_recent_first(self) -> None:
        store = MemoryHarvestRecordStore()
        for index, crop in enumerate(["Yam", "Rice"]):
            await store.save_harvest(
                HarvestRecord(
                    batch_id=f"H{index}",
                    phone_number=PHONE,
                    session_id=f"s{index}",
                    crop_type=crop,
                    quantity_kg=100 + index,
                    harvest_date=date(2024, 8, 1 + index),
                    logged_at=datetime(2024, 8, 1 + index, tzinfo=UTC),
                )
            )

        outcome = await ViewHarvestsFlow(store).handle(_context(), [])

        assert outcome.text == (
            "Your Recent Harvests:\n"
            "1. Rice - 101kg (02/08/2024) pending\n"
            "2. Yam - 100kg (01/08/2024) pending"
        )

    @pytest.mark.asyncio
    async def test_store_failure_is_unavailable(self) -> None:
        store = AsyncMock()
        store.recent_harvests.side_effect = RecordPersistenceError("down")

        outcome = await ViewHarvestsFlow(store).handle(_context(), [])

        assert outcome.status is FlowStatus.UNAVAILABLE
        assert outcome.service == "record_persistence"

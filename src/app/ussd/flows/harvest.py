"""Fluxos de colheita: registrar nova colheita e listar as recentes."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import TYPE_CHECKING, ClassVar

from app.domain.harvest import HarvestRecord, batch_id_for_session
from app.services.background_tasks import schedule_background_task
from app.sessions.flow_data import HarvestDraft
from app.ussd.flows.base import (
    FieldFlow,
    FieldValidationError,
    FlowContext,
    FlowOutcome,
    format_quantity,
    with_hint,
)
from config.logging import log_downstream_failure
from fsm.states import MenuNode

if TYPE_CHECKING:
    from app.protocols.record_store import HarvestRecordStoreProtocol
    from app.sessions.flow_data import FlowData

logger = logging.getLogger(__name__)

MAX_CROP_LENGTH = 30
MAX_QUANTITY_KG = 1_000_000
RECENT_HARVESTS_LIMIT = 5
DATE_FORMAT = "%d/%m/%Y"

_DATE_PATTERN = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


def parse_quantity(token: str) -> float:
    """Converte quantidade em kg (positiva, até MAX_QUANTITY_KG)."""
    try:
        quantity = float(token.replace(",", ""))
    except ValueError:
        raise FieldValidationError("Invalid quantity. Enter a number, e.g. 500.") from None
    if quantity != quantity or quantity <= 0:  # NaN ou não positivo
        raise FieldValidationError("Quantity must be greater than 0.")
    if quantity > MAX_QUANTITY_KG:
        raise FieldValidationError("Quantity too large. Maximum is 1,000,000 kg.")
    return quantity


def parse_harvest_date(token: str, today: date) -> date:
    """Converte data DD/MM/YYYY; rejeita datas inexistentes e futuras."""
    match = _DATE_PATTERN.match(token)
    if match is None:
        raise FieldValidationError("Invalid date. Use DD/MM/YYYY.")
    day, month, year = (int(part) for part in match.groups())
    try:
        harvest_date = date(year, month, day)
    except ValueError:
        raise FieldValidationError("Invalid date. Use DD/MM/YYYY.") from None
    if harvest_date > today:
        raise FieldValidationError("Harvest date cannot be in the future.")
    return harvest_date


def display_quantity(draft: HarvestDraft) -> str:
    """Quantidade exatamente como o produtor digitou."""
    if draft.quantity_text is not None:
        return draft.quantity_text
    return format_quantity(draft.quantity_kg or 0)


class LogHarvestFlow(FieldFlow):
    """Cultura → quantidade → data → registro (fire-and-forget)."""

    node: ClassVar[MenuNode] = MenuNode.LOG_HARVEST
    fields: ClassVar[tuple[str, ...]] = ("crop_type", "quantity_kg", "harvest_date")

    def __init__(self, records: HarvestRecordStoreProtocol) -> None:
        self._records = records

    def new_draft(self) -> FlowData | None:
        return HarvestDraft()

    async def accept(
        self,
        context: FlowContext,
        draft: FlowData | None,
        field_name: str,
        token: str,
    ) -> FlowData | None:
        current = draft if isinstance(draft, HarvestDraft) else HarvestDraft()
        if field_name == "crop_type":
            if len(token) > MAX_CROP_LENGTH:
                raise FieldValidationError("Crop type too long. Use up to 30 characters.")
            return current.model_copy(update={"crop_type": token})
        if field_name == "quantity_kg":
            return current.model_copy(
                update={"quantity_kg": parse_quantity(token), "quantity_text": token}
            )
        return current.model_copy(
            update={"harvest_date": parse_harvest_date(token, context.today)}
        )

    async def prompt(
        self,
        context: FlowContext,
        draft: FlowData | None,
        field_name: str,
        hint: str | None,
    ) -> FlowOutcome:
        current = draft if isinstance(draft, HarvestDraft) else HarvestDraft()
        if field_name == "crop_type":
            text = "Log New Harvest\nEnter crop type (e.g. Cassava, Yam, Rice):"
        elif field_name == "quantity_kg":
            text = f"Crop: {current.crop_type}\nEnter quantity in kg:"
        else:
            text = (
                f"Quantity: {display_quantity(current)}kg\n"
                "Enter harvest date (DD/MM/YYYY):"
            )
        return FlowOutcome.prompt(with_hint(text, hint), current)

    async def finalize(
        self,
        context: FlowContext,
        draft: FlowData | None,
        accepted: dict[str, str],
    ) -> FlowOutcome:
        current = draft if isinstance(draft, HarvestDraft) else HarvestDraft()
        record = HarvestRecord(
            batch_id=batch_id_for_session(context.session_id),
            phone_number=context.phone_number,
            session_id=context.session_id,
            crop_type=current.crop_type or "",
            quantity_kg=current.quantity_kg or 0,
            harvest_date=current.harvest_date or context.today,
        )
        # A chamada já está terminando; o shutdown drena a task
        schedule_background_task(name="record_persistence", coroutine=self._persist(record))

        text = (
            "Harvest logged successfully!\n"
            f"Batch ID: {record.batch_id}\n"
            f"Crop: {record.crop_type}\n"
            f"Quantity: {display_quantity(current)}kg\n"
            f"Date: {record.harvest_date.strftime(DATE_FORMAT)}\n"
            "Thank you for using GroChain!"
        )
        return FlowOutcome.completed(text, current)

    async def _persist(self, record: HarvestRecord) -> None:
        """Persiste o registro (background task); nunca propaga exceções."""
        try:
            await self._records.save_harvest(record)
        except Exception as exc:  # noqa: BLE001
            log_downstream_failure(
                logger,
                "record_persistence",
                session_id=record.session_id,
                phone_number=record.phone_number,
                error=exc,
            )


class ViewHarvestsFlow(FieldFlow):
    """Lista as colheitas mais recentes do produtor (terminal)."""

    node: ClassVar[MenuNode] = MenuNode.VIEW_HARVESTS

    def __init__(self, records: HarvestRecordStoreProtocol) -> None:
        self._records = records

    async def finalize(
        self,
        context: FlowContext,
        draft: FlowData | None,
        accepted: dict[str, str],
    ) -> FlowOutcome:
        harvests = await self._records.recent_harvests(
            context.phone_number, limit=RECENT_HARVESTS_LIMIT
        )
        if not harvests:
            return FlowOutcome.completed(
                "You have no harvests logged yet.\n"
                f"Dial {context.service_code} and choose 1 > 1 to log one."
            )
        lines = ["Your Recent Harvests:"]
        for index, harvest in enumerate(harvests, start=1):
            lines.append(
                f"{index}. {harvest.crop_type} - {format_quantity(harvest.quantity_kg)}kg "
                f"({harvest.harvest_date.strftime(DATE_FORMAT)}) {harvest.status}"
            )
        return FlowOutcome.completed("\n".join(lines))

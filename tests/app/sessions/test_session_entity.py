"""Testes da entidade UssdSession e dos rascunhos de fluxo."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest
from pydantic import ValidationError

from app.sessions import (
    CreditCheckDraft,
    EndReason,
    HarvestDraft,
    ProductBrowseDraft,
    SessionEvent,
    SessionEventType,
    UssdSession,
)
from app.sessions.flow_data import dump_flow_data, load_flow_data
from fsm import MenuNode

NOW = datetime(2024, 8, 20, 10, 0, tzinfo=UTC)


def _session(**overrides: object) -> UssdSession:
    defaults: dict[str, object] = {
        "session_id": "ATUid_1",
        "phone_number": "08031234567",
        "service_code": "*123*456#",
        "created_at": NOW,
        "last_activity": NOW,
    }
    defaults.update(overrides)
    return UssdSession(**defaults)  # type: ignore[arg-type]


class TestUssdSession:
    def test_defaults(self) -> None:
        session = _session()
        assert session.current_menu is MenuNode.MAIN
        assert session.step == 0
        assert session.is_active
        assert session.end_reason is None

    def test_idle_check_is_strictly_greater(self) -> None:
        session = _session()
        assert not session.is_idle_for(30, NOW + timedelta(minutes=30))
        assert session.is_idle_for(30, NOW + timedelta(minutes=30, seconds=1))

    def test_enter_flow_resets_user_data(self) -> None:
        session = _session(user_data=HarvestDraft(crop_type="Yam"))
        session.enter_flow(MenuNode.CHECK_CREDIT, 2)
        assert session.current_menu is MenuNode.CHECK_CREDIT
        assert session.flow_entry_step == 2
        assert session.user_data is None

    def test_terminate_is_idempotent_and_clears_inputs(self) -> None:
        session = _session(user_data=CreditCheckDraft(bvn_last4="1234"), last_input="3*1*2234")

        assert session.terminate(EndReason.COMPLETED, NOW) is True
        assert session.terminate(EndReason.FAILED, NOW + timedelta(minutes=1)) is False

        assert not session.is_active
        assert session.end_reason is EndReason.COMPLETED
        assert session.ended_at == NOW
        assert session.user_data is None
        assert session.last_input == ""

    def test_dict_round_trip_preserves_draft(self) -> None:
        session = _session(
            current_menu=MenuNode.LOG_HARVEST,
            step=4,
            flow_entry_step=2,
            user_data=HarvestDraft(crop_type="Rice", quantity_kg=20, harvest_date=date(2024, 8, 1)),
            last_input="1*1*Rice*20",
            last_response="CON Quantity: 20kg",
        )

        restored = UssdSession.from_dict(session.to_dict())

        assert restored == session

    def test_from_dict_tolerates_unknown_menu(self) -> None:
        data = _session().to_dict()
        data["current_menu"] = "legacy_menu"

        assert UssdSession.from_dict(data).current_menu is MenuNode.MAIN


class TestFlowData:
    def test_discriminated_load(self) -> None:
        raw = dump_flow_data(ProductBrowseDraft(category="Grains"))
        assert raw == {"flow": "browse_products", "category": "Grains", "product_id": None}
        assert isinstance(load_flow_data(raw), ProductBrowseDraft)

    def test_empty_is_none(self) -> None:
        assert dump_flow_data(None) is None
        assert load_flow_data(None) is None
        assert load_flow_data({}) is None

    def test_quantity_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            HarvestDraft(quantity_kg=0)

    def test_bvn_last4_length(self) -> None:
        with pytest.raises(ValidationError):
            CreditCheckDraft(bvn_last4="12345")


class TestSessionEvent:
    def test_from_session_hashes_phone(self) -> None:
        session = _session(step=2)
        session.terminate(EndReason.EXITED, NOW)

        event = SessionEvent.from_session(session, SessionEventType.SESSION_TERMINATED)
        payload = event.to_dict()

        assert payload["session_id"] == "ATUid_1"
        assert payload["event_type"] == "session_terminated"
        assert payload["reason"] == "exited"
        assert payload["step"] == 2
        assert "08031234567" not in str(payload)
        assert len(payload["phone_hash"]) == 16

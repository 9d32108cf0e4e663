"""Testes do ResponseRenderer (prefixos CON/END e encerramento)."""

from app.ussd.flows.base import FlowOutcome
from app.ussd.renderer import (
    GOODBYE_TEXT,
    INVALID_OPTION_NOTICE,
    SERVICE_UNAVAILABLE_TEXT,
    TRY_AGAIN_LATER_TEXT,
    MenuOutcome,
    ResponseRenderer,
    SystemOutcome,
    SystemReply,
)
from fsm import MenuNode, render_menu


def _renderer() -> ResponseRenderer:
    return ResponseRenderer("*123*456#")


class TestResponseRenderer:
    def test_menu_continues(self) -> None:
        reply = _renderer().render(MenuOutcome(MenuNode.MAIN))
        assert reply.response == f"CON {render_menu(MenuNode.MAIN)}"
        assert reply.should_close is False

    def test_invalid_option_notice_precedes_menu(self) -> None:
        reply = _renderer().render(MenuOutcome(MenuNode.HARVEST, invalid_option=True))
        assert reply.response.startswith(f"CON {INVALID_OPTION_NOTICE}\nHarvest Management")
        assert reply.should_close is False

    def test_flow_prompt_continues(self) -> None:
        reply = _renderer().render(FlowOutcome.prompt("Enter quantity in kg:"))
        assert reply.response == "CON Enter quantity in kg:"
        assert not reply.should_close

    def test_flow_completed_ends(self) -> None:
        reply = _renderer().render(FlowOutcome.completed("Done"))
        assert reply.response == "END Done"
        assert reply.should_close

    def test_flow_unavailable_ends_with_try_again(self) -> None:
        reply = _renderer().render(FlowOutcome.unavailable("catalog"))
        assert reply.response == f"END {TRY_AGAIN_LATER_TEXT}"
        assert reply.should_close

    def test_goodbye_uses_brand(self) -> None:
        reply = ResponseRenderer("*1#", brand_name="AgroX").render(
            SystemOutcome(SystemReply.GOODBYE)
        )
        assert reply.response == "END " + GOODBYE_TEXT.format(brand="AgroX")
        assert reply.should_close

    def test_unavailable(self) -> None:
        reply = _renderer().unavailable()
        assert reply.response == f"END {SERVICE_UNAVAILABLE_TEXT}"
        assert reply.should_close

    def test_stale_names_service_code(self) -> None:
        assert _renderer().stale().response == (
            "END Your session has expired. Please dial *123*456# again."
        )
        assert "*999#" in _renderer().stale("*999#").response

    def test_prefix_matches_should_close(self) -> None:
        outcomes = [
            MenuOutcome(MenuNode.MAIN),
            FlowOutcome.prompt("x"),
            FlowOutcome.completed("y"),
            FlowOutcome.unavailable("z"),
            SystemOutcome(SystemReply.GOODBYE),
            SystemOutcome(SystemReply.STALE),
        ]
        for outcome in outcomes:
            reply = _renderer().render(outcome)
            assert reply.response.startswith("END ") is reply.should_close
            assert reply.response.startswith("CON ") is not reply.should_close

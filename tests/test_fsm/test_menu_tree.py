"""
Testes da árvore de menus USSD.

Cobre: MENU_TREE, resolve_transition, render_menu, transition_table,
validate_menu_tree e os helpers de tipo de nó.
"""

import pytest

from fsm import (
    BACK_KEY,
    DEFAULT_NODE,
    EXIT_KEY,
    FLOW_NODES,
    MENU_TREE,
    MenuNode,
    MenuResolution,
    NodeKind,
    StateTransition,
    is_flow,
    is_menu,
    is_terminal,
    node_kind,
    parse_node,
    render_menu,
    resolve_transition,
    transition_table,
    validate_menu_tree,
)


class TestMenuTreeIntegrity:
    def test_tree_is_valid(self) -> None:
        assert validate_menu_tree() == []

    def test_every_menu_has_exit_and_submenus_have_back(self) -> None:
        for node, definition in MENU_TREE.items():
            assert definition.target_for(EXIT_KEY) is MenuNode.EXIT
            if node is not MenuNode.MAIN:
                assert definition.target_for(BACK_KEY) is MenuNode.MAIN

    def test_every_flow_is_reachable_by_exactly_one_option(self) -> None:
        table = transition_table()
        for flow in FLOW_NODES:
            sources = [key for key, target in table.items() if target is flow]
            assert len(sources) == 1, flow

    def test_node_kinds(self) -> None:
        assert node_kind(MenuNode.MAIN) is NodeKind.MENU
        assert is_menu(MenuNode.HARVEST)
        assert is_flow(MenuNode.LOG_HARVEST)
        assert not is_flow(MenuNode.MARKETPLACE)
        assert is_terminal(MenuNode.EXIT)
        assert DEFAULT_NODE is MenuNode.MAIN

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("harvest", MenuNode.HARVEST),
            (MenuNode.FAQ, MenuNode.FAQ),
            ("nonexistent", MenuNode.MAIN),
            (None, MenuNode.MAIN),
        ],
    )
    def test_parse_node_falls_back_to_main(self, raw: object, expected: MenuNode) -> None:
        assert parse_node(raw) is expected


class TestResolveTransition:
    def test_matched_option(self) -> None:
        resolution = resolve_transition(MenuNode.MAIN, "1")
        assert resolution.matched
        assert resolution.target is MenuNode.HARVEST

    def test_unknown_option_keeps_current_node(self) -> None:
        resolution = resolve_transition(MenuNode.HARVEST, "7")
        assert not resolution.matched
        assert resolution.target is MenuNode.HARVEST

    def test_back_and_exit(self) -> None:
        assert resolve_transition(MenuNode.SUPPORT, "9").target is MenuNode.MAIN
        assert resolve_transition(MenuNode.SUPPORT, "0").target is MenuNode.EXIT

    def test_main_has_no_back_option(self) -> None:
        resolution = resolve_transition(MenuNode.MAIN, "9")
        assert not resolution.matched
        assert resolution.target is MenuNode.MAIN

    def test_non_menu_node_resolves_from_main(self) -> None:
        resolution = resolve_transition(MenuNode.LOG_HARVEST, "2")
        assert resolution.source is MenuNode.MAIN
        assert resolution.target is MenuNode.MARKETPLACE

    def test_token_is_stripped(self) -> None:
        assert resolve_transition(MenuNode.MAIN, " 3 ").target is MenuNode.FINANCIAL

    def test_resolution_rejects_moving_on_unmatched(self) -> None:
        with pytest.raises(ValueError):
            MenuResolution(
                source=MenuNode.MAIN, target=MenuNode.HARVEST, token="x", matched=False
            )


class TestRenderMenu:
    def test_main_menu_text(self) -> None:
        assert render_menu(MenuNode.MAIN) == (
            "GroChain - Digital Agriculture\n"
            "1. Harvest Management\n"
            "2. Marketplace\n"
            "3. Financial Services\n"
            "4. Support & Training\n"
            "0. Exit"
        )

    def test_brand_name_is_configurable(self) -> None:
        assert render_menu(MenuNode.MAIN, "AgroX").startswith("AgroX - Digital Agriculture")

    def test_harvest_menu_text(self) -> None:
        assert render_menu(MenuNode.HARVEST) == (
            "Harvest Management\n"
            "1. Log New Harvest\n"
            "2. View My Harvests\n"
            "9. Back to Main Menu\n"
            "0. Exit"
        )

    def test_non_menu_renders_main(self) -> None:
        assert render_menu(MenuNode.FAQ) == render_menu(MenuNode.MAIN)


class TestStateTransition:
    def test_rejects_empty_trigger_and_step_zero(self) -> None:
        with pytest.raises(ValueError):
            StateTransition(from_node=MenuNode.MAIN, to_node=MenuNode.HARVEST, trigger=" ", step=1)
        with pytest.raises(ValueError):
            StateTransition(from_node=MenuNode.MAIN, to_node=MenuNode.HARVEST, trigger="1", step=0)

    def test_log_dict_has_no_free_text(self) -> None:
        transition = StateTransition(
            from_node=MenuNode.MAIN, to_node=MenuNode.HARVEST, trigger="1", step=1
        )
        payload = transition.to_log_dict()
        assert payload["from_node"] == "main"
        assert payload["to_node"] == "harvest"
        assert payload["step"] == 1

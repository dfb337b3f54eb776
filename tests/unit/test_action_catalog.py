"""Tests for the action catalog and availability guards."""

import pytest

from keychord.core.action_catalog import (
    ACTION_DEFS,
    ActionCategory,
    ActionContext,
    availability_check,
    get_action_def,
    get_available_palette_actions,
    get_menu_availability,
    get_palette_actions,
    get_palette_items,
    is_action_available,
    menu_id_to_action,
)
from keychord.core.actions import ActionDispatcher, check_action_id
from keychord.core.default_keymap import get_keymap
from keychord.core.keymap import ResolvedBinding
from keychord.core.keys import Platform

IN_WORKTREE = ActionContext(
    active_project_id="p1",
    active_worktree_id="w1",
    active_entity_id="w1",
    open_worktree_count=2,
)


class TestActionDefs:
    """Tests for the catalog contents."""

    def test_action_ids_are_valid(self):
        for definition in ACTION_DEFS:
            check_action_id(definition.action)

    def test_menu_ids_are_unique(self):
        menu_ids = [d.menu_id for d in ACTION_DEFS]
        assert len(menu_ids) == len(set(menu_ids))

    def test_lookup_by_action(self):
        definition = get_action_def("view::zoomIn")
        assert definition.label == "Zoom In"
        assert definition.category is ActionCategory.VIEW

    def test_lookup_by_args(self):
        assert get_action_def("navigate::toEntity", [2]).menu_id == "worktree3"
        assert get_action_def("navigate::toEntity") is None

    def test_unknown_action(self):
        assert get_action_def("app::nothing") is None


class TestMenuIds:
    """Tests for menu id mapping."""

    def test_menu_id_to_action(self):
        definition = menu_id_to_action("close_tab")
        assert definition.action == "session::closeTab"
        assert definition.label == "Close"

    def test_numbered_menu_id_carries_args(self):
        definition = menu_id_to_action("worktree3")
        assert (definition.action, definition.args) == ("navigate::toEntity", (2,))

    def test_unknown_menu_id(self):
        assert menu_id_to_action("nope") is None

    def test_menu_availability_covers_catalog(self):
        availability = get_menu_availability(ActionContext())
        assert set(availability) == {d.menu_id for d in ACTION_DEFS}
        assert availability["zoom_in"] is True
        assert availability["open_in_finder"] is False


class TestAvailability:
    """Tests for availability guards."""

    def test_new_worktree_needs_project_without_scratch(self):
        assert not is_action_available("worktree::new", ActionContext())
        assert is_action_available("worktree::new", ActionContext(active_project_id="p1"))
        scratch = ActionContext(active_project_id="p1", active_scratch_id="s1")
        assert not is_action_available("worktree::new", scratch)

    def test_close_project_only_without_worktree(self):
        assert is_action_available("project::close", ActionContext(active_project_id="p1"))
        assert not is_action_available("project::close", IN_WORKTREE)

    def test_close_tab_from_drawer_or_entity(self):
        assert not is_action_available("session::closeTab", ActionContext(is_drawer_open=True))
        drawer = ActionContext(is_drawer_open=True, active_drawer_tab_id="t1")
        assert is_action_available("session::closeTab", drawer)
        assert is_action_available("session::closeTab", ActionContext(active_entity_id="w1"))

    @pytest.mark.parametrize(("index", "expected"), [(0, True), (1, True), (2, False), (8, False)])
    def test_entity_slots_follow_open_count(self, index, expected):
        assert is_action_available("navigate::toEntity", IN_WORKTREE, (index,)) is expected

    def test_run_task_needs_selection(self):
        assert not is_action_available("task::run", IN_WORKTREE)
        ctx = ActionContext(active_entity_id="w1", active_selected_task="build")
        assert is_action_available("task::run", ctx)

    def test_previous_view(self):
        assert not is_action_available("navigate::back", ActionContext())
        assert is_action_available("navigate::back", ActionContext(has_previous_view=True))

    def test_uncatalogued_action_is_available(self):
        assert is_action_available("terminal::copy", ActionContext())


class TestPalette:
    """Tests for command palette queries."""

    def test_hidden_actions_excluded(self):
        actions = {d.action for d in get_palette_actions()}
        assert "palette::toggle" not in actions
        assert "navigate::toEntity" not in actions
        assert "scratch::new" in actions

    def test_available_actions_filtered(self):
        idle = {d.action for d in get_available_palette_actions(ActionContext())}
        assert "scratch::new" in idle
        assert "worktree::merge" not in idle
        assert "worktree::merge" in {d.action for d in get_available_palette_actions(IN_WORKTREE)}

    def test_items_carry_shortcuts(self):
        items = {item.definition.action: item for item in get_palette_items(get_keymap(), platform=Platform.OTHER)}
        assert items["scratch::new"].shortcut == "cmd-shift-n"
        assert items["scratch::new"].shortcut_label == "Ctrl+Shift+N"
        assert items["view::zoomIn"].shortcut == "cmd-="

    def test_items_with_context(self):
        items = get_palette_items(get_keymap(), ActionContext(), Platform.MAC)
        assert {item.definition.action for item in items} == {d.action for d in get_available_palette_actions(ActionContext())}


class TestAvailabilityCheck:
    """Tests for gating dispatch on the catalog."""

    def test_unavailable_action_not_dispatched(self):
        state = {"ctx": ActionContext()}
        calls = []
        dispatcher = ActionDispatcher(
            {"worktree::merge": lambda: calls.append("merge")},
            is_available=availability_check(lambda: state["ctx"]),
        )
        resolved = ResolvedBinding(action_id="worktree::merge", args=(), action="worktree::merge")
        assert dispatcher.dispatch(resolved) is False
        assert calls == []

        state["ctx"] = IN_WORKTREE
        assert dispatcher.dispatch(resolved) is True
        assert calls == ["merge"]

    def test_slot_args_reach_guard(self):
        seen = []
        dispatcher = ActionDispatcher(
            {"navigate::toEntity": seen.append},
            is_available=availability_check(lambda: IN_WORKTREE),
        )
        assert dispatcher.execute("navigate::toEntity", (1,)) is True
        assert dispatcher.execute("navigate::toEntity", (5,)) is False
        assert seen == [1]

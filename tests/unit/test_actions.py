"""Tests for action dispatch."""

import pytest

from keychord.core.actions import (
    ACTION_NAMESPACES,
    ActionDispatcher,
    UnknownActionError,
    check_action_id,
    execute_action,
)
from keychord.core.keymap import ResolvedBinding


class TestExecuteAction:
    """Tests for execute_action."""

    def test_handler_runs_with_args(self):
        calls = []
        handled = execute_action("navigate::toEntity", (2,), {"navigate::toEntity": calls.append})
        assert handled is True
        assert calls == [2]

    def test_no_handler_not_suppressed(self):
        assert execute_action("app::quit", (), {}) is False

    def test_explicit_false_not_suppressed(self):
        # e.g. terminal copy with no selection lets the key reach the terminal
        assert execute_action("terminal::copy", (), {"terminal::copy": lambda: False}) is False

    def test_none_result_is_suppressed(self):
        assert execute_action("terminal::copy", (), {"terminal::copy": lambda: None}) is True

    def test_falsy_non_false_result_is_suppressed(self):
        assert execute_action("app::count", (), {"app::count": lambda: 0}) is True

    def test_handler_errors_propagate(self):
        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            execute_action("app::boom", (), {"app::boom": boom})

    def test_dispatch_debug_event(self, debug_events):
        execute_action("app::quit", (), {})
        events = [event for event in debug_events() if event.name == "keybinding.dispatch"]
        assert events[0].data == {"action": "app::quit", "handled": False, "reason": "no handler"}


class TestCheckActionId:
    """Tests for action id validation at registration."""

    def test_known_namespace(self):
        assert check_action_id("panel::toggleRight") == "panel::toggleRight"

    def test_unknown_namespace(self):
        with pytest.raises(UnknownActionError, match="namespace 'bogus'"):
            check_action_id("bogus::thing")

    def test_malformed(self):
        with pytest.raises(UnknownActionError):
            check_action_id("toggle")

    def test_namespaces_are_lowercase(self):
        assert all(ns == ns.lower() for ns in ACTION_NAMESPACES)


class TestActionDispatcher:
    """Tests for ActionDispatcher."""

    def test_register_and_execute(self):
        seen = []
        dispatcher = ActionDispatcher({"drawer::selectTab": seen.append})
        assert dispatcher.execute("drawer::selectTab", [3])
        assert seen == [3]

    def test_register_rejects_unknown_namespace(self):
        dispatcher = ActionDispatcher()
        with pytest.raises(UnknownActionError):
            dispatcher.register("rightPanel::toggle", lambda: None)

    def test_constructor_validates(self):
        with pytest.raises(UnknownActionError):
            ActionDispatcher({"nope::x": lambda: None})

    def test_unregister(self):
        dispatcher = ActionDispatcher({"app::quit": lambda: None})
        assert dispatcher.has_handler("app::quit")
        dispatcher.unregister("app::quit")
        assert not dispatcher.has_handler("app::quit")
        dispatcher.unregister("app::quit")

    def test_action_ids_sorted(self):
        dispatcher = ActionDispatcher({"view::zoomIn": lambda: None, "app::quit": lambda: None})
        assert dispatcher.action_ids == ["app::quit", "view::zoomIn"]

    def test_dispatch_resolved_binding(self):
        seen = []
        dispatcher = ActionDispatcher({"navigate::toEntity": seen.append})
        resolved = ResolvedBinding(action=["navigate::toEntity", 4], action_id="navigate::toEntity", args=(4,))
        assert dispatcher.dispatch(resolved)
        assert seen == [4]

    def test_dispatch_none(self):
        assert ActionDispatcher().dispatch(None) is False

    def test_copy_without_selection_falls_through(self):
        selection = {"text": ""}

        def copy():
            if not selection["text"]:
                return False
            return None

        dispatcher = ActionDispatcher({"terminal::copy": copy})
        assert dispatcher.execute("terminal::copy") is False
        selection["text"] = "hello"
        assert dispatcher.execute("terminal::copy") is True

    def test_unavailable_action_lets_key_through(self, debug_events):
        calls = []
        dispatcher = ActionDispatcher(
            {"worktree::merge": lambda: calls.append("merge")},
            is_available=lambda action_id, args: False,
        )
        assert dispatcher.execute("worktree::merge") is False
        assert calls == []
        events = [event for event in debug_events() if event.name == "keybinding.dispatch"]
        assert events[0].data == {"action": "worktree::merge", "handled": False, "reason": "unavailable"}

    def test_availability_sees_args(self):
        seen = []
        dispatcher = ActionDispatcher(
            {"drawer::selectTab": lambda index: None},
            is_available=lambda action_id, args: seen.append((action_id, args)) is None,
        )
        assert dispatcher.dispatch(ResolvedBinding(action=["drawer::selectTab", 1], action_id="drawer::selectTab", args=(1,)))
        assert seen == [("drawer::selectTab", (1,))]

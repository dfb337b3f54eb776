"""Action identifiers and the handler dispatcher."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from keychord.core.keymap import ActionId, ResolvedBinding, is_valid_action_id, parse_action_id
from keychord.shared.core.debug_events import emit_debug_event

# Returns False to let the originating key event through; anything else
# (including None) means the event was handled.
ActionHandler = Callable[..., Any]
# (action_id, args) -> whether the action may run now
AvailabilityCheck = Callable[[ActionId, tuple[Any, ...]], bool]


class ActionNamespace(str, Enum):
    """Closed set of action namespaces."""

    APP = "app"
    DRAWER = "drawer"
    SESSION = "session"
    SCRATCH = "scratch"
    WORKTREE = "worktree"
    PROJECT = "project"
    NAVIGATE = "navigate"
    FOCUS = "focus"
    VIEW = "view"
    PANEL = "panel"
    PALETTE = "palette"
    TASK = "task"
    TERMINAL = "terminal"
    MODAL = "modal"


ACTION_NAMESPACES: frozenset[str] = frozenset(ns.value for ns in ActionNamespace)


class UnknownActionError(ValueError):
    """Raised when a handler is registered for a malformed or unknown action id."""


def check_action_id(action_id: str) -> ActionId:
    """Validate an action id against the format and the namespace vocabulary."""
    if not is_valid_action_id(action_id):
        raise UnknownActionError(f"Invalid action id '{action_id}', expected 'namespace::name'")
    namespace = parse_action_id(action_id).namespace
    if namespace not in ACTION_NAMESPACES:
        raise UnknownActionError(f"Unknown action namespace '{namespace}' in '{action_id}'")
    return action_id


def execute_action(action_id: ActionId, args: tuple[Any, ...] | list[Any], handlers: Mapping[str, ActionHandler]) -> bool:
    """Run the handler for an action.

    Returns True when the key event should be suppressed: a handler exists
    and did not explicitly return False.
    """
    handler = handlers.get(action_id)
    if handler is None:
        emit_debug_event("keybinding.dispatch", category="keybinding", action=action_id, handled=False, reason="no handler")
        return False
    result = handler(*args)
    handled = result is not False
    emit_debug_event("keybinding.dispatch", category="keybinding", action=action_id, handled=handled)
    return handled


class ActionDispatcher:
    """Handler table keyed by validated action ids.

    An optional availability check runs before the handler; an unavailable
    action is not executed and the key event is let through.
    """

    def __init__(
        self,
        handlers: Mapping[str, ActionHandler] | None = None,
        *,
        is_available: AvailabilityCheck | None = None,
    ) -> None:
        self._handlers: dict[ActionId, ActionHandler] = {}
        self._is_available = is_available
        for action_id, handler in (handlers or {}).items():
            self.register(action_id, handler)

    def register(self, action_id: str, handler: ActionHandler) -> None:
        self._handlers[check_action_id(action_id)] = handler

    def unregister(self, action_id: str) -> None:
        self._handlers.pop(action_id, None)

    def has_handler(self, action_id: str) -> bool:
        return action_id in self._handlers

    @property
    def action_ids(self) -> list[ActionId]:
        return sorted(self._handlers)

    def execute(self, action_id: ActionId, args: tuple[Any, ...] | list[Any] = ()) -> bool:
        if self._is_available is not None and not self._is_available(action_id, tuple(args)):
            emit_debug_event(
                "keybinding.dispatch", category="keybinding", action=action_id, handled=False, reason="unavailable"
            )
            return False
        return execute_action(action_id, args, self._handlers)

    def dispatch(self, resolved: ResolvedBinding | None) -> bool:
        """Execute a resolved binding; returns whether to suppress the key event."""
        if resolved is None:
            return False
        return self.execute(resolved.action_id, resolved.args)

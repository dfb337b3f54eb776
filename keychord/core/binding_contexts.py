"""Resolve active keybinding contexts from the input context."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from keychord.core.input_context import ContextState, FocusTarget, SessionKind

ActiveContexts = frozenset[str]


class ContextFlag(str, Enum):
    """Closed vocabulary of context flags."""

    # View focus (mutually exclusive)
    SCRATCH_FOCUSED = "scratchFocused"
    WORKTREE_FOCUSED = "worktreeFocused"
    PROJECT_FOCUSED = "projectFocused"
    # Panel focus
    DRAWER_FOCUSED = "drawerFocused"
    MAIN_FOCUSED = "mainFocused"
    # UI state
    DRAWER_OPEN = "drawerOpen"
    RIGHT_PANEL_OPEN = "rightPanelOpen"
    PICKER_OPEN = "pickerOpen"
    COMMAND_PALETTE_OPEN = "commandPaletteOpen"
    TASK_SWITCHER_OPEN = "taskSwitcherOpen"
    PROJECT_SWITCHER_OPEN = "projectSwitcherOpen"
    MODAL_OPEN = "modalOpen"
    DIFF_VIEW_OPEN = "diffViewOpen"
    HAS_SPLITS = "hasSplits"
    # Entity state
    HAS_MULTIPLE_ENTITIES = "hasMultipleEntities"
    HAS_PREVIOUS_VIEW = "hasPreviousView"
    HAS_NEXT_VIEW = "hasNextView"


CONTEXT_FLAGS: frozenset[str] = frozenset(flag.value for flag in ContextFlag)

_SESSION_FOCUS_FLAGS = {
    SessionKind.SCRATCH: ContextFlag.SCRATCH_FOCUSED,
    SessionKind.WORKTREE: ContextFlag.WORKTREE_FOCUSED,
    SessionKind.PROJECT: ContextFlag.PROJECT_FOCUSED,
}


def _view_focus_flag(state: ContextState) -> ContextFlag | None:
    # An explicit session kind replaces the legacy ids, it is never merged with them.
    if state.active_session_kind is not None:
        return _SESSION_FOCUS_FLAGS.get(SessionKind(state.active_session_kind))
    if state.active_scratch_id:
        return ContextFlag.SCRATCH_FOCUSED
    if state.active_worktree_id:
        return ContextFlag.WORKTREE_FOCUSED
    if state.active_project_id:
        return ContextFlag.PROJECT_FOCUSED
    return None


def get_active_contexts(state: ContextState) -> ActiveContexts:
    """Determine which keybinding contexts should be active."""
    contexts: set[ContextFlag] = set()

    view_flag = _view_focus_flag(state)
    if view_flag is not None:
        contexts.add(view_flag)

    if state.is_drawer_open and state.focus_state == FocusTarget.DRAWER:
        contexts.add(ContextFlag.DRAWER_FOCUSED)
    if state.focus_state == FocusTarget.MAIN:
        contexts.add(ContextFlag.MAIN_FOCUSED)

    if state.is_drawer_open:
        contexts.add(ContextFlag.DRAWER_OPEN)
    if state.is_right_panel_open:
        contexts.add(ContextFlag.RIGHT_PANEL_OPEN)

    if state.is_command_palette_open or state.is_task_switcher_open or state.is_project_switcher_open:
        contexts.add(ContextFlag.PICKER_OPEN)
    if state.is_command_palette_open:
        contexts.add(ContextFlag.COMMAND_PALETTE_OPEN)
    if state.is_task_switcher_open:
        contexts.add(ContextFlag.TASK_SWITCHER_OPEN)
    if state.is_project_switcher_open:
        contexts.add(ContextFlag.PROJECT_SWITCHER_OPEN)

    if state.has_open_modal:
        contexts.add(ContextFlag.MODAL_OPEN)
    if state.is_diff_view_open:
        contexts.add(ContextFlag.DIFF_VIEW_OPEN)
    if state.has_splits:
        contexts.add(ContextFlag.HAS_SPLITS)

    if state.open_entity_count > 1:
        contexts.add(ContextFlag.HAS_MULTIPLE_ENTITIES)
    if state.has_previous_view:
        contexts.add(ContextFlag.HAS_PREVIOUS_VIEW)
    if state.has_next_view:
        contexts.add(ContextFlag.HAS_NEXT_VIEW)

    return frozenset(flag.value for flag in contexts)


def make_contexts(flags: Iterable[str | ContextFlag]) -> ActiveContexts:
    """Build an active context set from flag names (tests, tooling, CLI)."""
    return frozenset(flag.value if isinstance(flag, ContextFlag) else str(flag) for flag in flags)


def has_context(contexts: ActiveContexts, flag: str | ContextFlag) -> bool:
    name = flag.value if isinstance(flag, ContextFlag) else flag
    return name in contexts


def is_known_context_flag(name: str) -> bool:
    return name in CONTEXT_FLAGS


def format_contexts(contexts: Iterable[str]) -> str:
    """Format active contexts for debugging."""
    return ", ".join(sorted(contexts))

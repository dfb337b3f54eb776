"""UI-agnostic snapshot of host state used to derive keybinding contexts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SessionKind(str, Enum):
    SCRATCH = "scratch"
    WORKTREE = "worktree"
    PROJECT = "project"


class FocusTarget(str, Enum):
    MAIN = "main"
    DRAWER = "drawer"


@dataclass(frozen=True)
class ContextState:
    """Snapshot of UI state for context flag derivation.

    Built by the host from its own (mutable) panel, session and focus maps on
    every evaluation; the engine never holds on to it.
    """

    active_session_id: str | None = None
    active_session_kind: SessionKind | None = None
    # Legacy per-kind ids, only consulted when active_session_kind is None
    active_scratch_id: str | None = None
    active_worktree_id: str | None = None
    active_project_id: str | None = None
    focus_state: FocusTarget = FocusTarget.MAIN
    is_drawer_open: bool = False
    is_right_panel_open: bool = False
    is_command_palette_open: bool = False
    is_task_switcher_open: bool = False
    is_project_switcher_open: bool = False
    has_open_modal: bool = False
    open_entity_count: int = 0
    has_previous_view: bool = False
    has_next_view: bool = False
    is_diff_view_open: bool = False
    has_splits: bool = False

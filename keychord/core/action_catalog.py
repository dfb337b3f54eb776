"""Action catalog: labels, menu ids and availability guards.

The catalog answers "can this action run right now?" for menus, the command
palette and key dispatch, independently of which chord is bound to it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from keychord.core.keymap import ActionId, Keymap, get_shortcut
from keychord.core.keys import Platform
from keychord.core.shortcuts import format_chord


@dataclass(frozen=True)
class ActionContext:
    """Host state the availability guards read."""

    active_project_id: str | None = None
    active_worktree_id: str | None = None
    active_scratch_id: str | None = None
    active_entity_id: str | None = None
    is_drawer_open: bool = False
    is_drawer_focused: bool = False
    active_drawer_tab_id: str | None = None
    open_worktree_count: int = 0
    has_previous_view: bool = False
    active_selected_task: str | None = None
    task_count: int = 0


class ActionCategory(str, Enum):
    FILE = "File"
    VIEW = "View"
    NAVIGATE = "Navigate"
    TASKS = "Tasks"
    HELP = "Help"


ActionGuard = Callable[[ActionContext], bool]


def _always(ctx: ActionContext) -> bool:
    return True


@dataclass(frozen=True)
class ActionDef:
    """Definition of a catalogued action."""

    action: ActionId  # The action id (e.g., "view::zoomIn")
    label: str  # Display label
    category: ActionCategory  # Palette/menu grouping
    menu_id: str  # Menu item id in the host's menu bar
    guard: ActionGuard = _always  # Availability predicate
    args: tuple[Any, ...] = ()  # Bound arguments (e.g., entity index)
    show_in_palette: bool = True  # Whether the command palette lists it

    def is_available(self, ctx: ActionContext) -> bool:
        return bool(self.guard(ctx))


@dataclass(frozen=True)
class PaletteItem:
    """A command palette row."""

    definition: ActionDef
    shortcut: str | None  # Bound chord, if any
    shortcut_label: str | None  # Chord formatted for the platform


def _has_entity(ctx: ActionContext) -> bool:
    return ctx.active_entity_id is not None


def _has_worktree(ctx: ActionContext) -> bool:
    return ctx.active_worktree_id is not None


def _entity_slot_guard(index: int) -> ActionGuard:
    return lambda ctx: ctx.open_worktree_count > index


def _build_action_defs() -> tuple[ActionDef, ...]:
    file, view, navigate, tasks, help_ = (
        ActionCategory.FILE,
        ActionCategory.VIEW,
        ActionCategory.NAVIGATE,
        ActionCategory.TASKS,
        ActionCategory.HELP,
    )
    defs = [
        # File
        ActionDef("project::add", "Add Project", file, "add_project"),
        ActionDef("palette::projectSwitcher", "Switch Project", file, "switch_project"),
        ActionDef(
            "worktree::new",
            "New Worktree",
            file,
            "new_worktree",
            guard=lambda ctx: ctx.active_project_id is not None and ctx.active_scratch_id is None,
        ),
        ActionDef("scratch::new", "New Scratch Terminal", file, "new_scratch_terminal"),
        ActionDef(
            "session::closeTab",
            "Close",
            file,
            "close_tab",
            guard=lambda ctx: (ctx.is_drawer_open and ctx.active_drawer_tab_id is not None)
            or ctx.active_entity_id is not None,
        ),
        ActionDef("app::openInFinder", "Open in Finder", file, "open_in_finder", guard=_has_entity),
        ActionDef("app::openInTerminal", "Open in Terminal", file, "open_in_terminal", guard=_has_entity),
        ActionDef("app::openInEditor", "Open in Editor", file, "open_in_editor", guard=_has_entity),
        ActionDef(
            "project::close",
            "Close Project",
            file,
            "close_project",
            guard=lambda ctx: ctx.active_project_id is not None and ctx.active_worktree_id is None,
        ),
        # View
        ActionDef("palette::toggle", "Command Palette", view, "command_palette", show_in_palette=False),
        ActionDef("drawer::toggle", "Toggle Drawer", view, "toggle_drawer", guard=_has_entity),
        ActionDef(
            "drawer::expand",
            "Expand Drawer",
            view,
            "expand_drawer",
            guard=lambda ctx: ctx.active_entity_id is not None and ctx.is_drawer_open,
        ),
        ActionDef("panel::toggleRight", "Toggle Changed Files", view, "toggle_right_panel", guard=_has_entity),
        ActionDef("view::zoomIn", "Zoom In", view, "zoom_in"),
        ActionDef("view::zoomOut", "Zoom Out", view, "zoom_out"),
        ActionDef("view::zoomReset", "Reset Zoom", view, "zoom_reset"),
        # Navigate
        ActionDef(
            "navigate::prev",
            "Previous Worktree",
            navigate,
            "worktree_prev",
            guard=lambda ctx: ctx.open_worktree_count > 0,
        ),
        ActionDef(
            "navigate::next",
            "Next Worktree",
            navigate,
            "worktree_next",
            guard=lambda ctx: ctx.open_worktree_count > 0,
        ),
        ActionDef(
            "navigate::back",
            "Previous View",
            navigate,
            "previous_view",
            guard=lambda ctx: ctx.has_previous_view,
        ),
        ActionDef("focus::switch", "Switch Focus", navigate, "switch_focus", guard=_has_entity),
    ]
    # Numbered slots clutter the palette; they stay reachable by key and menu.
    defs.extend(
        ActionDef(
            "navigate::toEntity",
            f"Go to Worktree {n}",
            navigate,
            f"worktree{n}",
            guard=_entity_slot_guard(n - 1),
            args=(n - 1,),
            show_in_palette=False,
        )
        for n in range(1, 10)
    )
    defs.extend(
        [
            ActionDef("worktree::renameBranch", "Rename Branch", navigate, "rename_branch", guard=_has_worktree),
            ActionDef("worktree::merge", "Merge Worktree", navigate, "merge_worktree", guard=_has_worktree),
            ActionDef("worktree::delete", "Delete Worktree", navigate, "delete_worktree", guard=_has_worktree),
            # Tasks
            ActionDef(
                "task::run",
                "Run Task",
                tasks,
                "run_task",
                guard=lambda ctx: ctx.active_entity_id is not None and ctx.active_selected_task is not None,
            ),
            ActionDef("task::switcher", "Task Switcher", tasks, "task_switcher", guard=lambda ctx: ctx.task_count > 0),
            # Help
            ActionDef("app::helpDocs", "Help", help_, "help_docs"),
            ActionDef("app::reportIssue", "Report Issue", help_, "help_report_issue"),
            ActionDef("app::releaseNotes", "Release Notes", help_, "help_release_notes"),
        ]
    )
    return tuple(defs)


ACTION_DEFS: tuple[ActionDef, ...] = _build_action_defs()

_DEFS_BY_ACTION: dict[tuple[ActionId, tuple[Any, ...]], ActionDef] = {(d.action, d.args): d for d in ACTION_DEFS}
_DEFS_BY_MENU_ID: dict[str, ActionDef] = {d.menu_id: d for d in ACTION_DEFS}


def get_action_def(action_id: ActionId, args: tuple[Any, ...] | list[Any] = ()) -> ActionDef | None:
    return _DEFS_BY_ACTION.get((action_id, tuple(args)))


def menu_id_to_action(menu_id: str) -> ActionDef | None:
    """Map a menu item id back to its action definition."""
    return _DEFS_BY_MENU_ID.get(menu_id)


def is_action_available(action_id: ActionId, ctx: ActionContext, args: tuple[Any, ...] | list[Any] = ()) -> bool:
    """Check an action's guard. Actions outside the catalog have no guard."""
    definition = get_action_def(action_id, args)
    return definition is None or definition.is_available(ctx)


def get_menu_availability(ctx: ActionContext) -> dict[str, bool]:
    """Availability of every catalogued action, keyed by menu item id."""
    return {d.menu_id: d.is_available(ctx) for d in ACTION_DEFS}


def get_palette_actions() -> list[ActionDef]:
    return [d for d in ACTION_DEFS if d.show_in_palette]


def get_available_palette_actions(ctx: ActionContext) -> list[ActionDef]:
    return [d for d in get_palette_actions() if d.is_available(ctx)]


def get_palette_items(
    keymap: Keymap,
    ctx: ActionContext | None = None,
    platform: Platform | None = None,
) -> list[PaletteItem]:
    """Build palette rows with their bound shortcuts.

    With a context only available actions are listed.
    """
    definitions = get_palette_actions() if ctx is None else get_available_palette_actions(ctx)
    items: list[PaletteItem] = []
    for definition in definitions:
        chord = get_shortcut(definition.action, keymap, definition.args or None)
        items.append(
            PaletteItem(
                definition=definition,
                shortcut=chord,
                shortcut_label=format_chord(chord, platform) if chord else None,
            )
        )
    return items


def availability_check(get_context: Callable[[], ActionContext]) -> Callable[[ActionId, tuple[Any, ...]], bool]:
    """Adapt the catalog to `ActionDispatcher(is_available=...)`.

    ``get_context`` is called on every dispatch so guards see current state.
    """
    return lambda action_id, args: is_action_available(action_id, get_context(), args)

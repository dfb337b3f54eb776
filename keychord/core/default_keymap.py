"""Keymap providers and the process-wide active keymap."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from keychord.core.keymap import Keymap, split_action
from keychord.core.mapping_source import DEFAULT_SOURCE, MappingsIssue, build_keymap, compile_raw_mappings
from keychord.shared.core.debug_events import emit_debug_event


class KeymapProvider(ABC):
    """Abstract base class for keymap providers."""

    @abstractmethod
    def get_raw_mappings(self) -> dict[str, Any]:
        """Get the raw mappings document this provider is built from."""
        raise NotImplementedError

    @abstractmethod
    def get_keymap(self) -> Keymap:
        """Get the compiled keymap."""
        raise NotImplementedError

    @property
    def errors(self) -> list[MappingsIssue]:
        return []


class DefaultKeymapProvider(KeymapProvider):
    """Built-in bindings, optionally layered with user mapping text."""

    def __init__(self, user_text: str | None = None, *, strict: bool = False, strict_flags: bool = False) -> None:
        self._user_text = user_text
        self._strict = strict
        self._strict_flags = strict_flags
        self._keymap_cache: Keymap | None = None
        self._errors: list[MappingsIssue] = []

    def get_raw_mappings(self) -> dict[str, Any]:
        return self._build_raw_mappings()

    def get_keymap(self) -> Keymap:
        if self._keymap_cache is None:
            defaults = compile_raw_mappings(self._build_raw_mappings(), DEFAULT_SOURCE)
            result = build_keymap(defaults, self._user_text, strict=self._strict, strict_flags=self._strict_flags)
            self._errors = result.errors
            self._keymap_cache = result.keymap
        return self._keymap_cache

    @property
    def errors(self) -> list[MappingsIssue]:
        self.get_keymap()
        return list(self._errors)

    def _build_raw_mappings(self) -> dict[str, Any]:
        return {
            "bindings": [
                # Global
                {
                    "bindings": {
                        "cmd-shift-p": "palette::toggle",
                        "cmd-o": "palette::projectSwitcher",
                        "cmd-;": "task::switcher",
                        "cmd-r": "task::run",
                        "ctrl-`": "drawer::toggle",
                        "cmd-b": "panel::toggleRight",
                        "cmd-\\": "focus::switch",
                        "cmd-=": "view::zoomIn",
                        "cmd-+": "view::zoomIn",
                        "cmd--": "view::zoomOut",
                        "cmd-0": "view::zoomReset",
                        "cmd-n": "worktree::new",
                        "cmd-shift-n": "scratch::new",
                        "cmd-t": "session::newTab",
                        "cmd-[": "navigate::prev",
                        "cmd-]": "navigate::next",
                        **{f"cmd-{n}": ["navigate::toEntity", n - 1] for n in range(1, 10)},
                    }
                },
                {"context": "hasPreviousView", "bindings": {"cmd-'": "navigate::back"}},
                {"context": "hasNextView", "bindings": {"cmd-shift-'": "navigate::forward"}},
                # Main pane, per session kind
                {"context": "scratchFocused && mainFocused", "bindings": {"cmd-w": "scratch::close", "cmd-shift-r": "scratch::renameSession"}},
                {"context": "worktreeFocused && mainFocused", "bindings": {"cmd-w": "worktree::close", "cmd-shift-r": "worktree::renameBranch"}},
                {"context": "projectFocused && mainFocused", "bindings": {"cmd-w": "project::close"}},
                {
                    "context": "mainFocused && hasSplits",
                    "bindings": {"cmd-w": "session::closeTab", "ctrl-tab": "session::nextTab", "ctrl-shift-tab": "session::prevTab"},
                },
                # Drawer
                {
                    "context": "drawerFocused",
                    "bindings": {
                        "cmd-w": "drawer::closeTab",
                        "cmd-t": "drawer::newTab",
                        "ctrl-tab": "drawer::nextTab",
                        "ctrl-shift-tab": "drawer::prevTab",
                        "cmd-shift-enter": "drawer::expand",
                        **{f"cmd-{n}": ["drawer::selectTab", n - 1] for n in range(1, 10)},
                    },
                },
                # Terminal clipboard
                {"context": "mainFocused || drawerFocused", "bindings": {"cmd-c": "terminal::copy", "cmd-v": "terminal::paste"}},
                # Overlays
                {"context": "diffViewOpen && !pickerOpen", "bindings": {"escape": "view::closeDiff"}},
                {"context": "pickerOpen", "bindings": {"escape": "palette::close"}},
                {"context": "modalOpen", "bindings": {"escape": "modal::close"}},
            ]
        }


# Global keymap provider instance
_keymap_provider: KeymapProvider | None = None


def get_keymap_provider() -> KeymapProvider:
    """Get the current keymap provider."""
    global _keymap_provider
    if _keymap_provider is None:
        _keymap_provider = DefaultKeymapProvider()
        emit_keybinding_snapshot(_keymap_provider)
    return _keymap_provider


def get_keymap() -> Keymap:
    """Get the compiled keymap of the current provider."""
    return get_keymap_provider().get_keymap()


def set_keymap(provider: KeymapProvider) -> None:
    """Publish a new keymap provider.

    The provider's table is compiled before it is published, so readers only
    ever see a complete keymap.
    """
    global _keymap_provider
    provider.get_keymap()
    _keymap_provider = provider
    emit_keybinding_snapshot(provider)


def reload_user_mappings(
    user_text: str | None, *, strict: bool = False, strict_flags: bool = False
) -> list[MappingsIssue]:
    """Rebuild the default provider with new user mapping text and publish it."""
    provider = DefaultKeymapProvider(user_text, strict=strict, strict_flags=strict_flags)
    set_keymap(provider)
    return provider.errors


def reset_keymap() -> None:
    """Reset to default keymap provider."""
    global _keymap_provider
    _keymap_provider = None


def emit_keybinding_snapshot(provider: KeymapProvider | None = None) -> None:
    """Emit debug events for the current keymap bindings."""
    provider = provider or get_keymap_provider()
    for index, group in enumerate(provider.get_keymap().groups):
        for chord, action in group.bindings.items():
            parts = split_action(action)
            emit_debug_event(
                "keybinding.register",
                category="keybinding",
                source="snapshot",
                provider=provider.__class__.__name__,
                group=index,
                key=chord,
                action=parts[0] if parts else None,
                context=group.context_source,
            )

"""Textual integration: feed Textual key events through the keymap."""

from __future__ import annotations

from textual.events import Key

from keychord.core.actions import ActionDispatcher
from keychord.core.binding_contexts import get_active_contexts
from keychord.core.default_keymap import get_keymap
from keychord.core.input_context import ContextState
from keychord.core.key_router import resolve_key_event
from keychord.core.keymap import Keymap, ResolvedBinding
from keychord.core.keys import KeyEvent, Platform

# Textual key name -> (key, physical code) in the host-neutral KeyEvent form.
TEXTUAL_KEYS: dict[str, tuple[str, str]] = {
    "space": (" ", "Space"),
    "escape": ("Escape", "Escape"),
    "up": ("ArrowUp", "ArrowUp"),
    "down": ("ArrowDown", "ArrowDown"),
    "left": ("ArrowLeft", "ArrowLeft"),
    "right": ("ArrowRight", "ArrowRight"),
    "enter": ("Enter", "Enter"),
    "tab": ("Tab", "Tab"),
    "backspace": ("Backspace", "Backspace"),
    "delete": ("Delete", "Delete"),
    "home": ("Home", "Home"),
    "end": ("End", "End"),
    "pageup": ("PageUp", "PageUp"),
    "pagedown": ("PageDown", "PageDown"),
    "backslash": ("\\", "Backslash"),
    "slash": ("/", "Slash"),
    "left_square_bracket": ("[", "BracketLeft"),
    "right_square_bracket": ("]", "BracketRight"),
    "grave_accent": ("`", "Backquote"),
    "apostrophe": ("'", "Quote"),
    "minus": ("-", "Minus"),
    "plus": ("+", ""),
    "equals_sign": ("=", "Equal"),
    "semicolon": (";", "Semicolon"),
    "comma": (",", "Comma"),
    "full_stop": (".", "Period"),
}

# Textual modifier prefix -> KeyEvent field. "super" is the Cmd key under the
# kitty keyboard protocol; terminals report Option as alt or meta.
TEXTUAL_MODIFIERS: dict[str, str] = {
    "ctrl": "ctrl",
    "shift": "shift",
    "alt": "alt",
    "meta": "alt",
    "super": "meta",
}


def key_event_from_textual(event: Key) -> KeyEvent:
    """Convert a Textual key event to a KeyEvent."""
    *prefixes, name = event.key.split("+")
    flags = {"meta": False, "ctrl": False, "alt": False, "shift": False}
    for prefix in prefixes:
        field_name = TEXTUAL_MODIFIERS.get(prefix)
        if field_name:
            flags[field_name] = True

    if name in TEXTUAL_KEYS:
        key, code = TEXTUAL_KEYS[name]
    elif len(name) == 1:
        key, code = name, ""
        if name.isalpha() and name.isupper():
            flags["shift"] = True
            key = name.lower()
    elif event.character and len(event.character) == 1 and event.character.isprintable():
        key, code = event.character, ""
    else:
        key, code = name, ""

    return KeyEvent(key=key, code=code, **flags)


class KeybindingMixin:
    """Mixin for a Textual App routing key presses through the keymap.

    Hosts provide the context snapshot and the dispatcher; everything else
    is stateless per key press.
    """

    keybinding_platform: Platform | None = None

    def get_context_state(self) -> ContextState:
        raise NotImplementedError

    def get_action_dispatcher(self) -> ActionDispatcher:
        raise NotImplementedError

    def get_active_keymap(self) -> Keymap:
        return get_keymap()

    def resolve_textual_key(self, event: Key) -> ResolvedBinding | None:
        contexts = get_active_contexts(self.get_context_state())
        return resolve_key_event(
            key_event_from_textual(event),
            contexts,
            self.get_active_keymap(),
            self.keybinding_platform,
        )

    def on_key(self, event: Key) -> None:
        """Route key presses through the keymap."""
        resolved = self.resolve_textual_key(event)
        if resolved is None:
            return
        if self.get_action_dispatcher().dispatch(resolved):
            event.prevent_default()
            event.stop()

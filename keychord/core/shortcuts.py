"""Platform shortcut matching and display formatting.

This is the context-free path for call sites that only need "does this event
match this one shortcut", independent of any keymap. Shortcut strings use
the same chord syntax as mapping files (``cmd+shift+p`` or ``cmd-shift-p``),
where ``cmd`` means Cmd on macOS and Ctrl elsewhere.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Union

from keychord.core.keys import (
    NAMED_KEYS,
    PUNCTUATION_KEY_CODES,
    KeyEvent,
    Platform,
    detect_platform,
    split_chord,
)

PlatformShortcut = Mapping[str, str]  # {"mac": ..., "other": ...}
ShortcutEntry = Union[str, PlatformShortcut]
Shortcut = Union[str, PlatformShortcut, Sequence[ShortcutEntry]]

# Keys matched by physical code as well as by produced key name.
SHORTCUT_KEY_CODES: dict[str, str] = {**PUNCTUATION_KEY_CODES, "escape": "Escape"}

MAC_DISPLAY_KEYS: dict[str, str] = {
    "cmd": "⌘",
    "ctrl": "⌃",
    "alt": "⌥",
    "shift": "⇧",
}

OTHER_DISPLAY_KEYS: dict[str, str] = {
    "cmd": "Ctrl",
    "ctrl": "Ctrl",
    "alt": "Alt",
    "shift": "Shift",
}

NAMED_DISPLAY_KEYS: dict[str, str] = {
    "escape": "Esc",
    "space": "Space",
    "enter": "Enter",
    "tab": "Tab",
    "backspace": "Backspace",
    "up": "↑",
    "down": "↓",
    "left": "←",
    "right": "→",
    "=": "+",
}

DISPLAY_MODIFIER_ORDER: tuple[str, ...] = ("ctrl", "alt", "shift", "cmd")


def _is_platform_shortcut(value: object) -> bool:
    return isinstance(value, Mapping) and ("mac" in value or "other" in value)


def _platform_string(shortcut: PlatformShortcut, platform: Platform) -> str | None:
    return shortcut.get("mac") if platform == Platform.MAC else shortcut.get("other")


def resolve_shortcut(shortcut: Shortcut, platform: Platform | None = None) -> list[str]:
    """Expand a shortcut config into the shortcut strings for a platform."""
    platform = platform or detect_platform()
    if isinstance(shortcut, str):
        return [shortcut]
    if _is_platform_shortcut(shortcut):
        value = _platform_string(shortcut, platform)  # type: ignore[arg-type]
        return [value] if value else []
    if isinstance(shortcut, Sequence):
        result: list[str] = []
        for entry in shortcut:
            result.extend(resolve_shortcut(entry, platform))
        return result
    return []


def _event_key_matches(event: KeyEvent, key: str) -> bool:
    expected_code = SHORTCUT_KEY_CODES.get(key)
    if expected_code and event.code == expected_code:
        return True
    return NAMED_KEYS.get(event.key, event.key).lower() == key


def matches_single_shortcut(event: KeyEvent, shortcut: str, platform: Platform | None = None) -> bool:
    platform = platform or detect_platform()
    modifiers, key = split_chord(shortcut)
    if not key or not _event_key_matches(event, key):
        return False

    wanted = set(modifiers)
    expected_meta = False
    expected_ctrl = "ctrl" in wanted
    if "cmd" in wanted:
        if platform == Platform.MAC:
            expected_meta = True
        else:
            expected_ctrl = True

    return (
        event.meta == expected_meta
        and event.ctrl == expected_ctrl
        and event.alt == ("alt" in wanted)
        and event.shift == ("shift" in wanted)
    )


def matches_shortcut(event: KeyEvent, shortcut: Shortcut, platform: Platform | None = None) -> bool:
    """Check whether a key event matches any applicable entry of a shortcut."""
    platform = platform or detect_platform()
    return any(matches_single_shortcut(event, s, platform) for s in resolve_shortcut(shortcut, platform))


def format_chord(chord: str, platform: Platform | None = None) -> str:
    """Format a chord for display, e.g. ``⇧⌘P`` on macOS or ``Ctrl+Shift+P`` elsewhere."""
    platform = platform or detect_platform()
    modifiers, key = split_chord(chord)
    if not key:
        return ""

    glyphs = MAC_DISPLAY_KEYS if platform == Platform.MAC else OTHER_DISPLAY_KEYS
    parts: list[str] = []
    for modifier in DISPLAY_MODIFIER_ORDER:
        if modifier in modifiers:
            label = glyphs[modifier]
            if label not in parts:
                parts.append(label)
    parts.append(NAMED_DISPLAY_KEYS.get(key, key.upper()))

    if platform == Platform.MAC:
        return "".join(parts)
    return "+".join(parts)


def format_shortcut(shortcut: Shortcut, platform: Platform | None = None) -> str | None:
    """Format the first applicable entry of a shortcut, or None if none applies."""
    shortcuts = resolve_shortcut(shortcut, platform)
    if not shortcuts:
        return None
    return format_chord(shortcuts[0], platform)

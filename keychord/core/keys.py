"""Key chord normalization shared by mapping tables and live key events."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from enum import Enum


class Platform(str, Enum):
    MAC = "mac"
    OTHER = "other"


def detect_platform() -> Platform:
    return Platform.MAC if sys.platform == "darwin" else Platform.OTHER


# Canonical modifier order in chord strings.
MODIFIER_ORDER: tuple[str, ...] = ("cmd", "ctrl", "alt", "shift")

# Key names reported for a bare modifier press.
MODIFIER_KEY_NAMES = frozenset({"Meta", "Control", "Alt", "Shift", "OS", "AltGraph"})

NAMED_KEYS: dict[str, str] = {
    " ": "space",
    "Spacebar": "space",
    "Escape": "escape",
    "Esc": "escape",
    "ArrowUp": "up",
    "ArrowDown": "down",
    "ArrowLeft": "left",
    "ArrowRight": "right",
}

# Physical key codes whose produced character is unreliable while ctrl, meta
# or alt is held (control characters, or alternate glyphs on Apple layouts).
PUNCTUATION_CODES: dict[str, str] = {
    "Backslash": "\\",
    "Slash": "/",
    "BracketLeft": "[",
    "BracketRight": "]",
    "Backquote": "`",
    "Quote": "'",
    "Minus": "-",
    "Equal": "=",
    "Semicolon": ";",
    "Comma": ",",
    "Period": ".",
}

PUNCTUATION_KEY_CODES: dict[str, str] = {char: code for code, char in PUNCTUATION_CODES.items()}

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class KeyEvent:
    """A raw key press as delivered by the host input layer."""

    key: str
    code: str = ""
    meta: bool = False
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def is_modifier_only(self) -> bool:
        return self.key in MODIFIER_KEY_NAMES


def normalize_key(key: str) -> str:
    """Normalize chord spelling to lowercase, hyphen-joined form.

    A trailing ``+`` that follows a separator is the plus key itself and is
    kept; every other ``+`` is a separator.

    >>> normalize_key("Cmd+Shift-P")
    'cmd-shift-p'
    >>> normalize_key("cmd++")
    'cmd-+'
    """
    text = _WHITESPACE_RE.sub(" ", key.lower()).strip()
    plus_key = text.endswith("+") and (len(text) == 1 or text[-2] in "+-")
    if plus_key:
        return text[:-1].replace("+", "-") + "+"
    return text.replace("+", "-")


def split_chord(chord: str) -> tuple[list[str], str]:
    """Split a chord into (modifiers, key), allowing a literal '-' key."""
    normalized = normalize_key(chord)
    if not normalized:
        return [], ""
    if normalized == "-":
        return [], "-"
    if normalized.endswith("--"):
        head = normalized[:-2]
        return [part for part in head.split("-") if part], "-"
    parts = normalized.split("-")
    return [part for part in parts[:-1] if part], parts[-1]


def key_name(event: KeyEvent) -> str:
    """Return the canonical key token for an event, without modifiers."""
    if event.is_modifier_only:
        return ""
    if (event.ctrl or event.meta or event.alt) and event.code in PUNCTUATION_CODES:
        return PUNCTUATION_CODES[event.code]
    return NAMED_KEYS.get(event.key, event.key).lower()


def key_event_to_string(event: KeyEvent) -> str:
    """Convert a key event to a canonical chord such as ``cmd-shift-w``.

    Returns an empty string for modifier-only presses.
    """
    key = key_name(event)
    if not key:
        return ""

    parts: list[str] = []
    if event.meta:
        parts.append("cmd")
    if event.ctrl:
        parts.append("ctrl")
    if event.alt:
        parts.append("alt")
    if event.shift:
        parts.append("shift")
    parts.append(key)
    return "-".join(parts)

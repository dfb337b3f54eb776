"""Compile mapping documents from source text.

Reading files, defaulting and live-reload triggering belong to the host;
this module only turns JSONC text into a validated keymap.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from keychord.core.context_expr import ContextSyntaxError
from keychord.core.keymap import Keymap, merge_mappings, parse_mappings, validate_mappings
from keychord.shared.core.debug_events import emit_debug_event

DEFAULT_SOURCE = "default_mappings.jsonc"
USER_SOURCE = "mappings.jsonc"


@dataclass
class MappingsIssue:
    """A problem found while loading one mapping source."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"


class MappingsLoadError(ValueError):
    """Raised when a mapping source cannot be compiled."""

    def __init__(self, issues: list[MappingsIssue]) -> None:
        self.issues = issues
        super().__init__("; ".join(str(issue) for issue in issues))


@dataclass
class MappingsResult:
    """A compiled keymap plus the issues met while building it."""

    keymap: Keymap
    errors: list[MappingsIssue] = field(default_factory=list)


def strip_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments outside double-quoted strings.

    Newlines are kept so JSON error positions still point at the right line.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False

    while i < length:
        ch = text[i]

        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 1
            elif ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
            continue

        if ch == "/" and i + 1 < length:
            nxt = text[i + 1]
            if nxt == "/":
                i += 2
                while i < length and text[i] != "\n":
                    i += 1
                continue
            if nxt == "*":
                i += 2
                while i + 1 < length and not (text[i] == "*" and text[i + 1] == "/"):
                    if text[i] == "\n":
                        out.append("\n")
                    i += 1
                i += 2
                continue

        out.append(ch)
        i += 1

    return "".join(out)


def load_raw_mappings(text: str, source: str = USER_SOURCE) -> dict[str, Any]:
    """Parse JSONC text into a raw mappings document (not yet validated)."""
    try:
        raw = json.loads(strip_comments(text))
    except json.JSONDecodeError as e:
        raise MappingsLoadError([MappingsIssue(source, f"Invalid JSON: {e}")]) from e
    if not isinstance(raw, dict):
        raise MappingsLoadError([MappingsIssue(source, "Mappings must be an object")])
    return raw


def compile_raw_mappings(raw: Mapping[str, Any], source: str = USER_SOURCE, *, strict_flags: bool = False) -> Keymap:
    """Validate and compile a raw mappings document."""
    result = validate_mappings(raw, strict_flags=strict_flags)
    if not result.valid:
        raise MappingsLoadError([MappingsIssue(source, message) for message in result.errors])
    try:
        return parse_mappings(raw)
    except ContextSyntaxError as e:
        raise MappingsLoadError([MappingsIssue(source, str(e))]) from e


def parse_mappings_text(text: str, source: str = USER_SOURCE, *, strict_flags: bool = False) -> Keymap:
    """Compile JSONC mapping source text into a keymap.

    Raises:
        MappingsLoadError: with one issue per problem found.
    """
    return compile_raw_mappings(load_raw_mappings(text, source), source, strict_flags=strict_flags)


def build_keymap(
    defaults: str | Mapping[str, Any] | Keymap,
    user_text: str | None = None,
    *,
    strict: bool = False,
    strict_flags: bool = False,
) -> MappingsResult:
    """Layer user mappings over the defaults.

    The defaults must compile. A broken user source raises in strict mode;
    otherwise it is dropped and its issues are returned alongside the
    default keymap.
    """
    if isinstance(defaults, Keymap):
        default_keymap = defaults
    elif isinstance(defaults, str):
        default_keymap = parse_mappings_text(defaults, DEFAULT_SOURCE)
    else:
        default_keymap = compile_raw_mappings(defaults, DEFAULT_SOURCE)

    if user_text is None or not user_text.strip():
        return MappingsResult(keymap=default_keymap)

    try:
        user_keymap = parse_mappings_text(user_text, USER_SOURCE, strict_flags=strict_flags)
    except MappingsLoadError as e:
        if strict:
            raise
        for issue in e.issues:
            emit_debug_event("keymap.load_error", category="keybinding", source=issue.source, message=issue.message)
        return MappingsResult(keymap=default_keymap, errors=list(e.issues))

    return MappingsResult(keymap=merge_mappings(default_keymap, user_keymap))

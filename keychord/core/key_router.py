"""Route raw key events through the keymap."""

from __future__ import annotations

from keychord.core.binding_contexts import ActiveContexts, format_contexts
from keychord.core.keymap import Keymap, ResolvedBinding, resolve_binding
from keychord.core.keys import KeyEvent, Platform, detect_platform, key_event_to_string
from keychord.shared.core.debug_events import emit_debug_event


def alias_ctrl_to_cmd(chord: str) -> str | None:
    """Rewrite a canonical ``ctrl`` chord to its ``cmd`` spelling.

    Returns None when the chord holds no ctrl or already holds cmd. In
    canonical order cmd comes first, so a chord with ctrl and no cmd starts
    with ``ctrl-``.
    """
    if not chord.startswith("ctrl-"):
        return None
    return "cmd-" + chord[len("ctrl-") :]


def resolve_key_event(
    event: KeyEvent,
    contexts: ActiveContexts,
    keymap: Keymap,
    platform: Platform | None = None,
) -> ResolvedBinding | None:
    """Resolve a live key event to a binding.

    Mapping tables are written with ``cmd``; off Apple platforms a ``ctrl``
    chord that matches nothing directly is retried as ``cmd``.
    """
    chord = key_event_to_string(event)
    if not chord:
        return None

    resolved = resolve_binding(chord, contexts, keymap)
    aliased_from: str | None = None

    if resolved is None and (platform or detect_platform()) != Platform.MAC:
        alias = alias_ctrl_to_cmd(chord)
        if alias is not None:
            resolved = resolve_binding(alias, contexts, keymap)
            if resolved is not None:
                aliased_from = chord

    if resolved is not None:
        emit_debug_event(
            "keybinding.resolve",
            category="keybinding",
            key=chord,
            action=resolved.action_id,
            context=resolved.context or "global",
            aliased_from=aliased_from,
            contexts=format_contexts(contexts),
        )
    return resolved

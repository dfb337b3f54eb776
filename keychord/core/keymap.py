"""Context-aware binding tables (UI-agnostic).

A keymap is an ordered tuple of binding groups. Groups appended later take
precedence over earlier ones for the same chord, provided their context guard
matches, so layering user mappings after the defaults is plain concatenation.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, NamedTuple, Union

from keychord.core.binding_contexts import ActiveContexts
from keychord.core.context_expr import (
    ContextSyntaxError,
    ParsedContextExpr,
    matches_context,
    parse_context_expr,
    unknown_context_flags,
)
from keychord.core.keys import normalize_key
from keychord.shared.core.debug_events import emit_debug_event

# "namespace::name", e.g. "drawer::closeTab"
ActionId = str
# A bare action id, or [action_id, *args]
Action = Union[ActionId, list[Any], tuple[Any, ...]]

ACTION_ID_RE = re.compile(r"^[a-z]+::[a-zA-Z0-9]+$")


class ActionParts(NamedTuple):
    namespace: str
    name: str


@dataclass(frozen=True)
class BindingGroup:
    """A chord table guarded by an optional compiled context expression."""

    context: ParsedContextExpr | None
    bindings: Mapping[str, Action]

    @property
    def context_source(self) -> str | None:
        return self.context.source if self.context is not None else None

    def is_active(self, contexts: ActiveContexts) -> bool:
        return self.context is None or matches_context(self.context, contexts)


@dataclass(frozen=True)
class Keymap:
    """Compiled, read-only binding table."""

    groups: tuple[BindingGroup, ...] = ()

    def __len__(self) -> int:
        return len(self.groups)


@dataclass(frozen=True)
class ResolvedBinding:
    """Result of resolving a chord against a keymap."""

    action: Action
    action_id: ActionId
    args: tuple[Any, ...] = ()
    context: str | None = None
    chord: str = ""


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def is_valid_action_id(action: object) -> bool:
    """Check the `namespace::name` action id format."""
    return isinstance(action, str) and ACTION_ID_RE.match(action) is not None


def parse_action_id(action_id: ActionId) -> ActionParts:
    namespace, _, name = action_id.partition("::")
    return ActionParts(namespace, name)


def split_action(action: Action) -> tuple[ActionId, tuple[Any, ...]] | None:
    """Destructure an action into (action_id, args); None for an empty action."""
    if isinstance(action, (list, tuple)):
        if not action:
            return None
        return str(action[0]), tuple(action[1:])
    if not action:
        return None
    return action, ()


# ============================================================
# Parsing
# ============================================================


def _compile_group_context(raw_context: Any) -> ParsedContextExpr | None:
    if not raw_context:
        return None
    if not isinstance(raw_context, str):
        raise TypeError(f"Binding group context must be a string, got {type(raw_context).__name__}")
    parsed = parse_context_expr(raw_context)
    unknown = unknown_context_flags(parsed)
    if unknown:
        emit_debug_event(
            "keymap.unknown_context_flag",
            category="keybinding",
            context=parsed.source,
            flags=unknown,
        )
    return parsed


def parse_mappings(raw: Mapping[str, Any]) -> Keymap:
    """Compile a raw mappings document into a keymap.

    Chord keys are normalized so differently spelled chords collide; actions
    are stored as written and only destructured on resolution.

    Raises:
        ContextSyntaxError: if a group's context expression is malformed.
    """
    groups: list[BindingGroup] = []
    for raw_group in raw.get("bindings", []):
        context = _compile_group_context(raw_group.get("context"))
        bindings: dict[str, Action] = {}
        for key, action in raw_group.get("bindings", {}).items():
            bindings[normalize_key(key)] = action
        groups.append(BindingGroup(context=context, bindings=MappingProxyType(bindings)))
    return Keymap(groups=tuple(groups))


def merge_mappings(*keymaps: Keymap) -> Keymap:
    """Concatenate keymaps; later arguments take precedence."""
    groups: list[BindingGroup] = []
    for keymap in keymaps:
        groups.extend(keymap.groups)
    return Keymap(groups=tuple(groups))


# ============================================================
# Resolution
# ============================================================


def _resolved(chord: str, action: Action, group: BindingGroup) -> ResolvedBinding | None:
    parts = split_action(action)
    if parts is None:
        return None
    action_id, args = parts
    return ResolvedBinding(
        action=action,
        action_id=action_id,
        args=args,
        context=group.context_source,
        chord=chord,
    )


def resolve_binding(key: str, contexts: ActiveContexts, keymap: Keymap) -> ResolvedBinding | None:
    """Resolve a chord to the last-declared binding whose context matches.

    Returns None when nothing is bound; a miss is not an error.
    """
    chord = normalize_key(key)
    if not chord:
        return None

    for group in reversed(keymap.groups):
        if not group.is_active(contexts):
            continue
        action = group.bindings.get(chord)
        if action is None:
            continue
        resolved = _resolved(chord, action, group)
        if resolved is not None:
            return resolved
    return None


def get_active_bindings(contexts: ActiveContexts, keymap: Keymap) -> dict[str, ResolvedBinding]:
    """Map every chord to the binding the resolver would pick right now."""
    result: dict[str, ResolvedBinding] = {}
    for group in keymap.groups:
        if not group.is_active(contexts):
            continue
        for chord, action in group.bindings.items():
            resolved = _resolved(chord, action, group)
            if resolved is not None:
                result[chord] = resolved
    return result


def _action_matches(action: Action, action_id: ActionId, args: tuple[Any, ...] | None) -> bool:
    parts = split_action(action)
    if parts is None or parts[0] != action_id:
        return False
    return args is None or parts[1] == tuple(args)


def get_shortcut(action_id: ActionId, keymap: Keymap, args: tuple[Any, ...] | None = None) -> str | None:
    """Find a chord to display for an action.

    Prefers the first global binding in declaration order and falls back to
    the first context-scoped one. This is a display lookup and deliberately
    scans forward, unlike resolution.
    """
    fallback: str | None = None
    for group in keymap.groups:
        for chord, action in group.bindings.items():
            if not _action_matches(action, action_id, args):
                continue
            if group.context is None:
                return chord
            if fallback is None:
                fallback = chord
    return fallback


# ============================================================
# Validation
# ============================================================


def _validate_action(prefix: str, key: str, action: Any, errors: list[str]) -> None:
    if isinstance(action, str):
        if not is_valid_action_id(action):
            errors.append(f'{prefix}, key "{key}": invalid action format "{action}"')
    elif isinstance(action, list):
        if not action:
            errors.append(f'{prefix}, key "{key}": action array cannot be empty')
        elif not is_valid_action_id(action[0]):
            errors.append(f'{prefix}, key "{key}": invalid action format "{action[0]}"')
    else:
        errors.append(f'{prefix}, key "{key}": action must be a string or array')


def validate_mappings(raw: Any, *, strict_flags: bool = False) -> ValidationResult:
    """Check a raw mappings document, collecting one message per problem.

    Never raises. With ``strict_flags`` the context expressions must only
    reference known context flags.
    """
    if not isinstance(raw, Mapping):
        return ValidationResult(valid=False, errors=["Mappings must be an object"])

    groups = raw.get("bindings")
    if not isinstance(groups, list):
        return ValidationResult(valid=False, errors=['Mappings must have a "bindings" array'])

    errors: list[str] = []
    for i, group in enumerate(groups):
        prefix = f"Binding group {i}"
        if not isinstance(group, Mapping):
            errors.append(f"{prefix} must be an object")
            continue

        if "context" in group:
            context = group["context"]
            if not isinstance(context, str):
                errors.append(f'{prefix}: "context" must be a string')
            elif context:
                try:
                    parsed = parse_context_expr(context)
                except ContextSyntaxError as e:
                    errors.append(f'{prefix}: invalid context "{context}": {e}')
                else:
                    if strict_flags:
                        for flag in unknown_context_flags(parsed):
                            errors.append(f'{prefix}: unknown context flag "{flag}"')

        bindings = group.get("bindings")
        if not isinstance(bindings, Mapping):
            errors.append(f'{prefix}: "bindings" must be an object')
            continue

        for key, action in bindings.items():
            _validate_action(prefix, key, action, errors)

    return ValidationResult(valid=not errors, errors=errors)

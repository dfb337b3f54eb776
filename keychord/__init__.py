"""Context-aware keybinding resolution engine."""

from __future__ import annotations

from keychord.core.action_catalog import (
    ActionContext,
    ActionDef,
    availability_check,
    get_menu_availability,
    get_palette_items,
    is_action_available,
    menu_id_to_action,
)
from keychord.core.actions import ActionDispatcher, ActionNamespace, UnknownActionError, execute_action
from keychord.core.binding_contexts import ContextFlag, format_contexts, get_active_contexts, has_context
from keychord.core.context_expr import (
    ContextSyntaxError,
    ParsedContextExpr,
    evaluate_context_expr,
    extract_context_flags,
    matches_context,
    parse_context_expr,
    validate_context_expr,
)
from keychord.core.input_context import ContextState, FocusTarget, SessionKind
from keychord.core.key_router import resolve_key_event
from keychord.core.keymap import (
    Keymap,
    ResolvedBinding,
    get_active_bindings,
    get_shortcut,
    merge_mappings,
    parse_mappings,
    resolve_binding,
    validate_mappings,
)
from keychord.core.keys import KeyEvent, Platform, key_event_to_string, normalize_key
from keychord.core.mapping_source import MappingsLoadError, build_keymap, parse_mappings_text
from keychord.core.shortcuts import format_chord, format_shortcut, matches_shortcut

__version__ = "0.1.0"

__all__ = [
    "ActionContext",
    "ActionDef",
    "ActionDispatcher",
    "ActionNamespace",
    "ContextFlag",
    "ContextState",
    "ContextSyntaxError",
    "FocusTarget",
    "KeyEvent",
    "Keymap",
    "MappingsLoadError",
    "ParsedContextExpr",
    "Platform",
    "ResolvedBinding",
    "SessionKind",
    "UnknownActionError",
    "availability_check",
    "build_keymap",
    "evaluate_context_expr",
    "execute_action",
    "extract_context_flags",
    "format_chord",
    "format_contexts",
    "format_shortcut",
    "get_active_bindings",
    "get_active_contexts",
    "get_menu_availability",
    "get_palette_items",
    "get_shortcut",
    "has_context",
    "is_action_available",
    "key_event_to_string",
    "matches_context",
    "matches_shortcut",
    "menu_id_to_action",
    "merge_mappings",
    "normalize_key",
    "parse_context_expr",
    "parse_mappings",
    "parse_mappings_text",
    "resolve_binding",
    "resolve_key_event",
    "validate_context_expr",
    "validate_mappings",
]

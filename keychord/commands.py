"""CLI command handlers for keychord."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from keychord.core.action_catalog import get_palette_items
from keychord.core.binding_contexts import CONTEXT_FLAGS, format_contexts, make_contexts
from keychord.core.default_keymap import DefaultKeymapProvider
from keychord.core.keymap import Keymap, get_active_bindings, resolve_binding, validate_mappings
from keychord.core.keys import Platform
from keychord.core.mapping_source import MappingsLoadError, strip_comments
from keychord.core.shortcuts import format_chord
from keychord.shared.app.runtime import RuntimeConfig

console = Console()


def _read_text(path: str) -> str | None:
    try:
        return Path(path).expanduser().read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Error:[/] cannot read {escape(path)}: {escape(str(e))}")
        return None


def _load_keymap(args, runtime: RuntimeConfig) -> Keymap | None:
    """Build the keymap for a command: defaults plus the optional --mappings file."""
    user_text = None
    mappings_path = getattr(args, "mappings", None)
    if mappings_path:
        user_text = _read_text(mappings_path)
        if user_text is None:
            return None

    provider = DefaultKeymapProvider(
        user_text,
        strict=runtime.strict_mappings,
        strict_flags=runtime.strict_context_flags,
    )
    try:
        keymap = provider.get_keymap()
    except MappingsLoadError as e:
        for issue in e.issues:
            console.print(f"[red]Error:[/] {escape(str(issue))}")
        return None
    for issue in provider.errors:
        console.print(f"[yellow]Warning:[/] {escape(str(issue))} (user mappings ignored)")
    return keymap


def _contexts_from_args(args):
    flags = getattr(args, "context", None) or []
    unknown = sorted(flag for flag in flags if flag not in CONTEXT_FLAGS)
    if unknown:
        console.print(f"[yellow]Warning:[/] unknown context flags: {escape(', '.join(unknown))}")
    return make_contexts(flags)


def cmd_validate(args, runtime: RuntimeConfig) -> int:
    """Validate a mappings file without applying it."""
    text = _read_text(args.file)
    if text is None:
        return 1
    try:
        raw = json.loads(strip_comments(text))
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON:[/] {escape(str(e))}")
        return 1

    result = validate_mappings(raw, strict_flags=runtime.strict_context_flags or getattr(args, "strict_flags", False))
    if result.valid:
        console.print(f"[green]OK[/] {escape(args.file)}")
        return 0
    for error in result.errors:
        console.print(f"[red]-[/] {escape(error)}")
    console.print(f"[red]{len(result.errors)} problem(s)[/] in {escape(args.file)}")
    return 1


def cmd_resolve(args, runtime: RuntimeConfig) -> int:
    """Resolve one chord under the given context flags."""
    keymap = _load_keymap(args, runtime)
    if keymap is None:
        return 1
    contexts = _contexts_from_args(args)
    resolved = resolve_binding(args.chord, contexts, keymap)
    if resolved is None:
        console.print(f"No binding for [bold]{escape(args.chord)}[/] (contexts: {escape(format_contexts(contexts)) or '-'})")
        return 1

    console.print(f"[bold]{escape(resolved.chord)}[/] -> [cyan]{escape(resolved.action_id)}[/]")
    if resolved.args:
        console.print(f"  args: {escape(json.dumps(list(resolved.args)))}")
    console.print(f"  context: {escape(resolved.context or 'global')}")
    return 0


def cmd_bindings(args, runtime: RuntimeConfig) -> int:
    """List the bindings active under the given context flags."""
    keymap = _load_keymap(args, runtime)
    if keymap is None:
        return 1
    contexts = _contexts_from_args(args)
    platform = Platform(args.platform) if getattr(args, "platform", None) else runtime.platform

    table = Table(title=f"Active bindings ({format_contexts(contexts) or 'no contexts'})")
    table.add_column("Key")
    table.add_column("Display")
    table.add_column("Action", style="cyan")
    table.add_column("Args")
    table.add_column("Context", style="dim")
    for chord, resolved in sorted(get_active_bindings(contexts, keymap).items()):
        table.add_row(
            escape(chord),
            escape(format_chord(chord, platform)),
            escape(resolved.action_id),
            escape(json.dumps(list(resolved.args))) if resolved.args else "",
            escape(resolved.context or "global"),
        )
    console.print(table)
    return 0


def cmd_format(args, runtime: RuntimeConfig) -> int:
    """Print the display label of a chord."""
    platform = Platform(args.platform) if getattr(args, "platform", None) else runtime.platform
    label = format_chord(args.chord, platform)
    if not label:
        console.print(f"[red]Error:[/] empty chord '{escape(args.chord)}'")
        return 1
    console.print(escape(label))
    return 0


def cmd_actions(args, runtime: RuntimeConfig) -> int:
    """List command palette actions with their bound shortcuts."""
    keymap = _load_keymap(args, runtime)
    if keymap is None:
        return 1
    platform = Platform(args.platform) if getattr(args, "platform", None) else runtime.platform

    table = Table(title="Command palette actions")
    table.add_column("Label")
    table.add_column("Category", style="dim")
    table.add_column("Action", style="cyan")
    table.add_column("Shortcut")
    for item in get_palette_items(keymap, platform=platform):
        table.add_row(
            escape(item.definition.label),
            item.definition.category.value,
            escape(item.definition.action),
            escape(item.shortcut_label or ""),
        )
    console.print(table)
    return 0

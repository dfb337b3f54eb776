"""Command-line entry point for keychord."""

from __future__ import annotations

import argparse
import sys

from keychord.commands import cmd_actions, cmd_bindings, cmd_format, cmd_resolve, cmd_validate
from keychord.shared.app.runtime import RuntimeConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keychord", description="Inspect and validate context-aware key mappings.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate a mappings file")
    validate.add_argument("file", help="Path to a mappings.jsonc file")
    validate.add_argument("--strict-flags", action="store_true", help="Reject unknown context flags")
    validate.set_defaults(func=cmd_validate)

    resolve = subparsers.add_parser("resolve", help="Resolve a chord under context flags")
    resolve.add_argument("chord", help="Chord such as cmd-shift-p")
    resolve.add_argument("--context", "-c", action="append", help="Active context flag (repeatable)")
    resolve.add_argument("--mappings", "-m", help="User mappings file layered over the defaults")
    resolve.set_defaults(func=cmd_resolve)

    bindings = subparsers.add_parser("bindings", help="List active bindings under context flags")
    bindings.add_argument("--context", "-c", action="append", help="Active context flag (repeatable)")
    bindings.add_argument("--mappings", "-m", help="User mappings file layered over the defaults")
    bindings.add_argument("--platform", choices=["mac", "other"], help="Platform for display labels")
    bindings.set_defaults(func=cmd_bindings)

    fmt = subparsers.add_parser("format", help="Format a chord for display")
    fmt.add_argument("chord", help="Chord such as cmd+shift+p")
    fmt.add_argument("--platform", choices=["mac", "other"], help="Target platform")
    fmt.set_defaults(func=cmd_format)

    actions = subparsers.add_parser("actions", help="List command palette actions and their shortcuts")
    actions.add_argument("--mappings", "-m", help="User mappings file layered over the defaults")
    actions.add_argument("--platform", choices=["mac", "other"], help="Platform for display labels")
    actions.set_defaults(func=cmd_actions)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    runtime = RuntimeConfig.from_env()
    runtime.apply_debug_settings()
    return args.func(args, runtime)


if __name__ == "__main__":
    sys.exit(main())

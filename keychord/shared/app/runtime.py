"""Runtime configuration for keychord."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from keychord.core.keys import Platform


@dataclass
class RuntimeConfig:
    """Runtime configuration provided by CLI, host application, or tests."""

    platform: Platform | None = None
    strict_mappings: bool = False
    strict_context_flags: bool = False
    debug_mode: bool = False
    debug_log_path: Path | None = None

    @classmethod
    def from_env(cls) -> RuntimeConfig:
        def _parse_bool(value: str | None, default: bool) -> bool:
            if value is None or not value.strip():
                return default
            return value.strip().lower() in {"1", "true", "yes", "on"}

        def _parse_platform(value: str | None) -> Platform | None:
            if not value or not value.strip():
                return None
            try:
                return Platform(value.strip().lower())
            except ValueError:
                return None

        debug_log = os.environ.get("KEYCHORD_DEBUG_LOG", "").strip() or None

        return cls(
            platform=_parse_platform(os.environ.get("KEYCHORD_PLATFORM")),
            strict_mappings=_parse_bool(os.environ.get("KEYCHORD_STRICT_MAPPINGS"), False),
            strict_context_flags=_parse_bool(os.environ.get("KEYCHORD_STRICT_FLAGS"), False),
            debug_mode=_parse_bool(os.environ.get("KEYCHORD_DEBUG"), False) or bool(debug_log),
            debug_log_path=Path(debug_log).expanduser() if debug_log else None,
        )

    def apply_debug_settings(self) -> None:
        """Push debug settings into the shared debug event log."""
        from keychord.shared.core.debug_events import configure_debug_events

        configure_debug_events(self.debug_mode, self.debug_log_path)

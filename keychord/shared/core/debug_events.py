"""Structured debug event log shared by the engine and its hosts."""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

MAX_HISTORY = 500


@dataclass
class DebugEvent:
    """A single recorded debug event."""

    name: str
    category: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def iso(self) -> str:
        return self.timestamp.isoformat(timespec="milliseconds")

    def to_dict(self) -> dict[str, Any]:
        return {"time": self.iso, "category": self.category, "event": self.name, "data": self.data}


DebugListener = Callable[[DebugEvent], None]

_enabled: bool = False
_log_path: Path | None = None
_history: deque[DebugEvent] = deque(maxlen=MAX_HISTORY)
_listeners: list[DebugListener] = []


def configure_debug_events(enabled: bool, log_path: Path | None = None) -> None:
    """Enable or disable recording, optionally appending events to a JSON-lines file."""
    global _enabled, _log_path
    _enabled = bool(enabled)
    _log_path = log_path


def debug_events_enabled() -> bool:
    return _enabled


def get_debug_event_history() -> list[DebugEvent]:
    return list(_history)


def clear_debug_events() -> None:
    _history.clear()


def add_debug_listener(listener: DebugListener) -> None:
    _listeners.append(listener)


def remove_debug_listener(listener: DebugListener) -> None:
    if listener in _listeners:
        _listeners.remove(listener)


def format_debug_data(data: dict[str, Any]) -> str:
    """Render event payload as `key=value` pairs, skipping empty values."""
    parts: list[str] = []
    for key, value in data.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            value = ",".join(str(item) for item in value)
        parts.append(f"{key}={value}")
    return " ".join(parts)


def emit_debug_event(name: str, *, category: str = "general", **data: Any) -> DebugEvent | None:
    """Record a debug event if debug events are enabled."""
    if not _enabled:
        return None
    event = DebugEvent(name=name, category=category, data=dict(data))
    _history.append(event)
    for listener in list(_listeners):
        listener(event)
    if _log_path is not None:
        _write_event(_log_path, event)
    return event


def _write_event(path: Path, event: DebugEvent) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(event.to_dict(), default=str) + "\n")
    except OSError:
        # A broken log sink must never break key handling.
        pass

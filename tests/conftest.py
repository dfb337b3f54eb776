"""Pytest fixtures for keychord tests."""

from __future__ import annotations

import pytest

from keychord.core.default_keymap import reset_keymap
from keychord.shared.core.debug_events import clear_debug_events, configure_debug_events

KEYCHORD_ENV_VARS = (
    "KEYCHORD_PLATFORM",
    "KEYCHORD_STRICT_MAPPINGS",
    "KEYCHORD_STRICT_FLAGS",
    "KEYCHORD_DEBUG",
    "KEYCHORD_DEBUG_LOG",
)


@pytest.fixture(autouse=True)
def _reset_keychord_state(monkeypatch):
    """Ensure the active keymap and debug log do not leak between tests."""
    for name in KEYCHORD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_keymap()
    configure_debug_events(False)
    clear_debug_events()
    yield
    reset_keymap()
    configure_debug_events(False)
    clear_debug_events()


@pytest.fixture
def debug_events():
    """Enable debug events for the duration of a test."""
    from keychord.shared.core.debug_events import get_debug_event_history

    configure_debug_events(True)
    yield get_debug_event_history
    configure_debug_events(False)



"""Tests for the structured debug event log."""

import json

from keychord.shared.core.debug_events import (
    MAX_HISTORY,
    add_debug_listener,
    clear_debug_events,
    configure_debug_events,
    emit_debug_event,
    format_debug_data,
    get_debug_event_history,
    remove_debug_listener,
)


class TestEmitDebugEvent:
    """Tests for emit_debug_event."""

    def test_disabled_records_nothing(self):
        assert emit_debug_event("keybinding.resolve", key="cmd-w") is None
        assert get_debug_event_history() == []

    def test_enabled_records_event(self):
        configure_debug_events(True)
        event = emit_debug_event("keybinding.resolve", category="keybinding", key="cmd-w")
        assert event is not None
        assert get_debug_event_history() == [event]
        assert event.to_dict()["data"] == {"key": "cmd-w"}
        assert event.to_dict()["event"] == "keybinding.resolve"

    def test_history_is_bounded(self):
        configure_debug_events(True)
        for i in range(MAX_HISTORY + 10):
            emit_debug_event("tick", i=i)
        history = get_debug_event_history()
        assert len(history) == MAX_HISTORY
        assert history[0].data["i"] == 10

    def test_clear(self):
        configure_debug_events(True)
        emit_debug_event("tick")
        clear_debug_events()
        assert get_debug_event_history() == []

    def test_listeners(self):
        configure_debug_events(True)
        seen = []
        add_debug_listener(seen.append)
        try:
            emit_debug_event("tick")
        finally:
            remove_debug_listener(seen.append)
        emit_debug_event("tock")
        assert [event.name for event in seen] == ["tick"]

    def test_jsonl_sink(self, tmp_path):
        path = tmp_path / "debug.jsonl"
        configure_debug_events(True, path)
        emit_debug_event("keymap.load_error", category="keybinding", source="mappings.jsonc")
        emit_debug_event("tick")
        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["event"] == "keymap.load_error"
        assert first["category"] == "keybinding"
        assert first["data"] == {"source": "mappings.jsonc"}


class TestFormatDebugData:
    """Tests for format_debug_data."""

    def test_skips_empty_values(self):
        assert format_debug_data({"key": "cmd-w", "aliased_from": None, "context": ""}) == "key=cmd-w"

    def test_joins_sequences(self):
        assert format_debug_data({"flags": ["a", "b"], "group": 0}) == "flags=a,b group=0"

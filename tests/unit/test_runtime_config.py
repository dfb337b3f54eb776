"""Tests for RuntimeConfig environment parsing."""

from pathlib import Path

from keychord.core.keys import Platform
from keychord.shared.app.runtime import RuntimeConfig
from keychord.shared.core.debug_events import debug_events_enabled, emit_debug_event


class TestRuntimeConfigFromEnv:
    """Tests for RuntimeConfig.from_env."""

    def test_defaults(self):
        config = RuntimeConfig.from_env()
        assert config == RuntimeConfig()

    def test_platform(self, monkeypatch):
        monkeypatch.setenv("KEYCHORD_PLATFORM", " MAC ")
        assert RuntimeConfig.from_env().platform == Platform.MAC

    def test_invalid_platform_ignored(self, monkeypatch):
        monkeypatch.setenv("KEYCHORD_PLATFORM", "amiga")
        assert RuntimeConfig.from_env().platform is None

    def test_boolean_flags(self, monkeypatch):
        monkeypatch.setenv("KEYCHORD_STRICT_MAPPINGS", "yes")
        monkeypatch.setenv("KEYCHORD_STRICT_FLAGS", "1")
        monkeypatch.setenv("KEYCHORD_DEBUG", "off")
        config = RuntimeConfig.from_env()
        assert config.strict_mappings is True
        assert config.strict_context_flags is True
        assert config.debug_mode is False

    def test_debug_log_implies_debug(self, monkeypatch, tmp_path):
        monkeypatch.setenv("KEYCHORD_DEBUG_LOG", str(tmp_path / "events.jsonl"))
        config = RuntimeConfig.from_env()
        assert config.debug_mode is True
        assert config.debug_log_path == Path(tmp_path / "events.jsonl")


class TestApplyDebugSettings:
    """Tests for RuntimeConfig.apply_debug_settings."""

    def test_enables_debug_events(self, tmp_path):
        log_path = tmp_path / "logs" / "events.jsonl"
        RuntimeConfig(debug_mode=True, debug_log_path=log_path).apply_debug_settings()
        assert debug_events_enabled()
        emit_debug_event("test.event", category="test", value=1)
        assert log_path.read_text(encoding="utf-8").count("\n") == 1

    def test_disabled_by_default(self):
        RuntimeConfig().apply_debug_settings()
        assert not debug_events_enabled()

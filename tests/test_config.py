"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from roadtrip_planner.config import (
    PROVIDER_MODELS,
    PROVIDERS,
    InvocationMode,
    get_data_dir,
    get_debug_dir,
    get_invocation_mode,
)


class TestInvocationMode:
    def test_default_is_strict(self, monkeypatch):
        monkeypatch.delenv("ROADTRIP_INVOCATION_MODE", raising=False)
        assert get_invocation_mode() == InvocationMode.STRICT_SCHEMA

    @pytest.mark.parametrize("value", ["tools", "TOOLS", " tools "])
    def test_tool_mode(self, monkeypatch, value):
        monkeypatch.setenv("ROADTRIP_INVOCATION_MODE", value)
        assert get_invocation_mode() == InvocationMode.TOOL_AUGMENTED

    def test_unknown_value_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("ROADTRIP_INVOCATION_MODE", "maps-only")
        assert get_invocation_mode() == InvocationMode.STRICT_SCHEMA
        assert "maps-only" in caplog.text


class TestDirectories:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ROADTRIP_DATA_DIR", raising=False)
        monkeypatch.delenv("ROADTRIP_DEBUG_DIR", raising=False)
        assert get_data_dir() == Path("trip_data")
        assert get_debug_dir() == Path("debug")

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ROADTRIP_DATA_DIR", str(tmp_path / "state"))
        assert get_data_dir() == tmp_path / "state"


def test_every_provider_has_models():
    assert set(PROVIDER_MODELS) == set(PROVIDERS)
    assert PROVIDER_MODELS["Gemini"][0] == "gemini-2.5-flash"

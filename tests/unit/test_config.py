"""Tests for pydantic-settings configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from layermark.config import RenderConfig, Settings, get_settings
from layermark.textmap import InsertMode


class TestDefaults:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.render.default_tag == "mark"
        assert settings.render.strategy == "two_pass"
        assert settings.patterns.overlay_ranges is True
        assert settings.patterns.mode is InsertMode.SEGMENT
        assert settings.app.log_dir == Path("logs")
        assert settings.app.log_level == "INFO"


class TestEnvironment:
    def test_nested_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RENDER__DEFAULT_TAG", "span")
        monkeypatch.setenv("RENDER__STRATEGY", "patched")
        monkeypatch.setenv("PATTERNS__OVERLAY_RANGES", "false")
        monkeypatch.setenv("PATTERNS__MODE", "overwrite")
        monkeypatch.setenv("APP__LOG_DIR", "/tmp/layermark-logs")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.render.default_tag == "span"
        assert settings.render.strategy == "patched"
        assert settings.patterns.overlay_ranges is False
        assert settings.patterns.mode is InsertMode.OVERWRITE
        assert settings.app.log_dir == Path("/tmp/layermark-logs")

    def test_unknown_strategy_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RENDER__STRATEGY", "fast")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_unrelated_variables_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOMETHING_ELSE", "1")
        Settings(_env_file=None)  # type: ignore[call-arg]


class TestRenderConfig:
    @pytest.mark.parametrize("tag", ["", "   "])
    def test_blank_default_tag_rejected(self, tag: str) -> None:
        with pytest.raises(ValidationError, match="must not be blank"):
            RenderConfig(default_tag=tag)

    def test_default_tag_stripped(self) -> None:
        assert RenderConfig(default_tag=" span ").default_tag == "span"


class TestGetSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        assert get_settings().render.default_tag == "mark"
        monkeypatch.setenv("RENDER__DEFAULT_TAG", "em")
        assert get_settings().render.default_tag == "mark"
        get_settings.cache_clear()
        assert get_settings().render.default_tag == "em"

"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from plugincheck.config import DetectionMode, Settings


class TestSettings:
    def test_defaults(self, settings):
        assert settings.hook_name == "onload"
        assert settings.detection_mode == DetectionMode.STRUCTURAL
        assert settings.fallback_entry_file == "index.js"
        assert settings.user_agent == "bazaar-plugin-analyzer"
        assert settings.whole_project is True

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("PLUGINCHECK_DETECTION_MODE", "text")
        monkeypatch.setenv("PLUGINCHECK_FETCH_RETRIES", "5")
        settings = Settings(_env_file=None)
        assert settings.detection_mode == DetectionMode.TEXT
        assert settings.fetch_retries == 5

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("HOOK_NAME", "onunload")
        assert Settings(_env_file=None).hook_name == "onload"

    def test_trailing_slash_stripped(self):
        settings = Settings(_env_file=None, raw_base_url="https://mirror.example.com//")
        assert settings.raw_base_url == "https://mirror.example.com"

    @pytest.mark.parametrize("field", ["fetch_retries", "max_fetches", "max_project_files"])
    def test_negative_limits_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: -1})

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, detection_mode="fuzzy")

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("PLUGINCHECK_MAX_FETCHES=12\n")
        assert Settings(_env_file=env_file).max_fetches == 12

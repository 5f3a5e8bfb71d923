"""Tests for Settings."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from xray_core.settings import Settings, settings


class TestSettings:
    """Test Settings configuration."""

    def test_default_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults apply when no env vars or .env file are present."""
        monkeypatch.chdir(tmp_path)
        with patch.dict(os.environ, clear=True):
            s = Settings()

        assert s.xray_dir == Path(".xray")
        assert s.xray_storage == "local"

    @patch.dict(os.environ, {"XRAY_DIR": "/var/lib/xray", "XRAY_STORAGE": "memory"})
    def test_env_variable_loading(self):
        """Test loading settings from environment variables."""
        s = Settings()
        assert s.xray_dir == Path("/var/lib/xray")
        assert s.xray_storage == "memory"

    @patch.dict(os.environ, {"XRAY_STORAGE": "s3"})
    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            Settings()

    @patch.dict(os.environ, {"UNKNOWN_SETTING": "should-be-ignored"})
    def test_extra_env_ignored(self):
        """Test that unknown environment variables are ignored."""
        s = Settings()
        assert not hasattr(s, "unknown_setting")

    def test_settings_singleton(self):
        """Test that the module provides a settings singleton."""
        assert isinstance(settings, Settings)

        from xray_core.settings import settings as settings2

        assert settings is settings2

    def test_env_file_loading(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading from .env file."""
        (tmp_path / ".env").write_text("XRAY_DIR=traces-from-file\nXRAY_STORAGE=memory\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("XRAY_DIR", raising=False)
        monkeypatch.delenv("XRAY_STORAGE", raising=False)

        s = Settings()

        assert s.xray_dir == Path("traces-from-file")
        assert s.xray_storage == "memory"

    @patch.dict(os.environ, {"XRAY_DIR": "from-env-var"})
    def test_env_var_overrides_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables override .env file."""
        (tmp_path / ".env").write_text("XRAY_DIR=from-env-file")
        monkeypatch.chdir(tmp_path)

        assert Settings().xray_dir == Path("from-env-var")

    def test_settings_immutable_config(self):
        """Settings are frozen."""
        s = Settings()
        with pytest.raises(ValidationError) as exc_info:
            s.xray_dir = Path("elsewhere")  # type: ignore[misc]
        assert "frozen" in str(exc_info.value).lower()

    def test_model_config_attributes(self):
        assert Settings.model_config.get("env_file") == ".env"
        assert Settings.model_config.get("env_file_encoding") == "utf-8"
        assert Settings.model_config.get("extra") == "ignore"
        assert Settings.model_config.get("frozen") is True

"""
Tests for settings validation.
"""

import logging

import pytest

from remoting.config import Settings


class TestSettingsValidate:
    def test_defaults_are_valid(self):
        Settings.validate()

    def test_paths_must_be_absolute(self, monkeypatch):
        monkeypatch.setattr(Settings, "REST_API_ROOT", "api")

        with pytest.raises(ValueError) as exc_info:
            Settings.validate()

        assert "REST_API_ROOT must start with '/'" in str(exc_info.value)

    def test_transports_must_not_share_a_path(self, monkeypatch):
        monkeypatch.setattr(Settings, "REST_API_ROOT", "/rpc")
        monkeypatch.setattr(Settings, "SOCKET_PATH", "/rpc/")

        with pytest.raises(ValueError):
            Settings.validate()


class TestSettingsHelpers:
    def test_environment_checks(self, monkeypatch):
        monkeypatch.setattr(Settings, "ENVIRONMENT", "Production")

        assert Settings.is_production()
        assert not Settings.is_development()

    def test_log_level(self, monkeypatch):
        monkeypatch.setattr(Settings, "LOG_LEVEL", "debug")
        assert Settings().log_level == logging.DEBUG

        monkeypatch.setattr(Settings, "LOG_LEVEL", "chatty")
        assert Settings().log_level == logging.INFO

"""Tests for settings and logging setup."""

import structlog

from planet_mesh.config import Settings
from planet_mesh.utils.logging import configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PLANET_MESH_LOG_LEVEL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.default_chaos == 0.5
        assert settings.worker_processes == 0

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PLANET_MESH_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PLANET_MESH_MAX_POINTS", "500")
        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.max_points == 500

    def test_origins(self):
        settings = Settings(_env_file=None, allowed_origins="http://a, http://b,")
        assert settings.origins == ["http://a", "http://b"]


class TestLogging:
    """Test structlog configuration."""

    def test_configure_plain(self):
        configure_logging("DEBUG", "plain")
        assert structlog.is_configured()
        structlog.get_logger().info("configured", fmt="plain")

    def test_configure_json(self):
        configure_logging("warning", "json")
        assert structlog.is_configured()

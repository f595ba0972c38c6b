"""
Unit tests for settings, adapter config and logging setup.
"""
import logging
from typing import Iterator

import pytest
import structlog
from pydantic import ValidationError

from gateway_core.config import GatewayConfig, Settings
from gateway_core.monitoring import get_logger, setup_logging


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.app_name == "gateway-core"
        assert settings.http_open_timeout > 0
        assert settings.is_production is False

    def test_log_level_is_uppercased(self) -> None:
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(log_level="LOUD")

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log format"):
            Settings(log_format="xml")

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_timeouts_must_be_positive(self, timeout: float) -> None:
        with pytest.raises(ValidationError):
            Settings(http_read_timeout=timeout)

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that GATEWAY_CORE_* variables override defaults."""
        monkeypatch.setenv("GATEWAY_CORE_APP_ENV", "production")
        monkeypatch.setenv("GATEWAY_CORE_TEST_MODE", "false")

        settings = Settings()

        assert settings.is_production is True
        assert settings.test_mode is False


class TestGatewayConfig:
    """Per-adapter configuration."""

    @pytest.fixture
    def config(self) -> GatewayConfig:
        return GatewayConfig(
            credentials={"login": "merchant", "password": ""},
            test_url="https://sandbox.example.test",
            live_url="https://api.example.test",
        )

    def test_endpoint_follows_mode(self, config: GatewayConfig) -> None:
        assert config.endpoint == "https://sandbox.example.test"
        assert config.model_copy(update={"test": False}).endpoint == "https://api.example.test"

    def test_require_reports_missing_credential(self, config: GatewayConfig) -> None:
        """Test that blank and absent credentials are both missing."""
        config.require("login")

        with pytest.raises(ValueError, match="Missing required parameter: password"):
            config.require("login", "password")
        with pytest.raises(ValueError, match="Missing required parameter: api_key"):
            config.credential("api_key")

    def test_credential(self, config: GatewayConfig) -> None:
        assert config.credential("login") == "merchant"

    def test_config_is_immutable(self, config: GatewayConfig) -> None:
        with pytest.raises(ValidationError):
            config.test = False  # type: ignore[misc]

    def test_from_settings_uses_test_mode(self) -> None:
        config = GatewayConfig.from_settings(Settings(test_mode=False), live_url="https://api.example.test")

        assert config.test is False
        assert config.endpoint == "https://api.example.test"

    def test_from_settings_explicit_test_flag_wins(self) -> None:
        assert GatewayConfig.from_settings(Settings(test_mode=False), test=True).test is True


class TestLogging:
    """Logging setup."""

    @pytest.fixture(autouse=True)
    def restore_logging(self) -> Iterator[None]:
        root_logger = logging.getLogger()
        handlers = root_logger.handlers[:]
        level = root_logger.level
        yield
        structlog.reset_defaults()
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)

    @pytest.mark.parametrize("log_format", ["json", "console"])
    def test_setup_logging(self, log_format: str) -> None:
        """Test that both output formats configure the root logger."""
        setup_logging(Settings(log_level="warning", log_format=log_format))

        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_json_events_carry_app_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(Settings(app_name="gateway-core-test", log_format="json"))

        get_logger("tests").info("probe_event", step="authorize")

        out = capsys.readouterr().out
        assert "probe_event" in out
        assert "gateway-core-test" in out
        assert "authorize" in out

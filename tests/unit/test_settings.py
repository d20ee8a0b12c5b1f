"""
Unit Tests - Configuration and Logging
"""
import logging

import pytest
from pydantic import ValidationError

from opsreport.config import MonitoringSettings, ReportingSettings, Settings, get_settings
from opsreport.config.logging import SERVER_LOGGERS, configure_logging


class TestReportingSettings:
    """Tests for reporting thresholds"""

    def test_defaults(self, reporting_settings):
        assert reporting_settings.aging_bounds == (30, 60, 90)
        assert reporting_settings.stock_warning_multiplier == 1.5
        assert reporting_settings.compliance_warning_days == 30
        assert reporting_settings.default_credit_period_days == 30
        assert reporting_settings.top_n == 5
        assert reporting_settings.export_delimiter == ","

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("REPORT_STOCK_WARNING_MULTIPLIER", "2.0")
        monkeypatch.setenv("REPORT_AGING_BOUNDARIES", "[15,45,75]")

        settings = ReportingSettings()

        assert settings.stock_warning_multiplier == 2.0
        assert settings.aging_bounds == (15, 45, 75)

    @pytest.mark.parametrize("boundaries", [[30, 60], [60, 30, 90], [-1, 30, 60], [30, 30, 90]])
    def test_invalid_boundaries(self, boundaries):
        with pytest.raises(ValidationError):
            ReportingSettings(aging_boundaries=boundaries)

    def test_invalid_multiplier(self):
        with pytest.raises(ValidationError):
            ReportingSettings(stock_warning_multiplier=0.5)

    @pytest.mark.parametrize("delimiter", ['"', ";;", "\n", ""])
    def test_invalid_delimiter(self, delimiter):
        with pytest.raises(ValidationError):
            ReportingSettings(export_delimiter=delimiter)


class TestSettings:
    """Tests for application settings"""

    def test_test_settings(self, test_settings):
        assert test_settings.app_env == "testing"
        assert test_settings.debug is True
        assert not test_settings.is_production
        assert not test_settings.is_development

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(app_env="nowhere")

    def test_environment_is_normalized(self):
        assert Settings(app_env="Production").is_production

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        assert MonitoringSettings().log_level == "WARNING"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestConfigureLogging:
    """Tests for configure_logging"""

    def test_levels_and_handlers(self):
        configure_logging("DEBUG", "text")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        for name in SERVER_LOGGERS:
            server_logger = logging.getLogger(name)
            assert server_logger.propagate is False
            assert server_logger.handlers == root.handlers

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("CHATTY", "json")
        assert logging.getLogger().level == logging.INFO

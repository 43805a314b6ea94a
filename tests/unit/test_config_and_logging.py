"""Tests for settings and structured logging."""

import json
import logging
import math
import sys

import pytest
from pydantic import ValidationError

from metrics_core.config import DEFAULT_BUCKETS, Settings, get_settings, reset_settings
from metrics_core.counter import Counter
from metrics_core.errors import DuplicateRegistrationError
from metrics_core.histogram import Histogram
from metrics_core.logging.structured import (
    StructuredFormatter,
    StructuredLogger,
    configure_logging,
    get_logger,
)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """Test default settings."""
        settings = Settings()

        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_JSON is True
        assert settings.DEFAULT_BUCKETS == DEFAULT_BUCKETS

    def test_env_prefix(self, monkeypatch):
        """Test settings read METRICS_ prefixed variables."""
        monkeypatch.setenv("METRICS_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("METRICS_SERVICE_NAME", "checkout")

        settings = Settings()

        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.SERVICE_NAME == "checkout"

    def test_log_level_normalized(self, monkeypatch):
        """Test level names are accepted in any case."""
        monkeypatch.setenv("METRICS_LOG_LEVEL", " warning ")

        assert Settings().LOG_LEVEL == "WARNING"

    @pytest.mark.parametrize("level", ["verbose", "Level 5", ""])
    def test_unknown_log_level_rejected(self, level):
        """Test unknown level names fail validation."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(LOG_LEVEL=level)

    def test_unknown_log_level_from_env_rejected(self, monkeypatch):
        """Test an unknown level in the environment fails before logging is configured."""
        monkeypatch.setenv("METRICS_LOG_LEVEL", "loud")

        with pytest.raises(ValidationError):
            configure_logging()

    def test_cached(self):
        """Test get_settings caches until reset."""
        first = get_settings()
        assert get_settings() is first

        reset_settings()

        assert get_settings() is not first

    def test_default_buckets_from_env(self, monkeypatch):
        """Test histograms pick up configured default buckets."""
        monkeypatch.setenv("METRICS_DEFAULT_BUCKETS", "[1, 2, 4]")
        reset_settings()

        histogram = Histogram("h", "help")

        assert histogram.upper_bounds == (1.0, 2.0, 4.0, math.inf)


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def test_json_output(self):
        """Test records render as JSON with extra fields."""
        formatter = StructuredFormatter(service_name="svc", environment="test")
        record = logging.LogRecord("metrics_core.test", logging.INFO, __file__, 1, "hello", (), None)
        record.extra_fields = {"collector": "x"}

        entry = json.loads(formatter.format(record))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["service"] == "svc"
        assert entry["environment"] == "test"
        assert entry["extra"] == {"collector": "x"}

    def test_exception_info(self):
        """Test exception details are included."""
        formatter = StructuredFormatter()
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "metrics_core.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        entry = json.loads(formatter.format(record))

        assert entry["exception"]["type"] == "RuntimeError"
        assert entry["exception"]["message"] == "boom"


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_fields_attached(self, caplog):
        """Test keyword fields end up on the record."""
        logger = StructuredLogger("metrics_core.test.fields")

        with caplog.at_level(logging.DEBUG, logger="metrics_core.test.fields"):
            logger.debug("registered", collector="x", series=["x"])

        record = caplog.records[-1]
        assert record.getMessage() == "registered"
        assert record.extra_fields == {"collector": "x", "series": ["x"]}

    def test_no_fields(self, caplog):
        """Test a record without fields carries no extra_fields."""
        logger = get_logger("metrics_core.test.plain")

        with caplog.at_level(logging.WARNING, logger="metrics_core.test.plain"):
            logger.warning("plain")

        assert not hasattr(caplog.records[-1], "extra_fields")

    def test_disabled_level_is_skipped(self, caplog):
        """Test records below the logger level are not emitted."""
        logger = get_logger("metrics_core.test.level")

        with caplog.at_level(logging.WARNING, logger="metrics_core.test.level"):
            logger.debug("hidden")

        assert caplog.records == []

    def test_registry_logs_registration(self, caplog, registry):
        """Test the registry logs registrations and rejections."""
        with caplog.at_level(logging.DEBUG, logger="metrics_core.registry"):
            registry.register(Counter("x", "help"))
            try:
                registry.register(Counter("x", "help"))
            except DuplicateRegistrationError:
                pass

        messages = [r.getMessage() for r in caplog.records]
        assert "collector registered" in messages
        assert "duplicate collector registration rejected" in messages
        rejected = [r for r in caplog.records if r.levelno == logging.WARNING][0]
        assert rejected.extra_fields["series"] == "x"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_configure_from_settings(self, root_logger_isolation):
        """Test settings drive the root handler and formatter."""
        configure_logging(Settings(LOG_LEVEL="debug", LOG_JSON=True))

        root = root_logger_isolation
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)

    def test_plain_text(self, root_logger_isolation):
        """Test LOG_JSON=False uses a plain formatter."""
        configure_logging(Settings(LOG_JSON=False))

        handler = root_logger_isolation.handlers[0]
        assert not isinstance(handler.formatter, StructuredFormatter)

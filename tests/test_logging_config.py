"""Tests for logging_config.py utility functions."""

import os
import sys
import logging
from unittest.mock import patch

from photo_variants.core.gateways import S3BlobStore
from photo_variants.core.logging_config import DEFAULT_LOGGER_NAME, setup_logger, get_logger
from photo_variants.core.observability import StructuredLogger
from photo_variants.testing.fakes import FakeS3Client


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_default_parameters(self):
        """Test setup_logger with default parameters."""
        with patch.dict(os.environ, {"LOG_LEVEL": "INFO"}):
            test_logger = setup_logger()
        assert test_logger.name == "photo-variants"
        assert len(test_logger.handlers) == 1
        assert not test_logger.propagate

    def test_setup_logger_env_level_applies_on_first_install(self):
        """LOG_LEVEL is read when the handler is installed, not on later calls."""
        with patch.dict(os.environ, {"LOG_LEVEL": "ERROR"}):
            test_logger = setup_logger(name="test-first-install")
        with patch.dict(os.environ, {"LOG_LEVEL": "INFO"}):
            setup_logger(name="test-first-install")

        assert test_logger.level == logging.ERROR

    def test_setup_logger_explicit_level_overrides_existing(self):
        """An explicit level is applied even when the handler already exists."""
        setup_logger(name="test-explicit-override")
        test_logger = setup_logger(name="test-explicit-override", level="DEBUG")
        setup_logger(name="test-explicit-override")

        assert test_logger.level == logging.DEBUG

    def test_setup_logger_custom_level_by_parameter(self):
        """Test setup_logger with custom level via parameter."""
        test_logger = setup_logger(name="test-param-level", level="DEBUG")
        assert test_logger.level == logging.DEBUG

    def test_setup_logger_custom_level_by_env_var(self):
        """Test setup_logger with custom level via environment variable."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            test_logger = setup_logger(name="test-env-level")
            assert test_logger.level == logging.WARNING

    def test_setup_logger_invalid_level_defaults_to_info(self):
        """Test setup_logger with invalid level defaults to INFO."""
        test_logger = setup_logger(name="test-invalid-level", level="INVALID_LEVEL")
        assert test_logger.level == logging.INFO

    def test_setup_logger_structured_format(self):
        """Test setup_logger with structured format."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("LOG_FORMAT", None)
            test_logger = setup_logger(name="test-structured", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(filename)s" in format_string
        assert "%(lineno)d" in format_string
        assert "%(funcName)s" in format_string

    def test_setup_logger_env_format_override(self):
        """Test setup_logger format override via environment variable."""
        with patch.dict(os.environ, {"LOG_FORMAT": "simple"}):
            test_logger = setup_logger(name="test-env-format", format_type="structured")
            format_string = test_logger.handlers[0].formatter._fmt
            assert "%(filename)s" not in format_string
            assert "%(message)s" in format_string

    def test_setup_logger_no_duplicate_handlers(self):
        """Test that setup_logger doesn't add duplicate handlers."""
        test_logger1 = setup_logger(name="test-no-duplicates")
        test_logger2 = setup_logger(name="test-no-duplicates")

        assert test_logger1 is test_logger2
        assert len(test_logger1.handlers) == 1

    def test_setup_logger_handler_uses_stdout(self):
        """Test that logger handler uses stdout."""
        test_logger = setup_logger(name="test-stdout")
        assert test_logger.handlers[0].stream is sys.stdout


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_default_name(self):
        assert get_logger().name == DEFAULT_LOGGER_NAME

    def test_get_logger_returns_child_of_service_logger(self):
        """Child loggers share the service logger's handler."""
        test_logger = get_logger("gateways.s3")

        assert test_logger.name == "photo-variants.gateways.s3"
        assert test_logger.handlers == []
        assert test_logger.parent.name == "photo-variants.gateways"
        assert logging.getLogger(DEFAULT_LOGGER_NAME).handlers

    def test_debug_level_survives_component_construction(self):
        """Building components after --debug must not reset the service level."""
        service_logger = logging.getLogger(DEFAULT_LOGGER_NAME)
        previous_level = service_logger.level
        try:
            setup_logger(level="DEBUG")
            S3BlobStore(FakeS3Client())
            StructuredLogger("pipeline")

            assert service_logger.level == logging.DEBUG
            assert get_logger("gateways.s3").isEnabledFor(logging.DEBUG)
        finally:
            service_logger.setLevel(previous_level)

    def test_get_logger_does_not_reset_level(self):
        service_logger = setup_logger()
        previous_level = service_logger.level
        try:
            service_logger.setLevel(logging.WARNING)
            with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}):
                get_logger("renderer")

            assert service_logger.level == logging.WARNING
        finally:
            service_logger.setLevel(previous_level)

    def test_child_logger_output_reaches_service_handler(self, caplog, propagate_logs):
        with caplog.at_level(logging.INFO, logger=DEFAULT_LOGGER_NAME):
            get_logger("renderer").info("Rendered thumb")

        assert caplog.records[-1].name == "photo-variants.renderer"
        assert caplog.records[-1].getMessage() == "Rendered thumb"

"""Shared pytest fixtures."""

import logging

import pytest

from photo_variants.core.logging_config import DEFAULT_LOGGER_NAME, setup_logger


@pytest.fixture
def propagate_logs(monkeypatch):
    """Let records from the service logger reach pytest's caplog handler."""
    setup_logger()
    monkeypatch.setattr(logging.getLogger(DEFAULT_LOGGER_NAME), "propagate", True)

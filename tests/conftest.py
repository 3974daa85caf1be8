"""
Pytest configuration and fixtures for fanout-logger tests.
"""

import os

import pytest
import responses as responses_lib

from fanout_logger.core.config import LoggerOptions
from fanout_logger.core.context import clear_current_request
from fanout_logger.core.logger import Logger


@pytest.fixture
def ingest_url():
    """HTTP sink endpoint for testing."""
    return "http://example.test/ingest"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def http_logger(ingest_url):
    """Logger with HTTP sink only (console disabled)."""
    logger = Logger(LoggerOptions.create(url=ingest_url, console=False))
    yield logger
    logger.close()


@pytest.fixture
def file_options(tmp_path):
    """Options with a file sink in a temporary directory."""
    return LoggerOptions.create(filename="app.log", dirname=str(tmp_path / "logs"), console=False)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove FANOUT_LOGGER_* variables and the current request between tests."""
    for key in list(os.environ):
        if key.startswith("FANOUT_LOGGER_"):
            monkeypatch.delenv(key, raising=False)
    clear_current_request()
    yield
    clear_current_request()

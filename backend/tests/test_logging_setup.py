"""
Tests for logging_setup.py - console noise filtering.
"""
import logging

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "message", None, None)


class TestConsoleNoiseFilter:
    """Own modules pass at any level; libraries only at WARNING+."""

    @pytest.mark.parametrize("name", ["main", "database", "models", "config", "some_new_module"])
    def test_own_info_logs_pass(self, name):
        assert _ConsoleNoiseFilter().filter(_record(name, logging.INFO)) is True

    @pytest.mark.parametrize("name", ["sqlalchemy.engine", "uvicorn.access", "alembic.runtime.migration"])
    def test_library_info_logs_dropped(self, name):
        assert _ConsoleNoiseFilter().filter(_record(name, logging.INFO)) is False

    def test_library_warnings_pass(self):
        assert _ConsoleNoiseFilter().filter(_record("uvicorn.error", logging.WARNING)) is True

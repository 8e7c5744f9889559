"""
Pytest configuration and shared fixtures for structconf tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import patch

import pytest

from structconf.logging import DefaultLogger, SilentLogger, set_global_logger
from structconf.registry import TypeRegistry


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def registry() -> TypeRegistry:
    """Provide an empty, private type registry."""
    return TypeRegistry()


@pytest.fixture
def log_stream() -> io.StringIO:
    """Provide a stream that captures logger output."""
    return io.StringIO()


@pytest.fixture
def debug_logger(log_stream: io.StringIO) -> DefaultLogger:
    """Provide a debug-level logger writing to log_stream."""
    return DefaultLogger(debug=True, stream=log_stream)


@pytest.fixture(autouse=True)
def silent_global_logger():
    """Reset the global logger around every test."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def config_roots(tmp_path: Path, monkeypatch):
    """
    Provide system, user and program roots under tmp_path.

    The process is made to look like Linux with HOME pointing inside
    tmp_path, so the OS lookups never touch the real machine.
    """
    roots = {
        "system": tmp_path / "etc",
        "user": tmp_path / "home" / ".config",
        "program": tmp_path / "program",
    }
    for root in roots.values():
        root.mkdir(parents=True)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    with patch("structconf.config.paths._platform", return_value="linux"):
        yield roots

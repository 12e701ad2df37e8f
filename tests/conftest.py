"""
Shared pytest fixtures and configuration for Streamlet tests.
"""

import logging

import pytest
from utils import MemoryTracker, SignalRecorder, assert_no_object_leak


@pytest.fixture
def recorder():
    """Provide a fresh SignalRecorder for tests that need it."""
    return SignalRecorder()


@pytest.fixture
def memory_tracker():
    """Pytest fixture for memory tracking."""
    return MemoryTracker


@pytest.fixture
def no_leaks():
    """Pytest fixture for asserting no memory leaks."""

    def _assert_no_leaks(operation, type_name, tolerance=5):
        assert_no_object_leak(operation, type_name, tolerance)

    return _assert_no_leaks


@pytest.fixture
def stream_logs(caplog):
    """Capture DEBUG and above from the streamlet loggers."""
    caplog.set_level(logging.DEBUG, logger="streamlet")
    return caplog

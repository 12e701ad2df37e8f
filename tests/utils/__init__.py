"""
Test utilities for Streamlet.

Shared helpers for recording stream signals and checking that finished
subscriptions release their resources.
"""

from .memory_utils import (
    MemoryTracker,
    assert_cleaned_up,
    assert_no_object_leak,
    count_types,
)
from .recorder import SignalRecorder

__all__ = [
    "assert_cleaned_up",
    "assert_no_object_leak",
    "count_types",
    "MemoryTracker",
    "SignalRecorder",
]

"""Test utilities for perch.

Provides an in-memory navigation engine and location, plus assertion
helpers for URLs and recorded handler parameters::

    from perch.testing import MemoryEngine, MemoryLocation, assert_url
"""

from perch.testing.assertions import assert_handler_params, assert_url
from perch.testing.engine import Controller, MemoryEngine, MemoryLocation

__all__ = [
    "Controller",
    "MemoryEngine",
    "MemoryLocation",
    "assert_handler_params",
    "assert_url",
]

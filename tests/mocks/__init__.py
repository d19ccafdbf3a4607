"""
AutoTrade Test Mocks
====================
Reusable fakes for isolated testing.
"""

from tests.mocks.mock_backend import FakeTradingBackend, InMemoryTransactionStore, SleepRecorder

__all__ = [
    "FakeTradingBackend",
    "InMemoryTransactionStore",
    "SleepRecorder",
]

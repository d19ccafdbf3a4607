"""
Mock Trading Backend
====================
Fake swap backend and ledger for testing without RPC or SQLite.
"""

import asyncio
import sqlite3
from typing import Any, Dict, Iterable, List, Optional, Tuple

from autotrade.execution.models import SwapDetails, TradeStatus, TransactionRecord

_DEFAULT_DETAILS = SwapDetails(input_amount=1.0, output_amount=7_500_000.0)


class FakeTradingBackend:
    """
    Scriptable TradingBackend.

    Usage:
        backend = FakeTradingBackend(submit_failures=2)
        tx = await backend.submit_trade(SOL, 1.0, BONK)   # raises twice, then "sig3"
    """

    def __init__(
        self,
        submit_failures: int = 0,
        confirm_misses: int = 0,
        swap_details: Optional[SwapDetails] = _DEFAULT_DETAILS,
        failing_addresses: Iterable[str] = (),
        latency: float = 0.0,
        latencies: Optional[Dict[str, float]] = None,
    ):
        self.swap_details = swap_details
        self.failing_addresses = set(failing_addresses)
        self.latency = latency
        self.latencies = latencies or {}  # per to_address, overrides latency
        self._submit_failures = submit_failures
        self._confirm_misses = confirm_misses

        self.submit_calls: List[Tuple[str, float, str]] = []
        self.confirm_calls: List[str] = []
        self.details_calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def submit_trade(self, from_address: str, amount: float, to_address: str) -> str:
        self.submit_calls.append((from_address, amount, to_address))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            latency = self.latencies.get(to_address, self.latency)
            if latency:
                await asyncio.sleep(latency)
            if from_address in self.failing_addresses or to_address in self.failing_addresses:
                raise RuntimeError(f"Swap rejected for {to_address[:8]}")
            if self._submit_failures > 0:
                self._submit_failures -= 1
                raise RuntimeError("RPC node unavailable")
            return f"sig{len(self.submit_calls)}"
        finally:
            self.in_flight -= 1

    async def confirm(self, transaction_id: str) -> Optional[Dict[str, Any]]:
        self.confirm_calls.append(transaction_id)
        if self._confirm_misses > 0:
            self._confirm_misses -= 1
            return None
        return {"signature": transaction_id, "meta": {"err": None}}

    async def get_swap_details(self, transaction_id: str) -> Optional[SwapDetails]:
        self.details_calls.append(transaction_id)
        return self.swap_details


class InMemoryTransactionStore:
    """TransactionStore keeping records in a list; can be told to fail per status or target token."""

    def __init__(self, fail_statuses: Iterable[TradeStatus] = (), fail_addresses: Iterable[str] = ()):
        self.records: List[TransactionRecord] = []
        self.fail_statuses = set(fail_statuses)
        self.fail_addresses = set(fail_addresses)
        self.attempts = 0

    def create_transaction_record(self, record: TransactionRecord) -> TransactionRecord:
        self.attempts += 1
        if record.status in self.fail_statuses or record.token_to_address in self.fail_addresses:
            raise sqlite3.OperationalError("database is locked")
        record.id = len(self.records) + 1
        self.records.append(record)
        return record

    def statuses(self) -> List[TradeStatus]:
        return [r.status for r in self.records]


class SleepRecorder:
    """Drop-in for asyncio.sleep that returns immediately and remembers delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)

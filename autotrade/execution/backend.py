"""
Collaborator Protocols
======================
The execution core only talks to the outside world through these two
capabilities. Live mode plugs in JupiterTradingBackend, tests plug in fakes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from autotrade.execution.models import SwapDetails, TransactionRecord

# Raw confirmed-transaction payload as returned by the chain
TransactionDetails = Dict[str, Any]


@runtime_checkable
class TradingBackend(Protocol):
    """Swap submission and chain lookups."""

    async def submit_trade(self, from_address: str, amount: float, to_address: str) -> str:
        """Submit a swap of amount (UI units) and return its transaction id."""
        ...

    async def confirm(self, transaction_id: str) -> Optional[TransactionDetails]:
        """Return the confirmed transaction, or None if it is not (yet) on chain."""
        ...

    async def get_swap_details(self, transaction_id: str) -> Optional[SwapDetails]:
        """Return the normalized input/output amounts of a confirmed swap."""
        ...


@runtime_checkable
class TransactionStore(Protocol):
    """Append-only sink for outcome records."""

    def create_transaction_record(self, record: TransactionRecord) -> TransactionRecord:
        """Persist record and return it with its id assigned."""
        ...

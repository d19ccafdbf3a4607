"""
Swap Executor
=============
submit -> confirm -> extract, against a TradingBackend.

By default submit and confirm form one retried unit: a confirmation failure
resubmits the swap. With resubmit_on_confirm_failure=False the swap is sent
once and only the (idempotent) confirmation lookup is retried.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from autotrade.execution.backend import TradingBackend
from autotrade.execution.errors import SubmissionError, SwapDetailError
from autotrade.execution.models import SwapDetails, TradeDecision
from autotrade.execution.retry import RetryPolicy, SleepFn, execute_with_retry
from autotrade.shared.system.event_bus import EventBus, ExecutionEventType

SOURCE = "SWAP"


class TransactionNotConfirmed(Exception):
    """The backend has no details for a submitted transaction."""

    def __init__(self, transaction_id: str):
        super().__init__("Transaction failed to confirm")
        self.transaction_id = transaction_id


class SwapExecutor:
    def __init__(
        self,
        backend: TradingBackend,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: SleepFn = asyncio.sleep,
        events: Optional[EventBus] = None,
        resubmit_on_confirm_failure: bool = True,
    ):
        self.backend = backend
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep
        self.events = events
        self.resubmit_on_confirm_failure = resubmit_on_confirm_failure

    def _on_retry(self, attempt: int, delay: float, error: BaseException) -> None:
        if self.events:
            self.events.publish(
                ExecutionEventType.TRADE_RETRY,
                SOURCE,
                attempt=attempt,
                max_retries=self.retry_policy.max_retries,
                delay=delay,
                error=str(error),
            )

    def _on_submitted(self, transaction_id: str) -> None:
        if self.events:
            self.events.publish(ExecutionEventType.TRADE_SUBMITTED, SOURCE, transaction_id=transaction_id)

    async def _confirm(self, transaction_id: str) -> str:
        details = await self.backend.confirm(transaction_id)
        if not details:
            raise TransactionNotConfirmed(transaction_id)
        return transaction_id

    async def submit_and_confirm(self, from_address: str, amount: float, to_address: str) -> str:
        """Submit the swap and wait for confirmation; return the transaction id."""
        if self.resubmit_on_confirm_failure:
            return await self._submit_and_confirm_coupled(from_address, amount, to_address)
        return await self._submit_once_then_confirm(from_address, amount, to_address)

    async def _submit_and_confirm_coupled(self, from_address: str, amount: float, to_address: str) -> str:
        attempts = 0
        last_tx: Optional[str] = None

        async def attempt() -> str:
            nonlocal attempts, last_tx
            attempts += 1
            last_tx = await self.backend.submit_trade(from_address, amount, to_address)
            self._on_submitted(last_tx)
            return await self._confirm(last_tx)

        try:
            return await execute_with_retry(attempt, self.retry_policy, self.sleep, self._on_retry)
        except Exception as e:
            raise SubmissionError(
                f"Swap failed after {attempts} attempt(s): {e}",
                attempts=attempts,
                transaction_id=last_tx,
            ) from e

    async def _submit_once_then_confirm(self, from_address: str, amount: float, to_address: str) -> str:
        try:
            transaction_id = await self.backend.submit_trade(from_address, amount, to_address)
        except Exception as e:
            raise SubmissionError(f"Swap submission failed: {e}", attempts=1) from e
        self._on_submitted(transaction_id)

        attempts = 0

        async def poll() -> str:
            nonlocal attempts
            attempts += 1
            return await self._confirm(transaction_id)

        try:
            return await execute_with_retry(poll, self.retry_policy, self.sleep, self._on_retry)
        except Exception as e:
            raise SubmissionError(
                f"Swap {transaction_id} unconfirmed after {attempts} check(s): {e}",
                attempts=attempts,
                transaction_id=transaction_id,
            ) from e

    async def fetch_swap_details(self, transaction_id: str) -> SwapDetails:
        """Look up the amounts of a confirmed live swap. Never retried."""
        details = await self.backend.get_swap_details(transaction_id)
        if details is None or not details.is_complete:
            raise SwapDetailError("Invalid swap details")
        return details

    @staticmethod
    def simulate(decision: TradeDecision) -> SwapDetails:
        """Paper fill estimated from the strategy's token prices."""
        token_from = decision.token_pair.from_token
        token_to = decision.token_pair.to_token
        output_amount = None
        if token_from.price_usd and token_to.price_usd:
            output_amount = decision.amount * token_from.price_usd / token_to.price_usd
        return SwapDetails(input_amount=decision.amount, output_amount=output_amount, simulated=True)

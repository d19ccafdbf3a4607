"""
Trade Execution Pipeline
========================
Validator -> SwapExecutor -> OutcomeRecorder for a single decision.

Every decision that enters execute() leaves exactly one persisted record:
OPEN on success, FAILED otherwise. Failures are recorded first and then
re-raised to the caller.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Tuple

from config.settings import Settings
from autotrade.execution.backend import TradingBackend
from autotrade.execution.errors import PersistenceError
from autotrade.execution.models import SwapDetails, TradeDecision, TransactionRecord
from autotrade.execution.recorder import OutcomeRecorder
from autotrade.execution.retry import RetryPolicy, SleepFn
from autotrade.execution.swap_executor import SwapExecutor
from autotrade.execution.validation import ValidationConfig, validate_trade
from autotrade.shared.system.event_bus import EventBus, ExecutionEventType

SOURCE = "TRADE"


class TradeExecutionPipeline:
    def __init__(
        self,
        recorder: OutcomeRecorder,
        validation_config: Optional[ValidationConfig] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: SleepFn = asyncio.sleep,
        events: Optional[EventBus] = None,
        resubmit_on_confirm_failure: bool = True,
    ):
        self.recorder = recorder
        self.validation_config = validation_config or ValidationConfig()
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep
        self.events = events
        self.resubmit_on_confirm_failure = resubmit_on_confirm_failure

    @classmethod
    def from_settings(cls, recorder: OutcomeRecorder, events: Optional[EventBus] = None) -> "TradeExecutionPipeline":
        return cls(
            recorder,
            validation_config=ValidationConfig.from_settings(),
            retry_policy=RetryPolicy.from_settings(),
            events=events,
            resubmit_on_confirm_failure=Settings.RESUBMIT_ON_CONFIRM_FAILURE,
        )

    def swap_executor(self, backend: TradingBackend) -> SwapExecutor:
        return SwapExecutor(
            backend,
            retry_policy=self.retry_policy,
            sleep=self.sleep,
            events=self.events,
            resubmit_on_confirm_failure=self.resubmit_on_confirm_failure,
        )

    async def _execute_swap(
        self, decision: TradeDecision, backend: Optional[TradingBackend], is_paper_trading: bool
    ) -> Tuple[Optional[str], SwapDetails]:
        validate_trade(decision, self.validation_config)

        if is_paper_trading:
            return None, SwapExecutor.simulate(decision)

        executor = self.swap_executor(backend)
        transaction_id = await executor.submit_and_confirm(
            decision.token_pair.from_token.address,
            decision.amount,
            decision.token_pair.to_token.address,
        )
        swap_details = await executor.fetch_swap_details(transaction_id)
        return transaction_id, swap_details

    async def execute(
        self,
        decision: TradeDecision,
        backend: Optional[TradingBackend],
        strategy_assignment_id: str,
        is_paper_trading: bool,
    ) -> TransactionRecord:
        """Run one decision end to end and return its OPEN record."""
        transaction_id: Optional[str]
        swap_details: SwapDetails
        try:
            transaction_id, swap_details = await self._execute_swap(decision, backend, is_paper_trading)
        except Exception as e:
            if self.events:
                self.events.publish(
                    ExecutionEventType.TRADE_FAILED,
                    SOURCE,
                    description=decision.description,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            try:
                await self.recorder.record_failure(
                    decision, e, strategy_assignment_id, is_paper=is_paper_trading
                )
            except PersistenceError as persist_error:
                raise persist_error from e
            raise

        record = await self.recorder.record_success(
            decision,
            transaction_id,
            swap_details,
            strategy_assignment_id,
            is_paper=is_paper_trading,
        )
        if self.events:
            self.events.publish(
                ExecutionEventType.TRADE_SUCCEEDED,
                SOURCE,
                description=decision.description,
                transaction_id=transaction_id,
                input_amount=swap_details.input_amount,
                output_amount=swap_details.output_amount,
                simulated=is_paper_trading,
            )
        return record

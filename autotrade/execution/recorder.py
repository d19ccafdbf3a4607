"""Outcome bookkeeping: one OPEN or FAILED record per trade attempt."""

from __future__ import annotations

import asyncio
import traceback
from typing import Any, Dict, Optional

from autotrade.execution.backend import TransactionStore
from autotrade.execution.errors import PersistenceError, SubmissionError
from autotrade.execution.models import (
    SwapDetails,
    TradeDecision,
    TradeStatus,
    TransactionRecord,
)
from autotrade.shared.system.event_bus import EventBus, ExecutionEventType


def _amount(value: Optional[float]) -> str:
    return "0" if value is None else str(value)


def _base_record(decision: TradeDecision, status: TradeStatus, strategy_assignment_id: str, is_paper: bool) -> TransactionRecord:
    token_from = decision.token_pair.from_token
    token_to = decision.token_pair.to_token
    return TransactionRecord(
        side=decision.side,
        status=status,
        type=decision.trade_type,
        strategy_assignment_id=strategy_assignment_id,
        token_from_address=token_from.address,
        token_to_address=token_to.address,
        token_from_symbol=token_from.symbol,
        token_to_symbol=token_to.symbol,
        token_from_decimals=token_from.decimals,
        token_to_decimals=token_to.decimals,
        token_from_logo_uri=token_from.logo_uri,
        token_to_logo_uri=token_to.logo_uri,
        is_paper=is_paper,
    )


def failure_metadata(error: BaseException) -> Dict[str, Any]:
    """Diagnostic payload stored with a FAILED record."""
    metadata: Dict[str, Any] = {
        "error_type": type(error).__name__,
        "error": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
    }
    if isinstance(error, SubmissionError):
        metadata["attempts"] = error.attempts
        if error.transaction_id:
            metadata["last_transaction_id"] = error.transaction_id
    return metadata


class OutcomeRecorder:
    def __init__(self, store: TransactionStore, events: Optional[EventBus] = None):
        self.store = store
        self.events = events

    async def _persist(self, record: TransactionRecord) -> TransactionRecord:
        try:
            saved = await asyncio.to_thread(self.store.create_transaction_record, record)
        except Exception as e:
            raise PersistenceError(f"Failed to persist {record.status.value} record: {e}") from e
        if self.events:
            self.events.publish(
                ExecutionEventType.RECORD_PERSISTED,
                "DB",
                record_id=saved.id,
                status=saved.status.value,
            )
        return saved

    async def record_success(
        self,
        decision: TradeDecision,
        transaction_id: Optional[str],
        swap_details: Optional[SwapDetails],
        strategy_assignment_id: str,
        *,
        is_paper: bool = False,
    ) -> TransactionRecord:
        record = _base_record(decision, TradeStatus.OPEN, strategy_assignment_id, is_paper)
        if swap_details:
            record.token_from_amount = _amount(swap_details.input_amount)
            record.token_to_amount = _amount(swap_details.output_amount)
            record.metadata = {"simulated": swap_details.simulated}
        record.transaction_hash = transaction_id
        return await self._persist(record)

    async def record_failure(
        self,
        decision: TradeDecision,
        error: BaseException,
        strategy_assignment_id: str,
        *,
        is_paper: bool = False,
    ) -> TransactionRecord:
        record = _base_record(decision, TradeStatus.FAILED, strategy_assignment_id, is_paper)
        record.failure_reason = str(error)
        record.metadata = failure_metadata(error)
        return await self._persist(record)

"""
Decision Batch Runner
=====================
Filters a set of trade decisions to the actionable ones and drives the
pipeline for each. One decision's failure never aborts the batch: the
returned list holds one ExecutionResult per actionable decision, in order.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from config.settings import Settings
from autotrade.execution.backend import TradingBackend
from autotrade.execution.errors import PersistenceError
from autotrade.execution.models import ExecutionResult, ExecutionStrategy, TradeDecision
from autotrade.execution.pipeline import TradeExecutionPipeline
from autotrade.shared.system.event_bus import EventBus, ExecutionEventType

SOURCE = "BATCH"


@dataclass
class TradingContext:
    """Everything a batch needs from the surrounding agent process."""
    strategy_assignment_id: str
    trade_decisions: List[TradeDecision] = field(default_factory=list)
    backend: Optional[TradingBackend] = None  # unused in paper mode
    is_paper_trading: bool = True


class DecisionBatchRunner:
    def __init__(
        self,
        pipeline: TradeExecutionPipeline,
        strategy: ExecutionStrategy = ExecutionStrategy.SERIAL,
        max_concurrency: int = 3,
        halt_on_persistence_error: bool = False,
        events: Optional[EventBus] = None,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1 (got {max_concurrency})")
        self.pipeline = pipeline
        self.strategy = ExecutionStrategy(strategy)
        self.max_concurrency = max_concurrency
        self.halt_on_persistence_error = halt_on_persistence_error
        self.events = events

    @classmethod
    def from_settings(cls, pipeline: TradeExecutionPipeline, events: Optional[EventBus] = None) -> "DecisionBatchRunner":
        return cls(
            pipeline,
            strategy=ExecutionStrategy(Settings.EXECUTION_STRATEGY),
            max_concurrency=Settings.MAX_CONCURRENCY,
            halt_on_persistence_error=Settings.HALT_ON_PERSISTENCE_ERROR,
            events=events,
        )

    @staticmethod
    def actionable(decisions: List[TradeDecision]) -> List[TradeDecision]:
        return [d for d in decisions if d.is_actionable]

    def _publish(self, event_type: ExecutionEventType, **data) -> None:
        if self.events:
            self.events.publish(event_type, SOURCE, **data)

    async def _run_one(self, ctx: TradingContext, index: int, total: int, decision: TradeDecision) -> ExecutionResult:
        self._publish(
            ExecutionEventType.TRADE_STARTED,
            index=index,
            total=total,
            description=decision.description,
            amount=decision.amount,
            side=decision.side.value,
        )
        try:
            record = await self.pipeline.execute(
                decision,
                ctx.backend,
                ctx.strategy_assignment_id,
                ctx.is_paper_trading,
            )
        except PersistenceError as e:
            if self.halt_on_persistence_error:
                raise
            return ExecutionResult(decision=decision, success=False, error=e, simulated=ctx.is_paper_trading)
        except Exception as e:
            return ExecutionResult(decision=decision, success=False, error=e, simulated=ctx.is_paper_trading)

        return ExecutionResult(
            decision=decision,
            success=True,
            transaction_hash=record.transaction_hash,
            record_id=record.id,
            simulated=ctx.is_paper_trading,
        )

    async def _run_serial(self, ctx: TradingContext, decisions: List[TradeDecision]) -> List[ExecutionResult]:
        results: List[ExecutionResult] = []
        for i, decision in enumerate(decisions, start=1):
            results.append(await self._run_one(ctx, i, len(decisions), decision))
        return results

    async def _run_parallel(self, ctx: TradingContext, decisions: List[TradeDecision]) -> List[ExecutionResult]:
        """
        Bounded fan-out. A halting PersistenceError stops queued decisions from
        starting; decisions already in flight finish (and record) before it is
        re-raised.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        halted: List[PersistenceError] = []

        async def bounded(i: int, decision: TradeDecision) -> Optional[ExecutionResult]:
            async with semaphore:
                if halted:
                    return None
                try:
                    return await self._run_one(ctx, i, len(decisions), decision)
                except PersistenceError as e:
                    halted.append(e)
                    return None

        # gather keeps input order
        results = await asyncio.gather(*(bounded(i, d) for i, d in enumerate(decisions, start=1)))
        if halted:
            raise halted[0]
        return list(results)

    async def run(self, ctx: TradingContext) -> List[ExecutionResult]:
        if not ctx.is_paper_trading and ctx.backend is None:
            raise ValueError("Live trading requires a trading backend")
        decisions = self.actionable(ctx.trade_decisions)
        self._publish(
            ExecutionEventType.BATCH_STARTED,
            count=len(decisions),
            skipped=len(ctx.trade_decisions) - len(decisions),
            paper=ctx.is_paper_trading,
            strategy=self.strategy.value,
        )

        if self.strategy == ExecutionStrategy.PARALLEL:
            results = await self._run_parallel(ctx, decisions)
        else:
            results = await self._run_serial(ctx, decisions)

        self._publish(
            ExecutionEventType.BATCH_COMPLETED,
            total=len(results),
            succeeded=sum(1 for r in results if r.success),
            failed=sum(1 for r in results if not r.success),
        )
        return results


async def execute_trade_decisions(
    ctx: TradingContext,
    pipeline: TradeExecutionPipeline,
    events: Optional[EventBus] = None,
) -> List[ExecutionResult]:
    """Run a batch with the strategy and limits from Settings."""
    return await DecisionBatchRunner.from_settings(pipeline, events=events).run(ctx)

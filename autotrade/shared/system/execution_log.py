"""
Execution Log Renderer
======================
Subscribes to the EventBus and renders execution events through Logger.
The execution core never formats log lines itself.
"""

from autotrade.shared.system.event_bus import EventBus, ExecutionEvent, ExecutionEventType
from autotrade.shared.system.logging import Logger


def _render_batch_started(e: ExecutionEvent) -> None:
    d = e.data
    mode = "PAPER" if d.get("paper") else "LIVE"
    Logger.section(f"Executing {d['count']} trades ({mode}, {d.get('strategy', 'serial')})")
    if d.get("skipped"):
        Logger.debug(f"[BATCH] Skipped {d['skipped']} non-actionable decisions")


def _render_trade_started(e: ExecutionEvent) -> None:
    d = e.data
    Logger.info(
        f"[TRADE] {d['index']}/{d['total']} {d['side']} {d['amount']}: {d['description']}"
    )


def _render_retry(e: ExecutionEvent) -> None:
    d = e.data
    Logger.warning(
        f"[RETRY] Attempt {d['attempt']}/{d['max_retries']} failed ({d['error']}), "
        f"retrying after {d['delay']:.1f}s..."
    )


def _render_submitted(e: ExecutionEvent) -> None:
    Logger.info(f"[SWAP] Transaction sent: {e.data['transaction_id']}")


def _render_succeeded(e: ExecutionEvent) -> None:
    d = e.data
    tx = d.get("transaction_id") or "paper"
    Logger.success(
        f"[TRADE] {d['description']}: {d.get('input_amount')} -> {d.get('output_amount')} (tx={tx})"
    )


def _render_failed(e: ExecutionEvent) -> None:
    d = e.data
    Logger.error(f"[TRADE] {d['description']}: {d['error_type']}: {d['error']}")


def _render_persisted(e: ExecutionEvent) -> None:
    Logger.debug(f"[DB] Recorded {e.data['status']} transaction #{e.data['record_id']}")


def _render_batch_completed(e: ExecutionEvent) -> None:
    d = e.data
    line = f"[BATCH] {d['succeeded']}/{d['total']} trades succeeded"
    if d["failed"]:
        Logger.warning(f"{line}, {d['failed']} failed")
    else:
        Logger.success(line)


_RENDERERS = {
    ExecutionEventType.BATCH_STARTED: _render_batch_started,
    ExecutionEventType.TRADE_STARTED: _render_trade_started,
    ExecutionEventType.TRADE_RETRY: _render_retry,
    ExecutionEventType.TRADE_SUBMITTED: _render_submitted,
    ExecutionEventType.TRADE_SUCCEEDED: _render_succeeded,
    ExecutionEventType.TRADE_FAILED: _render_failed,
    ExecutionEventType.RECORD_PERSISTED: _render_persisted,
    ExecutionEventType.BATCH_COMPLETED: _render_batch_completed,
}


class ExecutionLogRenderer:
    def __init__(self, bus: EventBus):
        self.bus = bus

    def __call__(self, event: ExecutionEvent) -> None:
        _RENDERERS[event.type](event)

    def attach(self) -> "ExecutionLogRenderer":
        self.bus.subscribe_all(self)
        return self

import asyncio
from typing import Dict, List, Callable, Any, Set
from dataclasses import dataclass, field
from enum import Enum
import time


class ExecutionEventType(Enum):
    BATCH_STARTED = "BATCH_STARTED"
    BATCH_COMPLETED = "BATCH_COMPLETED"
    TRADE_STARTED = "TRADE_STARTED"
    TRADE_RETRY = "TRADE_RETRY"
    TRADE_SUBMITTED = "TRADE_SUBMITTED"
    TRADE_SUCCEEDED = "TRADE_SUCCEEDED"
    TRADE_FAILED = "TRADE_FAILED"
    RECORD_PERSISTED = "RECORD_PERSISTED"


@dataclass
class ExecutionEvent:
    type: ExecutionEventType
    source: str
    data: Dict[str, Any]
    timestamp: float = field(default_factory=time.time)


class EventBus:
    """
    Event bus for the execution core.
    Components emit events; renderers (console, metrics) subscribe without
    the emitting code knowing about them.
    """

    def __init__(self, max_history: int = 100):
        self._subscribers: Dict[ExecutionEventType, List[Callable]] = {
            t: [] for t in ExecutionEventType
        }
        self._history: List[ExecutionEvent] = []
        self._max_history = max_history
        # strong refs until async callbacks finish
        self._tasks: Set[asyncio.Task] = set()

    def subscribe(self, event_type: ExecutionEventType, callback: Callable[[ExecutionEvent], None]):
        """Register a callback for a specific event type."""
        if callback not in self._subscribers[event_type]:
            self._subscribers[event_type].append(callback)

    def subscribe_all(self, callback: Callable[[ExecutionEvent], None]):
        """Register a callback for every event type."""
        for event_type in ExecutionEventType:
            self.subscribe(event_type, callback)

    def emit(self, event: ExecutionEvent):
        """Emit an event to all subscribers."""
        self._history.append(event)
        if len(self._history) > self._max_history:
            self._history.pop(0)

        for callback in self._subscribers.get(event.type, []):
            if asyncio.iscoroutinefunction(callback):
                task = asyncio.create_task(callback(event))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
            else:
                callback(event)

    def publish(self, event_type: ExecutionEventType, source: str, **data: Any):
        self.emit(ExecutionEvent(type=event_type, source=source, data=data))

    def history(self, event_type: ExecutionEventType = None) -> List[ExecutionEvent]:
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.type == event_type]

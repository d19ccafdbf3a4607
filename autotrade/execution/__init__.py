"""
Trade-decision execution core.

    DecisionBatchRunner -> TradeExecutionPipeline -> validate -> SwapExecutor -> OutcomeRecorder
"""

from autotrade.execution.batch_runner import DecisionBatchRunner, TradingContext, execute_trade_decisions
from autotrade.execution.errors import (
    PersistenceError,
    SubmissionError,
    SwapDetailError,
    TradeExecutionError,
    ValidationError,
)
from autotrade.execution.models import (
    ExecutionResult,
    ExecutionStrategy,
    SwapDetails,
    Token,
    TokenPair,
    TradeDecision,
    TradeSide,
    TradeStatus,
    TradeType,
    TransactionRecord,
)
from autotrade.execution.pipeline import TradeExecutionPipeline
from autotrade.execution.recorder import OutcomeRecorder
from autotrade.execution.retry import RetryPolicy, execute_with_retry
from autotrade.execution.swap_executor import SwapExecutor
from autotrade.execution.validation import (
    ValidationConfig,
    ValidationResult,
    validate_position_size,
    validate_trade,
    validate_trade_parameters,
)

__all__ = [
    "DecisionBatchRunner",
    "TradingContext",
    "execute_trade_decisions",
    "PersistenceError",
    "SubmissionError",
    "SwapDetailError",
    "TradeExecutionError",
    "ValidationError",
    "ExecutionResult",
    "ExecutionStrategy",
    "SwapDetails",
    "Token",
    "TokenPair",
    "TradeDecision",
    "TradeSide",
    "TradeStatus",
    "TradeType",
    "TransactionRecord",
    "TradeExecutionPipeline",
    "OutcomeRecorder",
    "RetryPolicy",
    "execute_with_retry",
    "SwapExecutor",
    "ValidationConfig",
    "ValidationResult",
    "validate_position_size",
    "validate_trade",
    "validate_trade_parameters",
]

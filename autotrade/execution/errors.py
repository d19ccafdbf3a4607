"""Failure taxonomy of the execution pipeline."""

from typing import Optional


class TradeExecutionError(Exception):
    """Base class for every failure the pipeline records."""


class ValidationError(TradeExecutionError):
    """Trade or position failed a pre-trade policy check. Never retried."""


class SubmissionError(TradeExecutionError):
    """
    Swap submission or confirmation failed after all retries.

    The last backend error is chained as __cause__.
    """

    def __init__(self, message: str, attempts: int = 1, transaction_id: Optional[str] = None):
        super().__init__(message)
        self.attempts = attempts
        self.transaction_id = transaction_id


class SwapDetailError(TradeExecutionError):
    """Confirmed transaction yielded no usable amounts. Not retried."""


class PersistenceError(TradeExecutionError):
    """Writing the outcome record failed."""

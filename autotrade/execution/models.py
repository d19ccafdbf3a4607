"""
Execution Models
================
Trade decisions arrive as JSON from the strategy process and are parsed with
pydantic (camelCase aliases). Everything the pipeline produces is a plain
dataclass.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TradeSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class TradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class TradeStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    FAILED = "FAILED"


class ExecutionStrategy(str, Enum):
    """How a batch of decisions is driven."""
    SERIAL = "serial"
    PARALLEL = "parallel"  # bounded by max_concurrency


# ═══════════════════════════════════════════════════════════════════════════════
# STRATEGY INPUT (pydantic)
# ═══════════════════════════════════════════════════════════════════════════════

class TokenPrice(BaseModel):
    value: float = 0.0


class TokenLiquidity(BaseModel):
    usd: float = 0.0


class TokenVolume(BaseModel):
    h24: float = 0.0


class Token(BaseModel):
    """
    A token as described by the strategy layer.

    Example:
        Token.model_validate({
            "address": "So11111111111111111111111111111111111111112",
            "symbol": "SOL",
            "decimals": 9,
            "logoURI": "https://...",
            "price": {"value": 150.0},
            "liquidity": {"usd": 2_500_000},
            "volume": {"h24": 9_000_000},
            "trustScore": 0.92,
        })
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: str
    symbol: str
    decimals: int = 9
    logo_uri: Optional[str] = Field(default=None, alias="logoURI")
    price: Optional[TokenPrice] = None
    liquidity: Optional[TokenLiquidity] = None
    volume: Optional[TokenVolume] = None
    trust_score: Optional[float] = Field(default=None, alias="trustScore")

    @property
    def price_usd(self) -> float:
        return self.price.value if self.price else 0.0

    @property
    def liquidity_usd(self) -> float:
        return self.liquidity.usd if self.liquidity else 0.0

    @property
    def daily_volume_usd(self) -> float:
        return self.volume.h24 if self.volume else 0.0


class TokenPair(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_token: Token = Field(alias="from")
    to_token: Token = Field(alias="to")


class TradeDecision(BaseModel):
    """An instruction from the strategy layer to open or close a position."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    description: str = ""
    should_open: bool = Field(default=False, alias="shouldOpen")
    should_close: bool = Field(default=False, alias="shouldClose")
    amount: float
    token_pair: TokenPair = Field(alias="tokenPair")

    @property
    def is_actionable(self) -> bool:
        return self.should_open or self.should_close

    @property
    def side(self) -> TradeSide:
        return TradeSide.BUY if self.should_open else TradeSide.SELL

    @property
    def trade_type(self) -> TradeType:
        return TradeType.BUY if self.should_open else TradeType.SELL


# ═══════════════════════════════════════════════════════════════════════════════
# PIPELINE OUTPUT
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SwapDetails:
    """Normalized amounts of a completed swap, in UI units."""
    input_amount: Optional[float] = None
    output_amount: Optional[float] = None
    simulated: bool = False

    @property
    def is_complete(self) -> bool:
        return bool(self.input_amount) and bool(self.output_amount)


@dataclass
class TransactionRecord:
    """
    Persisted bookkeeping row, one per decision that entered the pipeline.

    profit_loss_usd / profit_loss_pct stay None: P/L is not computed here.
    transaction_hash is None for paper trades and for failures.
    """
    side: TradeSide
    status: TradeStatus
    type: TradeType
    strategy_assignment_id: str

    token_from_address: str
    token_to_address: str
    token_from_symbol: str
    token_to_symbol: str
    token_from_decimals: int
    token_to_decimals: int
    token_from_logo_uri: Optional[str] = None
    token_to_logo_uri: Optional[str] = None

    token_from_amount: str = "0"
    token_to_amount: str = "0"
    fees_in_usd: float = 0.0
    profit_loss_usd: Optional[float] = None
    profit_loss_pct: Optional[float] = None

    transaction_hash: Optional[str] = None
    is_paper: bool = False
    failure_reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)
    id: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status != TradeStatus.FAILED


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one decision inside a batch."""
    decision: TradeDecision
    success: bool
    transaction_hash: Optional[str] = None
    error: Optional[BaseException] = None
    record_id: Optional[int] = None
    simulated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "description": self.decision.description,
            "side": self.decision.side.value,
            "amount": self.decision.amount,
            "success": self.success,
            "transaction_hash": self.transaction_hash,
            "error": str(self.error) if self.error else None,
            "record_id": self.record_id,
            "simulated": self.simulated,
        }

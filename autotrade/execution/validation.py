"""
Pre-Trade Validation
====================
The single gate that runs before any irreversible action. Pure functions,
no I/O: each check returns a ValidationResult with a human readable reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config.settings import Settings
from autotrade.execution.errors import ValidationError
from autotrade.execution.models import TradeDecision

# Slippage the strategy layer assumes for every decision (percent)
DEFAULT_EXPECTED_SLIPPAGE_PCT = 1.0


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    reason: Optional[str] = None


VALID = ValidationResult(is_valid=True)


@dataclass(frozen=True)
class ValidationConfig:
    """Validation thresholds. Percentages are 0-100."""
    min_trust_score: float = 0.5
    max_liquidity_pct: float = 2.0
    max_volume_pct: float = 10.0
    min_daily_volume_usd: float = 1000.0
    max_slippage_pct: float = 5.0
    max_position_liquidity_pct: float = 5.0

    @classmethod
    def from_settings(cls) -> "ValidationConfig":
        return cls(
            min_trust_score=Settings.MIN_TRUST_SCORE,
            max_liquidity_pct=Settings.MAX_LIQUIDITY_PCT,
            max_volume_pct=Settings.MAX_VOLUME_PCT,
            min_daily_volume_usd=Settings.MIN_DAILY_VOLUME_USD,
            max_slippage_pct=Settings.MAX_SLIPPAGE_PCT,
            max_position_liquidity_pct=Settings.MAX_POSITION_LIQUIDITY_PCT,
        )


def _reject(reason: str) -> ValidationResult:
    return ValidationResult(is_valid=False, reason=reason)


def validate_trade_parameters(
    amount_in_sol: float,
    token_liquidity_usd: float,
    token_daily_volume_usd: float,
    expected_slippage: float,
    trust_score: Optional[float],
    *,
    price_usd: Optional[float] = None,
    config: Optional[ValidationConfig] = None,
) -> ValidationResult:
    """
    Reject trades that are oversized for the target token's market or that
    target an untrusted token.

    Trade value is amount_in_sol * price_usd when a price is known, otherwise
    the raw amount is compared against the USD metrics.
    """
    config = config or ValidationConfig()

    if amount_in_sol <= 0:
        return _reject(f"Trade amount must be positive (got {amount_in_sol})")

    trade_value_usd = amount_in_sol * price_usd if price_usd else amount_in_sol

    if token_liquidity_usd <= 0:
        return _reject("Token has no liquidity")

    liquidity_pct = trade_value_usd / token_liquidity_usd * 100
    if liquidity_pct > config.max_liquidity_pct:
        return _reject(
            f"Trade size ${trade_value_usd:,.2f} is {liquidity_pct:.2f}% of liquidity "
            f"(max {config.max_liquidity_pct}%)"
        )

    if token_daily_volume_usd < config.min_daily_volume_usd:
        return _reject(
            f"24h volume ${token_daily_volume_usd:,.2f} below minimum "
            f"${config.min_daily_volume_usd:,.2f}"
        )

    volume_pct = trade_value_usd / token_daily_volume_usd * 100
    if volume_pct > config.max_volume_pct:
        return _reject(
            f"Trade size ${trade_value_usd:,.2f} is {volume_pct:.2f}% of 24h volume "
            f"(max {config.max_volume_pct}%)"
        )

    if expected_slippage > config.max_slippage_pct:
        return _reject(
            f"Expected slippage {expected_slippage}% exceeds max {config.max_slippage_pct}%"
        )

    if trust_score is None:
        return _reject("Trust score unavailable")

    if trust_score < config.min_trust_score:
        return _reject(
            f"Trust score {trust_score:.2f} below minimum {config.min_trust_score:.2f}"
        )

    return VALID


def validate_position_size(
    amount_usd: float,
    token_liquidity_usd: float,
    *,
    config: Optional[ValidationConfig] = None,
) -> ValidationResult:
    """Guard against a single position taking too much of the pool."""
    config = config or ValidationConfig()

    if token_liquidity_usd <= 0:
        return _reject("Token has no liquidity")

    max_position_usd = token_liquidity_usd * config.max_position_liquidity_pct / 100
    if amount_usd > max_position_usd:
        return _reject(
            f"Position ${amount_usd:,.2f} exceeds {config.max_position_liquidity_pct}% "
            f"of liquidity (${max_position_usd:,.2f})"
        )

    return VALID


def validate_trade(decision: TradeDecision, config: Optional[ValidationConfig] = None) -> None:
    """Run both checks against the decision's target token; raise on rejection."""
    token_from = decision.token_pair.from_token
    token_to = decision.token_pair.to_token

    validation = validate_trade_parameters(
        decision.amount,
        token_to.liquidity_usd,
        token_to.daily_volume_usd,
        DEFAULT_EXPECTED_SLIPPAGE_PCT,
        token_to.trust_score,
        price_usd=token_from.price_usd,
        config=config,
    )
    if not validation.is_valid:
        raise ValidationError(f"Trade validation failed: {validation.reason}")

    position = validate_position_size(
        decision.amount * token_from.price_usd,
        token_to.liquidity_usd,
        config=config,
    )
    if not position.is_valid:
        raise ValidationError(f"Position size validation failed: {position.reason}")

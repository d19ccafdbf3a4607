"""Tests for trade parameter and position size checks."""

import pytest

from config.settings import Settings
from autotrade.execution.errors import ValidationError
from autotrade.execution.validation import (
    ValidationConfig,
    validate_position_size,
    validate_trade,
    validate_trade_parameters,
)
from tests.conftest import make_decision, make_token


def _params(**overrides):
    params = dict(
        amount_in_sol=1.0,
        token_liquidity_usd=1_000_000.0,
        token_daily_volume_usd=5_000_000.0,
        expected_slippage=1.0,
        trust_score=0.8,
        price_usd=150.0,
    )
    params.update(overrides)
    amount = params.pop("amount_in_sol")
    liquidity = params.pop("token_liquidity_usd")
    volume = params.pop("token_daily_volume_usd")
    slippage = params.pop("expected_slippage")
    trust = params.pop("trust_score")
    return validate_trade_parameters(amount, liquidity, volume, slippage, trust, **params)


class TestTradeParameters:

    def test_healthy_trade_passes(self):
        result = _params()
        assert result.is_valid
        assert result.reason is None

    @pytest.mark.parametrize("amount", [0, -1.5])
    def test_non_positive_amount_rejected(self, amount):
        result = _params(amount_in_sol=amount)
        assert not result.is_valid
        assert "must be positive" in result.reason

    def test_no_liquidity_rejected(self):
        result = _params(token_liquidity_usd=0)
        assert result.reason == "Token has no liquidity"

    def test_oversized_for_liquidity(self):
        # 200 SOL * $150 = $30,000 = 3% of $1M
        result = _params(amount_in_sol=200)
        assert not result.is_valid
        assert "3.00% of liquidity" in result.reason

    def test_low_volume_rejected(self):
        result = _params(token_daily_volume_usd=500)
        assert not result.is_valid
        assert "below minimum" in result.reason

    def test_oversized_for_volume(self):
        # $15,000 against $100,000 daily volume
        result = _params(amount_in_sol=100, token_liquidity_usd=10_000_000, token_daily_volume_usd=100_000)
        assert not result.is_valid
        assert "15.00% of 24h volume" in result.reason

    def test_slippage_over_max(self):
        result = _params(expected_slippage=6.0)
        assert "Expected slippage" in result.reason

    def test_missing_trust_score_rejected(self):
        result = _params(trust_score=None)
        assert result.reason == "Trust score unavailable"

    def test_low_trust_score_rejected(self):
        result = _params(trust_score=0.2)
        assert result.reason == "Trust score 0.20 below minimum 0.50"

    def test_raw_amount_used_without_price(self):
        # 30,000 units priced unknown are compared as $30,000
        result = _params(amount_in_sol=30_000, price_usd=None)
        assert not result.is_valid
        assert "of liquidity" in result.reason

    def test_custom_config(self):
        config = ValidationConfig(min_trust_score=0.9)
        result = _params(config=config)
        assert result.reason == "Trust score 0.80 below minimum 0.90"


class TestPositionSize:

    def test_within_limit(self):
        assert validate_position_size(10_000, 1_000_000).is_valid

    def test_over_limit(self):
        result = validate_position_size(60_000, 1_000_000)
        assert not result.is_valid
        assert "exceeds 5.0%" in result.reason

    def test_no_liquidity(self):
        assert validate_position_size(1, 0).reason == "Token has no liquidity"


class TestValidateTrade:

    def test_valid_decision_passes(self):
        validate_trade(make_decision())

    def test_parameter_failure_prefix(self):
        decision = make_decision(token_to=make_token(trust_score=0.1))
        with pytest.raises(ValidationError, match="^Trade validation failed: Trust score 0.10"):
            validate_trade(decision)

    def test_position_failure_prefix(self):
        config = ValidationConfig(max_position_liquidity_pct=0.001)
        with pytest.raises(ValidationError, match="^Position size validation failed"):
            validate_trade(make_decision(), config)

    def test_missing_market_data_rejected(self):
        bare = make_token().model_copy(update={"liquidity": None})
        with pytest.raises(ValidationError, match="no liquidity"):
            validate_trade(make_decision(token_to=bare))

    def test_config_from_settings(self, monkeypatch):
        monkeypatch.setattr(Settings, "MIN_TRUST_SCORE", 0.95)
        config = ValidationConfig.from_settings()
        assert config.min_trust_score == 0.95
        with pytest.raises(ValidationError, match="below minimum 0.95"):
            validate_trade(make_decision(), config)

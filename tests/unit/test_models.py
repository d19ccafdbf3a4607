"""Tests for the decision and record models."""

import pytest
from pydantic import ValidationError as SchemaError

from autotrade.execution.models import (
    ExecutionResult,
    SwapDetails,
    TradeDecision,
    TradeSide,
    TradeStatus,
    TransactionRecord,
    TradeType,
)
from tests.conftest import BONK_MINT, SOL_MINT, make_decision

STRATEGY_PAYLOAD = {
    "description": "Momentum entry on BONK",
    "shouldOpen": True,
    "shouldClose": False,
    "amount": 0.5,
    "tokenPair": {
        "from": {"address": SOL_MINT, "symbol": "SOL", "decimals": 9, "price": {"value": 150.0}},
        "to": {
            "address": BONK_MINT,
            "symbol": "BONK",
            "decimals": 5,
            "logoURI": "https://img.example/bonk.png",
            "price": {"value": 0.00002},
            "liquidity": {"usd": 1_000_000},
            "volume": {"h24": 5_000_000},
            "trustScore": 0.8,
        },
    },
}


class TestTradeDecision:

    def test_parses_strategy_payload(self):
        decision = TradeDecision.model_validate(STRATEGY_PAYLOAD)
        to_token = decision.token_pair.to_token

        assert decision.should_open
        assert decision.is_actionable
        assert decision.side == TradeSide.BUY
        assert decision.trade_type == TradeType.BUY
        assert to_token.logo_uri == "https://img.example/bonk.png"
        assert to_token.trust_score == 0.8
        assert to_token.liquidity_usd == 1_000_000

    def test_missing_market_data_defaults(self):
        decision = TradeDecision.model_validate(STRATEGY_PAYLOAD)
        from_token = decision.token_pair.from_token
        assert from_token.liquidity_usd == 0
        assert from_token.daily_volume_usd == 0
        assert from_token.trust_score is None

    def test_close_only_is_sell(self):
        decision = make_decision(should_open=False, should_close=True)
        assert decision.side == TradeSide.SELL
        assert decision.is_actionable

    def test_neither_flag_is_not_actionable(self):
        assert not make_decision(should_open=False, should_close=False).is_actionable

    def test_token_pair_required(self):
        payload = {k: v for k, v in STRATEGY_PAYLOAD.items() if k != "tokenPair"}
        with pytest.raises(SchemaError):
            TradeDecision.model_validate(payload)

    def test_decisions_are_immutable(self):
        decision = make_decision()
        with pytest.raises(SchemaError):
            decision.amount = 10


class TestSwapDetails:

    @pytest.mark.parametrize("details,complete", [
        (SwapDetails(1.0, 2.0), True),
        (SwapDetails(1.0, None), False),
        (SwapDetails(0.0, 2.0), False),
        (SwapDetails(), False),
    ])
    def test_is_complete(self, details, complete):
        assert details.is_complete is complete


class TestRecordsAndResults:

    def test_failed_record_did_not_succeed(self):
        record = TransactionRecord(
            side=TradeSide.BUY,
            status=TradeStatus.FAILED,
            type=TradeType.BUY,
            strategy_assignment_id="assign-1",
            token_from_address=SOL_MINT,
            token_to_address=BONK_MINT,
            token_from_symbol="SOL",
            token_to_symbol="BONK",
            token_from_decimals=9,
            token_to_decimals=5,
        )
        assert not record.succeeded
        assert record.profit_loss_usd is None

    def test_result_to_dict(self):
        result = ExecutionResult(decision=make_decision(), success=False, error=RuntimeError("boom"))
        data = result.to_dict()
        assert data["side"] == "BUY"
        assert data["error"] == "boom"
        assert data["transaction_hash"] is None

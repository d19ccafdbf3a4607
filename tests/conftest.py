"""
AutoTrade Test Configuration
============================
Shared fixtures: tokens, decisions, a fake trading backend and an
in-memory ledger.
"""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import Settings
from autotrade.execution.models import Token, TokenPair, TradeDecision
from tests.mocks.mock_backend import FakeTradingBackend, InMemoryTransactionStore, SleepRecorder

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
BONK_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
JUP_MINT = "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN"


@pytest.fixture(autouse=True, scope="session")
def quiet_logs(tmp_path_factory):
    """Keep console quiet and log files out of the repo."""
    Settings.SILENT_MODE = True
    Settings.LOG_DIR = str(tmp_path_factory.mktemp("logs"))
    yield


def make_token(
    symbol: str = "BONK",
    address: str = BONK_MINT,
    price: float = 0.00002,
    liquidity: float = 1_000_000.0,
    volume: float = 5_000_000.0,
    trust_score=0.8,
    decimals: int = 5,
) -> Token:
    return Token.model_validate({
        "address": address,
        "symbol": symbol,
        "decimals": decimals,
        "logoURI": f"https://img.example/{symbol.lower()}.png",
        "price": {"value": price},
        "liquidity": {"usd": liquidity},
        "volume": {"h24": volume},
        "trustScore": trust_score,
    })


def make_decision(
    description: str = "Buy BONK",
    amount: float = 1.0,
    should_open: bool = True,
    should_close: bool = False,
    token_from: Token = None,
    token_to: Token = None,
) -> TradeDecision:
    token_from = token_from or make_token(
        "SOL", SOL_MINT, price=150.0, liquidity=50_000_000.0, volume=900_000_000.0, trust_score=1.0, decimals=9
    )
    token_to = token_to or make_token()
    return TradeDecision(
        description=description,
        should_open=should_open,
        should_close=should_close,
        amount=amount,
        token_pair=TokenPair(from_token=token_from, to_token=token_to),
    )


@pytest.fixture
def decision():
    return make_decision()


@pytest.fixture
def backend():
    return FakeTradingBackend()


@pytest.fixture
def store():
    return InMemoryTransactionStore()


@pytest.fixture
def sleeper():
    return SleepRecorder()

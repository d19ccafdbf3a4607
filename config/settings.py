import os
from dotenv import load_dotenv

# Load Environment Variables from project root .env
env_path = os.path.join(os.path.dirname(__file__), "../.env")
load_dotenv(env_path)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # ═══════════════════════════════════════════════════════════════════
    # AUTOTRADE EXECUTION CONFIGURATION
    # ═══════════════════════════════════════════════════════════════════

    # --- Console ---
    SILENT_MODE = _env_bool("SILENT_MODE", False)

    # --- Mode ---
    # Paper mode never submits a real swap
    PAPER_TRADING = _env_bool("PAPER_TRADING", True)

    # Paths
    DATA_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../data"))
    DB_PATH = os.getenv("DB_PATH", os.path.join(DATA_DIR, "autotrade.db"))
    LOG_DIR = os.getenv(
        "LOG_DIR", os.path.abspath(os.path.join(os.path.dirname(__file__), "../logs"))
    )

    # ═══════════════════════════════════════════════════════════════════
    # RETRY (submit + confirm)
    # ═══════════════════════════════════════════════════════════════════
    MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
    BACKOFF_BASE_S = float(os.getenv("BACKOFF_BASE_S", "1.0"))  # 1s, 2s, 4s

    # False = submit once, retry only the confirmation lookup
    RESUBMIT_ON_CONFIRM_FAILURE = _env_bool("RESUBMIT_ON_CONFIRM_FAILURE", True)

    # ═══════════════════════════════════════════════════════════════════
    # BATCH
    # ═══════════════════════════════════════════════════════════════════
    EXECUTION_STRATEGY = os.getenv("EXECUTION_STRATEGY", "serial")  # serial | parallel
    MAX_CONCURRENCY = int(os.getenv("MAX_CONCURRENCY", "3"))
    HALT_ON_PERSISTENCE_ERROR = _env_bool("HALT_ON_PERSISTENCE_ERROR", False)

    # ═══════════════════════════════════════════════════════════════════
    # PRE-TRADE VALIDATION
    # ═══════════════════════════════════════════════════════════════════
    MIN_TRUST_SCORE = float(os.getenv("MIN_TRUST_SCORE", "0.5"))  # 0.0 - 1.0
    MAX_LIQUIDITY_PCT = float(os.getenv("MAX_LIQUIDITY_PCT", "2.0"))  # % of pool
    MAX_VOLUME_PCT = float(os.getenv("MAX_VOLUME_PCT", "10.0"))  # % of 24h volume
    MIN_DAILY_VOLUME_USD = float(os.getenv("MIN_DAILY_VOLUME_USD", "1000"))
    MAX_SLIPPAGE_PCT = float(os.getenv("MAX_SLIPPAGE_PCT", "5.0"))
    MAX_POSITION_LIQUIDITY_PCT = float(os.getenv("MAX_POSITION_LIQUIDITY_PCT", "5.0"))

    # ═══════════════════════════════════════════════════════════════════
    # SOLANA / JUPITER
    # ═══════════════════════════════════════════════════════════════════
    RPC_URL = os.getenv("RPC_URL", "https://api.mainnet-beta.solana.com")
    JUPITER_QUOTE_URL = os.getenv("JUPITER_QUOTE_URL", "https://quote-api.jup.ag/v6/quote")
    JUPITER_SWAP_URL = os.getenv("JUPITER_SWAP_URL", "https://quote-api.jup.ag/v6/swap")
    SLIPPAGE_BPS = int(os.getenv("SLIPPAGE_BPS", "100"))  # 1%
    # submit_trade returns only once the signature is confirmed
    CONFIRM_TIMEOUT_S = float(os.getenv("CONFIRM_TIMEOUT_S", "30"))
    CONFIRM_POLL_INTERVAL_S = float(os.getenv("CONFIRM_POLL_INTERVAL_S", "1.0"))
    PRIVATE_KEY = os.getenv("SOLANA_PRIVATE_KEY") or os.getenv("PHANTOM_PRIVATE_KEY", "")

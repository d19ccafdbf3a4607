import json
from typing import List, Optional

from autotrade.execution.models import TradeSide, TradeStatus, TradeType, TransactionRecord
from autotrade.shared.system.database.repositories.assignment_repo import StrategyAssignmentRepository
from autotrade.shared.system.database.repositories.base import BaseRepository


class TransactionRepository(BaseRepository):
    """
    Append-only trade ledger. Implements the TransactionStore protocol.
    Inserting a record for an unknown strategy assignment raises IntegrityError.
    """

    TABLE = "transactions"

    def init_table(self):
        StrategyAssignmentRepository(self.db)
        with self.db.cursor(commit=True) as c:
            c.execute("""
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                side TEXT NOT NULL,
                status TEXT NOT NULL,
                type TEXT NOT NULL,
                timestamp REAL NOT NULL,
                token_from_address TEXT NOT NULL,
                token_to_address TEXT NOT NULL,
                token_from_symbol TEXT,
                token_to_symbol TEXT,
                token_from_decimals INTEGER,
                token_to_decimals INTEGER,
                token_from_logo_uri TEXT,
                token_to_logo_uri TEXT,
                token_from_amount TEXT NOT NULL DEFAULT '0',
                token_to_amount TEXT NOT NULL DEFAULT '0',
                fees_in_usd REAL DEFAULT 0,
                profit_loss_usd REAL,
                profit_loss_pct REAL,
                transaction_hash TEXT,
                is_paper BOOLEAN DEFAULT 0,
                failure_reason TEXT,
                metadata TEXT,
                strategy_assignment_id TEXT NOT NULL
                    REFERENCES strategy_assignments(id)
            )
            """)
            c.execute(
                "CREATE INDEX IF NOT EXISTS idx_transactions_assignment "
                "ON transactions(strategy_assignment_id)"
            )
            c.execute(
                "CREATE INDEX IF NOT EXISTS idx_transactions_timestamp ON transactions(timestamp)"
            )

    def create_transaction_record(self, record: TransactionRecord) -> TransactionRecord:
        """Insert record and return it with its id assigned."""
        record.id = self._insert({
            "side": record.side.value,
            "status": record.status.value,
            "type": record.type.value,
            "timestamp": record.timestamp,
            "token_from_address": record.token_from_address,
            "token_to_address": record.token_to_address,
            "token_from_symbol": record.token_from_symbol,
            "token_to_symbol": record.token_to_symbol,
            "token_from_decimals": record.token_from_decimals,
            "token_to_decimals": record.token_to_decimals,
            "token_from_logo_uri": record.token_from_logo_uri,
            "token_to_logo_uri": record.token_to_logo_uri,
            "token_from_amount": record.token_from_amount,
            "token_to_amount": record.token_to_amount,
            "fees_in_usd": record.fees_in_usd,
            "profit_loss_usd": record.profit_loss_usd,
            "profit_loss_pct": record.profit_loss_pct,
            "transaction_hash": record.transaction_hash,
            "is_paper": record.is_paper,
            "failure_reason": record.failure_reason,
            "metadata": json.dumps(record.metadata, default=str),
            "strategy_assignment_id": record.strategy_assignment_id,
        })
        return record

    @staticmethod
    def _to_record(row: dict) -> TransactionRecord:
        row = dict(row)
        row["side"] = TradeSide(row["side"])
        row["status"] = TradeStatus(row["status"])
        row["type"] = TradeType(row["type"])
        row["is_paper"] = bool(row["is_paper"])
        row["metadata"] = json.loads(row["metadata"]) if row["metadata"] else {}
        return TransactionRecord(**row)

    def get(self, record_id: int) -> Optional[TransactionRecord]:
        row = self._fetchone("SELECT * FROM transactions WHERE id = ?", (record_id,))
        return self._to_record(row) if row else None

    def get_by_assignment(self, strategy_assignment_id: str, limit: int = 50) -> List[TransactionRecord]:
        """Most recent records first."""
        rows = self._fetchall(
            "SELECT * FROM transactions WHERE strategy_assignment_id = ? "
            "ORDER BY timestamp DESC, id DESC LIMIT ?",
            (strategy_assignment_id, limit),
        )
        return [self._to_record(r) for r in rows]

from typing import Any, Dict, List, Optional

from autotrade.shared.system.database.core import DatabaseCore


class BaseRepository:
    """
    Base class for the ledger repositories.
    Wraps the DB Core cursor with row-as-dict helpers.
    """

    TABLE = ""

    def __init__(self, db: DatabaseCore):
        self.db = db
        self.init_table()

    def _insert(self, row: Dict[str, Any]) -> int:
        """Insert one row into TABLE and return its rowid."""
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        with self.db.cursor(commit=True) as c:
            c.execute(
                f"INSERT INTO {self.TABLE} ({columns}) VALUES ({placeholders})",
                tuple(row.values()),
            )
            return c.lastrowid

    def _fetchone(self, query: str, params: tuple = ()) -> Optional[dict]:
        with self.db.cursor() as c:
            c.execute(query, params)
            row = c.fetchone()
            return dict(row) if row else None

    def _fetchall(self, query: str, params: tuple = ()) -> List[dict]:
        with self.db.cursor() as c:
            c.execute(query, params)
            return [dict(row) for row in c.fetchall()]

    def count(self) -> int:
        result = self._fetchone(f"SELECT COUNT(*) AS count FROM {self.TABLE}")
        return result["count"] if result else 0

    def init_table(self):
        """Override this to create tables."""
        raise NotImplementedError

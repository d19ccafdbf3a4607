import time
import uuid
from typing import Optional

from autotrade.shared.system.database.repositories.base import BaseRepository


class StrategyAssignmentRepository(BaseRepository):
    """
    Strategy assignments link a decision stream to its owning strategy.
    Transaction records reference them; this core never deletes them.
    """

    TABLE = "strategy_assignments"

    def init_table(self):
        with self.db.cursor(commit=True) as c:
            c.execute("""
            CREATE TABLE IF NOT EXISTS strategy_assignments (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                created_at REAL NOT NULL
            )
            """)

    def create(self, name: str, assignment_id: Optional[str] = None) -> str:
        """Create an assignment and return its id."""
        assignment_id = assignment_id or str(uuid.uuid4())
        self._insert({"id": assignment_id, "name": name, "created_at": time.time()})
        return assignment_id

    def get(self, assignment_id: str) -> Optional[dict]:
        return self._fetchone("SELECT * FROM strategy_assignments WHERE id = ?", (assignment_id,))

    def exists(self, assignment_id: str) -> bool:
        return self.get(assignment_id) is not None

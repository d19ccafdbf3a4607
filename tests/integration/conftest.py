"""
Integration Test Configuration
==============================
Real SQLite ledger under tmp_path.
"""

import pytest

from autotrade.shared.system.database.core import DatabaseCore
from autotrade.shared.system.database.repositories.assignment_repo import StrategyAssignmentRepository
from autotrade.shared.system.database.repositories.transaction_repo import TransactionRepository


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "data" / "ledger.db")


@pytest.fixture
def db(db_path):
    return DatabaseCore(db_path)


@pytest.fixture
def repo(db):
    return TransactionRepository(db)


@pytest.fixture
def assignment_id(db):
    return StrategyAssignmentRepository(db).create("momentum-v1")

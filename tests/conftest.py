"""
Shared fixtures.

Every test gets its own database file under tmp_path; ledger-level tests run
once against SQLite and once against the in-memory store.
"""

import pytest

from clinancial.db import LedgerRepository, MemoryLedgerStore
from clinancial.services import LedgerService


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "clinancial.test.db"


@pytest.fixture
def repository(db_path):
    return LedgerRepository(db_path)


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    if request.param == "sqlite":
        return LedgerRepository(tmp_path / "clinancial.test.db")
    return MemoryLedgerStore()


@pytest.fixture
def ledger(store):
    return LedgerService(store)


@pytest.fixture
def accounts(ledger):
    """Two accounts, A and B."""
    return ledger.create_account("Account1"), ledger.create_account("Account2")

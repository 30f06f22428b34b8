"""
Database module for the clinancial ledger.

Structure:
- interface.py: LedgerStore, the storage contract
- base.py: Base repository with connection management and schema
- accounts.py: Account CRUD and lookups
- registers.py: Register CRUD, range scans and balance sums
- repository.py: SQLite facade that composes the sub-repositories
- memory.py: Ephemeral in-memory store with a sorted period-key index
"""

from .accounts import AccountRepository
from .base import BaseRepository
from .interface import LedgerStore
from .memory import MemoryLedgerStore
from .registers import RegisterRepository
from .repository import LedgerRepository, get_repository

__all__ = [
    # Contract
    "LedgerStore",
    # SQLite
    "AccountRepository",
    "BaseRepository",
    "LedgerRepository",
    "RegisterRepository",
    # In-memory
    "MemoryLedgerStore",
    # Utilities
    "get_repository",
]

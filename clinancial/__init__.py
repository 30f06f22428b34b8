"""
clinancial - a command-line financial manager

Records accounts and the registers (transactions) moving money between them,
and computes an account's balance at the end of any month.
"""

from .db import LedgerRepository, LedgerStore, MemoryLedgerStore, get_repository
from .errors import LedgerError, NotFoundError, StorageError, ValidationError
from .models import Account, FinancialRegister
from .services import LedgerService

__version__ = "0.1.0"

__all__ = [
    "Account",
    "FinancialRegister",
    "LedgerError",
    "LedgerRepository",
    "LedgerService",
    "LedgerStore",
    "MemoryLedgerStore",
    "NotFoundError",
    "StorageError",
    "ValidationError",
    "get_repository",
]

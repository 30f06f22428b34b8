"""
Main ledger repository facade.

Composes the account and register repositories into the LedgerStore
interface used by the ledger service.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from clinancial.config import get_db_path
from clinancial.models import Account, FinancialRegister

from .accounts import AccountRepository
from .base import BaseRepository
from .interface import LedgerStore
from .registers import RegisterRepository

logger = logging.getLogger(__name__)


class LedgerRepository(BaseRepository, LedgerStore):
    """
    SQLite-backed ledger store.

    Delegates to:
    - AccountRepository: account CRUD and lookups
    - RegisterRepository: register CRUD, range scans and balances
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """
        Initialize the repository and all sub-repositories.

        Args:
            db_path: Path to the SQLite database file. Defaults to the
                configured path
        """
        super().__init__(db_path, init_schema=True)

        self._accounts = AccountRepository(self.db_path, init_schema=False)
        self._registers = RegisterRepository(
            self.db_path, init_schema=False, account_repo=self._accounts
        )

        logger.debug(f"LedgerRepository ready at {self.db_path}")

    # =========================================================================
    # Accounts
    # =========================================================================

    def create_account(self, name: str) -> Account:
        return self._accounts.create(name)

    def update_account(self, account: Account) -> Account:
        return self._accounts.update(account)

    def get_account_by_id(self, account_id: int) -> Account:
        return self._accounts.get_by_id(account_id)

    def get_account_by_name(self, name: str) -> Account:
        return self._accounts.get_by_name(name)

    def list_accounts(self) -> list[Account]:
        return self._accounts.list_all()

    # =========================================================================
    # Registers
    # =========================================================================

    def insert_register(self, register: FinancialRegister) -> FinancialRegister:
        return self._registers.insert(register)

    def delete_register(self, register: FinancialRegister):
        self._registers.delete(register)

    def get_register_by_id(self, register_id: int) -> FinancialRegister:
        return self._registers.get_by_id(register_id)

    def get_registers_by_date_period(
        self, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        return self._registers.get_by_period(start, end)

    def get_account_registers(
        self, account_id: int, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        return self._registers.get_for_account(account_id, start, end)

    def get_balance(self, account_id: int, before: datetime) -> float:
        return self._registers.get_balance(account_id, before)


def get_repository(db_path: Optional[Union[str, Path]] = None) -> LedgerRepository:
    """Build a repository for the given path, or the configured one."""
    return LedgerRepository(db_path or get_db_path())

"""
Abstract ledger storage interface.

Both the SQLite repository and the in-memory store implement these
operations, so the ledger service does not care where registers live.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from clinancial.models import Account, FinancialRegister


class LedgerStore(ABC):
    """
    Storage contract for accounts and financial registers.

    Lookups that match nothing raise NotFoundError; failures of the
    underlying storage raise StorageError.
    """

    # =========================================================================
    # Schema
    # =========================================================================

    @abstractmethod
    def create_schema(self):
        """Create storage structures if missing. Safe to call repeatedly."""
        pass

    @abstractmethod
    def drop_schema(self):
        """Wipe all accounts and registers."""
        pass

    # =========================================================================
    # Accounts
    # =========================================================================

    @abstractmethod
    def create_account(self, name: str) -> Account:
        """Store a new account, assigning its id and creation time."""
        pass

    @abstractmethod
    def update_account(self, account: Account) -> Account:
        """
        Persist an account's name.

        Raises:
            NotFoundError: If the account does not exist
        """
        pass

    @abstractmethod
    def get_account_by_id(self, account_id: int) -> Account:
        """
        Raises:
            NotFoundError: If no account has this id
        """
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Account:
        """
        First account (lowest id) with this name.

        Raises:
            NotFoundError: If no account has this name
        """
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """All accounts ordered by id."""
        pass

    # =========================================================================
    # Registers
    # =========================================================================

    @abstractmethod
    def insert_register(self, register: FinancialRegister) -> FinancialRegister:
        """Store a register and write the assigned id back onto it."""
        pass

    @abstractmethod
    def delete_register(self, register: FinancialRegister):
        """
        Delete by (id, name) and reset the register's id to 0.

        Raises:
            ValidationError: If register.id <= 0
            NotFoundError: If nothing matches
        """
        pass

    @abstractmethod
    def get_register_by_id(self, register_id: int) -> FinancialRegister:
        """
        Register with endpoints resolved; unresolvable endpoints are None.

        Raises:
            NotFoundError: If no register has this id
        """
        pass

    @abstractmethod
    def get_registers_by_date_period(
        self, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        """Registers with start < time < end, ordered by (time, id)."""
        pass

    @abstractmethod
    def get_account_registers(
        self, account_id: int, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        """Registers touching an account with start <= time < end, ordered by (time, id)."""
        pass

    @abstractmethod
    def get_balance(self, account_id: int, before: datetime) -> float:
        """Sum of signed register values for an account with time < before."""
        pass

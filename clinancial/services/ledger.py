"""
Ledger service: balances, registers and accounts.

This is the layer the command line talks to. It validates input, then
delegates to a LedgerStore (SQLite or in-memory).
"""

import logging
import math
from datetime import MAXYEAR, MINYEAR, datetime
from typing import Optional, Union

from clinancial.config import (
    MAX_ACCOUNT_NAME_LENGTH,
    MAX_REGISTER_NAME_LENGTH,
    MAX_VALUE,
    MIN_VALUE,
)
from clinancial.db import LedgerStore
from clinancial.errors import NotFoundError, ValidationError
from clinancial.models import Account, FinancialRegister, month_end_bound, month_start

logger = logging.getLogger(__name__)


class LedgerService:
    """Operations on accounts and financial registers."""

    def __init__(self, store: LedgerStore):
        """
        Initialize the ledger service.

        Args:
            store: Where accounts and registers are kept
        """
        self.store = store

    # =========================================================================
    # Accounts
    # =========================================================================

    def create_account(self, name: str) -> Account:
        """
        Create a new account.

        Raises:
            ValidationError: If the name is empty or too long
        """
        name = self._validate_account_name(name)
        return self.store.create_account(name)

    def rename_account(self, account_id: int, name: str) -> Account:
        """
        Change an account's name.

        Raises:
            ValidationError: If the name is empty or too long
            NotFoundError: If the account does not exist
        """
        name = self._validate_account_name(name)
        account = self.store.get_account_by_id(account_id)
        account.name = name
        return self.store.update_account(account)

    def list_accounts(self) -> list[Account]:
        return self.store.list_accounts()

    def get_account(self, ref: Union[int, str]) -> Account:
        """
        Look an account up by id or by name.

        Strings made of digits are tried as an id first, then as a name.

        Raises:
            NotFoundError: If nothing matches
        """
        if isinstance(ref, int):
            return self.store.get_account_by_id(ref)

        ref = ref.strip()
        if ref.isdigit():
            try:
                return self.store.get_account_by_id(int(ref))
            except NotFoundError:
                logger.debug(f"No account with id {ref}, trying it as a name")
        return self.store.get_account_by_name(ref)

    def _validate_account_name(self, name: Optional[str]) -> str:
        if not name or not name.strip():
            raise ValidationError("Account name cannot be empty")
        name = name.strip()
        if len(name) > MAX_ACCOUNT_NAME_LENGTH:
            raise ValidationError(
                f"Account name is longer than {MAX_ACCOUNT_NAME_LENGTH} characters"
            )
        return name

    # =========================================================================
    # Balances
    # =========================================================================

    def get_value(self, account: Account, month: int, year: int) -> float:
        """
        Balance of an account at the end of ``month``/``year``.

        Sums every register dated strictly before the first instant of the
        following month: +value where the account is credited, -value where
        it is debited.

        Raises:
            ValidationError: If month/year is not a usable month
        """
        self.validate_period(month, year)

        bound = month_end_bound(month, year)
        balance = self.store.get_balance(account.id, bound)
        logger.debug(f"Balance of account {account.id} before {bound}: {balance}")
        return balance

    def get_opening_value(self, account: Account, month: int, year: int) -> float:
        """
        Balance of an account at the first instant of ``month``/``year``.

        Raises:
            ValidationError: If month/year is not a usable month
        """
        self.validate_period(month, year)
        return self.store.get_balance(account.id, month_start(month, year))

    @staticmethod
    def validate_period(month: int, year: int):
        """
        Check that ``month``/``year`` and the month after it can be represented.

        Raises:
            ValidationError: If month is not 1..12 or the year is out of range
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month: {month}")
        if not MINYEAR <= year <= MAXYEAR or (year, month) == (MAXYEAR, 12):
            raise ValidationError(f"Invalid year: {year}")

    # =========================================================================
    # Registers
    # =========================================================================

    def add_register(self, register: FinancialRegister) -> FinancialRegister:
        """
        Record a register. The store assigns its id, written back onto it.

        Raises:
            ValidationError: If the register is malformed
            NotFoundError: If an endpoint account does not exist
        """
        self._validate_register(register)
        return self.store.insert_register(register)

    def remove_register(self, register: FinancialRegister):
        """
        Delete a register by id and name; its id is reset to 0.

        Raises:
            ValidationError: If the register has no valid id
            NotFoundError: If no stored register matches
        """
        self.store.delete_register(register)

    def get_register_by_id(self, register_id: int) -> FinancialRegister:
        """
        Raises:
            NotFoundError: If no register has this id
        """
        return self.store.get_register_by_id(register_id)

    def get_registers_by_date_period(
        self, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        """Registers dated strictly between ``start`` and ``end``, oldest first."""
        if start >= end:
            return []
        return self.store.get_registers_by_date_period(start, end)

    def get_account_registers(
        self, account: Account, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        """Registers touching ``account`` with ``start <= time < end``, oldest first."""
        if start >= end:
            return []
        return self.store.get_account_registers(account.id, start, end)

    def _validate_register(self, register: FinancialRegister):
        if not register.name or not register.name.strip():
            raise ValidationError("Register name cannot be empty")
        if len(register.name) > MAX_REGISTER_NAME_LENGTH:
            raise ValidationError(
                f"Register name is longer than {MAX_REGISTER_NAME_LENGTH} characters"
            )
        if (
            register.value is None
            or not math.isfinite(register.value)
            or register.value < MIN_VALUE
        ):
            raise ValidationError(f"Invalid value: {register.value}")
        if register.value > MAX_VALUE:
            raise ValidationError(f"Value exceeds maximum: {register.value}")
        if register.from_account is None and register.to_account is None:
            raise ValidationError("A register needs a source or a destination account")

        for side, account in (("from", register.from_account), ("to", register.to_account)):
            if account is None:
                continue
            if not account.is_stored:
                raise ValidationError(f"The {side} account has not been created")
            # Raises NotFoundError for stale references
            self.store.get_account_by_id(account.id)

        if register.from_id and register.from_id == register.to_id:
            raise ValidationError("Source and destination are the same account")

"""
In-memory ledger store.

An ephemeral LedgerStore for tests and dry runs. Registers live in a single
table keyed by id; accounts only ever see them through that table, so a
register is visible from both of its endpoints as soon as it is inserted.

Registers are also bucketed by period key. The keys are kept in a sorted
list so month ranges can be scanned with bisect and the scan can stop at the
first key past the range.
"""

import bisect
import logging
from dataclasses import dataclass, replace
from datetime import datetime

from clinancial.errors import NotFoundError, ValidationError
from clinancial.models import Account, FinancialRegister, period_key_of

from .interface import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class _StoredRegister:
    """Register row as kept by the store: endpoints are ids, 0 when absent."""

    id: int
    name: str
    time: datetime
    value: float
    from_id: int
    to_id: int


class MemoryLedgerStore(LedgerStore):
    """Dictionary-backed ledger store with a sorted period-key index."""

    def __init__(self):
        self._accounts: dict[int, Account] = {}
        self._registers: dict[int, _StoredRegister] = {}
        self._buckets: dict[int, list[int]] = {}
        self._period_keys: list[int] = []
        self._next_account_id = 1
        self._next_register_id = 1

    # =========================================================================
    # Schema
    # =========================================================================

    def create_schema(self):
        pass

    def drop_schema(self):
        self._accounts.clear()
        self._registers.clear()
        self._buckets.clear()
        self._period_keys.clear()
        self._next_account_id = 1
        self._next_register_id = 1
        logger.info("In-memory ledger wiped")

    # =========================================================================
    # Accounts
    # =========================================================================

    def create_account(self, name: str) -> Account:
        account = Account(
            id=self._next_account_id,
            name=name,
            created_at=datetime.now().replace(microsecond=0),
        )
        self._accounts[account.id] = account
        self._next_account_id += 1
        logger.info(f"Created account {account.id} ({name})")
        return replace(account)

    def update_account(self, account: Account) -> Account:
        stored = self._accounts.get(account.id)
        if stored is None:
            raise NotFoundError(f"No account with id {account.id}")
        stored.name = account.name
        return account

    def get_account_by_id(self, account_id: int) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise NotFoundError(f"No account with id {account_id}")
        return replace(account)

    def get_account_by_name(self, name: str) -> Account:
        for account_id in sorted(self._accounts):
            if self._accounts[account_id].name == name:
                return replace(self._accounts[account_id])
        raise NotFoundError(f"No account named {name!r}")

    def list_accounts(self) -> list[Account]:
        return [replace(self._accounts[i]) for i in sorted(self._accounts)]

    # =========================================================================
    # Registers
    # =========================================================================

    def insert_register(self, register: FinancialRegister) -> FinancialRegister:
        stored = _StoredRegister(
            id=self._next_register_id,
            name=register.name,
            time=register.time.replace(microsecond=0),
            value=float(register.value),
            from_id=register.from_id,
            to_id=register.to_id,
        )
        self._next_register_id += 1
        self._registers[stored.id] = stored

        key = period_key_of(stored.time)
        if key not in self._buckets:
            bisect.insort(self._period_keys, key)
            self._buckets[key] = []
        self._buckets[key].append(stored.id)

        register.id = stored.id
        logger.info(
            f"Inserted register {stored.id}: {stored.value:.2f} "
            f"from {stored.from_id} to {stored.to_id}"
        )
        return register

    def delete_register(self, register: FinancialRegister):
        if not register.id or register.id <= 0:
            raise ValidationError("Invalid financial register ID")

        stored = self._registers.get(register.id)
        if stored is None or stored.name != register.name:
            raise NotFoundError(
                f"No register with id {register.id} named {register.name!r}"
            )

        del self._registers[stored.id]
        key = period_key_of(stored.time)
        bucket = self._buckets[key]
        bucket.remove(stored.id)
        if not bucket:
            del self._buckets[key]
            self._period_keys.remove(key)

        logger.info(f"Deleted register {stored.id}")
        register.id = 0

    def get_register_by_id(self, register_id: int) -> FinancialRegister:
        stored = self._registers.get(register_id)
        if stored is None:
            raise NotFoundError(f"No register with id {register_id}")
        return self._resolve(stored)

    def get_registers_by_date_period(
        self, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        candidates = self._scan(period_key_of(start), period_key_of(end))
        return [self._resolve(r) for r in candidates if start < r.time < end]

    def get_account_registers(
        self, account_id: int, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        candidates = self._scan(period_key_of(start), period_key_of(end))
        return [
            self._resolve(r)
            for r in candidates
            if start <= r.time < end and account_id in (r.from_id, r.to_id)
        ]

    def get_balance(self, account_id: int, before: datetime) -> float:
        if not self._period_keys:
            return 0.0

        total = 0.0
        for r in self._scan(self._period_keys[0], period_key_of(before)):
            if r.time >= before:
                continue
            if r.to_id == account_id:
                total += r.value
            if r.from_id == account_id:
                total -= r.value
        return total

    def _scan(self, first_key: int, last_key: int) -> list[_StoredRegister]:
        """Registers in period keys first_key..last_key inclusive, ordered by (time, id)."""
        found = []
        index = bisect.bisect_left(self._period_keys, first_key)
        while index < len(self._period_keys):
            key = self._period_keys[index]
            if key > last_key:
                break
            found.extend(self._registers[i] for i in self._buckets[key])
            index += 1
        found.sort(key=lambda r: (r.time, r.id))
        return found

    def _resolve(self, stored: _StoredRegister) -> FinancialRegister:
        """Build a register model, turning endpoint ids back into accounts."""
        from_account = self._accounts.get(stored.from_id)
        to_account = self._accounts.get(stored.to_id)
        return FinancialRegister(
            id=stored.id,
            name=stored.name,
            time=stored.time,
            value=stored.value,
            from_account=replace(from_account) if from_account else None,
            to_account=replace(to_account) if to_account else None,
        )

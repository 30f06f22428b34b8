"""
Financial register model and period helpers.

A financial register is a single transaction moving value from one account
to another. Registers are bucketed by period key, an integer encoding a month
as ``year * 100 + month`` (201701 is January 2017).
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .account import Account


def period_key(year: int, month: int) -> int:
    """Encode a year and month as a period key."""
    return year * 100 + month


def period_key_of(moment: datetime) -> int:
    """Period key of the month a timestamp falls in."""
    return period_key(moment.year, moment.month)


def month_end_bound(month: int, year: int) -> datetime:
    """
    First instant of the month after ``month``/``year``.

    This is the exclusive upper bound used for month-end balances: December
    wraps to January of the following year.
    """
    if month >= 12:
        month = 1
        year += 1
    else:
        month += 1
    return datetime(year, month, 1)


def month_start(month: int, year: int) -> datetime:
    """First instant of ``month``/``year``."""
    return datetime(year, month, 1)


def to_timestamp(moment: datetime, round_up: bool = False) -> int:
    """
    Unix seconds for a (local, naive) datetime.

    Fractions of a second are dropped, or rounded up with ``round_up``.
    Stored times are whole seconds, so comparing them against a bound
    rounded this way gives the same answer as comparing full datetimes.
    """
    seconds = moment.timestamp()
    return math.ceil(seconds) if round_up else math.floor(seconds)


def from_timestamp(seconds: int) -> datetime:
    """Local naive datetime for Unix seconds."""
    return datetime.fromtimestamp(seconds)


@dataclass
class FinancialRegister:
    """
    A single recorded transaction.

    ``value`` is always positive; its sign depends on which account asks.
    Either endpoint may be None, standing for money entering or leaving the
    tracked accounts.
    """

    name: str
    time: datetime
    value: float
    from_account: Optional[Account] = None  # debited
    to_account: Optional[Account] = None  # credited
    id: int = 0

    @property
    def period_key(self) -> int:
        return period_key_of(self.time)

    @property
    def from_id(self) -> int:
        """Id of the debited account, 0 when absent."""
        return (self.from_account.id or 0) if self.from_account else 0

    @property
    def to_id(self) -> int:
        """Id of the credited account, 0 when absent."""
        return (self.to_account.id or 0) if self.to_account else 0

    def signed_value(self, account_id: int) -> float:
        """Contribution of this register to the balance of ``account_id``."""
        contribution = 0.0
        if account_id and self.to_id == account_id:
            contribution += self.value
        if account_id and self.from_id == account_id:
            contribution -= self.value
        return contribution

    def touches(self, account_id: int) -> bool:
        """Whether the register moves money in or out of ``account_id``."""
        return bool(account_id) and account_id in (self.from_id, self.to_id)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "time": self.time.isoformat(),
            "value": self.value,
            "from_account": self.from_account.name if self.from_account else None,
            "to_account": self.to_account.name if self.to_account else None,
        }

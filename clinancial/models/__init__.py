from .account import Account
from .register import (
    FinancialRegister,
    from_timestamp,
    month_end_bound,
    month_start,
    period_key,
    period_key_of,
    to_timestamp,
)

__all__ = [
    "Account",
    "FinancialRegister",
    "from_timestamp",
    "month_end_bound",
    "month_start",
    "period_key",
    "period_key_of",
    "to_timestamp",
]

"""
Statement service for month-by-month account summaries.

For each month of a range it reports what an account received, what it
sent, the net movement and the balance at the end of the month.
"""

import logging

import pandas as pd

from clinancial.errors import ValidationError
from clinancial.models import Account, month_end_bound, month_start, period_key

from .ledger import LedgerService

logger = logging.getLogger(__name__)

STATEMENT_COLUMNS = ["incoming", "outgoing", "net", "balance"]


def iter_periods(start_month: int, start_year: int, end_month: int, end_year: int):
    """Yield (month, year) pairs from start to end inclusive."""
    month, year = start_month, start_year
    while (year, month) <= (end_year, end_month):
        yield month, year
        if month == 12:
            month, year = 1, year + 1
        else:
            month += 1


class StatementService:
    """Builds monthly statements from the ledger."""

    def __init__(self, ledger: LedgerService):
        self.ledger = ledger

    def monthly_statement(
        self,
        account: Account,
        start_month: int,
        start_year: int,
        end_month: int,
        end_year: int,
    ) -> pd.DataFrame:
        """
        Monthly statement of ``account`` from start to end month inclusive.

        Returns:
            DataFrame indexed by period key with incoming, outgoing, net and
            balance columns. The balance of the last row equals
            ``LedgerService.get_value`` for the end month.

        Raises:
            ValidationError: If a month or year is out of range or start is
                after end
        """
        self.ledger.validate_period(start_month, start_year)
        self.ledger.validate_period(end_month, end_year)
        if (start_year, start_month) > (end_year, end_month):
            raise ValidationError("Statement start is after its end")

        periods = [
            period_key(year, month)
            for month, year in iter_periods(start_month, start_year, end_month, end_year)
        ]

        opening = self.ledger.get_opening_value(account, start_month, start_year)
        registers = self.ledger.get_account_registers(
            account,
            month_start(start_month, start_year),
            month_end_bound(end_month, end_year),
        )

        movements = pd.DataFrame(
            {
                "period": [r.period_key for r in registers],
                "incoming": [max(r.signed_value(account.id), 0.0) for r in registers],
                "outgoing": [max(-r.signed_value(account.id), 0.0) for r in registers],
            }
        ).astype({"period": "int64", "incoming": "float64", "outgoing": "float64"})

        statement = (
            movements.groupby("period")[["incoming", "outgoing"]]
            .sum()
            .reindex(periods, fill_value=0.0)
        )
        statement.index.name = "period"
        statement["net"] = statement["incoming"] - statement["outgoing"]
        statement["balance"] = opening + statement["net"].cumsum()

        logger.debug(
            f"Statement for account {account.id}: {len(registers)} registers "
            f"over {len(periods)} months"
        )
        return statement[STATEMENT_COLUMNS]

    @staticmethod
    def format_statement(statement: pd.DataFrame) -> str:
        """Render a statement as a plain-text table."""
        if statement.empty:
            return "No months in range."

        table = statement.copy()
        table.index = [f"{key // 100:04d}-{key % 100:02d}" for key in table.index]
        table.index.name = "month"
        return table.to_string(float_format=lambda v: f"{v:,.2f}")

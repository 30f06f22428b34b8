"""
Registers repository module for financial register CRUD and balance queries.

Handles all register-related database operations including:
- Inserting registers (writing the assigned id back)
- Removing registers by (id, name)
- Point lookups and timestamp range scans
- Month-end balance sums
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from clinancial.errors import NotFoundError, ValidationError
from clinancial.models import FinancialRegister, from_timestamp, to_timestamp

from .base import BaseRepository

if TYPE_CHECKING:
    from .accounts import AccountRepository

logger = logging.getLogger(__name__)

REGISTER_COLUMNS = "id, name, time, val, fromaccount, toaccount"


class RegisterRepository(BaseRepository):
    """
    Repository for the registers table.

    Endpoint accounts are stored as ids and resolved through the account
    repository when registers are read back.
    """

    def __init__(
        self,
        db_path=None,
        init_schema: bool = False,
        account_repo: Optional["AccountRepository"] = None,
    ):
        """
        Initialize the register repository.

        Args:
            db_path: Path to the SQLite database file
            init_schema: Whether to initialize schema
            account_repo: Account repository used to resolve endpoints
        """
        super().__init__(db_path, init_schema=init_schema)
        self._account_repo = account_repo

    def set_account_repo(self, account_repo: "AccountRepository"):
        """Set the account repository reference."""
        self._account_repo = account_repo

    # =========================================================================
    # Write Operations
    # =========================================================================

    def insert(self, register: FinancialRegister) -> FinancialRegister:
        """
        Insert a register and write the assigned id back onto it.

        Absent endpoints are stored as account id 0.
        """
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO registers (name, time, val, fromaccount, toaccount)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    register.name,
                    to_timestamp(register.time),
                    register.value,
                    register.from_id,
                    register.to_id,
                ),
            )
            register.id = cursor.lastrowid

        logger.info(
            f"Inserted register {register.id}: {register.value:.2f} "
            f"from {register.from_id} to {register.to_id}"
        )
        return register

    def delete(self, register: FinancialRegister):
        """
        Delete a register matching both its id and its name.

        The passed register's id is reset to 0 on success.

        Raises:
            ValidationError: If the register has no valid id
            NotFoundError: If no row matches
        """
        if not register.id or register.id <= 0:
            raise ValidationError("Invalid financial register ID")

        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM registers WHERE id = ? AND name = ?",
                (register.id, register.name),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(
                    f"No register with id {register.id} named {register.name!r}"
                )

        logger.info(f"Deleted register {register.id}")
        register.id = 0

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_by_id(self, register_id: int) -> FinancialRegister:
        """
        Get a register by id with its endpoints resolved.

        Endpoints that do not resolve to an account come back as None.

        Raises:
            NotFoundError: If no register has this id
        """
        with self._get_connection() as conn:
            row = conn.execute(
                f"SELECT {REGISTER_COLUMNS} FROM registers WHERE id = ?",
                (register_id,),
            ).fetchone()

        if row is None:
            raise NotFoundError(f"No register with id {register_id}")
        return self._build_registers([row])[0]

    def get_by_period(self, start: datetime, end: datetime) -> list[FinancialRegister]:
        """Registers strictly between ``start`` and ``end``, oldest first."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                f"""
                SELECT {REGISTER_COLUMNS} FROM registers
                WHERE time > ? AND time < ?
                ORDER BY time ASC, id ASC
                """,
                (to_timestamp(start), to_timestamp(end, round_up=True)),
            )
            rows = cursor.fetchall()

        return self._build_registers(rows)

    def get_for_account(
        self, account_id: int, start: datetime, end: datetime
    ) -> list[FinancialRegister]:
        """Registers touching one account with ``start <= time < end``, oldest first."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                f"""
                SELECT {REGISTER_COLUMNS} FROM registers
                WHERE (fromaccount = ? OR toaccount = ?)
                AND time >= ? AND time < ?
                ORDER BY time ASC, id ASC
                """,
                (
                    account_id,
                    account_id,
                    to_timestamp(start, round_up=True),
                    to_timestamp(end, round_up=True),
                ),
            )
            rows = cursor.fetchall()

        return self._build_registers(rows)

    def get_balance(self, account_id: int, before: datetime) -> float:
        """
        Sum of signed register values for an account with ``time < before``.

        Credits (account is ``to``) add, debits (account is ``from``) subtract.
        """
        with self._get_connection() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(
                    CASE WHEN toaccount = ? THEN val ELSE 0 END
                    - CASE WHEN fromaccount = ? THEN val ELSE 0 END
                ), 0.0)
                FROM registers
                WHERE time < ? AND (fromaccount = ? OR toaccount = ?)
                """,
                (
                    account_id,
                    account_id,
                    to_timestamp(before, round_up=True),
                    account_id,
                    account_id,
                ),
            ).fetchone()

        return float(row[0])

    def _build_registers(self, rows) -> list[FinancialRegister]:
        """Turn register rows into models, resolving endpoints in one query."""
        if not self._account_repo:
            raise RuntimeError("Account repository not set")

        accounts = self._account_repo.get_many(
            [row["fromaccount"] for row in rows] + [row["toaccount"] for row in rows]
        )

        return [
            FinancialRegister(
                id=row["id"],
                name=row["name"],
                time=from_timestamp(row["time"]),
                value=float(row["val"]),
                from_account=accounts.get(row["fromaccount"]),
                to_account=accounts.get(row["toaccount"]),
            )
            for row in rows
        ]

"""
Accounts repository module.

Handles account persistence: creation, renaming and lookups by id or name.
Accounts are never deleted.
"""

import logging
from datetime import datetime

from clinancial.errors import NotFoundError
from clinancial.models import Account, to_timestamp

from .base import BaseRepository

logger = logging.getLogger(__name__)


class AccountRepository(BaseRepository):
    """Repository for the accounts table."""

    def __init__(self, db_path=None, init_schema: bool = False):
        """
        Initialize the account repository.

        Args:
            db_path: Path to the SQLite database file
            init_schema: Whether to initialize schema (usually False,
                        as the main repository handles this)
        """
        super().__init__(db_path, init_schema=init_schema)

    def create(self, name: str) -> Account:
        """
        Insert a new account.

        The creation time is truncated to whole seconds, matching what the
        table stores, so the returned object equals a later lookup.
        """
        created_at = datetime.now().replace(microsecond=0)

        with self._get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO accounts (name, ctime) VALUES (?, ?)",
                (name, to_timestamp(created_at)),
            )
            account_id = cursor.lastrowid

        logger.info(f"Created account {account_id} ({name})")
        return Account(id=account_id, name=name, created_at=created_at)

    def update(self, account: Account) -> Account:
        """
        Persist the account's name. The creation time never changes.

        Raises:
            NotFoundError: If no account has this id
        """
        with self._get_connection() as conn:
            cursor = conn.execute(
                "UPDATE accounts SET name = ? WHERE id = ?",
                (account.name, account.id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"No account with id {account.id}")

        logger.info(f"Renamed account {account.id} to {account.name}")
        return account

    def get_by_id(self, account_id: int) -> Account:
        """
        Get an account by id.

        Raises:
            NotFoundError: If no account has this id
        """
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT id, name, ctime FROM accounts WHERE id = ?",
                (account_id,),
            ).fetchone()

        if row is None:
            raise NotFoundError(f"No account with id {account_id}")
        return Account.from_row(tuple(row))

    def get_by_name(self, name: str) -> Account:
        """
        Get the first account (lowest id) with this name.

        Raises:
            NotFoundError: If no account has this name
        """
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT id, name, ctime FROM accounts WHERE name = ? ORDER BY id LIMIT 1",
                (name,),
            ).fetchone()

        if row is None:
            raise NotFoundError(f"No account named {name!r}")
        return Account.from_row(tuple(row))

    def get_many(self, account_ids) -> dict[int, Account]:
        """Map of id to Account for the ids that exist; 0 and unknown ids are left out."""
        wanted = sorted({i for i in account_ids if i})
        if not wanted:
            return {}

        placeholders = ", ".join("?" for _ in wanted)
        with self._get_connection() as conn:
            cursor = conn.execute(
                f"SELECT id, name, ctime FROM accounts WHERE id IN ({placeholders})",
                wanted,
            )
            return {row["id"]: Account.from_row(tuple(row)) for row in cursor.fetchall()}

    def list_all(self) -> list[Account]:
        """All accounts ordered by id."""
        with self._get_connection() as conn:
            cursor = conn.execute("SELECT id, name, ctime FROM accounts ORDER BY id")
            return [Account.from_row(tuple(row)) for row in cursor.fetchall()]

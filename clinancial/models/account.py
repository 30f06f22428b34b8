"""
Account model.

An account is where money is sent to or received from, regardless of what the
account actually is (a bank account, a wallet, the bank itself or a business).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Account:
    """
    A named money holder.

    Attributes:
        id: Database ID (None or 0 until stored)
        name: Display name, not required to be unique
        created_at: When the account was created, stored with second precision
    """

    id: Optional[int]
    name: str
    created_at: Optional[datetime] = None

    @property
    def is_stored(self) -> bool:
        """Whether the account has been assigned an id by a store."""
        return bool(self.id) and self.id > 0

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_row(cls, row: tuple) -> "Account":
        """Create an Account from an (id, name, ctime) database row."""
        return cls(
            id=row[0],
            name=row[1],
            created_at=datetime.fromtimestamp(row[2]) if row[2] is not None else None,
        )

"""
Exception hierarchy for clinancial.

Library code raises these; only the command line decides whether an error is
fatal.
"""


class LedgerError(Exception):
    """Base exception for ledger operations."""

    pass


class NotFoundError(LedgerError, LookupError):
    """A lookup by id or name matched no rows."""

    pass


class StorageError(LedgerError):
    """The database could not be opened, read or written."""

    pass


class ValidationError(LedgerError, ValueError):
    """Input rejected before reaching storage."""

    pass

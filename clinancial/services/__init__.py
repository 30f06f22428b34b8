from .amount_parser import AmountParser
from .export import ExportFormat, ExportService
from .ledger import LedgerService
from .statement import StatementService

__all__ = [
    "AmountParser",
    "ExportFormat",
    "ExportService",
    "LedgerService",
    "StatementService",
]

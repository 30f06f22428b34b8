"""
Command handlers for the clinancial command line.

Each command is an entry in COMMANDS: a name, a one-line description, a
function adding its arguments to a parser, and a handler. Handlers receive
the ledger service and parsed arguments, print their output and return an
exit code. Errors from the ledger propagate to the dispatcher.
"""

import argparse
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from clinancial.config import DATE_FORMAT, ERROR_MESSAGES, EXPORT_FORMATS
from clinancial.errors import ValidationError
from clinancial.models import Account, FinancialRegister
from clinancial.services import (
    AmountParser,
    ExportFormat,
    ExportService,
    LedgerService,
    StatementService,
)

logger = logging.getLogger(__name__)

ConfirmFunc = Callable[[str], bool]


@dataclass
class Command:
    """A command line verb."""

    name: str
    description: str
    handler: Callable[[LedgerService, argparse.Namespace, ConfirmFunc], int]
    configure: Optional[Callable[[argparse.ArgumentParser], None]] = None


# =============================================================================
# Argument types
# =============================================================================


def parse_date(text: str) -> datetime:
    """
    Parse YYYY-MM-DD, optionally followed by a time (YYYY-MM-DD HH:MM[:SS]).

    Dates carrying a UTC offset are converted to local time; the ledger only
    deals in naive local datetimes.
    """
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        pass
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {text!r} (use YYYY-MM-DD)") from None
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def parse_month(text: str) -> tuple[int, int]:
    """Parse YYYY-MM into (month, year)."""
    try:
        moment = datetime.strptime(text, "%Y-%m")
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid month: {text!r} (use YYYY-MM)") from None
    return moment.month, moment.year


def parse_value(text: str) -> float:
    value = AmountParser.parse(text)
    if value is None:
        raise argparse.ArgumentTypeError(f"invalid value: {text!r}")
    return value


def ask_confirmation(prompt: str) -> bool:
    """Ask a yes/no question on the terminal. Anything but y/yes is a no."""
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


# =============================================================================
# Formatting
# =============================================================================


def format_account(account: Account) -> str:
    created = account.created_at.strftime("%Y-%m-%d %H:%M") if account.created_at else "-"
    return f"{account.id:>5}  {account.name:<30}  {created}"


def format_register(register: FinancialRegister) -> str:
    source = register.from_account.name if register.from_account else "(outside)"
    destination = register.to_account.name if register.to_account else "(outside)"
    return (
        f"{register.id:>5}  {register.time.strftime('%Y-%m-%d %H:%M')}  "
        f"{register.value:>14,.2f}  {source} -> {destination}  {register.name}"
    )


# =============================================================================
# Handlers
# =============================================================================


def create_account(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    account = ledger.create_account(args.name)
    print(f"Created account {account.id}: {account.name}")
    return 0


def list_accounts(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    accounts = ledger.list_accounts()
    if not accounts:
        print("No accounts yet. Create one with: clinancial create-account NAME")
        return 0

    print(f"{'ID':>5}  {'Name':<30}  Created")
    for account in accounts:
        print(format_account(account))
    return 0


def rename_account(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    account = ledger.rename_account(args.id, args.name)
    print(f"Account {account.id} is now named {account.name}")
    return 0


def delete_account(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    account = ledger.get_account(args.account)
    logger.warning(f"delete-account requested for account {account.id}, ignored")
    print(f"Accounts are never deleted; {account.name} was left unchanged.")
    return 0


def balance(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    now = datetime.now()
    month = args.month or now.month
    year = args.year or now.year

    account = ledger.get_account(args.account)
    value = ledger.get_value(account, month, year)
    print(f"{account.name} at end of {year:04d}-{month:02d}: {value:,.2f}")
    return 0


def add_register(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    source = ledger.get_account(args.from_account) if args.from_account else None
    destination = ledger.get_account(args.to_account) if args.to_account else None

    register = FinancialRegister(
        name=args.name,
        time=args.date or datetime.now(),
        value=args.value,
        from_account=source,
        to_account=destination,
    )

    print(
        f"{register.name}: {register.value:,.2f} "
        f"from {source.name if source else '(outside)'} "
        f"to {destination.name if destination else '(outside)'} "
        f"on {register.time.strftime('%Y-%m-%d %H:%M')}"
    )
    if not args.yes and not confirm("Store this register?"):
        print(ERROR_MESSAGES["cancelled"])
        return 1

    ledger.add_register(register)
    print(f"Stored register {register.id}")
    return 0


def remove_register(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    register = ledger.get_register_by_id(args.id)
    print(format_register(register))
    if not args.yes and not confirm("Remove this register?"):
        print(ERROR_MESSAGES["cancelled"])
        return 1

    removed_id = register.id
    ledger.remove_register(register)
    print(f"Removed register {removed_id}")
    return 0


def show_register(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    print(format_register(ledger.get_register_by_id(args.id)))
    return 0


def list_registers(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    registers = ledger.get_registers_by_date_period(args.start, args.end)
    if not registers:
        print("No registers in period.")
        return 0

    for register in registers:
        print(format_register(register))
    return 0


def statement(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    account = ledger.get_account(args.account)
    (start_month, start_year), (end_month, end_year) = args.start, args.end

    service = StatementService(ledger)
    table = service.monthly_statement(
        account, start_month, start_year, end_month, end_year
    )
    print(f"Statement for {account.name}")
    print(service.format_statement(table))
    return 0


def export(ledger: LedgerService, args, confirm: ConfirmFunc) -> int:
    if args.start >= args.end:
        raise ValidationError("Export start must be before its end")

    format = ExportFormat(args.format)
    service = ExportService(ledger)
    buffer = service.export(format, args.start, args.end)

    output = Path(args.output or service.get_filename(format, args.start, args.end))
    output.write_bytes(buffer.getvalue())
    print(f"Exported registers to {output}")
    return 0


# =============================================================================
# Argument configuration
# =============================================================================


def _configure_create_account(parser):
    parser.add_argument("name", help="Account name")


def _configure_rename_account(parser):
    parser.add_argument("id", type=int, help="Account id")
    parser.add_argument("name", help="New account name")


def _configure_account_ref(parser):
    parser.add_argument("account", help="Account id or name")


def _configure_balance(parser):
    _configure_account_ref(parser)
    parser.add_argument("--month", type=int, help="Month 1-12 (default: current)")
    parser.add_argument("--year", type=int, help="Year (default: current)")


def _configure_add_register(parser):
    parser.add_argument("name", help="Register label")
    parser.add_argument("value", type=parse_value, help="Value, e.g. 120.50 or 1.5k")
    parser.add_argument("--from", dest="from_account", help="Debited account id or name")
    parser.add_argument("--to", dest="to_account", help="Credited account id or name")
    parser.add_argument("--date", type=parse_date, help="Date (default: now)")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")


def _configure_remove_register(parser):
    parser.add_argument("id", type=int, help="Register id")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")


def _configure_show_register(parser):
    parser.add_argument("id", type=int, help="Register id")


def _configure_period(parser):
    parser.add_argument("start", type=parse_date, help="Start date, exclusive")
    parser.add_argument("end", type=parse_date, help="End date, exclusive")


def _configure_statement(parser):
    _configure_account_ref(parser)
    parser.add_argument("start", type=parse_month, help="First month (YYYY-MM)")
    parser.add_argument("end", type=parse_month, help="Last month (YYYY-MM)")


def _configure_export(parser):
    _configure_period(parser)
    parser.add_argument("--format", choices=EXPORT_FORMATS, default="csv")
    parser.add_argument("--output", help="Output file (default: generated name)")


COMMANDS = [
    Command("create-account", "Create a new account", create_account, _configure_create_account),
    Command("list-accounts", "List all accounts", list_accounts),
    Command("rename-account", "Change an account's name", rename_account, _configure_rename_account),
    Command("delete-account", "Accepted for compatibility; accounts are kept", delete_account, _configure_account_ref),
    Command("balance", "Show an account's balance at the end of a month", balance, _configure_balance),
    Command("add-register", "Record a transaction between two accounts", add_register, _configure_add_register),
    Command("remove-register", "Remove a recorded transaction", remove_register, _configure_remove_register),
    Command("show-register", "Show one recorded transaction", show_register, _configure_show_register),
    Command("registers", "List transactions strictly between two dates", list_registers, _configure_period),
    Command("statement", "Monthly statement of an account", statement, _configure_statement),
    Command("export", "Export transactions of a period to CSV or XLSX", export, _configure_export),
]

"""
Command line runner for clinancial.

This module handles configuration loading, logging setup and dispatching a
command name to its handler.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from clinancial.config import (
    CONFIG_DIR,
    ERROR_MESSAGES,
    LOG_FILE,
    LOG_FORMAT,
    ensure_directories,
    get_db_path,
    get_log_level,
)
from clinancial.db import LedgerStore, get_repository
from clinancial.errors import NotFoundError, StorageError, ValidationError
from clinancial.services import LedgerService

from .commands import COMMANDS, ConfirmFunc, ask_confirmation

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_STORAGE = 3


def print_help():
    """Print the command table."""
    print(" clinancial - a command-line financial manager")
    print("")
    print(" Usage: clinancial [--db PATH] <command> [args]")
    print("")
    print(" Commands: ")
    print(f"\t{'help':<20} Print this help text")
    for command in COMMANDS:
        print(f"\t{command.name:<20} {command.description}")
    print("")
    print(" Run 'clinancial <command> --help' for a command's arguments.")


def build_command_parser(name: str) -> argparse.ArgumentParser:
    """Argument parser for one command."""
    command = next(c for c in COMMANDS if c.name == name)
    parser = argparse.ArgumentParser(
        prog=f"clinancial {command.name}", description=command.description
    )
    if command.configure:
        command.configure(parser)
    return parser


def main(
    argv: Optional[list[str]] = None,
    store: Optional[LedgerStore] = None,
    confirm: ConfirmFunc = ask_confirmation,
) -> int:
    """
    Run one command and return its exit code.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        store: Ledger store to use instead of the configured database
        confirm: Yes/no prompt used by commands that ask before writing

    Returns:
        0 on success, 1 for not-found, validation errors or a declined
        confirmation, 2 for usage errors, 3 for storage errors
    """
    argv = list(sys.argv[1:] if argv is None else argv)

    global_parser = argparse.ArgumentParser(
        prog="clinancial", add_help=False, allow_abbrev=False
    )
    global_parser.add_argument("--db", metavar="PATH")
    options, rest = global_parser.parse_known_args(argv)

    if not rest or rest[0] in ("help", "-h", "--help"):
        print_help()
        return EXIT_OK

    name, command_args = rest[0], rest[1:]
    command = next((c for c in COMMANDS if c.name == name), None)
    if command is None:
        print(f"No command named {name}")
        return EXIT_USAGE

    args = build_command_parser(name).parse_args(command_args)

    try:
        if store is None:
            store = get_repository(get_db_path(options.db))
        ledger = LedgerService(store)
        logger.debug(f"Running {name} with {args}")
        return command.handler(ledger, args, confirm)
    except NotFoundError as e:
        logger.info(f"{name}: {e}")
        print(f"Not found: {e}")
        return EXIT_ERROR
    except ValidationError as e:
        logger.info(f"{name}: {e}")
        print(ERROR_MESSAGES["validation_error"].format(error=e))
        return EXIT_ERROR
    except StorageError as e:
        logger.error(f"{name} failed: {e}")
        print(ERROR_MESSAGES["storage_error"].format(error=e))
        return EXIT_STORAGE


def configure_logging():
    """Log to a file in the config directory and to stderr."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    try:
        ensure_directories()
        handlers.append(logging.FileHandler(CONFIG_DIR / LOG_FILE))
    except OSError as e:
        print(f"Warning: file logging disabled ({e})", file=sys.stderr)

    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT, handlers=handlers)


def load_environment():
    """Load .env files from the working directory and the config directory."""
    for env_path in (Path.cwd() / ".env", CONFIG_DIR / ".env"):
        if env_path.exists():
            load_dotenv(env_path)
            logger.info(f"Loaded environment from {env_path}")


def run():
    """Console entry point."""
    load_environment()
    configure_logging()

    try:
        code = main()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, stopping")
        print("\nInterrupted.")
        code = EXIT_ERROR

    sys.exit(code)


if __name__ == "__main__":
    run()

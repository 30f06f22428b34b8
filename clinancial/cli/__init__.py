from .commands import COMMANDS, Command, ask_confirmation
from .runner import main, print_help, run

__all__ = [
    "COMMANDS",
    "Command",
    "ask_confirmation",
    "main",
    "print_help",
    "run",
]

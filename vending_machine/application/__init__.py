"""
Application layer - Command routing.

Contains:
- Command handler
"""

from .command_handler import CommandHandler, CommandResponse


__all__ = [
    "CommandHandler",
    "CommandResponse",
]

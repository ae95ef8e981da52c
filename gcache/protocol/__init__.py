"""Protocol module for GCache."""

from .commands import Command, CommandType, Response, ResponseStatus
from .dispatcher import CommandDispatcher
from .parser import ProtocolParser

__all__ = [
    "Command",
    "CommandDispatcher",
    "CommandType",
    "Response",
    "ResponseStatus",
    "ProtocolParser",
]

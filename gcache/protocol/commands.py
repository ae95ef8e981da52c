"""
Protocol Command and Response Definitions

This module defines the data structures for protocol commands and responses.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List


class CommandType(Enum):
    """Enumeration of supported command types."""
    GET = auto()
    SET = auto()
    DEL = auto()
    SIZE = auto()
    CLEAR = auto()
    PING = auto()
    INFO = auto()
    STATS = auto()
    QUIT = auto()
    EMPTY = auto()
    UNKNOWN = auto()


class ResponseStatus(Enum):
    """Enumeration of response statuses, valued by their wire prefix."""
    OK = "+"
    ERROR = "-ERR"
    INTEGER = ":"


@dataclass
class Command:
    """
    Represents a parsed protocol command.

    Attributes:
        type: The type of command
        name: The upper-cased command token as sent by the client
        args: Tokens following the command name
        raw: The original raw command string
    """
    type: CommandType
    name: str = ""
    args: List[str] = field(default_factory=list)
    raw: str = ""

    @property
    def key(self) -> str:
        """First argument, or an empty string if there is none."""
        return self.args[0] if self.args else ""

    @property
    def value(self) -> str:
        """Arguments after the key, re-joined with single spaces."""
        return " ".join(self.args[1:])


@dataclass
class Response:
    """
    Represents a protocol response.

    Attributes:
        status: OK, ERROR or INTEGER
        message: Value, integer text or error description
        close_connection: True when the server should hang up after sending
    """
    status: ResponseStatus
    message: str = ""
    close_connection: bool = False

    @classmethod
    def ok(cls, message: str = "OK") -> "Response":
        """Create a plain success response."""
        return cls(status=ResponseStatus.OK, message=message)

    @classmethod
    def value_response(cls, value: str) -> "Response":
        """Create a success response carrying a value."""
        return cls.ok(message=value)

    @classmethod
    def integer(cls, number: int) -> "Response":
        """Create an integer response."""
        return cls(status=ResponseStatus.INTEGER, message=str(number))

    @classmethod
    def error(cls, message: str) -> "Response":
        """Create an error response."""
        return cls(status=ResponseStatus.ERROR, message=message)

    @classmethod
    def key_not_found(cls) -> "Response":
        return cls.error("key not found")

    @classmethod
    def wrong_arguments(cls, name: str) -> "Response":
        return cls.error(f"wrong number of arguments for '{name}' command")

    @classmethod
    def unknown_command(cls, name: str) -> "Response":
        return cls.error(f"unknown command '{name}'")

    @classmethod
    def empty_command(cls) -> "Response":
        return cls.error("empty command")

    @classmethod
    def bye(cls) -> "Response":
        """Acknowledge QUIT; the connection is closed after this is sent."""
        return cls(status=ResponseStatus.OK, message="BYE", close_connection=True)

"""
Protocol Parser Module

This module handles parsing of raw protocol lines and encoding of responses.

Protocol Format:
    Request:  <COMMAND> [ARGS...]\n
    Response: +<value> | -ERR <message> | :<integer>, terminated by \r\n
"""

from .commands import Command, CommandType, Response, ResponseStatus

LINE_TERMINATOR = "\r\n"


class ProtocolParser:
    """
    Parser for the GCache text protocol.

    Commands (names are case-insensitive):
        GET <key>              -> +<value> | -ERR key not found
        SET <key> <value...>   -> +OK
        DEL <key>              -> +OK | -ERR key not found
        SIZE                   -> :<n>
        CLEAR                  -> +OK
        PING [message]         -> +PONG | +<message>
        INFO                   -> +<key:value summary>
        STATS                  -> +size:<n> capacity:<m>
        QUIT                   -> +BYE (connection closed)
    """

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw request line into a Command object.

        Args:
            data: Raw request string (may include a trailing newline)

        Returns:
            Command object. Blank input yields CommandType.EMPTY and an
            unrecognised name yields CommandType.UNKNOWN; this never raises.

        Examples:
            >>> cmd = ProtocolParser().parse_request("set greeting hello  world")
            >>> cmd.type == CommandType.SET
            True
            >>> cmd.value
            'hello world'
        """
        raw = data.strip()
        parts = raw.split()
        if not parts:
            return Command(type=CommandType.EMPTY, raw=raw)

        name = parts[0].upper()
        try:
            command_type = CommandType[name]
        except KeyError:
            command_type = CommandType.UNKNOWN

        # EMPTY and UNKNOWN are internal variants, not wire commands
        if command_type in (CommandType.EMPTY, CommandType.UNKNOWN):
            command_type = CommandType.UNKNOWN

        return Command(type=command_type, name=name, args=parts[1:], raw=raw)

    def format_response(self, response: Response) -> str:
        """
        Format a Response object into a protocol line.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.ok())
            '+OK\\r\\n'
            >>> parser.format_response(Response.integer(3))
            ':3\\r\\n'
            >>> parser.format_response(Response.key_not_found())
            '-ERR key not found\\r\\n'
        """
        return self.encode(response) + LINE_TERMINATOR

    @staticmethod
    def encode(response: Response) -> str:
        """Encode a response without the line terminator."""
        if response.status == ResponseStatus.ERROR:
            return f"{response.status.value} {response.message}"
        return f"{response.status.value}{response.message}"

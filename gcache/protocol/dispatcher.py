"""
Command Dispatcher

Maps a parsed Command to a call on the LRUCache and a typed Response.
Every handler checks its argument count before touching the cache. The
dispatcher performs no I/O and is safe to share between connections.
"""

import time
from typing import Callable, Dict, Optional

from ..cache.lru import LRUCache
from ..config.settings import settings
from .commands import Command, CommandType, Response
from .parser import ProtocolParser


class CommandDispatcher:
    """
    Routes protocol commands to the cache engine.

    Usage:
        dispatcher = CommandDispatcher(LRUCache(capacity=100))
        dispatcher.process_command("SET greeting hello world")  # '+OK'
        dispatcher.process_command("GET greeting")              # '+hello world'

    Attributes:
        cache: The LRUCache instance commands operate on
        started_at: Monotonic timestamp used for INFO uptime
    """

    def __init__(self, cache: LRUCache, started_at: Optional[float] = None):
        self.cache = cache
        self.started_at = started_at if started_at is not None else time.monotonic()
        self.parser = ProtocolParser()

        self._handlers: Dict[CommandType, Callable[[Command], Response]] = {
            CommandType.GET: self._handle_get,
            CommandType.SET: self._handle_set,
            CommandType.DEL: self._handle_del,
            CommandType.SIZE: self._handle_size,
            CommandType.CLEAR: self._handle_clear,
            CommandType.PING: self._handle_ping,
            CommandType.INFO: self._handle_info,
            CommandType.STATS: self._handle_stats,
            CommandType.QUIT: self._handle_quit,
            CommandType.EMPTY: self._handle_empty,
            CommandType.UNKNOWN: self._handle_unknown,
        }

    def process_command(self, line: str) -> str:
        """
        Parse one request line, execute it and return the response line.

        Args:
            line: Raw request line (terminator optional)

        Returns:
            Encoded response without the line terminator
        """
        return self.parser.encode(self.dispatch(self.parser.parse_request(line)))

    def dispatch(self, command: Command) -> Response:
        """Execute a parsed command and return its Response."""
        return self._handlers[command.type](command)

    def _handle_get(self, command: Command) -> Response:
        if len(command.args) != 1:
            return Response.wrong_arguments(command.name)

        value, found = self.cache.get(command.key)
        if found:
            return Response.value_response(value)
        return Response.key_not_found()

    def _handle_set(self, command: Command) -> Response:
        if len(command.args) < 2:
            return Response.wrong_arguments(command.name)

        self.cache.put(command.key, command.value)
        return Response.ok()

    def _handle_del(self, command: Command) -> Response:
        if len(command.args) != 1:
            return Response.wrong_arguments(command.name)

        if self.cache.delete(command.key):
            return Response.ok()
        return Response.key_not_found()

    def _handle_size(self, command: Command) -> Response:
        if command.args:
            return Response.wrong_arguments(command.name)
        return Response.integer(self.cache.size())

    def _handle_clear(self, command: Command) -> Response:
        if command.args:
            return Response.wrong_arguments(command.name)

        self.cache.clear()
        return Response.ok()

    def _handle_ping(self, command: Command) -> Response:
        if not command.args:
            return Response.ok("PONG")
        if len(command.args) == 1:
            return Response.ok(command.args[0])
        return Response.wrong_arguments(command.name)

    def _handle_info(self, command: Command) -> Response:
        if command.args:
            return Response.wrong_arguments(command.name)

        uptime = time.monotonic() - self.started_at
        # Single line so line-oriented clients can read it in one call
        info = (
            f"gcache_version:{settings.VERSION} "
            f"cache_capacity:{self.cache.capacity} "
            f"cache_size:{self.cache.size()} "
            f"uptime_seconds:{uptime:.0f}"
        )
        return Response.ok(info)

    def _handle_stats(self, command: Command) -> Response:
        if command.args:
            return Response.wrong_arguments(command.name)
        return Response.ok(f"size:{self.cache.size()} capacity:{self.cache.capacity}")

    def _handle_quit(self, command: Command) -> Response:
        return Response.bye()

    def _handle_empty(self, command: Command) -> Response:
        return Response.empty_command()

    def _handle_unknown(self, command: Command) -> Response:
        return Response.unknown_command(command.name)

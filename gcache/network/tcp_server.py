"""
Async TCP Server Module

This module implements the asyncio TCP server for GCache.

Each accepted connection runs its own handle_client() coroutine:

    Reading -> Dispatching -> Writing -> Reading ...

until the client disconnects, sends QUIT, a transport error occurs or the
server shuts down. Dispatching is a synchronous call into the cache, so
the cache lock is never held across an await.
"""

import asyncio
import logging
import time
from asyncio import StreamReader, StreamWriter
from typing import Optional, Set

from ..cache.lru import LRUCache
from ..config.settings import settings
from ..protocol.commands import Response
from ..protocol.dispatcher import CommandDispatcher
from ..protocol.parser import ProtocolParser

logger = logging.getLogger(__name__)


class CacheServer:
    """
    Asynchronous TCP server for the GCache service.

    All connections share one LRUCache through one CommandDispatcher.

    Usage:
        server = CacheServer(host='127.0.0.1', port=8080, capacity=1000)
        await server.start()  # Runs until stop() is called

    Attributes:
        host: Server bind address
        port: Requested port (0 picks a free one, see bound_port)
        cache: The LRUCache instance shared by all connections
        dispatcher: Translates command lines into cache calls
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            cache: LRUCache = None,
            capacity: int = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            cache: LRUCache instance (creates a new one if not provided)
            capacity: Capacity for a newly created cache (default from settings)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        if cache is None:
            cache = LRUCache(capacity if capacity is not None else settings.CAPACITY)
        self.cache = cache
        self.parser = ProtocolParser()
        self.dispatcher = CommandDispatcher(self.cache, started_at=time.monotonic())

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._running = False
        self._shutting_down = False
        self._clients: Set[StreamWriter] = set()
        self._connection_count = 0
        self._total_requests = 0

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Handle a single client connection.

        Reads one line at a time, dispatches it and writes the response
        back. Protocol errors are answered and the connection stays open;
        transport errors end this connection only.

        Args:
            reader: StreamReader for reading from the client
            writer: StreamWriter for writing to the client
        """
        addr = writer.get_extra_info('peername')
        self._connection_count += 1
        self._clients.add(writer)
        logger.info(f"Client connected: {addr}")

        try:
            while not self._shutting_down:
                data = await self._read_line(reader)
                if data is None:
                    logger.warning(f"Line too long from {addr}")
                    await self._send(writer, Response.error("line too long"))
                    continue

                if not data:
                    break

                try:
                    line = data.decode()
                except UnicodeDecodeError:
                    await self._send(writer, Response.error("invalid encoding"))
                    continue

                self._total_requests += 1
                command = self.parser.parse_request(line)
                response = self.dispatcher.dispatch(command)
                logger.debug(f"{addr} {command.name or '<empty>'} -> {response.status.name}")

                await self._send(writer, response)

                if response.close_connection:
                    logger.debug(f"Client requested quit: {addr}")
                    break

        except (ConnectionError, asyncio.IncompleteReadError) as exc:
            logger.debug(f"Connection lost with {addr}: {exc}")
        except Exception as exc:  # Log unexpected errors but keep server alive
            logger.exception(f"Error handling client {addr}: {exc}")
        finally:
            self._clients.discard(writer)
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError) as exc:
                logger.debug(f"Error closing connection to {addr}: {exc}")
            logger.info(f"Client disconnected: {addr}")

    async def _read_line(self, reader: StreamReader) -> Optional[bytes]:
        """
        Read one newline-terminated line.

        Returns:
            The line, b"" at EOF (or the unterminated tail before EOF), or
            None if the line was longer than the reader limit. An oversized
            line is discarded up to and including its newline so the next
            read starts at the following request.
        """
        try:
            return await reader.readuntil(b"\n")
        except asyncio.IncompleteReadError as exc:
            return exc.partial
        except asyncio.LimitOverrunError as exc:
            consumed = exc.consumed

        while True:
            await reader.read(consumed)
            try:
                await reader.readuntil(b"\n")
                return None
            except asyncio.IncompleteReadError:
                return None
            except asyncio.LimitOverrunError as exc:
                consumed = exc.consumed

    async def _send(self, writer: StreamWriter, response: Response) -> None:
        writer.write(self.parser.format_response(response).encode())
        await writer.drain()

    async def start(self) -> None:
        """
        Start the server and accept connections until stop() is called.

        Example:
            server = CacheServer(port=8080)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._shutting_down = False
        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
            limit=settings.MAX_LINE_LENGTH,
        )
        self._running = True

        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"GCache server started on {addrs}")
        logger.info(f"Cache capacity: {self.cache.capacity}")

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            # Expected when stop() closes the listener
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """
        Stop accepting connections and close the ones still open.

        Handlers notice their socket closing and finish on their own.
        """
        if self._server is None:
            return

        self._shutting_down = True
        self._server.close()
        for writer in list(self._clients):
            writer.close()

        try:
            await self._server.wait_closed()
        finally:
            self._server = None
            self._running = False
            logger.info("Server stopped")

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    @property
    def bound_port(self) -> Optional[int]:
        """Port actually bound by the listener, or None before start()."""
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with connection and request counters plus the
            cache statistics.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "active_connections": len(self._clients),
            "total_connections": self._connection_count,
            "total_requests": self._total_requests,
            "cache_stats": self.cache.get_stats(),
        }


async def run_server(host: str = None, port: int = None, capacity: int = None) -> None:
    """
    Convenience function to create and run the server.

    Usage:
        asyncio.run(run_server(port=8080, capacity=1000))
    """
    server = CacheServer(host=host, port=port, capacity=capacity)

    try:
        await server.start()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await server.stop()

"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import threading
import time
from contextlib import closing
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio

from gcache.cache.lru import LRUCache
from gcache.cache.node import DoublyLinkedList
from gcache.network.tcp_server import CacheServer
from gcache.protocol.dispatcher import CommandDispatcher
from gcache.protocol.parser import ProtocolParser


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Cache Fixtures
# ============================================================================

@pytest.fixture
def order() -> DoublyLinkedList:
    """Create an empty ordering list."""
    return DoublyLinkedList()


@pytest.fixture
def cache() -> LRUCache:
    """Create a fresh LRUCache with room for 100 keys."""
    return LRUCache(capacity=100)


@pytest.fixture
def small_cache() -> LRUCache:
    """Create an LRUCache with small capacity for eviction testing (5 keys)."""
    return LRUCache(capacity=5)


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


@pytest.fixture
def dispatcher(cache: LRUCache) -> CommandDispatcher:
    """Create a CommandDispatcher over the 100-key cache fixture."""
    return CommandDispatcher(cache)


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


async def _wait_until_running(srv: CacheServer, timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not srv.is_running():
        if time.monotonic() > deadline:
            raise RuntimeError("server did not start in time")
        await asyncio.sleep(0.01)


@pytest_asyncio.fixture
async def server(server_port: int) -> AsyncGenerator[CacheServer, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates a CacheServer (capacity 100) on a free port
    2. Starts it in a background task
    3. Yields the server for testing
    4. Cleans up after the test
    """
    srv = CacheServer(host='127.0.0.1', port=server_port, capacity=100)

    server_task = asyncio.create_task(srv.start())
    await _wait_until_running(srv)

    yield srv

    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


@pytest.fixture
def threaded_server(server_port: int) -> Generator[CacheServer, None, None]:
    """
    Run a server on its own event loop in a background thread.

    Used by tests that talk to the server with the blocking client.
    """
    srv = CacheServer(host='127.0.0.1', port=server_port, capacity=100)
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    started = asyncio.run_coroutine_threadsafe(srv.start(), loop)

    deadline = time.monotonic() + 2.0
    while not srv.is_running():
        if time.monotonic() > deadline:
            raise RuntimeError("server did not start in time")
        time.sleep(0.01)

    yield srv

    asyncio.run_coroutine_threadsafe(srv.stop(), loop).result(timeout=5)
    started.result(timeout=5)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.close()


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Provides a simple async context manager interface for
    sending commands and receiving responses.

    Usage:
        async with AsyncClient('127.0.0.1', 8080) as client:
            response = await client.send_command("SET key value")
            assert response == "+OK"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except ConnectionError:
                pass

    async def send_command(self, command: str) -> str:
        """
        Send a command and receive the response.

        Args:
            command: Command string (newline will be added if missing)

        Returns:
            Response string (stripped of the line terminator)
        """
        if not command.endswith('\n'):
            command += '\n'

        self.writer.write(command.encode())
        await self.writer.drain()

        response = await self.reader.readline()
        return response.decode().rstrip('\r\n')

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                response = await client.send_command("GET key")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


@pytest_asyncio.fixture
async def client_reader_writer(
    server: CacheServer,
    server_port: int
) -> AsyncGenerator[tuple, None]:
    """
    Create a raw reader/writer pair connected to the server.

    Useful for low-level protocol testing.
    """
    reader, writer = await asyncio.open_connection('127.0.0.1', server_port)

    yield reader, writer

    writer.close()
    try:
        await writer.wait_closed()
    except ConnectionError:
        pass


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

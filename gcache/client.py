#!/usr/bin/env python3
"""
GCache Client

A blocking TCP client for the GCache server, with typed helpers for each
command and an interactive mode for manual testing.

Usage:
    gcache-cli                         # Interactive session on localhost:8080
    gcache-cli --port 9090             # Connect to a specific port
    gcache-cli --cmd "SET name gcache" # Run a single command and exit
"""

import argparse
import socket
import sys
from typing import Optional

from .config.settings import settings

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default


class ClientError(Exception):
    """Raised on transport failures or unexpected server responses."""


class KeyNotFoundError(ClientError, KeyError):
    """Raised when the server reports that a key does not exist."""


class CacheClient:
    """
    Simple TCP client for GCache.

    Usage:
        with CacheClient("127.0.0.1", 8080) as client:
            client.set("greeting", "hello world")
            client.get("greeting")  # 'hello world'
    """

    def __init__(self, host: str = "localhost", port: int = None, timeout: float = None):
        self.host = host
        self.port = port if port is not None else settings.PORT
        self.timeout = timeout if timeout is not None else settings.CLIENT_TIMEOUT
        self.socket: Optional[socket.socket] = None
        self._buffer = b""

    def connect(self) -> None:
        """Connect to the server."""
        try:
            self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            raise ClientError(f"failed to connect to {self.host}:{self.port}: {e}") from e
        self._buffer = b""

    def close(self) -> None:
        """Disconnect from the server."""
        if self.socket:
            self.socket.close()
            self.socket = None

    def send_command(self, command: str) -> str:
        """
        Send one command line and return the response line.

        Returns:
            Response with the line terminator stripped

        Raises:
            ClientError: If not connected, the command spans more than one
                line, or the connection fails
        """
        if not self.socket:
            raise ClientError("not connected")

        command = command.strip()
        if "\n" in command or "\r" in command:
            raise ClientError("command must not contain line breaks")

        try:
            self.socket.sendall(f"{command}\r\n".encode('utf-8'))

            while b"\n" not in self._buffer:
                chunk = self.socket.recv(4096)
                if not chunk:
                    raise ClientError("connection closed by server")
                self._buffer += chunk
        except socket.timeout as e:
            raise ClientError("request timed out") from e
        except OSError as e:
            raise ClientError(f"connection error: {e}") from e

        line, _, self._buffer = self._buffer.partition(b"\n")
        return line.decode('utf-8').strip()

    @staticmethod
    def _check_argument(text: str) -> str:
        if "\n" in text or "\r" in text:
            raise ClientError(f"argument must not contain line breaks: {text!r}")
        return text

    def _expect_ok(self, command: str) -> None:
        response = self.send_command(command)
        if response != "+OK":
            raise ClientError(f"unexpected response: {response}")

    def get(self, key: str) -> str:
        response = self.send_command(f"GET {self._check_argument(key)}")
        if response.startswith("+"):
            return response[1:]
        if response == "-ERR key not found":
            raise KeyNotFoundError(key)
        raise ClientError(f"unexpected response: {response}")

    def set(self, key: str, value: str) -> None:
        self._expect_ok(f"SET {self._check_argument(key)} {self._check_argument(value)}")

    def delete(self, key: str) -> None:
        response = self.send_command(f"DEL {self._check_argument(key)}")
        if response == "-ERR key not found":
            raise KeyNotFoundError(key)
        if response != "+OK":
            raise ClientError(f"unexpected response: {response}")

    def size(self) -> int:
        response = self.send_command("SIZE")
        if not response.startswith(":"):
            raise ClientError(f"unexpected response: {response}")
        try:
            return int(response[1:])
        except ValueError as e:
            raise ClientError(f"invalid size response: {response}") from e

    def ping(self, message: str = None) -> str:
        response = self.send_command(f"PING {self._check_argument(message)}" if message else "PING")
        if not response.startswith("+"):
            raise ClientError(f"unexpected response: {response}")
        return response[1:]

    def clear(self) -> None:
        self._expect_ok("CLEAR")

    def info(self) -> str:
        response = self.send_command("INFO")
        if not response.startswith("+"):
            raise ClientError(f"unexpected response: {response}")
        return response[1:]

    def stats(self) -> dict:
        """Return STATS as a dict, e.g. {'size': 3, 'capacity': 1000}."""
        response = self.send_command("STATS")
        if not response.startswith("+"):
            raise ClientError(f"unexpected response: {response}")
        return parse_fields(response[1:])

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def parse_fields(text: str) -> dict:
    """Parse a 'name:value name:value' summary into a dict, ints where possible."""
    fields = {}
    for item in text.split():
        name, _, raw = item.partition(":")
        try:
            fields[name] = int(raw)
        except ValueError:
            fields[name] = raw
    return fields


def format_response(response: str) -> str:
    """Pretty-print a raw response line for interactive use."""
    if response.startswith("+"):
        return f"OK: {response[1:]}"
    if response.startswith("-ERR"):
        return f"ERROR: {response[5:]}"
    if response.startswith(":"):
        return f"VALUE: {response[1:]}"
    return f"RESPONSE: {response}"


def print_help():
    """Print help message."""
    print("""
Available Commands:
  GET key          - Get value for key
  SET key value    - Set key to value (value may contain spaces)
  DEL key          - Delete key
  SIZE             - Get cache size
  CLEAR            - Clear all items
  PING [message]   - Ping server
  INFO             - Server information
  STATS            - Cache statistics
  QUIT/EXIT        - Exit client

Examples:
  SET mykey hello world
  GET mykey
  DEL mykey
""")


def interactive(client: CacheClient) -> None:
    """Read commands from stdin and print the server's responses."""
    print("GCache Client - Interactive Mode")
    print("Commands: GET, SET, DEL, SIZE, CLEAR, PING, INFO, STATS, QUIT")
    print("Type 'help' for more information")

    while True:
        try:
            command = input("gcache> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not command:
            continue
        if command.lower() == "help":
            print_help()
            continue
        if command.upper() in ("QUIT", "EXIT"):
            client.send_command("QUIT")
            break

        try:
            print(format_response(client.send_command(command)))
        except ClientError as e:
            print(f"Error: {e}")
            break


def main(argv=None):
    parser = argparse.ArgumentParser(description="Client for the GCache server")
    parser.add_argument("--host", type=str, default="localhost", help="Server host (default: localhost)")
    parser.add_argument("--port", type=int, default=settings.PORT, help=f"Server port (default: {settings.PORT})")
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.CLIENT_TIMEOUT,
        help=f"Socket timeout in seconds (default: {settings.CLIENT_TIMEOUT})",
    )
    parser.add_argument("--cmd", type=str, default="", help="Single command to execute, then exit")

    args = parser.parse_args(argv)

    client = CacheClient(args.host, args.port, args.timeout)
    try:
        client.connect()
    except ClientError as e:
        print(f"Failed to connect: {e}", file=sys.stderr)
        print(f"  Try: python -m gcache.server --port {args.port}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.cmd:
            print(client.send_command(args.cmd))
        else:
            interactive(client)
    except ClientError as e:
        print(f"Command failed: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()

"""
Tests for the blocking CacheClient

These tests run the server on a background thread and talk to it with
CacheClient's typed helpers.

Run with: python -m pytest tests/test_client.py -v
"""

import pytest

from gcache.client import (
    CacheClient,
    ClientError,
    KeyNotFoundError,
    format_response,
    interactive,
    main,
    parse_fields,
)


@pytest.fixture
def client(threaded_server, server_port):
    with CacheClient('127.0.0.1', server_port, timeout=2.0) as c:
        yield c


class TestCacheClient:
    """Test typed helpers against a live server."""

    def test_ping(self, client: CacheClient):
        assert client.ping() == "PONG"
        assert client.ping("hello") == "hello"

    def test_set_get(self, client: CacheClient):
        client.set("greeting", "hello world")
        assert client.get("greeting") == "hello world"

    def test_get_missing(self, client: CacheClient):
        with pytest.raises(KeyNotFoundError):
            client.get("missing")

    def test_delete(self, client: CacheClient):
        client.set("k", "v")
        client.delete("k")

        with pytest.raises(KeyNotFoundError):
            client.delete("k")

    def test_size_and_clear(self, client: CacheClient):
        client.set("a", "1")
        client.set("b", "2")
        assert client.size() == 2

        client.clear()
        assert client.size() == 0

    def test_stats(self, client: CacheClient):
        client.set("a", "1")
        assert client.stats() == {"size": 1, "capacity": 100}

    def test_info(self, client: CacheClient):
        info = parse_fields(client.info())
        assert info["cache_capacity"] == 100
        assert info["cache_size"] == 0

    def test_raw_command(self, client: CacheClient):
        assert client.send_command("NOPE") == "-ERR unknown command 'NOPE'"

    @pytest.mark.parametrize("key, value", [
        ("k", "v\nSET injected yes"),
        ("k", "trailing\n"),
        ("k\r\nDEL other", "v"),
    ])
    def test_set_rejects_line_breaks(self, client: CacheClient, key, value):
        with pytest.raises(ClientError):
            client.set(key, value)

        assert client.size() == 0
        assert client.ping() == "PONG"

    def test_raw_command_rejects_embedded_line_break(self, client: CacheClient):
        with pytest.raises(ClientError):
            client.send_command("SET a 1\nSET b 2")

        assert client.size() == 0

    def test_quit_then_send_fails(self, client: CacheClient):
        assert client.send_command("QUIT") == "+BYE"
        with pytest.raises(ClientError):
            client.send_command("PING")


class TestClientErrors:
    """Test transport failures."""

    def test_not_connected(self):
        with pytest.raises(ClientError):
            CacheClient('127.0.0.1', 1).send_command("PING")

    def test_connection_refused(self, server_port):
        client = CacheClient('127.0.0.1', server_port, timeout=1.0)
        with pytest.raises(ClientError):
            client.connect()

    def test_main_exits_when_server_missing(self, server_port, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--host", "127.0.0.1", "--port", str(server_port), "--cmd", "PING"])
        assert excinfo.value.code == 1

    def test_main_single_command(self, threaded_server, server_port, capsys):
        main(["--host", "127.0.0.1", "--port", str(server_port), "--cmd", "PING"])
        assert capsys.readouterr().out.strip() == "+PONG"


class TestFormatting:
    """Test response pretty-printing helpers."""

    @pytest.mark.parametrize("raw, pretty", [
        ("+OK", "OK: OK"),
        ("-ERR key not found", "ERROR: key not found"),
        (":3", "VALUE: 3"),
        ("weird", "RESPONSE: weird"),
    ])
    def test_format_response(self, raw, pretty):
        assert format_response(raw) == pretty

    def test_parse_fields(self):
        assert parse_fields("size:2 capacity:10 name:x") == {
            "size": 2, "capacity": 10, "name": "x",
        }


class TestInteractive:
    """Test the interactive loop with scripted input."""

    def test_session(self, client: CacheClient, monkeypatch, capsys):
        lines = iter(["", "SET k hello there", "GET k", "SIZE", "GET nope", "quit"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

        interactive(client)

        out = capsys.readouterr().out
        assert "OK: OK" in out
        assert "OK: hello there" in out
        assert "VALUE: 1" in out
        assert "ERROR: key not found" in out

    def test_eof_ends_session(self, client: CacheClient, monkeypatch):
        def raise_eof(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", raise_eof)
        interactive(client)
        assert client.ping() == "PONG"

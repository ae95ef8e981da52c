"""Network module for GCache."""

from .tcp_server import CacheServer, run_server

__all__ = ["CacheServer", "run_server"]

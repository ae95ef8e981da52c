#!/usr/bin/env python3
"""
GCache Server Entry Point

This is the main entry point for starting the GCache server.

Usage:
    python -m gcache.server                     # Default settings (0.0.0.0:8080)
    python -m gcache.server --port 9090         # Custom port
    python -m gcache.server --host 127.0.0.1    # Custom host
    python -m gcache.server --capacity 5000     # Custom cache capacity
    python -m gcache.server --debug             # Enable debug logging

Environment Variables:
    GCACHE_HOST       - Server bind address
    GCACHE_PORT       - Server port
    GCACHE_CAPACITY   - Maximum number of cached keys
    GCACHE_DEBUG      - Enable debug mode (true/false)
    GCACHE_LOG_LEVEL  - Log level when not in debug mode
"""

import argparse
import asyncio
import logging
import signal
import sys

from .cache.lru import LRUCache
from .config.settings import settings
from .network.tcp_server import CacheServer


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="GCache: In-Memory LRU Cache Server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--capacity",
        type=int,
        default=settings.CAPACITY,
        help="Maximum number of keys in the cache",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def main(argv=None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    # Fails fast on a non-positive capacity
    try:
        cache = LRUCache(args.capacity)
    except ValueError as exc:
        logger.critical(f"Invalid configuration: {exc}")
        sys.exit(2)

    server = CacheServer(host=args.host, port=args.port, cache=cache)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    async def shutdown(sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received signal {sig.name}, shutting down gracefully...")
        await server.stop()

    # Register signal handlers (Unix only)
    if sys.platform != 'win32':
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: asyncio.create_task(shutdown(s))
            )

    logger.info("Starting GCache server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Capacity: {args.capacity}")
    logger.info(f"  Debug: {args.debug}")

    try:
        loop.run_until_complete(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        loop.run_until_complete(server.stop())
    except OSError as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()

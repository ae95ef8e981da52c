"""
GCache Configuration Settings

This module contains all configuration constants for the GCache server
and client. Values can be overridden through environment variables and,
for the server, through command line flags.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    VERSION: str = "1.0"

    # Network settings
    HOST: str = os.environ.get("GCACHE_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("GCACHE_PORT", "8080"))

    # Cache settings
    CAPACITY: int = int(os.environ.get("GCACHE_CAPACITY", "1000"))

    # Connection settings
    MAX_LINE_LENGTH: int = 64 * 1024  # Longest accepted command line, in bytes
    CLIENT_TIMEOUT: float = 5.0  # Seconds the blocking client waits for I/O

    # Logging settings
    DEBUG: bool = os.environ.get("GCACHE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("GCACHE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()

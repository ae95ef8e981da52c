"""Configuration module for GCache."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]

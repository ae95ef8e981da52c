"""
GCache: In-Memory LRU Cache Server

A fixed-capacity, least-recently-used key-value cache served over a
line-oriented TCP text protocol, built with Python asyncio.
"""

__version__ = "1.0.0"

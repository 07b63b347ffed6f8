"""
Click storage module for analytics data.

Implements the Strategy Pattern for the append-only click log that every
analytics query is computed from.
"""

from .strategies import ClickStorageStrategy, SQLClickStorage, GroupField

__all__ = [
    "ClickStorageStrategy",
    "SQLClickStorage",
    "GroupField",
]

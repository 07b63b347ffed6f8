"""
Database models for the shortener.

Aliases are the transactional data (written once, read on every redirect).
Clicks are the append-only event log that all analytics are computed from.
"""

from .alias import Alias
from .click import Click

__all__ = ["Alias", "Click"]

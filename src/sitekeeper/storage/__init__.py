"""
SiteKeeper Storage Module
Named-value stores backing the recovery key record set.
"""

from .base import KeyStore, KeyStoreError
from .memory import InMemoryKeyStore
from .sql import SqlOptionStore

__all__ = [
    "KeyStore",
    "KeyStoreError",
    "InMemoryKeyStore",
    "SqlOptionStore",
]

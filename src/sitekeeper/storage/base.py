"""
SiteKeeper Named-Value Store Contract
"""

from typing import Any, Protocol, runtime_checkable


class KeyStoreError(Exception):
    """Storage backend could not be read"""
    pass


@runtime_checkable
class KeyStore(Protocol):
    """
    Persistent store holding one structured value per name.

    ``set`` replaces the whole value; merging is the caller's job.
    """

    def get(self, name: str, default: Any = None) -> Any:
        ...

    def set(self, name: str, value: Any) -> bool:
        ...

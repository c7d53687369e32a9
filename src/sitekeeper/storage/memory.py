"""
In-process KeyStore, used for tests and single-process deployments.
"""

import copy
import threading
from typing import Any, Dict


class InMemoryKeyStore:
    """Dict-backed KeyStore; values are copied in and out"""

    def __init__(self, initial: Dict[str, Any] = None):
        self._values: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.Lock()

    def get(self, name: str, default: Any = None) -> Any:
        with self._lock:
            if name not in self._values:
                return default
            return copy.deepcopy(self._values[name])

    def set(self, name: str, value: Any) -> bool:
        with self._lock:
            self._values[name] = copy.deepcopy(value)
        return True

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._values

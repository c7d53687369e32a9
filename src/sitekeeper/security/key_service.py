"""
SiteKeeper Recovery Mode Key Service

Generates and validates the single-use keys an administrator uses to enter
recovery mode when normal authentication is unavailable.

A token identifies a pending attempt and is safe to put in a URL. The key is
the secret half: it is returned once, and only its hash is persisted. All
records live in one named value of the KeyStore, mapping token to
``{"hashed_key": ..., "created_at": ...}``. Any validation attempt consumes
the token before the key is checked, so a token can never be tried twice.
"""

import logging
import threading
import time
import weakref
from datetime import timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from sitekeeper.core.config import settings
from sitekeeper.core.logging import LoggerMixin
from sitekeeper.security.passwords import (
    BcryptPasswordHasher,
    PasswordHasher,
    generate_password,
)
from sitekeeper.storage.base import KeyStore, KeyStoreError
from sitekeeper.storage.sql import SqlOptionStore

KeyGeneratedListener = Callable[[str, str], None]
TTL = Union[int, float, timedelta]

# One mutex per (store, option name), shared by every service in the process
_record_set_locks: "weakref.WeakKeyDictionary[Any, Dict[str, threading.RLock]]" = (
    weakref.WeakKeyDictionary()
)
_record_set_locks_guard = threading.Lock()


def _record_set_lock(store: KeyStore, option_name: str) -> threading.RLock:
    with _record_set_locks_guard:
        locks = _record_set_locks.get(store)
        if locks is None:
            locks = {}
            _record_set_locks[store] = locks
        lock = locks.get(option_name)
        if lock is None:
            lock = threading.RLock()
            locks[option_name] = lock
        return lock


def _ttl_seconds(ttl: TTL) -> float:
    return ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class RecoveryKeyStatus(Enum):
    """Outcome of a recovery key validation"""
    SUCCESS = "success"
    TOKEN_NOT_FOUND = "token_not_found"
    INVALID_FORMAT = "invalid_recovery_key_format"
    HASH_MISMATCH = "hash_mismatch"
    EXPIRED = "key_expired"

    @property
    def ok(self) -> bool:
        return self is RecoveryKeyStatus.SUCCESS

    @property
    def code(self) -> str:
        return self.value

    @property
    def message(self) -> str:
        return _STATUS_MESSAGES[self]


_STATUS_MESSAGES = {
    RecoveryKeyStatus.SUCCESS: "Recovery key accepted.",
    RecoveryKeyStatus.TOKEN_NOT_FOUND: "Recovery Mode not initialized.",
    RecoveryKeyStatus.INVALID_FORMAT: "Invalid recovery key format.",
    RecoveryKeyStatus.HASH_MISMATCH: "Invalid recovery key.",
    RecoveryKeyStatus.EXPIRED: "Recovery key expired.",
}


class RecoveryKeyService(LoggerMixin):
    """
    Generates and validates keys used to enter recovery mode.

    Record set mutations are serialized per store and option name, so
    concurrent callers in one process never overwrite each other's records.
    """

    def __init__(
        self,
        store: KeyStore,
        hasher: PasswordHasher,
        *,
        option_name: Optional[str] = None,
        key_length: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.hasher = hasher
        self.option_name = settings.RECOVERY_KEYS_OPTION_NAME if option_name is None else option_name
        self.key_length = settings.RECOVERY_KEY_LENGTH if key_length is None else key_length
        self.clock = clock
        self._listeners: List[KeyGeneratedListener] = []
        self._lock = _record_set_lock(store, self.option_name)

    def add_key_listener(self, listener: KeyGeneratedListener) -> None:
        """Register a callable receiving ``(token, key)`` after each generated key."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_key_listener(self, listener: KeyGeneratedListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def generate_recovery_mode_token(self) -> str:
        """
        Create a recovery mode token.

        Returns:
            A random string identifying its associated key in storage.
        """
        return generate_password(self.key_length, special_chars=False)

    def generate_and_store_recovery_mode_key(self, token: str) -> str:
        """
        Create a recovery mode key and store its hash under ``token``.

        Registered key listeners are notified with the token and the
        plaintext key once the record is stored.

        Returns:
            The plaintext recovery mode key.
        """
        key = generate_password(self.key_length, special_chars=False)
        hashed = self.hasher.hash(key)

        with self._lock:
            records = self._get_keys()
            records[token] = {
                "hashed_key": hashed,
                "created_at": int(self.clock()),
            }
            stored = self._update_keys(records)

        if not stored:
            self.logger.warning("Recovery key record set could not be persisted")

        for listener in list(self._listeners):
            listener(token, key)

        return key

    def validate_recovery_mode_key(self, token: str, key: str, ttl: TTL) -> RecoveryKeyStatus:
        """
        Verify that ``key`` is correct for ``token``.

        Keys can only be used once: the record is consumed before it is
        checked, whatever the outcome.

        Args:
            token: The token used when generating the key.
            key: The unhashed key.
            ttl: Time in seconds (or a timedelta) the key is valid for.

        Raises:
            KeyStoreError: The token could not be consumed, so it was not checked.
        """
        ttl_seconds = _ttl_seconds(ttl)

        with self._lock:
            records = self._get_keys()
            if token not in records:
                return RecoveryKeyStatus.TOKEN_NOT_FOUND

            record = records.pop(token)
            if not self._update_keys(records):
                raise KeyStoreError(
                    f"Failed to consume recovery key token in option '{self.option_name}'"
                )

        self.logger.debug("Recovery key token consumed")

        if not isinstance(record, dict):
            return RecoveryKeyStatus.INVALID_FORMAT

        hashed_key = record.get("hashed_key")
        created_at = record.get("created_at")
        if not isinstance(hashed_key, str) or not _is_timestamp(created_at):
            return RecoveryKeyStatus.INVALID_FORMAT

        if not self.hasher.verify(key, hashed_key):
            return RecoveryKeyStatus.HASH_MISMATCH

        if self.clock() > created_at + ttl_seconds:
            return RecoveryKeyStatus.EXPIRED

        return RecoveryKeyStatus.SUCCESS

    def clean_expired_keys(self, ttl: TTL) -> None:
        """
        Remove expired recovery mode keys.

        Records without a usable ``created_at`` can never validate and are
        removed as well.
        """
        ttl_seconds = _ttl_seconds(ttl)

        with self._lock:
            records = self._get_keys()
            now = self.clock()
            kept = {
                token: record
                for token, record in records.items()
                if isinstance(record, dict)
                and _is_timestamp(record.get("created_at"))
                and now <= record["created_at"] + ttl_seconds
            }
            removed = len(records) - len(kept)
            if removed:
                self._update_keys(kept)

        self.log_with_context(
            logging.DEBUG,
            "Expired recovery keys cleaned",
            {"removed": removed, "remaining": len(kept)},
        )

    def _get_keys(self) -> Dict[str, Any]:
        records = self.store.get(self.option_name, {})
        return dict(records) if isinstance(records, dict) else {}

    def _update_keys(self, records: Dict[str, Any]) -> bool:
        return bool(self.store.set(self.option_name, records))


def create_recovery_key_service(
    store: Optional[KeyStore] = None,
    hasher: Optional[PasswordHasher] = None,
) -> RecoveryKeyService:
    """Build a service from settings, defaulting to the SQL option store and bcrypt"""
    if store is None:
        store = SqlOptionStore(settings.DATABASE_URL)
    if hasher is None:
        hasher = BcryptPasswordHasher(settings.BCRYPT_ROUNDS)
    return RecoveryKeyService(store, hasher)

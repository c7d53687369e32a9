"""
SiteKeeper Password Utilities
Random password generation and one-way hashing of short secrets.
"""

import secrets
from typing import Protocol, runtime_checkable

import bcrypt

BASE_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
SPECIAL_CHARS = "!@#$%^&*()"
EXTRA_SPECIAL_CHARS = "-_ []{}<>~`+=,.;:/?|"

BCRYPT_MIN_ROUNDS = 4
BCRYPT_MAX_ROUNDS = 31


def generate_password(
    length: int = 12,
    special_chars: bool = True,
    extra_special_chars: bool = False,
) -> str:
    """
    Generate a random password drawn from a fixed character set.

    Args:
        length: Number of characters to return.
        special_chars: Include ``!@#$%^&*()``.
        extra_special_chars: Include other punctuation and the space character.
    """
    if length <= 0:
        raise ValueError("Password length must be positive")

    chars = BASE_CHARS
    if special_chars:
        chars += SPECIAL_CHARS
    if extra_special_chars:
        chars += EXTRA_SPECIAL_CHARS

    return "".join(secrets.choice(chars) for _ in range(length))


@runtime_checkable
class PasswordHasher(Protocol):
    """One-way hash and verify capability for short secrets"""

    def hash(self, plaintext: str) -> str:
        ...

    def verify(self, plaintext: str, digest: str) -> bool:
        ...


class BcryptPasswordHasher:
    """PasswordHasher backed by bcrypt"""

    def __init__(self, rounds: int = 12):
        if not BCRYPT_MIN_ROUNDS <= rounds <= BCRYPT_MAX_ROUNDS:
            raise ValueError(
                f"bcrypt rounds must be between {BCRYPT_MIN_ROUNDS} and {BCRYPT_MAX_ROUNDS}"
            )
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        hashed = bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(self.rounds))
        return hashed.decode("ascii")

    def verify(self, plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            # Digest is not a bcrypt hash
            return False

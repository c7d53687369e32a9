"""
SiteKeeper Security Module
Recovery mode keys and password primitives.
"""

from .passwords import (
    BcryptPasswordHasher,
    PasswordHasher,
    generate_password,
)

from .key_service import (
    KeyGeneratedListener,
    RecoveryKeyService,
    RecoveryKeyStatus,
    create_recovery_key_service,
)

__all__ = [
    "BcryptPasswordHasher",
    "PasswordHasher",
    "generate_password",
    "KeyGeneratedListener",
    "RecoveryKeyService",
    "RecoveryKeyStatus",
    "create_recovery_key_service",
]

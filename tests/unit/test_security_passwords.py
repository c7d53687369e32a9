"""
Unit tests for password generation and bcrypt hashing.
"""
import string

import pytest

from sitekeeper.security.passwords import (
    EXTRA_SPECIAL_CHARS,
    SPECIAL_CHARS,
    BcryptPasswordHasher,
    PasswordHasher,
    generate_password,
)


class TestGeneratePassword:
    """Test cases for generate_password."""

    def test_default_length(self):
        assert len(generate_password()) == 12

    def test_alphanumeric_only(self):
        password = generate_password(200, special_chars=False)

        assert set(password) <= set(string.ascii_letters + string.digits)

    def test_special_chars_allowed(self):
        allowed = set(string.ascii_letters + string.digits + SPECIAL_CHARS)

        assert set(generate_password(500)) <= allowed

    def test_extra_special_chars_allowed(self):
        allowed = set(string.ascii_letters + string.digits + SPECIAL_CHARS + EXTRA_SPECIAL_CHARS)
        password = generate_password(500, extra_special_chars=True)

        assert set(password) <= allowed

    @pytest.mark.parametrize("length", [0, -5])
    def test_invalid_length(self, length):
        with pytest.raises(ValueError):
            generate_password(length)


class TestBcryptPasswordHasher:
    """Test cases for BcryptPasswordHasher."""

    def test_password_hashing(self, hasher):
        digest = hasher.hash("secure_password_123")

        assert digest != "secure_password_123"
        assert digest.startswith("$2")
        assert hasher.verify("secure_password_123", digest) is True
        assert hasher.verify("wrong_password", digest) is False

    def test_hashes_are_salted(self, hasher):
        assert hasher.hash("same") != hasher.hash("same")

    def test_rounds_are_encoded_in_digest(self):
        digest = BcryptPasswordHasher(rounds=5).hash("secret")

        assert digest.split("$")[2] == "05"

    def test_malformed_digest_does_not_verify(self, hasher):
        assert hasher.verify("secret", "not-a-bcrypt-hash") is False

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_rounds_out_of_range(self, rounds):
        with pytest.raises(ValueError):
            BcryptPasswordHasher(rounds=rounds)

    def test_satisfies_protocol(self, hasher):
        assert isinstance(hasher, PasswordHasher)

"""
Unit Tests for Security Module.

Black box tests against the public interface of security.py.
bcrypt executes for real at its lowest cost factor.
"""

import bcrypt
import pytest

from modules.backend.core.security import (
    hash_password,
    hash_password_async,
    verify_admin_key,
    verify_password,
    verify_password_async,
)

ROUNDS = 4


# =============================================================================
# Admin Key
# =============================================================================


class TestVerifyAdminKey:
    """Admin keys are compared verbatim, never hashed."""

    def test_exact_match(self):
        assert verify_admin_key("s3cret-admin-key", "s3cret-admin-key") is True

    def test_mismatch(self):
        assert verify_admin_key("s3cret-admin-kez", "s3cret-admin-key") is False

    def test_case_sensitive(self):
        assert verify_admin_key("S3CRET-ADMIN-KEY", "s3cret-admin-key") is False

    def test_missing_candidate(self):
        assert verify_admin_key(None, "s3cret-admin-key") is False

    def test_empty_secret_never_matches(self):
        assert verify_admin_key("", "") is False

    def test_non_ascii_keys(self):
        assert verify_admin_key("clé-ünïcode", "clé-ünïcode") is True


# =============================================================================
# Password Hashing
# =============================================================================


class TestHashPassword:
    """Tests for password hashing."""

    def test_returns_bcrypt_hash(self):
        hashed = hash_password("p@ss", rounds=ROUNDS)
        assert hashed.startswith("$2")
        assert hashed != "p@ss"

    def test_uses_requested_cost(self):
        hashed = hash_password("p@ss", rounds=ROUNDS)
        assert hashed.split("$")[2] == "04"

    def test_same_password_different_salts(self):
        assert hash_password("p@ss", rounds=ROUNDS) != hash_password("p@ss", rounds=ROUNDS)


class TestVerifyPassword:
    """Tests for password verification."""

    @pytest.fixture
    def hashed(self):
        return hash_password("p@ss", rounds=ROUNDS)

    def test_correct_password(self, hashed):
        assert verify_password("p@ss", hashed) is True

    def test_wrong_password(self, hashed):
        assert verify_password("wrong", hashed) is False

    def test_empty_password(self, hashed):
        assert verify_password("", hashed) is False

    def test_malformed_hash(self):
        assert verify_password("p@ss", "not-a-bcrypt-hash") is False

    def test_empty_hash(self):
        assert verify_password("p@ss", "") is False

    def test_non_string_candidate(self, hashed):
        assert verify_password(None, hashed) is False

    def test_accepts_hash_from_other_bcrypt_clients(self):
        foreign = bcrypt.hashpw(b"p@ss", bcrypt.gensalt(rounds=ROUNDS)).decode()
        assert verify_password("p@ss", foreign) is True

    def test_exact_72_byte_password(self):
        hashed = hash_password("x" * 72, rounds=ROUNDS)
        assert verify_password("x" * 72, hashed) is True

    def test_candidate_longer_than_72_bytes_never_matches(self):
        hashed = hash_password("x" * 72, rounds=ROUNDS)
        assert verify_password("x" * 72 + "EXTRA", hashed) is False

    def test_multibyte_candidate_counted_in_bytes(self):
        # 36 two-byte characters fill the limit, one more passes it
        hashed = hash_password("\u00e9" * 36, rounds=ROUNDS)
        assert verify_password("\u00e9" * 36, hashed) is True
        assert verify_password("\u00e9" * 37, hashed) is False


class TestAsyncVariants:
    """The async wrappers run on the I/O pool and give the same answers."""

    async def test_round_trip(self):
        hashed = await hash_password_async("p@ss", ROUNDS)

        assert await verify_password_async("p@ss", hashed) is True
        assert await verify_password_async("nope", hashed) is False

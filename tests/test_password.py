"""
Tests for password hashing and policy.
"""

import pytest

from recovery_core.password import (
    get_cached_hasher,
    hash_password,
    hash_password_sync,
    validate_new_password,
)


class TestPasswordPolicy:
    """Tests for new password checks."""
    
    def test_accepts_valid(self):
        assert validate_new_password("secret1", "secret1").ok is True
    
    def test_confirmation_optional(self):
        assert validate_new_password("secret1").ok is True
    
    def test_required(self):
        result = validate_new_password("")
        assert result.ok is False
        assert result.message == "New password is required"
    
    def test_too_short(self):
        result = validate_new_password("abc")
        assert result.message == "Password must be at least 6 characters"
    
    def test_mismatch(self):
        result = validate_new_password("secret1", "secret2")
        assert result.ok is False
        assert result.message == "Passwords do not match"


class TestPasswordHashing:
    """Tests for Argon2id hashing."""

    @pytest.mark.asyncio
    async def test_hash_is_argon2id(self):
        """Should produce an Argon2id hash of the given password."""
        hashed = await hash_password("new-secret")

        assert hashed.startswith("$argon2id$")
        assert get_cached_hasher().verify(hashed, "new-secret") is True
    
    def test_salted_per_call(self):
        """Same password should hash differently each time."""
        assert hash_password_sync("new-secret") != hash_password_sync("new-secret")
    
    @pytest.mark.asyncio
    async def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            await hash_password("")

    def test_sync_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password_sync("")

"""
Password Hashing and Policy
===========================
Argon2id hashing and the new-password policy for resets.
"""

from .hasher import get_cached_hasher
from .hashing import hash_password, hash_password_sync
from .policy import PolicyResult, validate_new_password, DEFAULT_MIN_LENGTH

__all__ = [
    # Hasher
    "get_cached_hasher",
    # Hashing
    "hash_password",
    "hash_password_sync",
    # Policy
    "PolicyResult",
    "validate_new_password",
    "DEFAULT_MIN_LENGTH",
]

"""
Password Hashing
================
Argon2id hashing for passwords set through recovery.
"""

import asyncio

from ..exceptions import PasswordHashError
from .hasher import get_cached_hasher


def hash_password_sync(password: str) -> str:
    """Synchronous version of hash_password (use async version when possible)."""
    if not password:
        raise ValueError("Password cannot be empty")
    try:
        return get_cached_hasher().hash(password)
    except Exception as e:
        raise PasswordHashError(f"Password hashing failed: {e}", cause=e) from e


async def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.
    
    Runs in the default executor so the event loop is not blocked.
    
    Args:
        password: Plain text password to hash
        
    Returns:
        Argon2id hash string (includes parameters and salt)
        
    Raises:
        ValueError: if the password is empty
        PasswordHashError: if hashing fails
    """
    if not password:
        raise ValueError("Password cannot be empty")
    
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, hash_password_sync, password)

"""
Recovery Exceptions
===================
Infrastructure failures raised by the recovery core.

Expected outcomes (not found, rate limited, bad OTP) are returned as
values and never raised.
"""

from typing import Optional


class RecoveryError(Exception):
    """Base class for recovery infrastructure failures."""
    
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class IdentityLookupError(RecoveryError):
    """The account query itself failed (distinct from zero rows)."""
    pass


class PersistenceError(RecoveryError):
    """Writing the new password hash failed. Safe to retry."""
    pass


class PasswordHashError(RecoveryError):
    """The password hashing capability failed."""
    pass

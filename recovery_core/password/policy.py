"""
Password Policy
===============
Checks applied to a new password before a reset is attempted.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_MIN_LENGTH = 6


@dataclass
class PolicyResult:
    """Outcome of a password policy check."""
    ok: bool
    message: Optional[str] = None


def validate_new_password(
    new_password: Optional[str],
    confirm_password: Optional[str] = None,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> PolicyResult:
    """
    Validate a new password and its optional confirmation.
    
    Args:
        new_password: Requested password
        confirm_password: Repeated password, checked only when given
        min_length: Minimum allowed length
        
    Returns:
        PolicyResult with ok flag and a user-facing message on failure
    """
    if not new_password:
        return PolicyResult(False, "New password is required")
    
    if len(new_password) < min_length:
        return PolicyResult(False, f"Password must be at least {min_length} characters")
    
    if confirm_password and new_password != confirm_password:
        return PolicyResult(False, "Passwords do not match")
    
    return PolicyResult(True)

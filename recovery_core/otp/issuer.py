"""
OTP Issuer
==========
Generates reset codes and registers them in the OTP store.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Tuple
import structlog

from .accessor import lookup_keys
from .models import StoredOTP
from .store import OTPStore

logger = structlog.get_logger(__name__)


def generate_otp(length: int = 6) -> str:
    """
    Generate a secure random numeric OTP.
    
    Args:
        length: Number of digits
        
    Returns:
        Zero-padded OTP string
    """
    max_value = 10 ** length - 1
    otp = secrets.randbelow(max_value + 1)
    return str(otp).zfill(length)


class OTPIssuer:
    """Issues OTPs under every lookup key of an account."""
    
    def __init__(
        self,
        store: OTPStore,
        length: int = 6,
        expiry_seconds: int = 600,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.length = length
        self.expiry_seconds = expiry_seconds
        self._clock = clock or (lambda: datetime.now(timezone.utc))
    
    def issue(self, account: Any, identifier: Optional[str] = None) -> Tuple[str, StoredOTP]:
        """
        Create a new OTP for an account, replacing any previous one.
        
        Args:
            account: Resolved account
            identifier: Identifier the user asked with
            
        Returns:
            Tuple of (plain_code, stored_record)
        """
        code = generate_otp(self.length)
        stored = StoredOTP(
            code=code,
            expires_at=self._clock() + timedelta(seconds=self.expiry_seconds),
            user_id=account.id,
        )
        
        keys = lookup_keys(account, identifier)
        for key in keys:
            self.store.put(key, stored)
        
        logger.info(
            "Password reset OTP issued",
            user_id=account.id,
            keys=len(keys),
            expires_in=self.expiry_seconds,
        )
        return code, stored
    
    def withdraw(self, stored: StoredOTP, account: Any, identifier: Optional[str] = None) -> None:
        """Remove an issued OTP that could not be delivered."""
        for key in lookup_keys(account, identifier):
            self.store.discard(key, expected=stored)

"""
OTP Models
==========
Data models for stored OTPs and their validation outcomes.
"""

from datetime import datetime, timezone
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

MISSING_MESSAGE = "Invalid or expired OTP. Please request a new one."
EXPIRED_MESSAGE = "OTP has expired. Please request a new one."
INVALID_MESSAGE = "Invalid OTP."


class OTPStatus(str, Enum):
    """OTP validation outcome."""
    VALID = "valid"
    MISSING = "missing"
    EXPIRED = "expired"
    INVALID = "invalid"


def as_utc(value: Union[datetime, int, float]) -> datetime:
    """
    Coerce an expiry to an aware UTC datetime.

    Naive datetimes are taken to be UTC; numbers are Unix seconds.
    """
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(eq=False)
class StoredOTP:
    """
    An issued OTP awaiting verification.

    expires_at is always held as an aware UTC datetime, whatever form
    the issuing flow wrote it in.
    """
    code: str
    expires_at: datetime
    user_id: Any

    def __post_init__(self):
        self.expires_at = as_utc(self.expires_at)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        return now >= self.expires_at

    def issued_for(self, account_id: Any) -> bool:
        """True if this OTP was issued to the given account."""
        if self.user_id is None or account_id is None:
            return False
        # Row ids may come back as int or str depending on the driver
        return str(self.user_id) == str(account_id)


@dataclass
class OTPLookup:
    """Result of probing the store with candidate keys."""
    stored: Optional[StoredOTP] = None
    used_key: Optional[str] = None
    keys: List[str] = field(default_factory=list)
    
    @property
    def found(self) -> bool:
        return self.stored is not None


@dataclass
class OTPValidation:
    """Result of validating a supplied code against a stored OTP."""
    status: OTPStatus
    message: Optional[str] = None
    
    @property
    def valid(self) -> bool:
        return self.status == OTPStatus.VALID

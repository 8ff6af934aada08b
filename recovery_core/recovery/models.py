"""
Recovery Models
===============
States and outcomes of the password reset flow.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..identity.models import Account
from ..otp.models import OTPStatus


class RecoveryState(str, Enum):
    """Password reset state machine."""
    START = "start"
    IDENTITY_RESOLVED = "identity_resolved"
    RATE_CHECKED = "rate_checked"
    OTP_VALIDATED = "otp_validated"
    PASSWORD_UPDATED = "password_updated"  # Terminal success
    REJECTED = "rejected"                  # Terminal failure


class RejectReason(str, Enum):
    """Why a recovery request was rejected."""
    INVALID_PASSWORD = "invalid_password"
    NOT_FOUND = "not_found"
    LOOKUP_FAILED = "lookup_failed"
    RATE_LIMITED = "rate_limited"
    OTP_MISSING = "otp_missing"
    OTP_EXPIRED = "otp_expired"
    OTP_INVALID = "otp_invalid"
    UPDATE_FAILED = "update_failed"
    OTP_DELIVERY_FAILED = "otp_delivery_failed"


OTP_REJECT_REASONS = {
    OTPStatus.MISSING: RejectReason.OTP_MISSING,
    OTPStatus.EXPIRED: RejectReason.OTP_EXPIRED,
    OTPStatus.INVALID: RejectReason.OTP_INVALID,
}


@dataclass
class RecoveryOutcome:
    """Final state of a password reset attempt."""
    state: RecoveryState
    message: str
    reason: Optional[RejectReason] = None
    reached: Optional[RecoveryState] = None  # Last state before rejection
    account: Optional[Account] = None
    retryable: bool = False
    
    @property
    def success(self) -> bool:
        return self.state == RecoveryState.PASSWORD_UPDATED
    
    @property
    def user_message(self) -> str:
        """Message safe to return to the end user."""
        if self.success:
            return self.message
        from .messages import user_message
        return user_message(self.reason, self.message)


@dataclass
class OTPRequestOutcome:
    """Result of asking for a password reset OTP."""
    accepted: bool
    message: str
    issued: bool = False
    reason: Optional[RejectReason] = None
    code: Optional[str] = None  # Only populated in SMS test mode

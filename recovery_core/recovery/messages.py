"""
User-Facing Messages
====================
Maps recovery rejections to messages safe to show end users.

Never reveal whether an account exists, and never reveal which OTP check
failed. Details belong in the logs.
"""

from typing import Optional

from ..otp.models import MISSING_MESSAGE
from ..rate_limit.models import TOO_MANY_ATTEMPTS_MESSAGE
from .models import RejectReason

GENERIC_ACCOUNT_MESSAGE = "If this account exists, your request has been processed."
GENERIC_OTP_MESSAGE = "Invalid or expired OTP."
UPDATE_FAILED_MESSAGE = "Could not update password. Please try again."
DELIVERY_FAILED_MESSAGE = "Failed to send OTP. Please try again later."

_USER_MESSAGES = {
    RejectReason.NOT_FOUND: GENERIC_ACCOUNT_MESSAGE,
    RejectReason.LOOKUP_FAILED: GENERIC_ACCOUNT_MESSAGE,
    RejectReason.RATE_LIMITED: TOO_MANY_ATTEMPTS_MESSAGE,
    RejectReason.OTP_MISSING: GENERIC_OTP_MESSAGE,
    RejectReason.OTP_EXPIRED: GENERIC_OTP_MESSAGE,
    RejectReason.OTP_INVALID: GENERIC_OTP_MESSAGE,
    RejectReason.UPDATE_FAILED: UPDATE_FAILED_MESSAGE,
    RejectReason.OTP_DELIVERY_FAILED: DELIVERY_FAILED_MESSAGE,
}


def user_message(reason: RejectReason, detail: Optional[str] = None) -> str:
    """
    Get the message to show a user for a rejection.
    
    Args:
        reason: Internal rejection reason
        detail: Internal message; only passed through for password policy
            failures, which reveal nothing about the account
    """
    if reason == RejectReason.INVALID_PASSWORD:
        return detail or "Invalid password"
    return _USER_MESSAGES.get(reason, MISSING_MESSAGE)

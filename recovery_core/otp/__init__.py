"""
OTP Storage and Validation
==========================
Lookup, validation and single-use consumption of password reset OTPs.
"""

from .models import (
    OTPStatus,
    StoredOTP,
    OTPLookup,
    OTPValidation,
    MISSING_MESSAGE,
    EXPIRED_MESSAGE,
    INVALID_MESSAGE,
)
from .store import OTPStore, InMemoryOTPStore
from .accessor import OTPAccessor, lookup_keys
from .issuer import OTPIssuer, generate_otp

__all__ = [
    # Models
    "OTPStatus",
    "StoredOTP",
    "OTPLookup",
    "OTPValidation",
    "MISSING_MESSAGE",
    "EXPIRED_MESSAGE",
    "INVALID_MESSAGE",
    # Store
    "OTPStore",
    "InMemoryOTPStore",
    # Accessor
    "OTPAccessor",
    "lookup_keys",
    # Issuer
    "OTPIssuer",
    "generate_otp",
]

"""
Recovery Configuration
======================
Tunables for attempt limiting, OTP issuance and password policy.
"""

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


@dataclass
class RecoveryConfig:
    """Configuration for the account recovery flow."""
    attempt_window_seconds: int = _env_int("OTP_ATTEMPT_WINDOW_SECONDS", 15 * 60)
    max_attempts: int = _env_int("OTP_MAX_ATTEMPTS", 5)
    otp_length: int = _env_int("OTP_LENGTH", 6)
    otp_expiry_seconds: int = _env_int("OTP_EXPIRY_SECONDS", 600)  # 10 minutes
    password_min_length: int = _env_int("PASSWORD_MIN_LENGTH", 6)
    sms_test_mode: bool = os.environ.get("SMS_TEST_MODE", "false").lower() == "true"
    sms_template: str = (
        "Your password reset OTP is: {code}. Valid for {minutes} minutes."
    )

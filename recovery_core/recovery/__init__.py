"""
Password Recovery Flow
======================
Orchestration of OTP-based password resets.
"""

from .models import (
    RecoveryState,
    RejectReason,
    RecoveryOutcome,
    OTPRequestOutcome,
)
from .messages import (
    user_message,
    GENERIC_ACCOUNT_MESSAGE,
    GENERIC_OTP_MESSAGE,
)
from .orchestrator import RecoveryOrchestrator, UPDATE_PASSWORD_STATEMENT

__all__ = [
    # Models
    "RecoveryState",
    "RejectReason",
    "RecoveryOutcome",
    "OTPRequestOutcome",
    # Messages
    "user_message",
    "GENERIC_ACCOUNT_MESSAGE",
    "GENERIC_OTP_MESSAGE",
    # Orchestrator
    "RecoveryOrchestrator",
    "UPDATE_PASSWORD_STATEMENT",
]

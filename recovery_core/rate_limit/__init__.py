"""
Attempt Limiting
================
Per-identifier OTP verification attempt limiting.
"""

from .models import (
    AttemptResult,
    AttemptRecord,
    AttemptDecision,
    TOO_MANY_ATTEMPTS_MESSAGE,
)
from .attempt_limiter import (
    AttemptLimiter,
    identifier_key,
    DEFAULT_WINDOW_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
)

__all__ = [
    # Models
    "AttemptResult",
    "AttemptRecord",
    "AttemptDecision",
    "TOO_MANY_ATTEMPTS_MESSAGE",
    # Limiter
    "AttemptLimiter",
    "identifier_key",
    "DEFAULT_WINDOW_SECONDS",
    "DEFAULT_MAX_ATTEMPTS",
]

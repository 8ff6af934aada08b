"""
Attempt Limit Models
====================
Data models for OTP attempt limiting.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set

TOO_MANY_ATTEMPTS_MESSAGE = "Too many attempts. Please try again later."


class AttemptResult(str, Enum):
    """Attempt limit decision result."""
    ALLOWED = "allowed"
    BLOCKED = "blocked"


@dataclass
class AttemptRecord:
    """Attempts counted for one identifier key in the current window."""
    count: int
    window_start: float  # Unix timestamp
    request_ids: Set[str] = field(default_factory=set)


@dataclass
class AttemptDecision:
    """Attempt limit check result with quota information."""
    allowed: bool
    count: int
    limit: int
    reset_at: float  # Unix timestamp
    message: Optional[str] = None
    
    @property
    def result(self) -> AttemptResult:
        return AttemptResult.ALLOWED if self.allowed else AttemptResult.BLOCKED
    
    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)

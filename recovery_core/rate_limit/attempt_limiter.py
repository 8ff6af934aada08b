"""
Attempt Limiter
===============
Fixed-window OTP verification attempt limiter keyed by identifier.
"""

import threading
import time
from typing import Callable, Dict, Optional
import structlog

from ..phone import digits_only, normalize_base, MIN_DIGITS
from .models import AttemptDecision, AttemptRecord, TOO_MANY_ATTEMPTS_MESSAGE

logger = structlog.get_logger(__name__)

DEFAULT_WINDOW_SECONDS = 15 * 60
DEFAULT_MAX_ATTEMPTS = 5


def identifier_key(identifier) -> str:
    """
    Derive the rate limit key for an identifier.
    
    Phone-like identifiers share one key across all their formats;
    everything else is keyed case-insensitively.
    """
    text = str(identifier or "").strip().lower()
    digits = digits_only(text)
    if len(digits) >= MIN_DIGITS:
        return "phone:" + (normalize_base(text) or digits)
    return "id:" + text


class AttemptLimiter:
    """
    In-memory attempt limiter with a resetting window.
    
    The window restarts once it has fully elapsed, so a burst straddling
    a reset can use up to twice max_attempts. Records are never evicted.
    """
    
    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        window: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            max_attempts: Attempts allowed per window
            window: Window size in seconds
            clock: Source of the current Unix time
        """
        self.max_attempts = max_attempts
        self.window = window
        self._clock = clock
        self._records: Dict[str, AttemptRecord] = {}
        self._lock = threading.Lock()
    
    def check_and_consume(
        self,
        identifier: str,
        request_id: Optional[str] = None,
    ) -> AttemptDecision:
        """
        Count one verification attempt and decide whether it may proceed.
        
        Args:
            identifier: Username, email or phone as supplied by the user
            request_id: Optional id of the calling request; a retried
                request with the same id is not counted twice
            
        Returns:
            AttemptDecision with allowed flag and quota
        """
        key = identifier_key(identifier)
        
        with self._lock:
            now = self._clock()
            record = self._records.get(key)
            if record is None:
                record = AttemptRecord(count=0, window_start=now)
                self._records[key] = record
            
            # Reset if the window has elapsed
            if now - record.window_start > self.window:
                record.count = 0
                record.window_start = now
                record.request_ids.clear()
            
            if request_id is None or request_id not in record.request_ids:
                record.count += 1
                if request_id is not None:
                    record.request_ids.add(request_id)
            
            count = record.count
            reset_at = record.window_start + self.window
        
        if count > self.max_attempts:
            logger.warning(
                "OTP attempt limit exceeded",
                key=key,
                count=count,
                limit=self.max_attempts,
            )
            return AttemptDecision(
                allowed=False,
                count=count,
                limit=self.max_attempts,
                reset_at=reset_at,
                message=TOO_MANY_ATTEMPTS_MESSAGE,
            )
        
        return AttemptDecision(
            allowed=True,
            count=count,
            limit=self.max_attempts,
            reset_at=reset_at,
        )
    
    def clear(self, identifier: str) -> None:
        """Forget all attempts for an identifier."""
        key = identifier_key(identifier)
        with self._lock:
            self._records.pop(key, None)
    
    def attempts(self, identifier: str) -> int:
        """Attempts counted so far for an identifier in its window."""
        key = identifier_key(identifier)
        with self._lock:
            record = self._records.get(key)
            return record.count if record else 0

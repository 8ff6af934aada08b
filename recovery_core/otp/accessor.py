"""
OTP Accessor
============
Finds, validates and consumes stored OTPs across phone format variants.

An OTP may have been registered under a different phone format than the
one supplied at verification time, so lookups probe every equivalent key.
"""

import hmac
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Set
import structlog

from ..phone import is_phone_like, strip_punctuation, variants
from .models import (
    OTPLookup,
    OTPStatus,
    OTPValidation,
    StoredOTP,
    MISSING_MESSAGE,
    EXPIRED_MESSAGE,
    INVALID_MESSAGE,
)
from .store import OTPStore

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def lookup_keys(account: Any, identifier: Optional[str]) -> List[str]:
    """
    All store keys an OTP for this account and identifier may live under.
    
    Args:
        account: Resolved account (only its ``phone`` is used)
        identifier: Identifier as supplied by the user
        
    Returns:
        Unique keys in probe order
    """
    keys: List[str] = []
    
    account_phone = strip_punctuation(getattr(account, "phone", None))
    if account_phone:
        keys.append(account_phone)
    
    if is_phone_like(identifier):
        keys.extend(variants(identifier))
        keys.append(strip_punctuation(identifier))
    
    return [k for k in dict.fromkeys(keys) if k]


class OTPAccessor:
    """Reads, validates and consumes OTPs held in an OTPStore."""
    
    def __init__(
        self,
        store: OTPStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self._clock = clock
        self._claimed: Set[StoredOTP] = set()
        self._lock = threading.Lock()
    
    def find_stored(self, keys: Iterable[str]) -> OTPLookup:
        """Probe the store with each key in order; first hit wins."""
        probed = [k for k in dict.fromkeys(keys) if k]
        for key in probed:
            stored = self.store.get(key)
            if stored is not None:
                return OTPLookup(stored=stored, used_key=key, keys=probed)
        return OTPLookup(keys=probed)
    
    def validate(
        self,
        stored: Optional[StoredOTP],
        supplied_code: Any,
        keys_to_invalidate: Iterable[str],
    ) -> OTPValidation:
        """
        Validate a supplied code against a stored OTP.
        
        Expired records are removed under every key. A wrong code leaves
        the record in place so the user can retry within the attempt limit.
        A valid record is not consumed here.
        
        Args:
            stored: Record returned by find_stored, or None
            supplied_code: Code entered by the user
            keys_to_invalidate: Keys the record may be registered under
            
        Returns:
            OTPValidation with status and message
        """
        if stored is None:
            return OTPValidation(OTPStatus.MISSING, MISSING_MESSAGE)
        
        if stored.is_expired(self._clock()):
            self._discard_all(stored, keys_to_invalidate)
            logger.info("Expired OTP removed", user_id=stored.user_id)
            return OTPValidation(OTPStatus.EXPIRED, EXPIRED_MESSAGE)
        
        supplied = str(supplied_code if supplied_code is not None else "").strip()
        if not hmac.compare_digest(stored.code.encode(), supplied.encode()):
            return OTPValidation(OTPStatus.INVALID, INVALID_MESSAGE)
        
        return OTPValidation(OTPStatus.VALID)
    
    def claim(self, stored: StoredOTP, key: str) -> bool:
        """
        Reserve a validated OTP for the calling request.
        
        The record must still be live under ``key``; a request holding a
        stale copy of an OTP another request already consumed gets False.
        
        Args:
            stored: Record returned by find_stored
            key: Key the record was found under
            
        Returns:
            False if another request holds or has used it
        """
        with self._lock:
            if stored in self._claimed:
                return False
            if self.store.get(key) is not stored:
                return False
            self._claimed.add(stored)
            return True
    
    def release(self, stored: StoredOTP) -> None:
        """Give back a claim without consuming the OTP."""
        with self._lock:
            self._claimed.discard(stored)
    
    def consume(self, stored: StoredOTP, keys: Iterable[str]) -> None:
        """Remove a used OTP under every key and drop its claim."""
        with self._lock:
            self._discard_all(stored, keys)
            self._claimed.discard(stored)
    
    def _discard_all(self, stored: StoredOTP, keys: Iterable[str]) -> None:
        for key in dict.fromkeys(keys):
            self.store.discard(key, expected=stored)

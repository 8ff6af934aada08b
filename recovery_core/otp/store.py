"""
OTP Store
=========
Key-value store for issued OTPs.
"""

import threading
from typing import Dict, Optional, Protocol

from .models import StoredOTP


class OTPStore(Protocol):
    """Interface the accessor needs from an OTP store."""
    
    def get(self, key: str) -> Optional[StoredOTP]:
        ...
    
    def put(self, key: str, stored: StoredOTP) -> None:
        ...
    
    def discard(self, key: str, expected: Optional[StoredOTP] = None) -> bool:
        ...


class InMemoryOTPStore:
    """
    Thread-safe in-memory OTP store.
    
    Not durable; records vanish with the process.
    Use a shared backend when running more than one instance.
    """
    
    def __init__(self):
        self._entries: Dict[str, StoredOTP] = {}
        self._lock = threading.Lock()
    
    def get(self, key: str) -> Optional[StoredOTP]:
        with self._lock:
            return self._entries.get(key)
    
    def put(self, key: str, stored: StoredOTP) -> None:
        with self._lock:
            self._entries[key] = stored
    
    def discard(self, key: str, expected: Optional[StoredOTP] = None) -> bool:
        """
        Delete the entry under key.
        
        Args:
            key: Store key
            expected: If given, only delete when the key still holds this record
            
        Returns:
            True if an entry was removed
        """
        with self._lock:
            current = self._entries.get(key)
            if current is None:
                return False
            if expected is not None and current is not expected:
                return False
            del self._entries[key]
            return True
    
    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

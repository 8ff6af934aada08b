"""
Identity Models
===============
Accounts, parsed identifiers and resolution outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional

from ..phone import is_phone_like, variants


class IdentifierKind(str, Enum):
    """What a user-supplied identifier looks like."""
    USERNAME = "username"
    EMAIL = "email"
    PHONE = "phone"


@dataclass(frozen=True)
class Identifier:
    """An identifier parsed once from raw user input."""
    raw: str
    lowered: str
    kind: IdentifierKind
    phone_variants: List[str] = field(default_factory=list)
    
    @classmethod
    def parse(cls, value: Any) -> "Identifier":
        raw = str(value if value is not None else "").strip()
        lowered = raw.lower()
        
        if is_phone_like(raw):
            kind = IdentifierKind.PHONE
        elif "@" in raw:
            kind = IdentifierKind.EMAIL
        else:
            kind = IdentifierKind.USERNAME
        
        phone_variants = variants(raw) if kind == IdentifierKind.PHONE else []
        return cls(raw=raw, lowered=lowered, kind=kind, phone_variants=phone_variants)


@dataclass(frozen=True)
class Account:
    """An active user account as seen by the recovery core."""
    id: Any
    username: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    
    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Account":
        return cls(
            id=row["id"],
            username=row.get("username"),
            email=row.get("email"),
            phone=row.get("phone"),
            is_active=bool(row.get("is_active", True)),
        )


class ResolutionStatus(str, Enum):
    """Identity resolution outcome."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    LOOKUP_FAILED = "lookup_failed"


@dataclass
class Resolution:
    """Result of resolving an identifier to an account."""
    status: ResolutionStatus
    account: Optional[Account] = None
    error: Optional[str] = None
    match_count: int = 0
    
    @property
    def found(self) -> bool:
        return self.status == ResolutionStatus.FOUND

"""
Identity Resolution
===================
Matching user-supplied identifiers to active accounts.
"""

from .models import (
    IdentifierKind,
    Identifier,
    Account,
    ResolutionStatus,
    Resolution,
)
from .resolver import IdentityResolver, build_lookup_query

__all__ = [
    # Models
    "IdentifierKind",
    "Identifier",
    "Account",
    "ResolutionStatus",
    "Resolution",
    # Resolver
    "IdentityResolver",
    "build_lookup_query",
]

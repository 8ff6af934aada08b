"""
Identity Resolver
=================
Resolves a username, email or phone (any Sri Lanka format) to one
active account.
"""

from typing import Any, Dict, Tuple
import structlog

from ..database import QueryExecutor
from ..exceptions import IdentityLookupError
from .models import Account, Identifier, Resolution, ResolutionStatus

logger = structlog.get_logger(__name__)

_SELECT_ACCOUNT = (
    "SELECT id, username, email, phone, is_active FROM users "
    "WHERE is_active = TRUE AND ({conditions}) ORDER BY id"
)


def build_lookup_query(identifier: Identifier) -> Tuple[str, Dict[str, Any]]:
    """
    Build the account lookup statement for an identifier.
    
    Matches username exactly, email case-insensitively, and the phone
    column against every variant when the identifier is phone-like.
    
    Returns:
        Tuple of (statement, params)
    """
    conditions = [
        "username = :username",
        "LOWER(TRIM(COALESCE(email, ''))) = :email",
    ]
    params: Dict[str, Any] = {
        "username": identifier.raw,
        "email": identifier.lowered,
    }
    
    if identifier.phone_variants:
        names = []
        for i, variant in enumerate(identifier.phone_variants):
            name = f"phone_{i}"
            names.append(":" + name)
            params[name] = variant
        conditions.append(f"phone IN ({', '.join(names)})")
    
    return _SELECT_ACCOUNT.format(conditions=" OR ".join(conditions)), params


class IdentityResolver:
    """Finds the active account for an identifier via a query executor."""
    
    def __init__(self, query: QueryExecutor):
        self.query = query
    
    async def fetch(self, identifier: Identifier) -> list:
        """
        Run the lookup and return raw rows.
        
        Raises:
            IdentityLookupError: if the query itself fails
        """
        statement, params = build_lookup_query(identifier)
        try:
            return list(await self.query.execute(statement, params) or [])
        except Exception as e:
            raise IdentityLookupError(f"Account lookup failed: {e}", cause=e) from e
    
    async def resolve(self, identifier: Any) -> Resolution:
        """
        Resolve an identifier to a single active account.
        
        The lowest id wins when several accounts match. Query failures are
        returned as LOOKUP_FAILED, never as NOT_FOUND.
        
        Args:
            identifier: Raw username, email or phone
            
        Returns:
            Resolution with status and account
        """
        parsed = identifier if isinstance(identifier, Identifier) else Identifier.parse(identifier)
        
        try:
            rows = await self.fetch(parsed)
        except IdentityLookupError as e:
            logger.error(
                "Identity lookup failed",
                kind=parsed.kind.value,
                error=str(e.cause),
            )
            return Resolution(ResolutionStatus.LOOKUP_FAILED, error=str(e.cause))
        
        if not rows:
            return Resolution(ResolutionStatus.NOT_FOUND)
        
        if len(rows) > 1:
            logger.warning(
                "Identifier matches multiple accounts",
                kind=parsed.kind.value,
                matches=len(rows),
            )
        
        return Resolution(
            ResolutionStatus.FOUND,
            account=Account.from_row(rows[0]),
            match_count=len(rows),
        )

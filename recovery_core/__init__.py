"""
Recovery Core Library
=====================
Account recovery for the back office: identity resolution, OTP
validation and attempt limiting.
"""

__version__ = "0.1.0"

# Configuration
from recovery_core.config import RecoveryConfig

# Exceptions
from recovery_core.exceptions import (
    RecoveryError,
    IdentityLookupError,
    PersistenceError,
    PasswordHashError,
)

# Phone
from recovery_core.phone import (
    digits_only,
    is_phone_like,
    normalize_base,
    variants,
    to_canonical_storage,
)

# Attempt Limiting
from recovery_core.rate_limit import (
    AttemptLimiter,
    AttemptDecision,
    identifier_key,
)

# OTP
from recovery_core.otp import (
    StoredOTP,
    OTPStatus,
    OTPLookup,
    OTPValidation,
    InMemoryOTPStore,
    OTPAccessor,
    OTPIssuer,
    lookup_keys,
    generate_otp,
)

# Identity
from recovery_core.identity import (
    Account,
    Identifier,
    IdentifierKind,
    IdentityResolver,
    Resolution,
    ResolutionStatus,
)

# Password Hashing
from recovery_core.password import (
    hash_password,
    validate_new_password,
)

# Query Capability
from recovery_core.database import (
    QueryExecutor,
    SQLAlchemyQueryExecutor,
    create_async_engine,
)

# Recovery Flow
from recovery_core.recovery import (
    RecoveryOrchestrator,
    RecoveryOutcome,
    RecoveryState,
    RejectReason,
    OTPRequestOutcome,
    user_message,
)

__all__ = [
    # Configuration
    "RecoveryConfig",
    # Exceptions
    "RecoveryError",
    "IdentityLookupError",
    "PersistenceError",
    "PasswordHashError",
    # Phone
    "digits_only",
    "is_phone_like",
    "normalize_base",
    "variants",
    "to_canonical_storage",
    # Attempt Limiting
    "AttemptLimiter",
    "AttemptDecision",
    "identifier_key",
    # OTP
    "StoredOTP",
    "OTPStatus",
    "OTPLookup",
    "OTPValidation",
    "InMemoryOTPStore",
    "OTPAccessor",
    "OTPIssuer",
    "lookup_keys",
    "generate_otp",
    # Identity
    "Account",
    "Identifier",
    "IdentifierKind",
    "IdentityResolver",
    "Resolution",
    "ResolutionStatus",
    # Password Hashing
    "hash_password",
    "validate_new_password",
    # Query Capability
    "QueryExecutor",
    "SQLAlchemyQueryExecutor",
    "create_async_engine",
    # Recovery Flow
    "RecoveryOrchestrator",
    "RecoveryOutcome",
    "RecoveryState",
    "RejectReason",
    "OTPRequestOutcome",
    "user_message",
]

"""
Recovery Orchestrator
=====================
Password reset flow: resolve identity, check the attempt limit,
validate the OTP, then update the password.

    START -> IDENTITY_RESOLVED -> RATE_CHECKED -> OTP_VALIDATED
          -> PASSWORD_UPDATED

Any step may end in REJECTED. There is no retry loop; callers re-invoke
from the start.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional
import structlog

from ..config import RecoveryConfig
from ..database import QueryExecutor
from ..exceptions import PasswordHashError, PersistenceError
from ..identity import IdentityResolver, Resolution, ResolutionStatus
from ..identity.models import Account
from ..otp import (
    InMemoryOTPStore,
    OTPAccessor,
    OTPIssuer,
    OTPLookup,
    OTPStore,
    OTPValidation,
    StoredOTP,
    lookup_keys,
    MISSING_MESSAGE,
)
from ..password import hash_password, validate_new_password
from ..phone import to_canonical_storage
from ..rate_limit import AttemptDecision, AttemptLimiter
from .messages import GENERIC_ACCOUNT_MESSAGE, DELIVERY_FAILED_MESSAGE, UPDATE_FAILED_MESSAGE
from .models import (
    OTP_REJECT_REASONS,
    OTPRequestOutcome,
    RecoveryOutcome,
    RecoveryState,
    RejectReason,
)

logger = structlog.get_logger(__name__)

UPDATE_PASSWORD_STATEMENT = (
    "UPDATE users SET password_hash = :password_hash, updated_at = :updated_at "
    "WHERE id = :user_id"
)

PasswordHashFn = Callable[[str], Awaitable[str]]
SmsSender = Callable[[str, str], Awaitable[Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecoveryOrchestrator:
    """
    Composes identity resolution, attempt limiting and OTP validation
    into the password reset flow.

    Create one instance at service startup and share it across requests;
    it owns the attempt map and the OTP claims.

    Example:
        orchestrator = RecoveryOrchestrator(SQLAlchemyQueryExecutor(factory))
        outcome = await orchestrator.reset_password(
            "+94771234567", "482913", "new-secret",
        )
        if not outcome.success:
            return {"success": False, "message": outcome.user_message}
    """

    def __init__(
        self,
        query: QueryExecutor,
        otp_store: Optional[OTPStore] = None,
        limiter: Optional[AttemptLimiter] = None,
        config: Optional[RecoveryConfig] = None,
        password_hasher: PasswordHashFn = hash_password,
        sms_sender: Optional[SmsSender] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.config = config or RecoveryConfig()
        self.query = query
        self.otp_store = otp_store if otp_store is not None else InMemoryOTPStore()
        self.limiter = limiter or AttemptLimiter(
            max_attempts=self.config.max_attempts,
            window=self.config.attempt_window_seconds,
        )
        self.resolver = IdentityResolver(query)
        self.otps = OTPAccessor(self.otp_store, clock=clock)
        self.issuer = OTPIssuer(
            self.otp_store,
            length=self.config.otp_length,
            expiry_seconds=self.config.otp_expiry_seconds,
            clock=clock,
        )
        self._hash = password_hasher
        self._send = sms_sender
        self._clock = clock

    # =========================================================================
    # Building blocks
    # =========================================================================

    def check_attempt(self, identifier: str, request_id: Optional[str] = None) -> AttemptDecision:
        return self.limiter.check_and_consume(identifier, request_id=request_id)

    def clear_attempts(self, identifier: str) -> None:
        self.limiter.clear(identifier)

    async def resolve_identity(self, identifier: str) -> Resolution:
        return await self.resolver.resolve(identifier)

    def lookup_otp(self, account: Account, identifier: str) -> OTPLookup:
        return self.otps.find_stored(lookup_keys(account, identifier))

    def validate_otp(
        self,
        stored: Optional[StoredOTP],
        code: Any,
        keys: List[str],
    ) -> OTPValidation:
        return self.otps.validate(stored, code, keys)

    async def update_password(self, user_id: Any, new_password: str) -> None:
        """
        Hash and persist a new password for an account.

        Raises:
            PasswordHashError: if hashing fails
            PersistenceError: if the update statement fails
        """
        try:
            password_hash = await self._hash(new_password)
        except PasswordHashError:
            raise
        except Exception as e:
            raise PasswordHashError(f"Password hashing failed: {e}", cause=e) from e

        try:
            await self.query.execute(
                UPDATE_PASSWORD_STATEMENT,
                {
                    "password_hash": password_hash,
                    "updated_at": self._clock(),
                    "user_id": user_id,
                },
            )
        except Exception as e:
            raise PersistenceError(f"Password update failed: {e}", cause=e) from e

    # =========================================================================
    # Flows
    # =========================================================================

    async def reset_password(
        self,
        identifier: str,
        code: Any,
        new_password: str,
        confirm_password: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> RecoveryOutcome:
        """
        Verify an OTP and set a new password.

        Args:
            identifier: Username, email or phone (any Sri Lanka format)
            code: OTP entered by the user
            new_password: Requested password
            confirm_password: Optional repeated password
            request_id: Id of the calling request, so a retried request
                is not counted twice against the attempt limit

        Returns:
            RecoveryOutcome; expected failures never raise

        Raises:
            PasswordHashError: if the hashing capability fails
        """
        policy = validate_new_password(
            new_password,
            confirm_password,
            min_length=self.config.password_min_length,
        )
        if not policy.ok:
            return self._reject(RejectReason.INVALID_PASSWORD, policy.message, RecoveryState.START)

        resolution = await self.resolve_identity(identifier)
        if not resolution.found:
            reason = (
                RejectReason.LOOKUP_FAILED
                if resolution.status == ResolutionStatus.LOOKUP_FAILED
                else RejectReason.NOT_FOUND
            )
            return self._reject(reason, GENERIC_ACCOUNT_MESSAGE, RecoveryState.START)
        account = resolution.account

        decision = self.check_attempt(identifier, request_id=request_id)
        if not decision.allowed:
            return self._reject(
                RejectReason.RATE_LIMITED,
                decision.message,
                RecoveryState.IDENTITY_RESOLVED,
                account,
            )

        lookup = self.lookup_otp(account, identifier)
        validation = self.validate_otp(lookup.stored, code, lookup.keys)
        if not validation.valid:
            return self._reject(
                OTP_REJECT_REASONS[validation.status],
                validation.message,
                RecoveryState.RATE_CHECKED,
                account,
            )

        stored = lookup.stored
        if not stored.issued_for(account.id):
            # Shared phone: the OTP under this key belongs to another account
            logger.warning(
                "OTP issued for a different account",
                user_id=account.id,
                otp_user_id=stored.user_id,
            )
            return self._reject(
                RejectReason.OTP_MISSING,
                MISSING_MESSAGE,
                RecoveryState.RATE_CHECKED,
                account,
            )

        if not self.otps.claim(stored, lookup.used_key):
            # Another request holds or has already consumed this OTP
            return self._reject(
                RejectReason.OTP_MISSING,
                MISSING_MESSAGE,
                RecoveryState.RATE_CHECKED,
                account,
            )

        try:
            try:
                await self.update_password(account.id, new_password)
            except PersistenceError as e:
                logger.error(
                    "Password reset persist failed",
                    user_id=account.id,
                    error=str(e.cause),
                )
                return self._reject(
                    RejectReason.UPDATE_FAILED,
                    UPDATE_FAILED_MESSAGE,
                    RecoveryState.OTP_VALIDATED,
                    account,
                    retryable=True,
                )

            self.otps.consume(stored, lookup.keys)
            self.clear_attempts(identifier)
        finally:
            self.otps.release(stored)

        logger.info("Password reset successful", user_id=account.id)
        return RecoveryOutcome(
            state=RecoveryState.PASSWORD_UPDATED,
            message="Password has been reset successfully",
            account=account,
        )

    async def request_otp(self, identifier: str) -> OTPRequestOutcome:
        """
        Issue a reset OTP for an identifier and hand it to the SMS sender.

        Unknown identifiers get the same answer as known ones.

        Args:
            identifier: Username, email or phone

        Returns:
            OTPRequestOutcome
        """
        resolution = await self.resolve_identity(identifier)
        if not resolution.found:
            logger.warning("Password reset OTP requested for unknown identifier")
            return OTPRequestOutcome(accepted=True, message=GENERIC_ACCOUNT_MESSAGE)
        account = resolution.account

        if not account.phone:
            logger.warning("Account has no phone for OTP delivery", user_id=account.id)
            return OTPRequestOutcome(accepted=True, message=GENERIC_ACCOUNT_MESSAGE)

        code, stored = self.issuer.issue(account, identifier)

        if self.config.sms_test_mode:
            logger.warning("SMS_TEST_MODE enabled - OTP not sent", user_id=account.id)
            return OTPRequestOutcome(
                accepted=True,
                message="OTP generated (TEST MODE). SMS not sent in test mode.",
                issued=True,
                code=code,
            )

        message = self.config.sms_template.format(
            code=code,
            minutes=self.config.otp_expiry_seconds // 60,
        )
        try:
            if self._send is None:
                raise RuntimeError("SMS sender is not configured")
            await self._send(to_canonical_storage(account.phone) or account.phone, message)
        except Exception as e:
            self.issuer.withdraw(stored, account, identifier)
            logger.error("Failed to send OTP SMS", user_id=account.id, error=str(e))
            return OTPRequestOutcome(
                accepted=False,
                message=DELIVERY_FAILED_MESSAGE,
                reason=RejectReason.OTP_DELIVERY_FAILED,
            )

        return OTPRequestOutcome(accepted=True, message=GENERIC_ACCOUNT_MESSAGE, issued=True)

    def _reject(
        self,
        reason: RejectReason,
        message: str,
        reached: RecoveryState,
        account: Optional[Account] = None,
        retryable: bool = False,
    ) -> RecoveryOutcome:
        logger.warning(
            "Password reset rejected",
            reason=reason.value,
            reached=reached.value,
            user_id=account.id if account else None,
        )
        return RecoveryOutcome(
            state=RecoveryState.REJECTED,
            message=message,
            reason=reason,
            reached=reached,
            account=account,
            retryable=retryable,
        )

"""
Tests for OTP lookup, validation and issuance.
"""

from datetime import timedelta

from recovery_core.identity import Account
from recovery_core.otp import (
    InMemoryOTPStore,
    OTPAccessor,
    OTPIssuer,
    OTPStatus,
    StoredOTP,
    generate_otp,
    lookup_keys,
    EXPIRED_MESSAGE,
    INVALID_MESSAGE,
    MISSING_MESSAGE,
)

ACCOUNT = Account(id=7, username="nimal", phone="077 123-4567")


class TestLookupKeys:
    """Tests for OTP store key derivation."""
    
    def test_account_phone_and_identifier_variants(self):
        """Should combine the stored phone with identifier variants."""
        keys = lookup_keys(ACCOUNT, "+94 77 123 4567")
        
        assert keys == [
            "0771234567",
            "771234567",
            "94771234567",
            "+94771234567",
        ]
    
    def test_non_phone_identifier(self):
        """A username contributes no keys of its own."""
        assert lookup_keys(ACCOUNT, "nimal") == ["0771234567"]
    
    def test_account_without_phone(self):
        """Should still use the identifier when the account has no phone."""
        keys = lookup_keys(Account(id=1), "0771234567")
        assert keys[0] == "771234567"
        assert "0771234567" in keys
    
    def test_nothing_to_look_up(self):
        assert lookup_keys(Account(id=1), "nimal") == []


class TestOTPAccessor:
    """Tests for finding and validating stored OTPs."""
    
    def test_find_by_variant(self, otp_store, stored_otp, clock):
        """Should find an OTP stored under a different format."""
        accessor = OTPAccessor(otp_store, clock=clock)
        
        lookup = accessor.find_stored(lookup_keys(ACCOUNT, "+94771234567"))
        
        assert lookup.found
        assert lookup.stored is stored_otp
        assert lookup.used_key == "771234567"
    
    def test_find_nothing(self, otp_store, clock):
        accessor = OTPAccessor(otp_store, clock=clock)
        
        lookup = accessor.find_stored(["0771234567"])
        
        assert lookup.found is False
        assert lookup.used_key is None
    
    def test_validate_missing(self, otp_store, clock):
        """No record means invalid or expired."""
        accessor = OTPAccessor(otp_store, clock=clock)
        
        result = accessor.validate(None, "482913", [])
        
        assert result.status == OTPStatus.MISSING
        assert result.message == MISSING_MESSAGE
    
    def test_validate_success_does_not_consume(self, otp_store, stored_otp, clock):
        """A valid code leaves the record for the caller to consume."""
        accessor = OTPAccessor(otp_store, clock=clock)
        
        result = accessor.validate(stored_otp, " 482913 ", ["771234567"])
        
        assert result.valid
        assert "771234567" in otp_store
    
    def test_expired_removed_under_every_key(self, otp_store, clock):
        """Expired records are removed from all keys."""
        stored = StoredOTP(code="111222", expires_at=clock() - timedelta(seconds=1), user_id=7)
        keys = ["771234567", "0771234567", "+94771234567"]
        for key in keys:
            otp_store.put(key, stored)
        accessor = OTPAccessor(otp_store, clock=clock)
        
        result = accessor.validate(stored, "111222", keys)
        
        assert result.status == OTPStatus.EXPIRED
        assert result.message == EXPIRED_MESSAGE
        assert len(otp_store) == 0
    
    def test_expiry_boundary(self, otp_store, clock):
        """An OTP is already expired at its expiry instant."""
        stored = StoredOTP(code="111222", expires_at=clock(), user_id=7)
        accessor = OTPAccessor(otp_store, clock=clock)
        
        assert accessor.validate(stored, "111222", []).status == OTPStatus.EXPIRED
    
    def test_wrong_code_keeps_record(self, otp_store, stored_otp, clock):
        """A wrong code must not consume the OTP."""
        accessor = OTPAccessor(otp_store, clock=clock)
        
        first = accessor.validate(stored_otp, "482914", ["771234567"])
        assert first.status == OTPStatus.INVALID
        assert first.message == INVALID_MESSAGE
        assert otp_store.get("771234567") is stored_otp
        
        second = accessor.validate(stored_otp, "482913", ["771234567"])
        assert second.valid
    
    def test_claim_is_exclusive(self, otp_store, stored_otp, clock):
        """Only one request may hold a claim at a time."""
        accessor = OTPAccessor(otp_store, clock=clock)
        
        assert accessor.claim(stored_otp, "771234567") is True
        assert accessor.claim(stored_otp, "771234567") is False
        
        accessor.release(stored_otp)
        assert accessor.claim(stored_otp, "771234567") is True
    
    def test_stale_copy_cannot_be_claimed_after_consume(self, otp_store, stored_otp, clock):
        """A request that read the OTP before another consumed it must not claim it."""
        accessor = OTPAccessor(otp_store, clock=clock)
        keys = lookup_keys(ACCOUNT, "0771234567")

        first = accessor.find_stored(keys)
        second = accessor.find_stored(keys)

        assert accessor.claim(first.stored, first.used_key) is True
        accessor.consume(first.stored, first.keys)
        accessor.release(first.stored)

        assert accessor.validate(second.stored, "482913", second.keys).valid
        assert accessor.claim(second.stored, second.used_key) is False
        assert len(otp_store) == 0

    def test_claim_requires_live_record(self, otp_store, stored_otp, clock):
        """A record replaced under its key cannot be claimed."""
        otp_store.put("771234567", StoredOTP(
            code="000111", expires_at=clock() + timedelta(minutes=5), user_id=7,
        ))
        accessor = OTPAccessor(otp_store, clock=clock)

        assert accessor.claim(stored_otp, "771234567") is False

    def test_consume_only_removes_same_record(self, otp_store, stored_otp, clock):
        """A newer OTP under the same key must survive consumption of the old one."""
        newer = StoredOTP(code="000111", expires_at=clock() + timedelta(minutes=5), user_id=7)
        otp_store.put("0771234567", newer)
        accessor = OTPAccessor(otp_store, clock=clock)
        
        accessor.consume(stored_otp, ["771234567", "0771234567"])
        
        assert "771234567" not in otp_store
        assert otp_store.get("0771234567") is newer


class TestStoredOTP:
    """Tests for the stored OTP record."""

    def test_naive_expiry_treated_as_utc(self, otp_store, clock):
        """Records written with a naive expiry validate without error."""
        naive = (clock() + timedelta(minutes=5)).replace(tzinfo=None)
        stored = StoredOTP(code="482913", expires_at=naive, user_id=7)
        accessor = OTPAccessor(otp_store, clock=clock)

        assert stored.expires_at.tzinfo is not None
        assert accessor.validate(stored, "482913", []).valid

        clock.advance(5 * 60)
        assert accessor.validate(stored, "482913", []).status == OTPStatus.EXPIRED

    def test_epoch_expiry(self, clock):
        """Unix timestamps are accepted as expiry."""
        stored = StoredOTP(code="1", expires_at=clock().timestamp() + 60, user_id=7)

        assert stored.expires_at == clock() + timedelta(seconds=60)
        assert stored.is_expired(clock()) is False

    def test_issued_for(self):
        """Ownership matches ids regardless of int or str form."""
        stored = StoredOTP(code="1", expires_at=0, user_id=7)

        assert stored.issued_for(7) is True
        assert stored.issued_for("7") is True
        assert stored.issued_for(8) is False
        assert StoredOTP(code="1", expires_at=0, user_id=None).issued_for(7) is False


class TestOTPIssuer:
    """Tests for OTP generation and registration."""
    
    def test_generate_otp_numeric(self):
        """Should generate a zero-padded numeric code."""
        otp = generate_otp(length=6)
        
        assert len(otp) == 6
        assert otp.isdigit()
    
    def test_issue_registers_all_keys(self, clock):
        """Issued OTP should be reachable under every lookup key."""
        store = InMemoryOTPStore()
        issuer = OTPIssuer(store, length=6, expiry_seconds=600, clock=clock)
        
        code, stored = issuer.issue(ACCOUNT, "+94771234567")
        
        assert stored.code == code
        assert stored.user_id == 7
        assert stored.expires_at == clock() + timedelta(minutes=10)
        for key in lookup_keys(ACCOUNT, "+94771234567"):
            assert store.get(key) is stored
    
    def test_withdraw(self, clock):
        """Withdrawing removes the issued OTP everywhere."""
        store = InMemoryOTPStore()
        issuer = OTPIssuer(store, clock=clock)
        
        _, stored = issuer.issue(ACCOUNT, "nimal")
        issuer.withdraw(stored, ACCOUNT, "nimal")
        
        assert len(store) == 0

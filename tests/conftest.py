"""
Shared fixtures for recovery-core tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from recovery_core.otp import InMemoryOTPStore, StoredOTP


class FakeQueryExecutor:
    """
    In-memory stand-in for the users table.
    
    Understands the account lookup and password update statements by
    their parameters.
    """
    
    def __init__(self, users: Optional[List[Dict[str, Any]]] = None):
        self.users = users or []
        self.calls: List[tuple] = []
        self.fail_select: Optional[Exception] = None
        self.fail_update: Optional[Exception] = None
    
    async def execute(self, statement: str, params=None):
        params = dict(params or {})
        self.calls.append((statement, params))
        
        if statement.lstrip().upper().startswith("SELECT"):
            if self.fail_select:
                raise self.fail_select
            phones = {v for k, v in params.items() if k.startswith("phone_")}
            rows = [
                dict(u) for u in sorted(self.users, key=lambda u: u["id"])
                if u.get("is_active", True) and (
                    u.get("username") == params["username"]
                    or (u.get("email") or "").strip().lower() == params["email"]
                    or u.get("phone") in phones
                )
            ]
            return rows
        
        if statement.lstrip().upper().startswith("UPDATE"):
            if self.fail_update:
                raise self.fail_update
            for u in self.users:
                if u["id"] == params["user_id"]:
                    u["password_hash"] = params["password_hash"]
                    u["updated_at"] = params["updated_at"]
            return []
        
        raise AssertionError(f"Unexpected statement: {statement}")
    
    @property
    def updates(self) -> List[Dict[str, Any]]:
        return [p for s, p in self.calls if s.lstrip().upper().startswith("UPDATE")]


class FakeClock:
    """Controllable UTC clock."""
    
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    
    def __call__(self) -> datetime:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


async def fast_hash(password: str) -> str:
    return "hashed:" + password


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def user_row():
    return {
        "id": 7,
        "username": "nimal",
        "email": "Nimal@Example.lk ",
        "phone": "0771234567",
        "is_active": True,
    }


@pytest.fixture
def query(user_row):
    return FakeQueryExecutor([
        user_row,
        {"id": 8, "username": "inactive", "email": None, "phone": "0719999999", "is_active": False},
    ])


@pytest.fixture
def otp_store():
    return InMemoryOTPStore()


@pytest.fixture
def stored_otp(clock, otp_store):
    stored = StoredOTP(
        code="482913",
        expires_at=clock() + timedelta(minutes=5),
        user_id=7,
    )
    otp_store.put("771234567", stored)
    return stored

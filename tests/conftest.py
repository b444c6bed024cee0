"""
Pytest configuration and fixtures.
"""
import hashlib
import hmac
import itertools
import json
import time
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from apps.cashback.deps import get_directory, get_gateway, get_ledger
from apps.cashback.main import app
from apps.cashback.services.directory import BusinessDirectory
from apps.cashback.services.ledger import InMemoryTransactionStore
from apps.cashback.services.payments import Charge, StripeGateway

WEBHOOK_SECRET = "whsec_test_fake_secret"

BUYER_ID = "11111111-1111-1111-1111-111111111111"
SELLER_ID = "22222222-2222-2222-2222-222222222222"
INACTIVE_ID = "33333333-3333-3333-3333-333333333333"


# -----------------------------
# Supabase test double
# -----------------------------
class FakeQuery:
    def __init__(self, rows: List[Dict[str, Any]], fail: Optional[Exception] = None) -> None:
        self._rows = rows
        self._fail = fail
        self._filters: List[tuple] = []
        self._limit: Optional[int] = None
        self.selected: Optional[str] = None

    def select(self, columns: str) -> "FakeQuery":
        self.selected = columns
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def limit(self, n: int) -> "FakeQuery":
        self._limit = n
        return self

    def execute(self) -> SimpleNamespace:
        if self._fail is not None:
            raise self._fail
        rows = [r for r in self._rows if all(r.get(c) == v for c, v in self._filters)]
        if self._limit is not None:
            rows = rows[: self._limit]
        return SimpleNamespace(data=[dict(r) for r in rows])


class FakeSupabase:
    def __init__(self, tables: Dict[str, List[Dict[str, Any]]], fail: Optional[Exception] = None) -> None:
        self.tables = tables
        self.fail = fail
        self.queried: List[str] = []

    def table(self, name: str) -> FakeQuery:
        self.queried.append(name)
        return FakeQuery(self.tables.get(name, []), self.fail)


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """Build a Stripe-Signature header the way Stripe signs webhook bodies."""
    ts = int(timestamp if timestamp is not None else time.time())
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


def payment_succeeded_event(charge_id: str, event_type: str = "payment_intent.succeeded") -> bytes:
    return json.dumps(
        {
            "id": "evt_test_1",
            "object": "event",
            "type": event_type,
            "data": {"object": {"id": charge_id, "object": "payment_intent", "amount": 10000}},
        }
    ).encode("utf-8")


# -----------------------------
# Fixtures
# -----------------------------
@pytest.fixture
def business_rows() -> List[Dict[str, Any]]:
    return [
        {
            "id": BUYER_ID,
            "business_name": "Crescent Coffee",
            "owner_name": "Ana Ruiz",
            "email": "ana@crescent.test",
            "status": "active",
            "business_category": "food",
            "parish": "Orleans Parish",
            "neighborhood": "Treme",
            "plan_type": "pro",
            "created_at": "2024-03-01T12:00:00+00:00",
        },
        {
            "id": SELLER_ID,
            "business_name": "Bayou Supply",
            "owner_name": "Sam Lee",
            "email": "sam@bayou.test",
            "status": "active",
            "business_category": "wholesale",
            "parish": None,
            "neighborhood": None,
            "plan_type": "basic",
            "created_at": "2024-04-01T12:00:00+00:00",
        },
        {
            "id": INACTIVE_ID,
            "business_name": "Closed Shop",
            "owner_name": "Pat Doe",
            "email": "pat@closed.test",
            "status": "inactive",
            "business_category": "retail",
            "parish": "Jefferson Parish",
            "neighborhood": "Metairie",
            "plan_type": "basic",
            "created_at": "2023-01-01T12:00:00+00:00",
        },
    ]


@pytest.fixture
def supabase(business_rows) -> FakeSupabase:
    return FakeSupabase({"subscribers": business_rows})


@pytest.fixture
def directory(supabase) -> BusinessDirectory:
    return BusinessDirectory(supabase)


@pytest.fixture
def ledger() -> InMemoryTransactionStore:
    return InMemoryTransactionStore()


@pytest.fixture
def gateway() -> MagicMock:
    """Charge creation mocked; webhook verification runs Stripe's real scheme."""
    counter = itertools.count(1)
    gw = MagicMock(spec=StripeGateway)

    def _create_charge(amount, currency, metadata):
        n = next(counter)
        return Charge(id=f"pi_test_{n}", client_secret=f"pi_test_{n}_secret_abc")

    gw.create_charge.side_effect = _create_charge
    gw.construct_event.side_effect = StripeGateway(None, WEBHOOK_SECRET).construct_event
    return gw


@pytest.fixture
def client(directory, ledger, gateway):
    app.dependency_overrides[get_directory] = lambda: directory
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# Signed correctly but missing fields the reconciliation flow reads.
MALFORMED_EVENTS = {
    "missing_type": {"id": "evt_bad_1", "object": "event", "data": {"object": {"id": "pi_test_1"}}},
    "missing_data": {"id": "evt_bad_2", "object": "event", "type": "payment_intent.succeeded"},
    "missing_intent_id": {
        "id": "evt_bad_3",
        "object": "event",
        "type": "payment_intent.succeeded",
        "data": {"object": {"object": "payment_intent", "amount": 10000}},
    },
}


def encode_event(event: Dict[str, Any]) -> bytes:
    return json.dumps(event).encode("utf-8")

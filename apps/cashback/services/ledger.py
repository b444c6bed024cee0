"""
Transaction Ledger
==================

Purpose:
- Local record of B2B transactions relayed through the payment processor.
- Append-only: records are never deleted; the only mutation is the
  pending -> completed status flip.

Design:
- Transaction is the stored record. Its JSON view keeps the camelCase keys
  the HTTP clients already consume.
- TransactionStore is the repository contract. InMemoryTransactionStore is
  the default backend; a Supabase-backed store can implement the same methods.
- Route handlers run in a thread pool, so the in-memory store guards its
  list with a lock.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple

TransactionStatus = Literal["pending", "completed"]

PENDING: TransactionStatus = "pending"
COMPLETED: TransactionStatus = "completed"


def new_transaction_id() -> str:
    return f"txn_{uuid.uuid4().hex}"


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Transaction:
    buyer_id: str
    seller_id: str
    amount: int
    cashback_amount: int
    stripe_payment_intent_id: str

    buyer_name: Optional[str] = None
    seller_name: Optional[str] = None
    description: Optional[str] = None

    id: str = field(default_factory=new_transaction_id)
    timestamp: str = field(default_factory=_now_utc_iso)
    status: TransactionStatus = PENDING

    def involves(self, business_id: str) -> bool:
        return business_id in (self.buyer_id, self.seller_id)

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "buyerId": self.buyer_id,
            "sellerId": self.seller_id,
            "buyerName": self.buyer_name,
            "sellerName": self.seller_name,
            "amount": int(self.amount),
            "cashbackAmount": int(self.cashback_amount),
            "description": self.description,
            "timestamp": self.timestamp,
            "stripePaymentIntentId": self.stripe_payment_intent_id,
            "status": self.status,
        }


class TransactionStore:
    """
    Repository contract:
    - append(txn) -> Transaction
    - get(transaction_id) -> Transaction|None
    - find_by_charge(charge_id) -> Transaction|None
    - for_business(business_id) -> List[Transaction] (insertion order)
    - all() -> List[Transaction] (insertion order)
    - mark_completed(transaction_id) -> (Transaction|None, changed)
    """

    def append(self, txn: Transaction) -> Transaction:
        raise NotImplementedError

    def get(self, transaction_id: str) -> Optional[Transaction]:
        raise NotImplementedError

    def find_by_charge(self, charge_id: str) -> Optional[Transaction]:
        raise NotImplementedError

    def for_business(self, business_id: str) -> List[Transaction]:
        raise NotImplementedError

    def all(self) -> List[Transaction]:
        raise NotImplementedError

    def mark_completed(self, transaction_id: str) -> Tuple[Optional[Transaction], bool]:
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self.all())


class InMemoryTransactionStore(TransactionStore):
    def __init__(self) -> None:
        self._items: List[Transaction] = []
        self._lock = threading.Lock()

    def append(self, txn: Transaction) -> Transaction:
        with self._lock:
            self._items.append(txn)
            return replace(txn)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        with self._lock:
            for t in self._items:
                if t.id == transaction_id:
                    return replace(t)
        return None

    def find_by_charge(self, charge_id: str) -> Optional[Transaction]:
        with self._lock:
            for t in self._items:
                if t.stripe_payment_intent_id == charge_id:
                    return replace(t)
        return None

    def for_business(self, business_id: str) -> List[Transaction]:
        with self._lock:
            return [replace(t) for t in self._items if t.involves(business_id)]

    def all(self) -> List[Transaction]:
        with self._lock:
            return [replace(t) for t in self._items]

    def mark_completed(self, transaction_id: str) -> Tuple[Optional[Transaction], bool]:
        with self._lock:
            for t in self._items:
                if t.id != transaction_id:
                    continue
                changed = t.status != COMPLETED
                t.status = COMPLETED
                return replace(t), changed
        return None, False

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from apps.cashback.services.ledger import Transaction


@dataclass(frozen=True)
class BusinessStats:
    total_cashback_earned: int
    total_spent: int
    total_received: int
    transaction_count: int

    @property
    def savings_rate(self) -> str:
        if self.total_spent <= 0:
            return "0%"
        rate = Decimal(self.total_cashback_earned) / Decimal(self.total_spent) * 100
        return f"{rate.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}%"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCashbackEarned": self.total_cashback_earned,
            "totalSpent": self.total_spent,
            "totalReceived": self.total_received,
            "transactionCount": self.transaction_count,
            "cashbackBalance": self.total_cashback_earned,
            "savingsRate": self.savings_rate,
        }


@dataclass(frozen=True)
class NetworkStats:
    active_businesses: int
    total_transactions: int
    total_volume: int
    total_cashback_distributed: int

    @property
    def average_transaction(self) -> int:
        if self.total_transactions == 0:
            return 0
        avg = Decimal(self.total_volume) / Decimal(self.total_transactions)
        return int(avg.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activeBusinesses": self.active_businesses,
            "totalTransactions": self.total_transactions,
            "totalVolume": self.total_volume,
            "totalCashbackDistributed": self.total_cashback_distributed,
            "averageTransaction": self.average_transaction,
        }


def business_stats(business_id: str, transactions: Iterable[Transaction]) -> BusinessStats:
    involved = [t for t in transactions if t.involves(business_id)]
    completed = [t for t in involved if t.is_completed]

    return BusinessStats(
        total_cashback_earned=sum(t.cashback_amount for t in completed if t.buyer_id == business_id),
        total_spent=sum(t.amount for t in completed if t.buyer_id == business_id),
        total_received=sum(t.amount for t in completed if t.seller_id == business_id),
        transaction_count=len(involved),
    )


def cashback_balance(business_id: str, transactions: Iterable[Transaction]) -> int:
    return sum(t.cashback_amount for t in transactions if t.buyer_id == business_id and t.is_completed)


def network_stats(active_businesses: int, transactions: Iterable[Transaction]) -> NetworkStats:
    completed = [t for t in transactions if t.is_completed]
    return NetworkStats(
        active_businesses=int(active_businesses),
        total_transactions=len(completed),
        total_volume=sum(t.amount for t in completed),
        total_cashback_distributed=sum(t.cashback_amount for t in completed),
    )


def recent_first(transactions: List[Transaction], limit: int, offset: int = 0) -> List[Transaction]:
    """Newest first; `transactions` is in insertion order."""
    newest = list(reversed(transactions))
    return newest[offset : offset + limit]

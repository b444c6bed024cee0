"""
Cashback Policy
===============

Fixed-rate rebate credited to the paying business.
Pure domain logic: no DB, no HTTP.

Amounts are integer minor units (cents). Rounding is half-up so that
exact halves (e.g. 100 * 0.015 = 1.5, 300 * 0.015 = 4.5) land on the larger cent.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

CASHBACK_RATE = Decimal("0.015")


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_cashback(amount: int) -> int:
    return _round_half_up(Decimal(int(amount)) * CASHBACK_RATE)


def cashback_percentage() -> str:
    pct = (CASHBACK_RATE * 100).normalize()
    return f"{pct}%"

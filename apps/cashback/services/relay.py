"""
Transaction Relay
=================

Orchestrates one B2B payment:
- both participants must be active businesses in the directory
- a charge for the full amount is requested from the payment processor
- cashback is computed once, at creation
- a pending record is appended to the ledger

No HTTP here. Routes should call this.
Identical requests are never merged: every call that passes validation
requests its own charge and appends its own record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from apps.cashback.services.cashback_policy import calculate_cashback, cashback_percentage
from apps.cashback.services.directory import BusinessDirectory
from apps.cashback.services.errors import BusinessNotFound
from apps.cashback.services.ledger import Transaction, TransactionStore
from apps.cashback.services.payments import Charge, StripeGateway

log = logging.getLogger("cashback.relay")


@dataclass(frozen=True)
class RelayResult:
    transaction: Transaction
    charge: Charge
    cashback_amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "transaction": self.transaction.to_dict(),
            "paymentIntent": self.charge.to_dict(),
            "cashbackAmount": int(self.cashback_amount),
            "cashbackPercentage": cashback_percentage(),
        }


class TransactionRelay:
    def __init__(
        self,
        directory: BusinessDirectory,
        gateway: StripeGateway,
        ledger: TransactionStore,
        *,
        currency: str = "usd",
    ) -> None:
        self.directory = directory
        self.gateway = gateway
        self.ledger = ledger
        self.currency = currency

    def create_transaction(
        self,
        buyer_id: str,
        seller_id: str,
        amount: int,
        description: Optional[str] = None,
    ) -> RelayResult:
        buyer = self.directory.get_active(buyer_id)
        seller = self.directory.get_active(seller_id)
        if buyer is None or seller is None:
            raise BusinessNotFound("One or both businesses not found or inactive", status_code=400)

        charge = self.gateway.create_charge(
            amount,
            self.currency,
            {
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "buyer_name": buyer.name,
                "seller_name": seller.name,
                "description": description,
            },
        )

        cashback_amount = calculate_cashback(amount)
        txn = self.ledger.append(
            Transaction(
                buyer_id=buyer_id,
                seller_id=seller_id,
                buyer_name=buyer.name,
                seller_name=seller.name,
                amount=int(amount),
                cashback_amount=cashback_amount,
                description=description,
                stripe_payment_intent_id=charge.id,
            )
        )
        log.info(
            "Recorded pending transaction id=%s charge=%s amount=%s cashback=%s",
            txn.id,
            charge.id,
            txn.amount,
            cashback_amount,
        )
        return RelayResult(transaction=txn, charge=charge, cashback_amount=cashback_amount)

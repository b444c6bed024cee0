"""
Reconciliation Listener.

Mirrors processor-reported payment success into the local ledger.
Both entry points perform the same pending -> completed flip:
- handle_webhook: asynchronous Stripe notification (signature verified first)
- confirm_manually: direct request from the client after payment confirmation
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from apps.cashback.services.errors import TransactionNotFound, ValidationFailure
from apps.cashback.services.ledger import Transaction, TransactionStore
from apps.cashback.services.payments import StripeGateway

log = logging.getLogger("cashback.reconciliation")

PAYMENT_SUCCEEDED = "payment_intent.succeeded"


def _dollars(cents: int) -> str:
    return f"${cents / 100:.2f}"


class ReconciliationListener:
    def __init__(self, ledger: TransactionStore, gateway: StripeGateway) -> None:
        self.ledger = ledger
        self.gateway = gateway

    def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        event = self.gateway.construct_event(payload, signature)
        try:
            event_type = event["type"]
            charge_id = event["data"]["object"]["id"] if event_type == PAYMENT_SUCCEEDED else None
        except (KeyError, TypeError) as ex:
            raise ValidationFailure(f"Webhook Error: malformed event (missing {ex})") from ex

        if event_type == PAYMENT_SUCCEEDED:
            if not isinstance(charge_id, str) or not charge_id:
                raise ValidationFailure("Webhook Error: malformed event (payment intent id)")
            self.on_charge_succeeded(charge_id)
        else:
            log.debug("Ignoring webhook event type=%s", event_type)

        return {"received": True}

    def on_charge_succeeded(self, charge_id: str) -> Optional[Transaction]:
        txn = self.ledger.find_by_charge(charge_id)
        if txn is None:
            log.info("No transaction for charge=%s; ignoring", charge_id)
            return None

        updated, changed = self.ledger.mark_completed(txn.id)
        if changed and updated is not None:
            log.info("Cashback applied: %s to %s", _dollars(updated.cashback_amount), updated.buyer_name)
            log.info("Transaction completed: %s -> %s", updated.buyer_name, updated.seller_name)
        return updated

    def confirm_manually(self, transaction_id: str) -> Dict[str, Any]:
        updated, changed = self.ledger.mark_completed(transaction_id)
        if updated is None:
            raise TransactionNotFound("Transaction not found", status_code=400)

        if changed:
            log.info("Transaction %s confirmed manually", updated.id)

        return {
            "success": True,
            "message": f"{_dollars(updated.cashback_amount)} cashback applied to {updated.buyer_name}",
            "transaction": updated.to_dict(),
        }

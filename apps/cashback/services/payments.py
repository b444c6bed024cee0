"""
Stripe payment gateway.

Two processor contracts are consumed:
- create charge: amount, currency, metadata -> PaymentIntent id + client secret
- verify webhook: raw body, Stripe-Signature header, endpoint secret -> Event
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import stripe

from apps.cashback.services.errors import ChargeFailed, InvalidSignature, ValidationFailure

log = logging.getLogger("cashback.payments")


@dataclass(frozen=True)
class Charge:
    id: str
    client_secret: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"client_secret": self.client_secret, "id": self.id}


class StripeGateway:
    def __init__(self, secret_key: Optional[str], webhook_secret: Optional[str]) -> None:
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret

    def create_charge(self, amount: int, currency: str, metadata: Dict[str, Any]) -> Charge:
        if not self.secret_key:
            raise ChargeFailed("Stripe not configured: set STRIPE_SECRET_KEY.")

        log.info("Creating payment intent amount=%s currency=%s", amount, currency)
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.secret_key,
                amount=int(amount),
                currency=currency,
                metadata={k: "" if v is None else str(v) for k, v in (metadata or {}).items()},
            )
        except stripe.StripeError as ex:
            raise ChargeFailed(f"Stripe rejected payment intent: {ex}") from ex

        return Charge(id=intent.id, client_secret=getattr(intent, "client_secret", None))

    def construct_event(self, payload: bytes, signature: Optional[str]) -> Any:
        """
        Verify the Stripe-Signature header against the raw body, then parse it.
        Nothing is parsed unless the signature checks out.
        """
        if not signature:
            raise InvalidSignature("Missing Stripe-Signature header")
        if not self.webhook_secret:
            raise InvalidSignature("Webhook secret not configured")

        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as ex:
            raise InvalidSignature(f"Webhook Error: {ex}") from ex
        except ValueError as ex:
            raise ValidationFailure(f"Webhook Error: invalid payload ({ex})") from ex

# apps/cashback/routes/webhooks.py
import logging

from fastapi import APIRouter, Depends, Request

from apps.cashback.deps import get_reconciliation
from apps.cashback.services.errors import CashbackError
from apps.cashback.services.reconciliation import ReconciliationListener
from apps.cashback.utils.envelope import from_exception

log = logging.getLogger("cashback.routes.webhooks")

router = APIRouter(prefix="/api", tags=["webhooks"])


async def raw_body(request: Request) -> bytes:
    # Raw bytes: the signature covers the exact body Stripe sent.
    return await request.body()


@router.post("/stripe-webhook")
def stripe_webhook(
    request: Request,
    raw: bytes = Depends(raw_body),
    listener: ReconciliationListener = Depends(get_reconciliation),
):
    sig = request.headers.get("stripe-signature")
    try:
        return listener.handle_webhook(raw, sig)
    except CashbackError as e:
        log.warning("Webhook rejected: %s", e.message)
        return from_exception(e, "Webhook processing failed")

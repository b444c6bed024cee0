# apps/cashback/routes/transactions.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, StrictInt

from apps.cashback.deps import get_reconciliation, get_relay
from apps.cashback.services.errors import CashbackError
from apps.cashback.services.reconciliation import ReconciliationListener
from apps.cashback.services.relay import TransactionRelay
from apps.cashback.utils.envelope import from_exception

router = APIRouter(prefix="/api", tags=["transactions"])


# ===== Pydantic models =====
class ProcessTransaction(BaseModel):
    buyerId: str = Field(min_length=1)
    sellerId: str = Field(min_length=1)
    amount: StrictInt = Field(gt=0, description="Amount in cents")
    description: Optional[str] = None


class ConfirmCashback(BaseModel):
    transactionId: str = Field(min_length=1)


# ===== Endpoints =====
@router.post("/process-transaction")
def process_transaction(inb: ProcessTransaction, relay: TransactionRelay = Depends(get_relay)):
    try:
        result = relay.create_transaction(inb.buyerId, inb.sellerId, inb.amount, inb.description)
    except CashbackError as e:
        return from_exception(e, "Transaction failed")
    return result.to_dict()


@router.post("/confirm-cashback")
def confirm_cashback(inb: ConfirmCashback, listener: ReconciliationListener = Depends(get_reconciliation)):
    try:
        return listener.confirm_manually(inb.transactionId)
    except CashbackError as e:
        return from_exception(e, "Failed to confirm cashback")

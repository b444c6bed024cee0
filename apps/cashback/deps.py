# apps/cashback/deps.py
from functools import lru_cache

from fastapi import Depends

from apps.cashback.db import get_supabase
from apps.cashback.services.directory import BusinessDirectory
from apps.cashback.services.ledger import InMemoryTransactionStore, TransactionStore
from apps.cashback.services.payments import StripeGateway
from apps.cashback.services.reconciliation import ReconciliationListener
from apps.cashback.services.relay import TransactionRelay
from apps.cashback.utils.settings import settings


@lru_cache(maxsize=1)
def get_ledger() -> TransactionStore:
    # Process-wide; history lives as long as the process.
    return InMemoryTransactionStore()


def get_directory() -> BusinessDirectory:
    return BusinessDirectory(get_supabase(), table=settings.SUPABASE_BUSINESS_TABLE)


def get_gateway() -> StripeGateway:
    return StripeGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_WEBHOOK_SECRET)


def get_relay(
    directory: BusinessDirectory = Depends(get_directory),
    gateway: StripeGateway = Depends(get_gateway),
    ledger: TransactionStore = Depends(get_ledger),
) -> TransactionRelay:
    return TransactionRelay(directory, gateway, ledger, currency=settings.CASHBACK_CURRENCY)


def get_reconciliation(
    ledger: TransactionStore = Depends(get_ledger),
    gateway: StripeGateway = Depends(get_gateway),
) -> ReconciliationListener:
    return ReconciliationListener(ledger, gateway)

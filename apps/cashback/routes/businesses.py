# apps/cashback/routes/businesses.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from apps.cashback.deps import get_directory, get_ledger
from apps.cashback.services.directory import BusinessDirectory
from apps.cashback.services.errors import BusinessNotFound, CashbackError
from apps.cashback.services.ledger import TransactionStore
from apps.cashback.services.stats import (
    business_stats,
    cashback_balance,
    network_stats,
    recent_first,
)
from apps.cashback.utils.envelope import from_exception
from apps.cashback.utils.settings import settings

router = APIRouter(prefix="/api", tags=["businesses"])


def _require_business(directory: BusinessDirectory, business_id: str):
    business = directory.get_active(business_id)
    if business is None:
        raise BusinessNotFound("Business not found")
    return business


@router.get("/businesses")
def list_businesses(directory: BusinessDirectory = Depends(get_directory)):
    try:
        businesses = directory.list_active()
    except CashbackError as e:
        return from_exception(e, "Failed to fetch businesses")

    out = []
    for b in businesses:
        row = b.to_summary()
        # balances are computed per business on the detail/dashboard routes
        row["cashbackBalance"] = 0
        row["owner"] = b.owner
        out.append(row)
    return out


@router.get("/business/{business_id}")
def get_business(
    business_id: str,
    directory: BusinessDirectory = Depends(get_directory),
    ledger: TransactionStore = Depends(get_ledger),
):
    try:
        business = _require_business(directory, business_id)
    except CashbackError as e:
        return from_exception(e, "Failed to fetch business")

    out = business.to_dict()
    out["cashbackBalance"] = cashback_balance(business.id, ledger.for_business(business.id))
    return out


@router.get("/business/{business_id}/dashboard")
def business_dashboard(
    business_id: str,
    directory: BusinessDirectory = Depends(get_directory),
    ledger: TransactionStore = Depends(get_ledger),
):
    try:
        business = _require_business(directory, business_id)
    except CashbackError as e:
        return from_exception(e, "Failed to load dashboard")

    history = ledger.for_business(business.id)
    business_view = business.to_summary()
    business_view["planType"] = business.plan_type
    business_view["joinDate"] = business.join_date

    return {
        "business": business_view,
        "stats": business_stats(business.id, history).to_dict(),
        "recentTransactions": [t.to_dict() for t in recent_first(history, settings.RECENT_TRANSACTIONS_LIMIT)],
    }


@router.get("/business/{business_id}/transactions")
def business_transactions(
    business_id: str,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    directory: BusinessDirectory = Depends(get_directory),
    ledger: TransactionStore = Depends(get_ledger),
):
    try:
        business = _require_business(directory, business_id)
    except CashbackError as e:
        return from_exception(e, "Failed to load transactions")

    history = ledger.for_business(business.id)
    return {
        "businessId": business.id,
        "total": len(history),
        "limit": limit,
        "offset": offset,
        "transactions": [t.to_dict() for t in recent_first(history, limit, offset)],
    }


@router.get("/network-stats")
def get_network_stats(
    directory: BusinessDirectory = Depends(get_directory),
    ledger: TransactionStore = Depends(get_ledger),
):
    try:
        active = directory.count_active()
    except CashbackError as e:
        return from_exception(e, "Failed to load network statistics")

    return network_stats(active, ledger.all()).to_dict()

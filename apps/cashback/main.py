# apps/cashback/main.py
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.cashback.middleware.errors import install_error_handlers
from apps.cashback.middleware.request_log import request_logger

from apps.cashback.routes.health import router as health_router
from apps.cashback.routes.businesses import router as businesses_router
from apps.cashback.routes.transactions import router as transactions_router
from apps.cashback.routes.webhooks import router as webhooks_router

from apps.cashback.services.cashback_policy import cashback_percentage
from apps.cashback.utils.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

log = logging.getLogger("cashback.main")

app = FastAPI(
    title="Cashback Relay",
    version=settings.CASHBACK_VERSION,
    description="B2B payments relay with fixed-rate cashback",
)

# -------------------------------------------------------------------
# Error handling (stable envelopes, no stack leaks)
# -------------------------------------------------------------------
install_error_handlers(app)

# -------------------------------------------------------------------
# CORS
# -------------------------------------------------------------------
if settings.CORS_MODE == "allowlist":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

# -------------------------------------------------------------------
# Access log (sensitive headers masked)
# -------------------------------------------------------------------
app.middleware("http")(request_logger)

# -------------------------------------------------------------------
# Routers
# -------------------------------------------------------------------
app.include_router(health_router)
app.include_router(businesses_router)
app.include_router(transactions_router)
app.include_router(webhooks_router)


# -------------------------------------------------------------------
# Root
# -------------------------------------------------------------------
@app.get("/")
async def root():
    return {
        "status": "Cashback Relay Online",
        "version": settings.CASHBACK_VERSION,
        "cashbackPercentage": cashback_percentage(),
        "routes": [
            "/health",
            "/api/businesses",
            "/api/business/{id}",
            "/api/business/{id}/dashboard",
            "/api/business/{id}/transactions",
            "/api/process-transaction",
            "/api/confirm-cashback",
            "/api/network-stats",
            "/api/stripe-webhook",
        ],
    }


@app.on_event("startup")
async def startup_event():
    log.info("Cashback relay starting on port %s (%s cashback)", settings.PORT, cashback_percentage())
    if not (settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY):
        log.warning("Supabase not configured; directory calls will fail")
    if not settings.STRIPE_WEBHOOK_SECRET:
        log.warning("STRIPE_WEBHOOK_SECRET not set; webhooks will be rejected")


def run() -> None:
    uvicorn.run("apps.cashback.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()

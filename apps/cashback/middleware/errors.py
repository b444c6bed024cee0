import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from apps.cashback.services.errors import CashbackError, ValidationFailure
from apps.cashback.utils.envelope import error, from_exception

log = logging.getLogger("cashback.errors")


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        return error(_describe(exc), ValidationFailure.code, 400)

    @app.exception_handler(CashbackError)
    async def _cashback(request: Request, exc: CashbackError):
        return from_exception(exc, "Request failed")

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error("Internal server error", "internal_error", 500)

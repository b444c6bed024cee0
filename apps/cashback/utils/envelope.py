import logging

from fastapi.responses import JSONResponse

from apps.cashback.services.errors import CashbackError

log = logging.getLogger("cashback.envelope")


def error(message: str, code: str = "error", status: int = 400):
    return JSONResponse(
        status_code=status,
        content={
            "ok": False,
            "error": code,
            "message": message,
        },
    )


def from_exception(exc: CashbackError, fallback: str):
    """
    Render a CashbackError at the request boundary.
    Non-exposed errors keep their code but answer with `fallback`.
    """
    if exc.expose:
        return error(exc.message, exc.code, exc.status_code)
    log.error("%s: %s", exc.code, exc.message)
    return error(fallback, exc.code, exc.status_code)

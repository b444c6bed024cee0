import logging
import time
from typing import Any, Dict

from fastapi import Request, Response

log = logging.getLogger("cashback.access")

SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "x-api-key",
    "x-supabase-key",
    "stripe-signature",
}


def _mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    out = {}
    for k, v in headers.items():
        if k.lower() in SENSITIVE_HEADERS:
            out[k] = "***masked***"
        else:
            out[k] = v
    return out


def log_request_response(request: Request, response: Response, start_time: float) -> Dict[str, Any]:
    duration_ms = int((time.time() - start_time) * 1000)

    entry: Dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "status_code": response.status_code,
        "duration_ms": duration_ms,
        "client": request.client.host if request.client else None,
        "headers": _mask_headers(dict(request.headers)),
    }

    log.info(entry)
    return entry


async def request_logger(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
    except Exception:
        log_request_response(request, Response(status_code=500), start)
        raise
    log_request_response(request, response, start)
    return response

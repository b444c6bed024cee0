"""
Error taxonomy for the cashback relay.

Every failure the services raise is a CashbackError carrying:
- message: text for logs, and for the client when `expose` is True
- status_code: HTTP status the request boundary maps it to
- code: stable machine-readable identifier used in the error envelope

Upstream failures (directory, payment processor) are not exposed: routes
replace their message with a generic per-endpoint one and log the detail.
"""


class CashbackError(Exception):
    code = "error"
    expose = True

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# -----------------------------
# NotFound
# -----------------------------
class NotFound(CashbackError):
    code = "not_found"

    def __init__(self, message: str, status_code: int = 404):
        super().__init__(message, status_code)


class BusinessNotFound(NotFound):
    code = "business_not_found"


class TransactionNotFound(NotFound):
    code = "transaction_not_found"


# -----------------------------
# UpstreamFailure
# -----------------------------
class UpstreamFailure(CashbackError):
    code = "upstream_failure"
    expose = False

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message, status_code)


class DirectoryUnavailable(UpstreamFailure):
    code = "directory_unavailable"


class ChargeFailed(UpstreamFailure):
    code = "charge_failed"


# -----------------------------
# Request-level
# -----------------------------
class InvalidSignature(CashbackError):
    code = "invalid_signature"


class ValidationFailure(CashbackError):
    code = "validation_error"

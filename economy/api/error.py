"""HTTP error mapping

Use cases return ``Error`` values; routes raise ``ClientError`` with
them and the registered handler renders the common error body.
"""

from typing import Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from economy.libs.result import Error

_STATUS_BY_CODE = {
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_SIGNATURE": status.HTTP_401_UNAUTHORIZED,
    "INSUFFICIENT_CREDITS": status.HTTP_402_PAYMENT_REQUIRED,
    "INSUFFICIENT_POINTS": status.HTTP_402_PAYMENT_REQUIRED,
    "PAYMENT_NOT_SUCCEEDED": status.HTTP_402_PAYMENT_REQUIRED,
    "ALREADY_PROCESSED": status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "INVALID_INVENTORY": status.HTTP_409_CONFLICT,
    "REWARD_UNAVAILABLE": status.HTTP_409_CONFLICT,
    "REWARD_INACTIVE": status.HTTP_409_CONFLICT,
    "PAYMENT_SYSTEM_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(error: Error) -> int:
    """HTTP status for a use case error code"""
    code = error.code
    if code in _STATUS_BY_CODE:
        return _STATUS_BY_CODE[code]
    if code.endswith("_NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    if code.endswith("_FORBIDDEN"):
        return status.HTTP_403_FORBIDDEN
    if code.startswith("PROMOTION_"):
        return status.HTTP_409_CONFLICT
    if code.endswith("_FAILED"):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error.model_dump()},
    )

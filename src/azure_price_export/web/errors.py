"""Maps pricing errors to HTTP responses."""

from typing import Any

from fastapi import HTTPException

from ..errors import FetchFailed, PricingError, UploadFailed

ERROR_STATUS_MAP: dict[type[PricingError], int] = {
    FetchFailed: 502,
    UploadFailed: 502,
}


def map_pricing_error(error: PricingError) -> HTTPException:
    detail: dict[str, Any] = {
        "code": error.kind,
        "message": error.message,
    }
    for kind, status_code in ERROR_STATUS_MAP.items():
        if isinstance(error, kind):
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(status_code=500, detail=detail)

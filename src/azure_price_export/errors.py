"""Error kinds raised by the fetch / export pipeline.

Every lower-layer failure (HTTP, JSON, filesystem, S3) is wrapped into one of
these at the component boundary, with the underlying exception chained as
``__cause__``. ``NoData`` is deliberately not here: an empty estimate is a
result, not a failure (see ``models.NoData``).
"""

from __future__ import annotations


class PricingError(Exception):
    """Base class; ``kind`` is the stable machine-readable code."""

    kind = "pricing_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FetchFailed(PricingError):
    """Network, parse or format error while reading prices. Aborts the whole fetch."""

    kind = "fetch_failed"


class UnsupportedFormat(FetchFailed):
    """Response shape or file extension not recognised."""

    kind = "unsupported_format"


class UploadFailed(PricingError):
    """Object-store write failed after the CSV was fully prepared."""

    kind = "upload_failed"

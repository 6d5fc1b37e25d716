"""Export API routes: raw fetch-and-upload and the processed export."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from ...errors import PricingError
from ...pipeline import PricingPipeline
from ..dependencies import get_pipeline
from ..errors import map_pricing_error
from ..schemas import FetchRequest, FetchResponse

log = logging.getLogger(__name__)

router = APIRouter(tags=["Prices"])


@router.post("/fetch-upload", response_model=FetchResponse)
def fetch_upload(
    body: Optional[FetchRequest] = Body(default=None),
    pipeline: PricingPipeline = Depends(get_pipeline),
):
    """Fetch every page (optionally from startUrl), upload the raw CSV export."""
    start_url = body.startUrl if body is not None else None
    try:
        summary = pipeline.run(start_url)
    except PricingError as e:
        log.error("fetch-upload failed: %s", e)
        raise map_pricing_error(e) from e
    return FetchResponse(
        message=summary.message,
        destinationURI=summary.destination_uri,
        recordCount=summary.record_count,
    )


@router.get("/status", response_class=PlainTextResponse)
def status():
    return "Azure Pricing Fetch Service is running!"


@router.get("/process", response_class=PlainTextResponse)
def process(pipeline: PricingPipeline = Depends(get_pipeline)):
    """Build and upload the processed export (static snapshot + derived columns)."""
    try:
        uri = pipeline.run_processed()
    except PricingError as e:
        log.exception("Processed export failed")
        return PlainTextResponse(f"Failed to process pricing sheet: {e}", status_code=500)
    return f"Processed pricing uploaded to: {uri}"


@router.get("/cache-refresh", response_class=PlainTextResponse)
def cache_refresh(pipeline: PricingPipeline = Depends(get_pipeline)):
    """Alias of /process, kept for clients that call it by this name."""
    try:
        pipeline.run_processed()
    except PricingError as e:
        log.exception("Cache refresh failed")
        return PlainTextResponse(f"Failed to refresh cache: {e}", status_code=500)
    return "Cache refreshed and processed pricing uploaded."

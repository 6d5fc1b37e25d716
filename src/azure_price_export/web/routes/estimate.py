"""Estimate API routes: product / region listings and cheapest-price estimates."""

from typing import List, Union

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ...errors import PricingError
from ...estimate import PriceEstimator
from ...models import NoData
from ..dependencies import get_estimator
from ..errors import map_pricing_error
from ..schemas import EstimateRequest, EstimateResponse, NoDataResponse

router = APIRouter(tags=["Estimate"])


@router.get("/products", response_model=List[str])
def list_products(estimator: PriceEstimator = Depends(get_estimator)):
    """Distinct product names, sorted."""
    try:
        return estimator.list_products()
    except PricingError as e:
        raise map_pricing_error(e) from e


@router.get("/products/{product}/regions", response_model=List[str])
def list_regions(product: str, estimator: PriceEstimator = Depends(get_estimator)):
    """Distinct ARM region names for one product, sorted."""
    try:
        return estimator.list_regions(product)
    except PricingError as e:
        raise map_pricing_error(e) from e


@router.post("", response_model=Union[EstimateResponse, NoDataResponse])
def estimate(body: EstimateRequest, estimator: PriceEstimator = Depends(get_estimator)):
    """Cheapest positive unit price times quantity, or a no-data message."""
    try:
        result = estimator.estimate(body.productName, body.region, body.quantity)
    except PricingError as e:
        raise map_pricing_error(e) from e

    if isinstance(result, NoData):
        return NoDataResponse(message=result.message)
    return EstimateResponse(
        product=result.product,
        region=result.region,
        unitPrice=float(result.unit_price),
        quantity=float(result.quantity),
        currency=result.currency,
        estimatedCost=float(result.estimated_cost),
    )


@router.get("/ping", response_class=PlainTextResponse)
def ping():
    return "Azure Estimate API is alive!"

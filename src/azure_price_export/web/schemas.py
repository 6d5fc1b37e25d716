"""Request / response bodies. Field names use the camelCase wire format of the Retail Prices API."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class EstimateRequest(BaseModel):
    productName: Optional[str] = None
    region: Optional[str] = None
    quantity: Decimal = Field(default=Decimal(0), ge=0)


class EstimateResponse(BaseModel):
    product: Optional[str] = None
    region: Optional[str] = None
    unitPrice: float
    quantity: float
    currency: Optional[str] = None
    estimatedCost: float


class NoDataResponse(BaseModel):
    message: str


class FetchRequest(BaseModel):
    startUrl: Optional[str] = None


class FetchResponse(BaseModel):
    message: str
    destinationURI: str
    recordCount: int
